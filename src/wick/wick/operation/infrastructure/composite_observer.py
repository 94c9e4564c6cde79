"""CompositeOperationObserver — fans out all events to a list of observers."""

from wick.operation.domain.observer import OperationObserver


class CompositeOperationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from OperationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[OperationObserver]) -> None:
        self._observers = observers

    def operation_started(
        self,
        kind: str,
        target: str,
        repeat: int,
        concurrency: int,
        delay_ms: int,
    ) -> None:
        for obs in self._observers:
            obs.operation_started(
                kind=kind,
                target=target,
                repeat=repeat,
                concurrency=concurrency,
                delay_ms=delay_ms,
            )

    def operation_completed(
        self,
        kind: str,
        target: str,
        total: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.operation_completed(
                kind=kind,
                target=target,
                total=total,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )

    def repetition_started(self, kind: str, target: str, index: int) -> None:
        for obs in self._observers:
            obs.repetition_started(kind=kind, target=target, index=index)

    def repetition_completed(
        self, kind: str, target: str, index: int, elapsed_ms: int | None
    ) -> None:
        for obs in self._observers:
            obs.repetition_completed(
                kind=kind, target=target, index=index, elapsed_ms=elapsed_ms
            )

    def repetition_failed(
        self, kind: str, target: str, index: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.repetition_failed(kind=kind, target=target, index=index, reason=reason)

    def call_result(self, procedure: str, output: str) -> None:
        for obs in self._observers:
            obs.call_result(procedure=procedure, output=output)

    def call_progress(self, procedure: str, output: str) -> None:
        for obs in self._observers:
            obs.call_progress(procedure=procedure, output=output)

    def registered(self, procedure: str, elapsed_ms: int | None) -> None:
        for obs in self._observers:
            obs.registered(procedure=procedure, elapsed_ms=elapsed_ms)

    def subscribed(self, topic: str, elapsed_ms: int | None) -> None:
        for obs in self._observers:
            obs.subscribed(topic=topic, elapsed_ms=elapsed_ms)

    def invocation_received(self, procedure: str, output: str) -> None:
        for obs in self._observers:
            obs.invocation_received(procedure=procedure, output=output)

    def event_received(self, topic: str, output: str) -> None:
        for obs in self._observers:
            obs.event_received(topic=topic, output=output)

    def command_failed(
        self, procedure: str, command: str, reason: str, stderr: str
    ) -> None:
        for obs in self._observers:
            obs.command_failed(
                procedure=procedure, command=command, reason=reason, stderr=stderr
            )

    def invocation_limit_reached(self, procedure: str) -> None:
        for obs in self._observers:
            obs.invocation_limit_reached(procedure=procedure)

    def unregister_failed(self, procedure: str, reason: str) -> None:
        for obs in self._observers:
            obs.unregister_failed(procedure=procedure, reason=reason)

    def session_closing(self, procedure: str) -> None:
        for obs in self._observers:
            obs.session_closing(procedure=procedure)

    def session_close_cancelled(self, procedure: str) -> None:
        for obs in self._observers:
            obs.session_close_cancelled(procedure=procedure)

    def session_close_failed(self, procedure: str, reason: str) -> None:
        for obs in self._observers:
            obs.session_close_failed(procedure=procedure, reason=reason)
