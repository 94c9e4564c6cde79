"""StructlogOperationObserver — production observer that delegates to structlog."""

import structlog


class StructlogOperationObserver:
    """Logs operation domain events to structlog.

    Does NOT inherit from OperationObserver (structural typing via Protocol).
    Per-repetition start/completion events are logged at debug level so that
    large repeat counts stay readable.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def operation_started(
        self,
        kind: str,
        target: str,
        repeat: int,
        concurrency: int,
        delay_ms: int,
    ) -> None:
        self._log.info(
            "operation.started",
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
        self._log.info(
            "operation.completed",
            kind=kind,
            target=target,
            total=total,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 3),
        )

    def repetition_started(self, kind: str, target: str, index: int) -> None:
        self._log.debug(
            "operation.repetition_started", kind=kind, target=target, index=index
        )

    def repetition_completed(
        self, kind: str, target: str, index: int, elapsed_ms: int | None
    ) -> None:
        if elapsed_ms is not None:
            self._log.info(
                "operation.repetition_completed",
                kind=kind,
                target=target,
                index=index,
                elapsed_ms=elapsed_ms,
            )
            return
        self._log.debug(
            "operation.repetition_completed", kind=kind, target=target, index=index
        )

    def repetition_failed(
        self, kind: str, target: str, index: int, reason: str
    ) -> None:
        self._log.error(
            "operation.repetition_failed",
            kind=kind,
            target=target,
            index=index,
            reason=reason,
        )

    def call_result(self, procedure: str, output: str) -> None:
        self._log.info("operation.call_result", procedure=procedure, output=output)

    def call_progress(self, procedure: str, output: str) -> None:
        self._log.info("operation.call_progress", procedure=procedure, output=output)

    def registered(self, procedure: str, elapsed_ms: int | None) -> None:
        self._log.info(
            "operation.registered", procedure=procedure, elapsed_ms=elapsed_ms
        )

    def subscribed(self, topic: str, elapsed_ms: int | None) -> None:
        self._log.info("operation.subscribed", topic=topic, elapsed_ms=elapsed_ms)

    def invocation_received(self, procedure: str, output: str) -> None:
        self._log.info(
            "operation.invocation_received", procedure=procedure, output=output
        )

    def event_received(self, topic: str, output: str) -> None:
        self._log.info("operation.event_received", topic=topic, output=output)

    def command_failed(
        self, procedure: str, command: str, reason: str, stderr: str
    ) -> None:
        self._log.error(
            "operation.command_failed",
            procedure=procedure,
            command=command,
            reason=reason,
            stderr=stderr,
        )

    def invocation_limit_reached(self, procedure: str) -> None:
        self._log.info("operation.invocation_limit_reached", procedure=procedure)

    def unregister_failed(self, procedure: str, reason: str) -> None:
        self._log.warning(
            "operation.unregister_failed", procedure=procedure, reason=reason
        )

    def session_closing(self, procedure: str) -> None:
        self._log.info("operation.session_closing", procedure=procedure)

    def session_close_cancelled(self, procedure: str) -> None:
        self._log.info("operation.session_close_cancelled", procedure=procedure)

    def session_close_failed(self, procedure: str, reason: str) -> None:
        self._log.warning(
            "operation.session_close_failed", procedure=procedure, reason=reason
        )
