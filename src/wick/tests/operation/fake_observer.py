"""FakeOperationObserver — records operation domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationStartedEvent:
    kind: str
    target: str
    repeat: int
    concurrency: int
    delay_ms: int


@dataclass(frozen=True)
class OperationCompletedEvent:
    kind: str
    target: str
    total: int
    failed: int
    elapsed_seconds: float


@dataclass(frozen=True)
class RepetitionEvent:
    kind: str
    target: str
    index: int


@dataclass(frozen=True)
class RepetitionCompletedEvent:
    kind: str
    target: str
    index: int
    elapsed_ms: int | None


@dataclass(frozen=True)
class RepetitionFailedEvent:
    kind: str
    target: str
    index: int
    reason: str


@dataclass(frozen=True)
class OutputEvent:
    name: str
    output: str


@dataclass(frozen=True)
class TimedEvent:
    name: str
    elapsed_ms: int | None


@dataclass(frozen=True)
class CommandFailedEvent:
    procedure: str
    command: str
    reason: str
    stderr: str


class FakeOperationObserver:
    """Records every operation event. Satisfies OperationObserver structurally."""

    def __init__(self) -> None:
        self.operation_started_events: list[OperationStartedEvent] = []
        self.operation_completed_events: list[OperationCompletedEvent] = []
        self.repetition_started_events: list[RepetitionEvent] = []
        self.repetition_completed_events: list[RepetitionCompletedEvent] = []
        self.repetition_failed_events: list[RepetitionFailedEvent] = []
        self.call_results: list[OutputEvent] = []
        self.call_progress_events: list[OutputEvent] = []
        self.registered_events: list[TimedEvent] = []
        self.subscribed_events: list[TimedEvent] = []
        self.invocations: list[OutputEvent] = []
        self.events: list[OutputEvent] = []
        self.command_failures: list[CommandFailedEvent] = []
        self.limit_reached: list[str] = []
        self.unregister_failures: list[tuple[str, str]] = []
        self.closing: list[str] = []
        self.close_cancelled: list[str] = []
        self.close_failures: list[tuple[str, str]] = []

    def operation_started(
        self,
        kind: str,
        target: str,
        repeat: int,
        concurrency: int,
        delay_ms: int,
    ) -> None:
        self.operation_started_events.append(
            OperationStartedEvent(
                kind=kind,
                target=target,
                repeat=repeat,
                concurrency=concurrency,
                delay_ms=delay_ms,
            )
        )

    def operation_completed(
        self,
        kind: str,
        target: str,
        total: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        self.operation_completed_events.append(
            OperationCompletedEvent(
                kind=kind,
                target=target,
                total=total,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )
        )

    def repetition_started(self, kind: str, target: str, index: int) -> None:
        self.repetition_started_events.append(
            RepetitionEvent(kind=kind, target=target, index=index)
        )

    def repetition_completed(
        self, kind: str, target: str, index: int, elapsed_ms: int | None
    ) -> None:
        self.repetition_completed_events.append(
            RepetitionCompletedEvent(
                kind=kind, target=target, index=index, elapsed_ms=elapsed_ms
            )
        )

    def repetition_failed(
        self, kind: str, target: str, index: int, reason: str
    ) -> None:
        self.repetition_failed_events.append(
            RepetitionFailedEvent(kind=kind, target=target, index=index, reason=reason)
        )

    def call_result(self, procedure: str, output: str) -> None:
        self.call_results.append(OutputEvent(name=procedure, output=output))

    def call_progress(self, procedure: str, output: str) -> None:
        self.call_progress_events.append(OutputEvent(name=procedure, output=output))

    def registered(self, procedure: str, elapsed_ms: int | None) -> None:
        self.registered_events.append(TimedEvent(name=procedure, elapsed_ms=elapsed_ms))

    def subscribed(self, topic: str, elapsed_ms: int | None) -> None:
        self.subscribed_events.append(TimedEvent(name=topic, elapsed_ms=elapsed_ms))

    def invocation_received(self, procedure: str, output: str) -> None:
        self.invocations.append(OutputEvent(name=procedure, output=output))

    def event_received(self, topic: str, output: str) -> None:
        self.events.append(OutputEvent(name=topic, output=output))

    def command_failed(
        self, procedure: str, command: str, reason: str, stderr: str
    ) -> None:
        self.command_failures.append(
            CommandFailedEvent(
                procedure=procedure, command=command, reason=reason, stderr=stderr
            )
        )

    def invocation_limit_reached(self, procedure: str) -> None:
        self.limit_reached.append(procedure)

    def unregister_failed(self, procedure: str, reason: str) -> None:
        self.unregister_failures.append((procedure, reason))

    def session_closing(self, procedure: str) -> None:
        self.closing.append(procedure)

    def session_close_cancelled(self, procedure: str) -> None:
        self.close_cancelled.append(procedure)

    def session_close_failed(self, procedure: str, reason: str) -> None:
        self.close_failures.append((procedure, reason))
