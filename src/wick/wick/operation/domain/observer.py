"""Observer port for the operation domain — defines events in domain language."""

from typing import Protocol


class OperationObserver(Protocol):
    """Observer port emitting structured events while operations run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def operation_started(
        self,
        kind: str,
        target: str,
        repeat: int,
        concurrency: int,
        delay_ms: int,
    ) -> None: ...

    def operation_completed(
        self,
        kind: str,
        target: str,
        total: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None: ...

    def repetition_started(self, kind: str, target: str, index: int) -> None: ...

    def repetition_completed(
        self, kind: str, target: str, index: int, elapsed_ms: int | None
    ) -> None: ...

    def repetition_failed(
        self, kind: str, target: str, index: int, reason: str
    ) -> None: ...

    def call_result(self, procedure: str, output: str) -> None: ...

    def call_progress(self, procedure: str, output: str) -> None: ...

    def registered(self, procedure: str, elapsed_ms: int | None) -> None: ...

    def subscribed(self, topic: str, elapsed_ms: int | None) -> None: ...

    def invocation_received(self, procedure: str, output: str) -> None: ...

    def event_received(self, topic: str, output: str) -> None: ...

    def command_failed(
        self, procedure: str, command: str, reason: str, stderr: str
    ) -> None: ...

    def invocation_limit_reached(self, procedure: str) -> None: ...

    def unregister_failed(self, procedure: str, reason: str) -> None: ...

    def session_closing(self, procedure: str) -> None: ...

    def session_close_cancelled(self, procedure: str) -> None: ...

    def session_close_failed(self, procedure: str, reason: str) -> None: ...
