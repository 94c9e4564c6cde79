"""ComposeObserver protocol — domain events emitted while running a compose file."""

from typing import Any, Protocol


class ComposeObserver(Protocol):
    """Observer for compose loading and task execution."""

    def compose_loaded(self, path: str, version: str, task_count: int) -> None: ...

    def compose_started(self, version: str, task_count: int) -> None: ...

    def compose_completed(self, task_count: int, elapsed_seconds: float) -> None: ...

    def task_started(self, index: int, name: str, kind: str) -> None: ...

    def task_failed(self, index: int, name: str, kind: str, reason: str) -> None: ...

    def registered(self, name: str, procedure: str) -> None: ...

    def called(self, name: str, procedure: str, output: str) -> None: ...

    def subscribed(self, name: str, topic: str) -> None: ...

    def published(self, name: str, topic: str) -> None: ...

    def invocation_received(self, procedure: str, output: str) -> None: ...

    def event_received(self, topic: str, output: str) -> None: ...

    def expectation_mismatch(
        self,
        subject: str,
        target: str,
        expected_args: list[Any],
        expected_kwargs: dict[str, Any],
        actual_args: list[Any],
        actual_kwargs: dict[str, Any],
    ) -> None: ...
