"""StructlogComposeObserver — logs compose events via structlog."""

from typing import Any

import structlog


class StructlogComposeObserver:
    """Logs compose events using structlog. Does NOT inherit from ComposeObserver."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def compose_loaded(self, path: str, version: str, task_count: int) -> None:
        self._log.info(
            "compose.loaded", path=path, version=version, task_count=task_count
        )

    def compose_started(self, version: str, task_count: int) -> None:
        self._log.debug("compose.started", version=version, task_count=task_count)

    def compose_completed(self, task_count: int, elapsed_seconds: float) -> None:
        self._log.info(
            "compose.completed",
            task_count=task_count,
            elapsed_seconds=round(elapsed_seconds, 3),
        )

    def task_started(self, index: int, name: str, kind: str) -> None:
        self._log.debug("compose.task_started", index=index, name=name, kind=kind)

    def task_failed(self, index: int, name: str, kind: str, reason: str) -> None:
        self._log.error(
            "compose.task_failed", index=index, name=name, kind=kind, reason=reason
        )

    def registered(self, name: str, procedure: str) -> None:
        self._log.info("compose.registered", name=name, procedure=procedure)

    def called(self, name: str, procedure: str, output: str) -> None:
        self._log.info("compose.called", name=name, procedure=procedure, output=output)

    def subscribed(self, name: str, topic: str) -> None:
        self._log.info("compose.subscribed", name=name, topic=topic)

    def published(self, name: str, topic: str) -> None:
        self._log.info("compose.published", name=name, topic=topic)

    def invocation_received(self, procedure: str, output: str) -> None:
        self._log.info(
            "compose.invocation_received", procedure=procedure, output=output
        )

    def event_received(self, topic: str, output: str) -> None:
        self._log.info("compose.event_received", topic=topic, output=output)

    def expectation_mismatch(
        self,
        subject: str,
        target: str,
        expected_args: list[Any],
        expected_kwargs: dict[str, Any],
        actual_args: list[Any],
        actual_kwargs: dict[str, Any],
    ) -> None:
        self._log.error(
            "compose.expectation_mismatch",
            message=f"actual {subject} is not equal to expected {subject}",
            target=target,
            expected_args=expected_args,
            expected_kwargs=expected_kwargs,
            actual_args=actual_args,
            actual_kwargs=actual_kwargs,
        )
