"""Error types raised while validating and running compose tasks."""

from wick.core.errors import WickError


class ComposeValidationError(WickError):
    """Raised when a task carries a field its type forbids, or lacks a required one."""

    def __init__(self, task_name: str, reason: str) -> None:
        self.task_name = task_name
        self.reason = reason
        super().__init__(f"Failed to validate task '{task_name}': {reason}")


class ComposeTaskError(WickError):
    """Raised when the broker rejects a task; the remaining tasks are not run."""

    def __init__(self, task_name: str, kind: str, reason: str) -> None:
        self.task_name = task_name
        self.kind = kind
        self.reason = reason
        super().__init__(f"Failed to {kind} in task '{task_name}': {reason}")
