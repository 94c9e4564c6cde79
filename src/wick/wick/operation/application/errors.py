"""Error types raised by the operation executor and invocation handlers."""

from wick.core.errors import BatchError, WickError


class OperationBatchError(BatchError):
    """Raised when at least one repetition of an operation failed."""

    def __init__(self, kind: str, target: str, failures: list[str], total: int) -> None:
        self.kind = kind
        self.target = target
        super().__init__(action=f"{kind} '{target}'", failures=failures, total=total)


class HandlerConfigError(WickError):
    """Raised when an invocation handler is built with invalid parameters."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to build invocation handler: {reason}")


class RegistrationClosedError(WickError):
    """Raised when a handler whose registration has closed is invoked."""

    def __init__(self, procedure: str) -> None:
        super().__init__(
            f"Failed to answer invocation: registration of '{procedure}' is closed"
        )
