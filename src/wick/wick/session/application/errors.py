"""Error types raised while building session pools."""

from wick.core.errors import BatchError, WickError


class SessionPoolConfigError(WickError):
    """Raised when the pool parameters are out of range."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to build session pool: {reason}")


class SessionBatchError(BatchError):
    """Raised when at least one connection attempt of a batch failed."""

    def __init__(self, failures: list[str], total: int) -> None:
        super().__init__(action="open sessions", failures=failures, total=total)
