"""Base exception class for all wick-specific errors."""


class WickError(Exception):
    """Base class for all wick errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class BatchError(WickError):
    """Raised when one or more units of a fanned-out batch failed.

    The message carries a header line followed by one ``- <reason>`` line per
    failure, in the order the failures were drained.
    """

    def __init__(self, action: str, failures: list[str], total: int) -> None:
        self.failures = failures
        self.total = total
        lines = "\n".join(f"- {reason}" for reason in failures)
        super().__init__(
            f"Failed to {action}: {len(failures)} of {total} failed, got errors:\n"
            f"{lines}"
        )
