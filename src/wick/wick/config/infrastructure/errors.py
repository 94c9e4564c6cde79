"""Error types raised by config infrastructure."""

from wick.core.errors import WickError


class ConfigValidationError(WickError):
    """Raised when connection options fail validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate config: {reason}")
