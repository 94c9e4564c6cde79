"""Error types raised by the argument codec."""

from wick.core.errors import WickError


class ArgumentFileError(WickError):
    """Raised when a file-reference argument points at an unreadable file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to read argument file '{path}': {reason}")
