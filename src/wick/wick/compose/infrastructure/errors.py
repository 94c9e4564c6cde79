"""Error types raised by compose infrastructure."""

from pathlib import Path

from wick.core.errors import WickError


class ComposeLoadError(WickError):
    """Raised when a compose file cannot be read, parsed or matched to the schema."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load compose file {path}: {reason}")


class MissingEnvVarsError(WickError):
    """Raised when a compose file references environment variables that are unset."""

    def __init__(self, path: Path, missing_vars: list[str]) -> None:
        self.path = path
        self.missing_vars = missing_vars
        super().__init__(
            f"Failed to load compose file {path}: missing environment variables: "
            f"{', '.join(sorted(missing_vars))}"
        )
