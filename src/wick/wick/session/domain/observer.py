"""Observer port for the session domain — defines events in domain language."""

from typing import Protocol


class SessionObserver(Protocol):
    """Observer port emitting structured events while a session pool is built.

    Implementations may log to structlog or record for tests.
    """

    def pool_started(self, url: str, realm: str, count: int, concurrency: int) -> None: ...

    def session_joined(self, elapsed_ms: int) -> None: ...

    def session_failed(self, reason: str) -> None: ...

    def pool_completed(self, opened: int, failed: int, elapsed_seconds: float) -> None: ...

    def survivors_closed(self, count: int) -> None: ...

    def session_close_failed(self, reason: str) -> None: ...
