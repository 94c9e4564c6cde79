"""Structlog implementation of the SessionObserver port."""

import structlog


class StructlogSessionObserver:
    """Delegates session domain events to structlog.

    Satisfies the SessionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def pool_started(self, url: str, realm: str, count: int, concurrency: int) -> None:
        self._log.info(
            "session.pool_started",
            url=url,
            realm=realm,
            count=count,
            concurrency=concurrency,
        )

    def session_joined(self, elapsed_ms: int) -> None:
        self._log.info("session.joined", elapsed_ms=elapsed_ms)

    def session_failed(self, reason: str) -> None:
        self._log.error("session.failed", reason=reason)

    def pool_completed(self, opened: int, failed: int, elapsed_seconds: float) -> None:
        self._log.info(
            "session.pool_completed",
            opened=opened,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def survivors_closed(self, count: int) -> None:
        self._log.warning("session.survivors_closed", count=count)

    def session_close_failed(self, reason: str) -> None:
        self._log.warning("session.close_failed", reason=reason)
