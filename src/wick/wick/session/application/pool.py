"""SessionPoolBuilder — opens many sessions against one bounded worker pool."""

import asyncio
import time

from wick.config.domain.connection import ConnectionConfig
from wick.core.fanout import describe_error, fan_out
from wick.session.application.errors import SessionBatchError, SessionPoolConfigError
from wick.session.domain.observer import SessionObserver
from wick.session.domain.session import Connector, Session


class SessionPoolBuilder:
    """Establishes exactly ``count`` sessions or fails the whole batch.

    The connector is injected so tests can substitute an in-memory broker.
    """

    def __init__(self, connector: Connector, observer: SessionObserver) -> None:
        self._connector = connector
        self._observer = observer

    async def build(
        self,
        config: ConnectionConfig,
        count: int,
        concurrency: int,
        keepalive: int = 0,
        log_time: bool = False,
    ) -> list[Session]:
        """Open ``count`` sessions with at most ``concurrency`` attempts in flight.

        Every attempt runs to completion before the outcome is decided. If any
        attempt failed, the sessions that did open are closed and a single
        SessionBatchError listing every failure is raised.

        Raises:
            SessionPoolConfigError: if count < 1, concurrency < 1 or keepalive < 0.
            SessionBatchError: if one or more connection attempts failed.
        """
        validate_pool_params(count=count, concurrency=concurrency, keepalive=keepalive)

        self._observer.pool_started(
            url=config.url,
            realm=config.realm,
            count=count,
            concurrency=concurrency,
        )
        started_at = time.monotonic()

        sessions: list[Session] = []
        sessions_lock = asyncio.Lock()

        async def _connect_one(index: int) -> None:
            attempt_started = time.monotonic()
            try:
                session = await self._connector.connect(config, keepalive)
            except Exception as exc:
                self._observer.session_failed(reason=describe_error(exc))
                raise
            async with sessions_lock:
                sessions.append(session)
            if log_time:
                self._observer.session_joined(
                    elapsed_ms=int((time.monotonic() - attempt_started) * 1000)
                )

        failures = await fan_out(_connect_one, count=count, concurrency=concurrency)

        self._observer.pool_completed(
            opened=len(sessions),
            failed=len(failures),
            elapsed_seconds=time.monotonic() - started_at,
        )

        if failures:
            await self.close(sessions)
            self._observer.survivors_closed(count=len(sessions))
            raise SessionBatchError(failures=failures, total=count)

        return sessions

    async def close(self, sessions: list[Session]) -> None:
        """Close every session of a pool, reporting each close that failed."""
        for reason in await close_all(sessions):
            self._observer.session_close_failed(reason=reason)


def validate_pool_params(count: int, concurrency: int, keepalive: int) -> None:
    """Reject out-of-range pool parameters before any connection is attempted."""
    if count < 1:
        raise SessionPoolConfigError("parallel must be greater than zero")
    if concurrency < 1:
        raise SessionPoolConfigError("concurrency must be greater than zero")
    if keepalive < 0:
        raise SessionPoolConfigError("keepalive interval must not be negative")


async def close_all(sessions: list[Session]) -> list[str]:
    """Close every session, returning the reasons of any close that failed."""
    results = await asyncio.gather(
        *(session.close() for session in sessions), return_exceptions=True
    )
    return [str(result) for result in results if isinstance(result, BaseException)]
