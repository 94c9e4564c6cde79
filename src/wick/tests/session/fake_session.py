"""In-memory router, sessions and connector for exercising wick without a network."""

import asyncio
from typing import Any

from wick.config.domain.connection import ConnectionConfig
from wick.session.domain.session import (
    CallResult,
    Event,
    EventHandler,
    Invocation,
    InvocationHandler,
    ProgressHandler,
)


class FakeBrokerError(Exception):
    """Raised by the fake router the way a real client raises a WAMP error."""


class FakeBroker:
    """Routes calls to registered handlers and publications to subscribers.

    Tracks how many calls/publications are in flight at once so tests can
    assert concurrency bounds without relying on wall-clock timing.
    """

    def __init__(self, latency: float = 0.0, fail_calls: int = 0) -> None:
        self.latency = latency
        self.fail_calls = fail_calls
        self.progress: list[CallResult] = []
        self.registrations: dict[str, InvocationHandler] = {}
        self.subscriptions: dict[str, list[EventHandler]] = {}
        self.calls: list[tuple[str, list[Any], dict[str, Any], dict[str, Any]]] = []
        self.publications: list[tuple[str, list[Any], dict[str, Any], dict[str, Any]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def route_call(
        self,
        procedure: str,
        args: list[Any],
        kwargs: dict[str, Any],
        options: dict[str, Any],
        on_progress: ProgressHandler | None,
    ) -> CallResult:
        self.calls.append((procedure, args, kwargs, options))
        async with self._tracked():
            if self.fail_calls > 0:
                self.fail_calls -= 1
                raise FakeBrokerError("wamp.error.canceled")
            handler = self.registrations.get(procedure)
            if handler is None:
                raise FakeBrokerError("wamp.error.no_such_procedure")
            if on_progress is not None:
                for step in self.progress:
                    on_progress(step)
            result = await handler(Invocation(args=args, kwargs=kwargs))
            if result.error is not None:
                raise FakeBrokerError(result.error)
            return CallResult(args=result.args, kwargs=result.kwargs)

    async def route_publish(
        self,
        topic: str,
        args: list[Any],
        kwargs: dict[str, Any],
        options: dict[str, Any],
    ) -> None:
        self.publications.append((topic, args, kwargs, options))
        async with self._tracked():
            for handler in list(self.subscriptions.get(topic, [])):
                await handler(Event(args=args, kwargs=kwargs, details={"topic": topic}))

    def _tracked(self) -> "_InFlight":
        return _InFlight(self)


class _InFlight:
    def __init__(self, broker: FakeBroker) -> None:
        self._broker = broker

    async def __aenter__(self) -> None:
        self._broker.in_flight += 1
        self._broker.max_in_flight = max(
            self._broker.max_in_flight, self._broker.in_flight
        )
        if self._broker.latency > 0:
            await asyncio.sleep(self._broker.latency)

    async def __aexit__(self, *exc_info: object) -> None:
        self._broker.in_flight -= 1


class FakeSession:
    """Session bound to a FakeBroker. Records close() calls."""

    def __init__(self, broker: FakeBroker, close_error: str | None = None) -> None:
        self.broker = broker
        self.close_error = close_error
        self.close_count = 0
        self.unregistered: list[str] = []
        self._procedures: set[str] = set()

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    async def register(
        self,
        procedure: str,
        handler: InvocationHandler,
        options: dict[str, Any] | None = None,
    ) -> None:
        self._ensure_open()
        if procedure in self.broker.registrations:
            raise FakeBrokerError("wamp.error.procedure_already_exists")
        self.broker.registrations[procedure] = handler
        self._procedures.add(procedure)

    async def unregister(self, procedure: str) -> None:
        self._ensure_open()
        if procedure not in self._procedures:
            raise FakeBrokerError("wamp.error.no_such_registration")
        self._procedures.discard(procedure)
        self.broker.registrations.pop(procedure, None)
        self.unregistered.append(procedure)

    async def call(
        self,
        procedure: str,
        args: list[Any] | None = None,
        kwargs: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        on_progress: ProgressHandler | None = None,
    ) -> CallResult:
        self._ensure_open()
        return await self.broker.route_call(
            procedure, list(args or []), dict(kwargs or {}), dict(options or {}), on_progress
        )

    async def subscribe(
        self,
        topic: str,
        handler: EventHandler,
        options: dict[str, Any] | None = None,
    ) -> None:
        self._ensure_open()
        self.broker.subscriptions.setdefault(topic, []).append(handler)

    async def unsubscribe(self, topic: str) -> None:
        self._ensure_open()
        self.broker.subscriptions.pop(topic, None)

    async def publish(
        self,
        topic: str,
        args: list[Any] | None = None,
        kwargs: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        self._ensure_open()
        await self.broker.route_publish(
            topic, list(args or []), dict(kwargs or {}), dict(options or {})
        )

    async def close(self) -> None:
        self.close_count += 1
        for procedure in self._procedures:
            self.broker.registrations.pop(procedure, None)
        self._procedures.clear()
        if self.close_error is not None:
            raise FakeBrokerError(self.close_error)

    def _ensure_open(self) -> None:
        if self.closed:
            raise FakeBrokerError("session is closed")


class FakeConnector:
    """Connector handing out FakeSessions; selected attempts fail.

    ``fail_attempts`` holds the zero-based attempt numbers that raise.
    """

    def __init__(
        self,
        broker: FakeBroker | None = None,
        fail_attempts: set[int] | None = None,
        latency: float = 0.0,
    ) -> None:
        self.broker = broker or FakeBroker()
        self.fail_attempts = fail_attempts or set()
        self.latency = latency
        self.attempts = 0
        self.sessions: list[FakeSession] = []
        self.configs: list[ConnectionConfig] = []
        self.keepalives: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def connect(self, config: ConnectionConfig, keepalive: int) -> FakeSession:
        attempt = self.attempts
        self.attempts += 1
        self.configs.append(config)
        self.keepalives.append(keepalive)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency > 0:
                await asyncio.sleep(self.latency)
            if attempt in self.fail_attempts:
                raise ConnectionRefusedError(f"attempt {attempt} refused")
            session = FakeSession(self.broker)
            self.sessions.append(session)
            return session
        finally:
            self.in_flight -= 1
