"""Session and Connector ports — the broker primitives wick drives.

Implementations live outside this package. Every method may raise any
exception to signal a protocol-level failure; callers treat the exception text
as the failure reason.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pydantic import BaseModel, Field

from wick.codec.domain.values import Args, Kwargs, Options
from wick.config.domain.connection import ConnectionConfig

INTERNAL_ERROR_URI = "wamp.error.internal_error"


class Invocation(BaseModel, frozen=True):
    """A call routed to a registered procedure."""

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    details: dict[str, Any] = Field(default_factory=dict)


class InvokeResult(BaseModel, frozen=True):
    """The answer a registered procedure returns for one invocation.

    When ``error`` is set the broker reports an error with that URI to the
    caller and ``args``/``kwargs`` carry its payload.
    """

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class CallResult(BaseModel, frozen=True):
    """The (final or progressive) result of a call."""

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    details: dict[str, Any] = Field(default_factory=dict)


class Event(BaseModel, frozen=True):
    """A publication delivered to a subscriber."""

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    details: dict[str, Any] = Field(default_factory=dict)


type InvocationHandler = Callable[[Invocation], Awaitable[InvokeResult]]
type EventHandler = Callable[[Event], Awaitable[None]]
type ProgressHandler = Callable[[CallResult], None]


class Session(Protocol):
    """An established connection joined to a realm.

    A session is owned by whoever opened it and must be closed exactly once.
    """

    async def register(
        self,
        procedure: str,
        handler: InvocationHandler,
        options: Options | None = None,
    ) -> None: ...

    async def unregister(self, procedure: str) -> None: ...

    async def call(
        self,
        procedure: str,
        args: Args | None = None,
        kwargs: Kwargs | None = None,
        options: Options | None = None,
        on_progress: ProgressHandler | None = None,
    ) -> CallResult: ...

    async def subscribe(
        self,
        topic: str,
        handler: EventHandler,
        options: Options | None = None,
    ) -> None: ...

    async def unsubscribe(self, topic: str) -> None: ...

    async def publish(
        self,
        topic: str,
        args: Args | None = None,
        kwargs: Kwargs | None = None,
        options: Options | None = None,
    ) -> None: ...

    async def close(self) -> None: ...


class Connector(Protocol):
    """Opens sessions. Per-call response timeouts are the connector's concern."""

    async def connect(self, config: ConnectionConfig, keepalive: int) -> Session: ...
