"""Operation specifications — what to run, how often and how concurrently."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class OperationKind(StrEnum):
    CALL = "call"
    PUBLISH = "publish"
    REGISTER = "register"
    SUBSCRIBE = "subscribe"


class OperationSpec(BaseModel, frozen=True):
    """A call or publish repeated ``repeat`` times.

    ``delay_ms`` is waited once, before the first execution only. A
    ``concurrency`` of 0 or 1 runs repetitions strictly one after another;
    larger values bound how many are in flight at once.
    """

    target: str = Field(min_length=1)
    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)
    repeat: int = Field(default=1, ge=1)
    delay_ms: int = Field(default=0, ge=0)
    concurrency: int = Field(default=1, ge=0)
    log_time: bool = False


class RegistrationSpec(BaseModel, frozen=True):
    """A procedure registration answered by the invocation handler.

    ``max_invocations`` unregisters the procedure, and later closes the
    session, once that many invocations have been answered.
    """

    procedure: str = Field(min_length=1)
    options: dict[str, Any] = Field(default_factory=dict)
    delay_ms: int = Field(default=0, ge=0)
    command: str = ""
    max_invocations: int | None = Field(default=None, ge=1)
    log_time: bool = False


class SubscriptionSpec(BaseModel, frozen=True):
    """A topic subscription that reports every received event."""

    topic: str = Field(min_length=1)
    options: dict[str, Any] = Field(default_factory=dict)
    delay_ms: int = Field(default=0, ge=0)
    print_details: bool = False
    log_time: bool = False
