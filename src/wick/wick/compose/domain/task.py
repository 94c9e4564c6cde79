"""Compose file models — a scripted sequence of broker tasks."""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class TaskKind(StrEnum):
    REGISTER = "register"
    CALL = "call"
    SUBSCRIBE = "subscribe"
    PUBLISH = "publish"


class ArgsKwargs(BaseModel, frozen=True):
    """A positional list plus a keyword mapping, as sent or expected on the wire."""

    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)

    @field_validator("args", "kwargs", mode="before")
    @classmethod
    def empty_when_null(cls, value: Any, info: ValidationInfo) -> Any:
        # ``args:`` with no value in YAML loads as None.
        if value is None:
            return [] if info.field_name == "args" else {}
        return value


class RawTask(BaseModel, frozen=True):
    """One task exactly as written in a compose file, every field optional.

    Which fields a task may carry depends on its ``type``; see
    ``wick.compose.application.validation.parse_task``.
    """

    name: str = ""
    type: str = ""
    options: dict[str, Any] | None = None
    procedure: str = ""
    topic: str = ""
    yield_: ArgsKwargs | None = Field(default=None, alias="yield")
    invocation: ArgsKwargs | None = None
    parameters: ArgsKwargs | None = None
    result: ArgsKwargs | None = None
    event: ArgsKwargs | None = None


class RegisterTask(BaseModel, frozen=True):
    """Register a procedure; answer with ``yield`` and check each ``invocation``."""

    type: Literal["register"] = "register"
    name: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    procedure: str = Field(min_length=1)
    invocation: ArgsKwargs | None = None
    yield_: ArgsKwargs | None = Field(default=None, alias="yield")


class CallTask(BaseModel, frozen=True):
    """Call a procedure with ``parameters`` and check the ``result``."""

    type: Literal["call"] = "call"
    name: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    procedure: str = Field(min_length=1)
    parameters: ArgsKwargs | None = None
    result: ArgsKwargs | None = None


class SubscribeTask(BaseModel, frozen=True):
    """Subscribe to a topic and check each received ``event``."""

    type: Literal["subscribe"] = "subscribe"
    name: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    topic: str = Field(min_length=1)
    event: ArgsKwargs | None = None


class PublishTask(BaseModel, frozen=True):
    """Publish ``parameters`` to a topic."""

    type: Literal["publish"] = "publish"
    name: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    topic: str = Field(min_length=1)
    parameters: ArgsKwargs | None = None


# Pydantic selects the subtype from the `type` field.
type Task = Annotated[
    RegisterTask | CallTask | SubscribeTask | PublishTask,
    Field(discriminator="type"),
]


class Compose(BaseModel, frozen=True):
    """Root of a compose file: a version tag and the ordered task list."""

    version: str = ""
    tasks: list[RawTask] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value: Any) -> Any:
        # An unquoted ``version: 2.0`` loads as a float.
        if isinstance(value, int | float):
            return str(value)
        return value
