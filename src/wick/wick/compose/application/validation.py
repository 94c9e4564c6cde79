"""Converts flat compose tasks into typed tasks, rejecting illegal field combinations.

Each task type names one required field and a set of forbidden ones:

    register   requires procedure; forbids topic, event, result, parameters
    call       requires procedure; forbids topic, event, yield, invocation
    subscribe  requires topic; forbids procedure, result, yield, invocation, parameters
    publish    requires topic; forbids procedure, result, yield, invocation, event

Checks run in the order listed and the first violation is reported.
"""

from typing import Any, NamedTuple

from wick.compose.application.errors import ComposeValidationError
from wick.compose.domain.task import (
    CallTask,
    PublishTask,
    RawTask,
    RegisterTask,
    SubscribeTask,
    Task,
    TaskKind,
)


class _Forbidden(NamedTuple):
    field: str
    verb: str


class _Rule(NamedTuple):
    required: str
    forbidden: tuple[_Forbidden, ...]


_RULES: dict[TaskKind, _Rule] = {
    TaskKind.REGISTER: _Rule(
        required="procedure",
        forbidden=(
            _Forbidden("topic", "is"),
            _Forbidden("event", "is"),
            _Forbidden("result", "is"),
            _Forbidden("parameters", "are"),
        ),
    ),
    TaskKind.CALL: _Rule(
        required="procedure",
        forbidden=(
            _Forbidden("topic", "is"),
            _Forbidden("event", "is"),
            _Forbidden("yield", "is"),
            _Forbidden("invocation", "are"),
        ),
    ),
    TaskKind.SUBSCRIBE: _Rule(
        required="topic",
        forbidden=(
            _Forbidden("procedure", "is"),
            _Forbidden("result", "is"),
            _Forbidden("yield", "is"),
            _Forbidden("invocation", "is"),
            _Forbidden("parameters", "are"),
        ),
    ),
    TaskKind.PUBLISH: _Rule(
        required="topic",
        forbidden=(
            _Forbidden("procedure", "is"),
            _Forbidden("result", "is"),
            _Forbidden("yield", "is"),
            _Forbidden("invocation", "is"),
            _Forbidden("event", "is"),
        ),
    ),
}

_SUPPORTED = ", ".join(kind.value for kind in TaskKind)


def parse_task(raw: RawTask) -> Task:
    """
    Validate a flat task against the rules of its type and return the typed task.

    Raises:
        ComposeValidationError: on an unknown type, a missing required field or
            a forbidden field, with the first violation as the reason.
    """
    try:
        kind = TaskKind(raw.type)
    except ValueError:
        raise ComposeValidationError(
            task_name=raw.name,
            reason=f"{raw.type} not supported: supported types are {_SUPPORTED}",
        ) from None

    rule = _RULES[kind]
    if not _is_set(raw, rule.required):
        raise ComposeValidationError(
            task_name=raw.name,
            reason=f"{rule.required} is required for {kind.value}",
        )
    for forbidden in rule.forbidden:
        if _is_set(raw, forbidden.field):
            raise ComposeValidationError(
                task_name=raw.name,
                reason=f"{forbidden.field} {forbidden.verb} not required for {kind.value}",
            )

    options = dict(raw.options or {})
    if kind is TaskKind.REGISTER:
        return RegisterTask.model_validate(
            {
                "name": raw.name,
                "options": options,
                "procedure": raw.procedure,
                "invocation": raw.invocation,
                "yield": raw.yield_,
            }
        )
    if kind is TaskKind.CALL:
        return CallTask(
            name=raw.name,
            options=options,
            procedure=raw.procedure,
            parameters=raw.parameters,
            result=raw.result,
        )
    if kind is TaskKind.SUBSCRIBE:
        return SubscribeTask(
            name=raw.name, options=options, topic=raw.topic, event=raw.event
        )
    return PublishTask(
        name=raw.name, options=options, topic=raw.topic, parameters=raw.parameters
    )


def _is_set(raw: RawTask, field: str) -> bool:
    value: Any = raw.yield_ if field == "yield" else getattr(raw, field)
    if isinstance(value, str):
        return value != ""
    return value is not None
