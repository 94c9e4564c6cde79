"""Tests for compose file models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from wick.compose.domain.task import (
    ArgsKwargs,
    CallTask,
    Compose,
    PublishTask,
    RawTask,
    RegisterTask,
    Task,
)


class TestArgsKwargs:
    """Missing or null parts become empty."""

    def test_defaults_are_empty(self) -> None:
        payload = ArgsKwargs()
        assert payload.args == []
        assert payload.kwargs == {}

    def test_null_parts_become_empty(self) -> None:
        payload = ArgsKwargs.model_validate({"args": None, "kwargs": None})
        assert payload.args == []
        assert payload.kwargs == {}

    def test_kwargs_must_be_a_mapping(self) -> None:
        with pytest.raises(ValidationError):
            ArgsKwargs.model_validate({"kwargs": [1, 2]})


class TestRawTask:
    """Flat tasks accept every field; yield is read from its YAML key."""

    def test_yield_alias(self) -> None:
        raw = RawTask.model_validate(
            {"type": "register", "procedure": "p", "yield": {"args": ["ok"]}}
        )
        assert raw.yield_ is not None
        assert raw.yield_.args == ["ok"]

    def test_unset_fields_are_empty(self) -> None:
        raw = RawTask()
        assert raw.procedure == ""
        assert raw.options is None
        assert raw.result is None


class TestCompose:
    """The version is kept as text; tasks keep file order."""

    @pytest.mark.parametrize(("value", "expected"), [(2.0, "2.0"), (2, "2"), ("2.0", "2.0")])
    def test_version_is_text(self, value: object, expected: str) -> None:
        assert Compose.model_validate({"version": value}).version == expected

    def test_tasks_keep_order(self) -> None:
        compose = Compose.model_validate(
            {"tasks": [{"name": "first"}, {"name": "second"}]}
        )
        assert [task.name for task in compose.tasks] == ["first", "second"]

    def test_models_are_frozen(self) -> None:
        compose = Compose()
        with pytest.raises(ValidationError):
            compose.version = "3"  # type: ignore[misc]


class TestTaskUnion:
    """The type field selects the typed task."""

    def test_discriminator_selects_type(self) -> None:
        adapter: TypeAdapter[Task] = TypeAdapter(Task)
        assert isinstance(adapter.validate_python({"type": "call", "procedure": "p"}), CallTask)
        assert isinstance(adapter.validate_python({"type": "publish", "topic": "t"}), PublishTask)

    def test_register_requires_procedure(self) -> None:
        with pytest.raises(ValidationError):
            RegisterTask(procedure="")
