"""Structural comparison of expected and observed payloads."""

from collections.abc import Mapping, Sequence
from typing import Any


def equal_args_kwargs(
    expected_args: Sequence[Any],
    actual_args: Sequence[Any],
    expected_kwargs: Mapping[str, Any],
    actual_kwargs: Mapping[str, Any],
) -> bool:
    """Return True when both the positional and the keyword parts are deep-equal."""
    return deep_equal(expected_args, actual_args) and deep_equal(
        expected_kwargs, actual_kwargs
    )


def deep_equal(expected: Any, actual: Any) -> bool:
    """Deep equality that also compares scalar types.

    ``1``, ``1.0`` and ``True`` compare equal in Python but are distinct
    values on the wire, so they are unequal here. Lists and tuples are both
    treated as sequences.
    """
    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        if expected.keys() != actual.keys():
            return False
        return all(deep_equal(expected[key], actual[key]) for key in expected)
    if isinstance(expected, list | tuple) and isinstance(actual, list | tuple):
        if len(expected) != len(actual):
            return False
        return all(deep_equal(e, a) for e, a in zip(expected, actual, strict=True))
    return type(expected) is type(actual) and expected == actual
