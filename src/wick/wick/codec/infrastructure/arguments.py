"""Argument codec — turns raw command-line strings into typed broker values.

Every string is classified by trying a fixed sequence of parsers, first match
wins:

1. a single- or double-quoted literal, returned with its quotes stripped;
2. a ``:=<path>`` file reference, replaced by the file's raw bytes
   (only when file references are enabled);
3. an integer;
4. a float;
5. a boolean (``true``/``false``/``t``/``f`` in any of their usual cases);
6. a JSON object;
7. a JSON array of objects;
8. a JSON array;
9. otherwise the raw string itself.

The order matters: ``"true"`` (quoted) stays a string, ``true`` is a boolean,
``1`` is an integer before it could ever be read as a boolean.
"""

import json
import re
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from wick.codec.domain.values import Args, Kwargs
from wick.codec.infrastructure.errors import ArgumentFileError

FILE_MARKER = ":="

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_BOOL_VALUES = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}


class _NoMatch:
    """Sentinel returned by a parser that does not recognise its input."""


NO_MATCH = _NoMatch()

type Parser = Callable[[str], Any]


def to_positional_args(values: Sequence[str] | None, check_file: bool = True) -> Args:
    """Classify each raw string and return the typed positional arguments.

    Raises:
        ArgumentFileError: if a file reference cannot be read.
    """
    if values is None:
        return []
    parsers = _parsers(check_file=check_file)
    return [classify(value, parsers=parsers) for value in values]


def to_keyword_args(
    values: Mapping[str, str] | None, check_file: bool = True
) -> Kwargs:
    """Classify each raw value and return the typed keyword arguments.

    Raises:
        ArgumentFileError: if a file reference cannot be read.
    """
    if values is None:
        return {}
    parsers = _parsers(check_file=check_file)
    return {key: classify(value, parsers=parsers) for key, value in values.items()}


def parse_key_value_pairs(pairs: Sequence[str] | None) -> dict[str, str]:
    """Split ``key=value`` strings (as given on the command line) into a dict.

    Raises:
        ValueError: if an item has no ``=`` separator.
    """
    result: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"invalid key-value pair {pair!r}: expected key=value")
        result[key] = value
    return result


def classify(value: str, parsers: Sequence[Parser] | None = None) -> Any:
    """Return the typed value for one raw string."""
    for parser in parsers if parsers is not None else _parsers(check_file=True):
        parsed = parser(value)
        if parsed is not NO_MATCH:
            return parsed
    return value


def get_path_if_file(value: str) -> str | None:
    """Return the path of a ``:=<path>`` file reference, or None."""
    if value.startswith(FILE_MARKER):
        return value[len(FILE_MARKER) :]
    return None


def _parsers(check_file: bool) -> list[Parser]:
    parsers: list[Parser] = [_parse_quoted]
    if check_file:
        parsers.append(_parse_file)
    parsers.extend(
        [
            _parse_int,
            _parse_float,
            _parse_bool,
            _parse_json_object,
            _parse_json_object_list,
            _parse_json_list,
        ]
    )
    return parsers


def _parse_quoted(value: str) -> Any:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return NO_MATCH


def _parse_file(value: str) -> Any:
    path = get_path_if_file(value)
    if path is None:
        return NO_MATCH
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ArgumentFileError(path=path, reason=exc.strerror or str(exc)) from exc


def _parse_int(value: str) -> Any:
    if _INT_PATTERN.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return NO_MATCH


def _parse_float(value: str) -> Any:
    # float() is more lenient than a strict numeric literal: it accepts
    # surrounding whitespace and digit-group underscores.
    if value != value.strip() or "_" in value:
        return NO_MATCH
    try:
        return float(value)
    except ValueError:
        return NO_MATCH


def _parse_bool(value: str) -> Any:
    return _BOOL_VALUES.get(value, NO_MATCH)


def _parse_json_object(value: str) -> Any:
    decoded = _load_json(value)
    if isinstance(decoded, dict):
        return decoded
    return NO_MATCH


def _parse_json_object_list(value: str) -> Any:
    decoded = _load_json(value)
    if isinstance(decoded, list) and all(isinstance(item, dict) for item in decoded):
        return decoded
    return NO_MATCH


def _parse_json_list(value: str) -> Any:
    decoded = _load_json(value)
    if isinstance(decoded, list):
        return decoded
    return NO_MATCH


def _load_json(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return NO_MATCH
