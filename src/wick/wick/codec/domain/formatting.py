"""Stable text layouts for printing call, invocation and event payloads.

Two layouts are produced:

- the full layout, used for invocations, events and call results::

      details:{...}
      args:
      [...]kwargs:
      {...}

  Each section is present only when it has content. When args and kwargs are
  empty and no details were given, the literal ``args: []\\nkwargs: {}`` is
  used instead.

- the compact single-line layout, used for progressive call results::

      args: [...]kwargs: {...}

  or ``args: [] kwargs: {}`` when both are empty.
"""

import base64
import json
from typing import Any

from wick.codec.domain.values import Args, Details, Kwargs

_INDENT = "    "
_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}
# Whole floats below this magnitude print without a fraction or exponent.
_PLAIN_FLOAT_LIMIT = 1e21


def format_args_kwargs(
    args: Args | None, kwargs: Kwargs | None, details: Details | None = None
) -> str:
    """Render args, kwargs and optional details in the full layout."""
    parts: list[str] = []
    if details is not None:
        parts.append(f"details:{_indented(details)}\n")
    if args:
        parts.append(f"args:\n{_indented(args)}")
    if kwargs:
        parts.append(f"kwargs:\n{_indented(kwargs)}")
    if not args and not kwargs and details is None:
        parts.append("args: []\nkwargs: {}")
    return "".join(parts)


def format_progress(args: Args | None, kwargs: Kwargs | None) -> str:
    """Render args and kwargs in the compact single-line layout."""
    parts: list[str] = []
    if args:
        parts.append(f"args: {_compact(args)}")
    if kwargs:
        parts.append(f"kwargs: {_compact(kwargs)}")
    if not args and not kwargs:
        parts.append("args: [] kwargs: {}")
    return "".join(parts)


def encode_to_json(value: Any) -> str:
    """Encode value as four-space indented JSON with a trailing newline.

    Unlike the payload layouts, HTML-significant characters are left as-is.
    """
    return (
        json.dumps(
            _plain_numbers(value),
            indent=_INDENT,
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
        + "\n"
    )


def _indented(value: Any) -> str:
    return _escape_html(
        json.dumps(
            _plain_numbers(value),
            indent=_INDENT,
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    )


def _compact(value: Any) -> str:
    return _escape_html(
        json.dumps(
            _plain_numbers(value),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    )


def _plain_numbers(value: Any) -> Any:
    match value:
        case float() if value.is_integer() and abs(value) < _PLAIN_FLOAT_LIMIT:
            return int(value)
        case dict():
            return {key: _plain_numbers(item) for key, item in value.items()}
        case list() | tuple():
            return [_plain_numbers(item) for item in value]
        case _:
            return value


def _escape_html(text: str) -> str:
    # These characters can only occur inside JSON string literals, so a plain
    # substitution keeps the document valid.
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
