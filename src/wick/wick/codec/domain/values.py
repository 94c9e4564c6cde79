"""Value types exchanged with a broker — positional and keyword payloads."""

from typing import Any

type Args = list[Any]
type Kwargs = dict[str, Any]
type Options = dict[str, Any]
type Details = dict[str, Any]
