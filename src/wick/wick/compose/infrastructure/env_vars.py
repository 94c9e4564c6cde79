"""${NAME} expansion inside the string values of a parsed compose document.

Only string scalars are expanded; mapping keys, numbers and booleans are left
as loaded. An unset variable is never replaced by an empty string.
"""

import os
import re
from collections.abc import Callable
from typing import Any

_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def unset_env_vars(document: Any) -> list[str]:
    """Return every referenced variable that is not set, in first-seen order."""
    unset: list[str] = []

    def _note(text: str) -> str:
        for name in _REFERENCE.findall(text):
            if name not in os.environ and name not in unset:
                unset.append(name)
        return text

    _map_strings(document, _note)
    return unset


def expand_env_vars(document: Any) -> Any:
    """Return a copy of the document with every ${NAME} replaced by its value.

    Raises KeyError for an unset variable; check ``unset_env_vars`` first.
    """
    return _map_strings(
        document, lambda text: _REFERENCE.sub(lambda m: os.environ[m.group(1)], text)
    )


def _map_strings(node: Any, fn: Callable[[str], str]) -> Any:
    match node:
        case str():
            return fn(node)
        case list():
            return [_map_strings(item, fn) for item in node]
        case dict():
            return {key: _map_strings(value, fn) for key, value in node.items()}
        case _:
            return node
