"""Loads the Connector implementation named on the command line."""

import importlib

from wick.core.errors import WickError
from wick.session.domain.session import Connector


class ConnectorLoadError(WickError):
    """Raised when the ``module:attribute`` connector reference cannot be resolved."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Failed to load connector {reference!r}: {reason}")


def load_connector(reference: str) -> Connector:
    """
    Resolve ``package.module:attribute`` to a Connector.

    The attribute may be a connector object or a zero-argument callable (such
    as a class) that returns one.

    Raises:
        ConnectorLoadError: if the reference is malformed, the module cannot be
            imported, or the attribute does not provide ``connect``.
    """
    if not reference:
        raise ConnectorLoadError(
            reference, "no connector given, pass --connector or set WICK_CONNECTOR"
        )
    module_name, sep, attr_name = reference.partition(":")
    if not sep or not module_name or not attr_name:
        raise ConnectorLoadError(reference, "expected 'module:attribute'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConnectorLoadError(reference, str(exc)) from exc

    target = getattr(module, attr_name, None)
    if target is None:
        raise ConnectorLoadError(
            reference, f"module {module_name!r} has no attribute {attr_name!r}"
        )

    connector = target
    if isinstance(target, type) or not hasattr(target, "connect"):
        if not callable(target):
            raise ConnectorLoadError(reference, "object has no connect() method")
        connector = target()
    if not callable(getattr(connector, "connect", None)):
        raise ConnectorLoadError(reference, "object has no connect() method")
    return connector
