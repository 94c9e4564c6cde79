"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def connection_configured(
        self, url: str, realm: str, serializer: str, authmethod: str
    ) -> None:
        self._log.debug(
            "config.connection_configured",
            url=url,
            realm=realm,
            serializer=serializer,
            authmethod=authmethod,
        )

    def auth_method_selected(self, authmethod: str) -> None:
        self._log.debug("config.auth_method_selected", authmethod=authmethod)
