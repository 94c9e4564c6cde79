"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def connection_configured(
        self, url: str, realm: str, serializer: str, authmethod: str
    ) -> None: ...

    def auth_method_selected(self, authmethod: str) -> None: ...
