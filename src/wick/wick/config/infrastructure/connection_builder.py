"""Builds a validated ConnectionConfig from loosely-typed user input."""

from pydantic import ValidationError

from wick.config.domain.connection import AuthMethod, ConnectionConfig, Serializer
from wick.config.domain.observer import ConfigObserver
from wick.config.infrastructure.errors import ConfigValidationError


class ConnectionConfigBuilder:
    """Turns CLI/environment values into an immutable ConnectionConfig."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def build(
        self,
        url: str,
        realm: str,
        serializer: str = "json",
        authmethod: str | None = None,
        authid: str = "",
        authrole: str = "",
        ticket: str = "",
        secret: str = "",
        private_key: str = "",
    ) -> ConnectionConfig:
        """
        Validate the inputs and return a ConnectionConfig.

        When authmethod is not given it is inferred from the single credential
        supplied (see select_auth_method).

        Raises:
            ConfigValidationError: if the serializer or auth method is unknown, or
                the credentials do not match the auth method.
        """
        if authmethod is None:
            method = select_auth_method(
                private_key=private_key, ticket=ticket, secret=secret
            )
            self._observer.auth_method_selected(authmethod=method.value)
        else:
            method = _parse_auth_method(authmethod)

        try:
            config = ConnectionConfig(
                url=sanitize_url(url),
                realm=realm,
                serializer=_parse_serializer(serializer),
                authmethod=method,
                authid=authid,
                authrole=authrole,
                ticket=ticket,
                secret=secret,
                private_key=private_key,
            )
        except ValidationError as exc:
            raise ConfigValidationError(_first_error(exc)) from exc

        self._observer.connection_configured(
            url=config.url,
            realm=config.realm,
            serializer=config.serializer.value,
            authmethod=config.authmethod.value,
        )
        return config


def select_auth_method(private_key: str, ticket: str, secret: str) -> AuthMethod:
    """Pick the auth method implied by exactly one supplied credential.

    Anything other than exactly one credential falls back to anonymous, which
    then rejects the stray credentials during validation.
    """
    if private_key and not ticket and not secret:
        return AuthMethod.CRYPTOSIGN
    if ticket and not private_key and not secret:
        return AuthMethod.TICKET
    if secret and not private_key and not ticket:
        return AuthMethod.WAMPCRA
    return AuthMethod.ANONYMOUS


def sanitize_url(url: str) -> str:
    """Rewrite raw-socket schemes (``rs://``, ``rss://``) to ``tcp://``."""
    if url.startswith("rss://"):
        return "tcp://" + url.removeprefix("rss://")
    if url.startswith("rs://"):
        return "tcp://" + url.removeprefix("rs://")
    return url


def _parse_serializer(value: str) -> Serializer:
    try:
        return Serializer(value)
    except ValueError:
        raise ConfigValidationError(
            f"serializer must be one of {', '.join(s.value for s in Serializer)},"
            f" got '{value}'"
        ) from None


def _parse_auth_method(value: str) -> AuthMethod:
    try:
        return AuthMethod(value)
    except ValueError:
        raise ConfigValidationError(
            f"authmethod must be one of {', '.join(m.value for m in AuthMethod)},"
            f" got '{value}'"
        ) from None


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    message = str(errors[0]["msg"])
    # model_validator errors are reported as "Value error, <message>".
    return message.removeprefix("Value error, ")
