"""Connection configuration — everything needed to join a realm on a broker."""

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, model_validator


class Serializer(StrEnum):
    JSON = "json"
    MSGPACK = "msgpack"
    CBOR = "cbor"


class AuthMethod(StrEnum):
    ANONYMOUS = "anonymous"
    TICKET = "ticket"
    WAMPCRA = "wampcra"
    CRYPTOSIGN = "cryptosign"


class ConnectionConfig(BaseModel, frozen=True):
    """Immutable parameters for one connection attempt.

    Exactly the credential matching ``authmethod`` may be set: a ticket for
    ``ticket``, a secret for ``wampcra``, a private key for ``cryptosign`` and
    none at all for ``anonymous``.
    """

    url: str = Field(default="ws://localhost:8080/ws", min_length=1)
    realm: str = Field(default="realm1", min_length=1)
    serializer: Serializer = Serializer.JSON
    authmethod: AuthMethod = AuthMethod.ANONYMOUS
    authid: str = ""
    authrole: str = ""
    ticket: str = ""
    secret: str = ""
    private_key: str = ""

    @model_validator(mode="after")
    def check_credentials(self) -> Self:
        match self.authmethod:
            case AuthMethod.ANONYMOUS:
                if self.private_key:
                    raise ValueError("private key not needed for anonymous auth")
                if self.ticket:
                    raise ValueError("ticket not needed for anonymous auth")
                if self.secret:
                    raise ValueError("secret not needed for anonymous auth")
            case AuthMethod.TICKET:
                if not self.ticket:
                    raise ValueError("must provide ticket when authmethod is ticket")
            case AuthMethod.WAMPCRA:
                if not self.secret:
                    raise ValueError("must provide secret when authmethod is wampcra")
            case AuthMethod.CRYPTOSIGN:
                if not self.private_key:
                    raise ValueError(
                        "must provide private key when authmethod is cryptosign"
                    )
        return self
