from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr



class Transport(str, Enum):
    """How the connection to the directory is secured."""
    PLAIN = "plain"
    STARTTLS = "starttls"
    IMPLICIT_TLS = "implicit_tls"


class Mechanism(str, Enum):
    """Bind mechanism presented to the directory."""
    SIMPLE = "simple"
    NEGOTIATE = "negotiate"
    NTLM = "ntlm"


class UsernamePrecedence(str, Enum):
    """Resolution rule for usernames containing both a backslash and an '@'.
    
    - UPN: the text after the first backslash is a UPN, the domain part is dropped.
    - BACKSLASH: the domain part before the first backslash is kept.
    """
    UPN = "upn"
    BACKSLASH = "backslash"


class AuthRequest(BaseModel):
    """Inbound credentials for the `/checkAuth` endpoint."""
    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    password: SecretStr
    domain: str | None = None


class AuthResponse(BaseModel):
    """Response body for the `/checkAuth` endpoint.
    
    `token` is omitted from the serialized body when not issued.
    """
    authenticated: bool
    token: str | None = None


class NormalizedCredential(BaseModel):
    """Credential split into the parts used to build a bind name."""
    model_config = ConfigDict(frozen=True)

    bind_domain: str | None = None
    bind_principal: str
    password: SecretStr


class DirectoryEndpoint(BaseModel):
    """Resolved directory host, port and transport security."""
    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    implicit_tls: bool = False


@dataclass(frozen=True)
class BindAttempt:
    """A single rung of the bind ladder."""
    transport: Transport
    mechanism: Mechanism
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.mechanism.value} bind over {self.transport.value} to {self.host}:{self.port}"


@dataclass(frozen=True)
class Authenticated:
    identity: str


@dataclass(frozen=True)
class Rejected:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


AuthOutcome = Union[Authenticated, Rejected, Failed]


@dataclass(frozen=True)
class IssuedToken:
    """A signed token and the registered claims it was built from."""
    subject: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    token: str
    issuer: str | None = None
    audience: str | None = None
