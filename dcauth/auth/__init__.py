"""Directory-backed authentication.

A request is normalized into a bind credential, the configured directory URL
is resolved into an endpoint and the bind strategy engine climbs a ladder of
transports and mechanisms until the directory accepts or rejects the
credential. A successful bind is turned into a signed JWT.

Available Backends
- Active directory (bonsai)
"""
from .backends import DirectoryBackends
from .credentials import mechanism_bind_credentials, normalize, simple_bind_name
from .endpoint import resolve
from .exceptions import DirectoryError, DirectoryUnavailable, MechanismUnavailable
from .gateway import AuthenticationGateway
from .models import (
    Authenticated,
    AuthOutcome,
    AuthRequest,
    AuthResponse,
    BindAttempt,
    DirectoryEndpoint,
    Failed,
    IssuedToken,
    Mechanism,
    NormalizedCredential,
    Rejected,
    Transport,
    UsernamePrecedence,
)
from .protocols import ConfigurationSource, DirectoryClient, DirectoryConnection
from .strategy import BindFailure, BindStrategyEngine, build_ladder, classify
from .token import TokenIssuer



__all__ = [
    "DirectoryBackends",
    "mechanism_bind_credentials",
    "normalize",
    "simple_bind_name",
    "resolve",
    "DirectoryError",
    "DirectoryUnavailable",
    "MechanismUnavailable",
    "AuthenticationGateway",
    "Authenticated",
    "AuthOutcome",
    "AuthRequest",
    "AuthResponse",
    "BindAttempt",
    "DirectoryEndpoint",
    "Failed",
    "IssuedToken",
    "Mechanism",
    "NormalizedCredential",
    "Rejected",
    "Transport",
    "UsernamePrecedence",
    "ConfigurationSource",
    "DirectoryClient",
    "DirectoryConnection",
    "BindFailure",
    "BindStrategyEngine",
    "build_ladder",
    "classify",
    "TokenIssuer",
]
