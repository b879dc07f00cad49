from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings

from dcauth.auth import DirectoryBackends, Mechanism, UsernamePrecedence



config = Config(".env")


DCAUTH_AUTH_BIND_TIMEOUT = config(
    "DCAUTH_AUTH_BIND_TIMEOUT",
    cast=float,
    default=5.0
)
DCAUTH_AUTH_REQUEST_TIMEOUT = config(
    "DCAUTH_AUTH_REQUEST_TIMEOUT",
    cast=float,
    default=30.0
)
DCAUTH_AUTH_TLS_PORT = config(
    "DCAUTH_AUTH_TLS_PORT",
    cast=int,
    default=636
)
DCAUTH_AUTH_MAX_WORKERS = config(
    "DCAUTH_AUTH_MAX_WORKERS",
    cast=int,
    default=16
)
DCAUTH_AUTH_USERNAME_PRECEDENCE = config(
    "DCAUTH_AUTH_USERNAME_PRECEDENCE",
    cast=lambda v: UsernamePrecedence(v.lower()),
    default=UsernamePrecedence.UPN.value
)
DCAUTH_DIRECTORY_BACKEND = config(
    "DCAUTH_DIRECTORY_BACKEND",
    cast=lambda v: DirectoryBackends(v.lower()),
    default=DirectoryBackends.DEFAULT.value
)
DCAUTH_DIRECTORY_MECHANISMS = config(
    "DCAUTH_DIRECTORY_MECHANISMS",
    cast=lambda v: frozenset(Mechanism(m.lower()) for m in CommaSeparatedStrings(v)),
    default="SIMPLE,NEGOTIATE,NTLM"
)
DCAUTH_DIRECTORY_CERT_POLICY = config(
    "DCAUTH_DIRECTORY_CERT_POLICY",
    default="demand"
)
DCAUTH_DIRECTORY_CA_CERT = config(
    "DCAUTH_DIRECTORY_CA_CERT",
    default=""
)
