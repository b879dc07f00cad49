from pydantic import ValidationError
from starlette.datastructures import URL

from dcauth.auth.models import DirectoryEndpoint
from dcauth.exceptions import ConfigurationError



LDAP_PORT = 389
LDAPS_PORT = 636


def resolve(configured_url: str | None) -> DirectoryEndpoint:
    """Resolve a configured directory URL into a `DirectoryEndpoint`.

    `ldaps://` selects implicit TLS on port 636. `ldap://`, an unrecognized
    scheme or a bare `host[:port]` selects a plain connection on port 389. An
    explicit port always overrides the scheme default.

    Raises:
        ConfigurationError: The URL is absent or cannot be parsed.
    """
    if configured_url is None or not configured_url.strip():
        raise ConfigurationError("Domain controller URL not configured")
    
    value = configured_url.strip()
    if "://" not in value:
        value = f"ldap://{value}"
    url = URL(value)
    
    try:
        host = url.hostname
        port = url.port
    except ValueError as err:
        raise ConfigurationError("Domain controller URL invalid") from err
    if not host:
        raise ConfigurationError("Domain controller URL invalid")
    
    implicit_tls = url.scheme == "ldaps"
    if port is None:
        port = LDAPS_PORT if implicit_tls else LDAP_PORT
    
    try:
        return DirectoryEndpoint(host=host, port=port, implicit_tls=implicit_tls)
    except ValidationError as err:
        raise ConfigurationError("Domain controller URL invalid") from err
