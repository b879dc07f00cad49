import functools

from dcauth.auth import AuthenticationGateway, DirectoryBackends, DirectoryClient
from dcauth.config import DCAUTH_ENVIRONMENT, DCAUTH_SETTINGS_PATH
from dcauth.config.auth import (
    DCAUTH_AUTH_BIND_TIMEOUT,
    DCAUTH_AUTH_REQUEST_TIMEOUT,
    DCAUTH_AUTH_TLS_PORT,
    DCAUTH_AUTH_USERNAME_PRECEDENCE,
    DCAUTH_DIRECTORY_BACKEND,
    DCAUTH_DIRECTORY_CA_CERT,
    DCAUTH_DIRECTORY_CERT_POLICY,
    DCAUTH_DIRECTORY_MECHANISMS
)
from dcauth.settings import EnvironmentSettings, SettingsStore



def setup_directory_client() -> DirectoryClient:
    """Configure the directory client for the selected backend."""
    backend = DCAUTH_DIRECTORY_BACKEND
    if backend in (DirectoryBackends.DEFAULT, DirectoryBackends.ACTIVE_DIRECTORY):
        from dcauth.auth.backends.activedirectory import ActiveDirectoryClient
        return ActiveDirectoryClient(
            mechanisms=DCAUTH_DIRECTORY_MECHANISMS,
            timeout=DCAUTH_AUTH_BIND_TIMEOUT,
            cert_policy=DCAUTH_DIRECTORY_CERT_POLICY,
            ca_cert=DCAUTH_DIRECTORY_CA_CERT or None
        )
    raise RuntimeError("Received invalid backend.")


@functools.lru_cache(maxsize=None)
def setup_settings() -> EnvironmentSettings:
    """Load the settings store and wrap it with the environment lookup."""
    store = SettingsStore.from_path(DCAUTH_SETTINGS_PATH)
    return EnvironmentSettings(store, environment=DCAUTH_ENVIRONMENT)


@functools.lru_cache(maxsize=None)
def setup_gateway() -> AuthenticationGateway:
    """Configure the authentication gateway from the environment.
    
    The gateway holds configuration only, sharing it across requests does not
    share any directory session.
    """
    return AuthenticationGateway(
        setup_settings(),
        setup_directory_client(),
        precedence=DCAUTH_AUTH_USERNAME_PRECEDENCE,
        bind_timeout=DCAUTH_AUTH_BIND_TIMEOUT,
        request_timeout=DCAUTH_AUTH_REQUEST_TIMEOUT,
        tls_port=DCAUTH_AUTH_TLS_PORT
    )
