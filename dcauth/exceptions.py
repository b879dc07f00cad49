class DCAuthException(Exception):
    """Base exception for all dcauth errors."""


class ClientError(DCAuthException):
    """Raised when an inbound request is malformed or missing credentials.

    The `error` code is returned verbatim to the caller in a 400 response.
    """
    def __init__(self, error: str = "missing_credentials") -> None:
        self.error = error

    def __str__(self) -> str:
        return self.error


class ConfigurationError(DCAuthException):
    """Raised when required server configuration is missing or invalid.
    
    The message is surfaced to the caller so it must never contain a secret
    value, only the name of what is missing.
    """


class InfrastructureFailure(DCAuthException):
    """Raised when the directory cannot be reached or did not answer in time.
    
    This is distinct from rejected credentials so that an outage is never
    reported to a caller as a bad password.
    """
