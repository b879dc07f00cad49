import logging

from dcauth.auth.credentials import normalize
from dcauth.auth.endpoint import resolve
from dcauth.auth.models import (
    Authenticated,
    AuthRequest,
    AuthResponse,
    Failed,
    Rejected,
    UsernamePrecedence,
)
from dcauth.auth.protocols import ConfigurationSource, DirectoryClient
from dcauth.auth.strategy import BindStrategyEngine
from dcauth.auth.token import TokenIssuer
from dcauth.exceptions import ClientError, InfrastructureFailure
from dcauth.util import cast_bool



_LOGGER = logging.getLogger("dcauth.auth.gateway")


class AuthenticationGateway:
    """Composition root for a single `/checkAuth` call.

    Configuration is read from `source` on every call so changes to the
    environment or settings store apply without a restart. No state is kept
    between calls.
    
    Args:
        source: Provides the `DomainController:*` and `Jwt:*` settings.
        client: Directory client used by the bind ladder.
        precedence: Rule for usernames containing both '\\' and '@'.
        bind_timeout: Seconds allowed for a single bind attempt.
        request_timeout: Seconds allowed for the whole bind ladder.
        tls_port: Port for the implicit TLS fallback.
    """
    def __init__(
        self,
        source: ConfigurationSource,
        client: DirectoryClient,
        precedence: UsernamePrecedence = UsernamePrecedence.UPN,
        bind_timeout: float = 5.0,
        request_timeout: float = 30.0,
        tls_port: int = 636
    ) -> None:
        self.source = source
        self.precedence = precedence
        self.engine = BindStrategyEngine(
            client,
            bind_timeout=bind_timeout,
            request_timeout=request_timeout,
            tls_port=tls_port
        )

    async def handle(self, request: AuthRequest | None) -> AuthResponse:
        """Authenticate the request and issue a token on success.

        Returns:
            response: `authenticated=False` for rejected credentials, the reason
                is never included.

        Raises:
            ClientError: The request carried no credentials.
            ConfigurationError: Required configuration is missing or invalid.
            InfrastructureFailure: The directory could not be used.
        """
        if request is None:
            raise ClientError("missing_credentials")

        directory_url = self.source.get("DomainController:Url")
        domain = request.domain if request.domain and request.domain.strip() else None
        domain = domain or self.source.get("DomainController:Domain")
        issue_tokens = cast_bool(self.source.get("Jwt:Enabled"), default=True)
        issuer = TokenIssuer.from_source(self.source)

        credential = normalize(
            request.username,
            domain,
            request.password,
            self.precedence
        )
        endpoint = resolve(directory_url)
        outcome = await self.engine.authenticate(endpoint, credential)

        match outcome:
            case Authenticated(identity=identity):
                _LOGGER.info("Authenticated %s", identity)
                if not issue_tokens:
                    return AuthResponse(authenticated=True)
                issued = issuer.issue(identity)
                return AuthResponse(authenticated=True, token=issued.token)
            case Rejected():
                return AuthResponse(authenticated=False)
            case Failed(reason=reason):
                raise InfrastructureFailure(reason)
