import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, SecretStr

from dcauth.auth.protocols import ConfigurationSource
from dcauth.auth.models import IssuedToken
from dcauth.exceptions import ConfigurationError



_LOGGER = logging.getLogger("dcauth.auth.token")

DEFAULT_LIFETIME_MINUTES = 60


def subject_from_identity(identity: str) -> str:
    """Strip a `DOMAIN\\` prefix from a bind identity. UPNs are kept whole."""
    if "\\" in identity:
        return identity.split("\\", 1)[1]
    return identity


def parse_lifetime(value: str | None) -> timedelta:
    """Parse a lifetime in minutes, falling back to the default when the value
    is missing, unparsable or not positive.
    """
    if value is None or not value.strip():
        return timedelta(minutes=DEFAULT_LIFETIME_MINUTES)
    try:
        minutes = int(value)
    except ValueError:
        _LOGGER.warning(
            "Invalid token lifetime %r, using %i minutes",
            value,
            DEFAULT_LIFETIME_MINUTES
        )
        return timedelta(minutes=DEFAULT_LIFETIME_MINUTES)
    if minutes <= 0:
        _LOGGER.warning(
            "Token lifetime must be positive, got %i. Using %i minutes",
            minutes,
            DEFAULT_LIFETIME_MINUTES
        )
        return timedelta(minutes=DEFAULT_LIFETIME_MINUTES)
    return timedelta(minutes=minutes)


class TokenIssuer(BaseModel):
    """Model for issuing and decoding HMAC signed JWT's.
    
    `issuer` and `audience` are only emitted as claims when configured.
    """
    key: SecretStr | None = None
    lifetime: timedelta = timedelta(minutes=DEFAULT_LIFETIME_MINUTES)
    algorithm: str = "HS256"
    issuer: str | None = None
    audience: str | None = None

    @classmethod
    def from_source(cls, source: ConfigurationSource) -> "TokenIssuer":
        """Create an issuer from the `Jwt:*` configuration keys."""
        return cls(
            key=source.get("Jwt:Key") or None,
            lifetime=parse_lifetime(source.get("Jwt:ExpiresMinutes")),
            issuer=source.get("Jwt:Issuer") or None,
            audience=source.get("Jwt:Audience") or None
        )

    def _get_key(self) -> str:
        if self.key is None or not self.key.get_secret_value():
            raise ConfigurationError("JWT signing key not configured (Jwt:Key)")
        return self.key.get_secret_value()

    def issue(self, identity: str) -> IssuedToken:
        """Issue a JWT for an authenticated identity.
        
        The `sub` claim carries the identity without its domain prefix. When
        that differs from the bind identity, the domain qualified form is
        carried in the `principal` claim.

        Raises:
            ConfigurationError: No signing key is configured.
            JWTError: If there was an error encoding the claims.
        """
        key = self._get_key()
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = issued_at + self.lifetime
        subject = subject_from_identity(identity)
        
        claims: Dict[str, Any] = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "nbf": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        if subject != identity:
            claims["principal"] = identity
        if self.issuer:
            claims["iss"] = self.issuer
        if self.audience:
            claims["aud"] = self.audience
        
        token = jwt.encode(claims, key, algorithm=self.algorithm)
        return IssuedToken(
            subject=subject,
            issued_at=issued_at,
            not_before=issued_at,
            expires_at=expires_at,
            token=token,
            issuer=self.issuer,
            audience=self.audience
        )

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify a JWT and return its claims.

        Returns:
            claims: If the token is invalid or expired this returns `None`.
        """
        try:
            return jwt.decode(
                token,
                self._get_key(),
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer
            )
        except ExpiredSignatureError:
            _LOGGER.debug("Token expired")
            return
        except JWTError:
            _LOGGER.debug("Received invalid token")
            return
