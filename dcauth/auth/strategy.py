"""Bind strategy engine.

The engine climbs a fixed ladder of bind attempts against a directory whose
security requirements are not known in advance...

1. Primary: simple bind, implicit TLS if the endpoint is `ldaps`, else plain.
2. StartTLS: simple bind on the plain port after a StartTLS upgrade. Only
   present when the primary attempt was plain.
3. Implicit TLS: simple bind on the TLS port.
4. Alternate mechanisms: Negotiate then NTLM, with the transport of the
   preceding rung. Only the mechanisms the directory client exposes are used.

After each attempt the failure is classified by `classify`. Only a
"strong authentication required" failure moves the engine to the next rung;
rejected credentials and infrastructure failures end the climb immediately.
Every attempt opens its own connection which is closed before the next rung
is tried.
"""
import contextlib
import enum
import logging
import re
from collections.abc import Sequence
from typing import AsyncGenerator, FrozenSet, List, Tuple

import anyio

from dcauth.auth.credentials import mechanism_bind_credentials, simple_bind_name
from dcauth.auth.exceptions import DirectoryError, DirectoryUnavailable, MechanismUnavailable
from dcauth.auth.models import (
    Authenticated,
    AuthOutcome,
    BindAttempt,
    DirectoryEndpoint,
    Failed,
    Mechanism,
    NormalizedCredential,
    Rejected,
    Transport,
)
from dcauth.auth.protocols import DirectoryClient, DirectoryConnection



_LOGGER = logging.getLogger("dcauth.auth.strategy")

# LDAP result codes that mean "try a different method", not "wrong password"
AUTH_METHOD_NOT_SUPPORTED = 7
STRONG_AUTH_REQUIRED = 8
_ESCALATABLE_CODES = frozenset((AUTH_METHOD_NOT_SUPPORTED, STRONG_AUTH_REQUIRED))
_STRONG_AUTH_PATTERN = re.compile(
    r"strong(?:\(er\)|er)?\s+authentication|error initializing ssl/tls",
    re.IGNORECASE
)
ALTERNATE_MECHANISMS = (Mechanism.NEGOTIATE, Mechanism.NTLM)


class BindFailure(enum.Enum):
    """Classification of a failed bind attempt."""
    ESCALATE = "escalate"
    REJECTED = "rejected"
    INFRASTRUCTURE = "infrastructure"


def classify(err: BaseException) -> BindFailure:
    """Classify an error raised by a bind attempt.

    - ESCALATE: the attempt's transport or mechanism could not be used
        (`MechanismUnavailable`), or the directory demands a stronger method.
        The latter is matched on the strong-authentication result codes or on
        the message text ("strong authentication", "Strong(er)
        authentication", a TLS initialization error).
    - INFRASTRUCTURE: the directory could not be reached or did not answer
        in time, or the error did not come from the directory at all.
    - REJECTED: any other directory-level bind failure.
    """
    if isinstance(err, MechanismUnavailable):
        return BindFailure.ESCALATE
    if isinstance(err, DirectoryError) and err.code in _ESCALATABLE_CODES:
        return BindFailure.ESCALATE
    if _STRONG_AUTH_PATTERN.search(str(err)):
        return BindFailure.ESCALATE
    if isinstance(err, (DirectoryUnavailable, TimeoutError, OSError)):
        return BindFailure.INFRASTRUCTURE
    if isinstance(err, DirectoryError):
        return BindFailure.REJECTED
    return BindFailure.INFRASTRUCTURE


def build_ladder(
    endpoint: DirectoryEndpoint,
    mechanisms: FrozenSet[Mechanism],
    tls_port: int = 636
) -> List[BindAttempt]:
    """Build the ordered list of attempts for an endpoint.
    
    The implicit TLS rung is left out when it would repeat the primary attempt.
    """
    host = endpoint.host
    if endpoint.implicit_tls:
        ladder = [BindAttempt(Transport.IMPLICIT_TLS, Mechanism.SIMPLE, host, endpoint.port)]
    else:
        ladder = [
            BindAttempt(Transport.PLAIN, Mechanism.SIMPLE, host, endpoint.port),
            BindAttempt(Transport.STARTTLS, Mechanism.SIMPLE, host, endpoint.port),
        ]
    
    fallback = BindAttempt(Transport.IMPLICIT_TLS, Mechanism.SIMPLE, host, tls_port)
    if fallback != ladder[0]:
        ladder.append(fallback)
    
    last = ladder[-1]
    for mechanism in ALTERNATE_MECHANISMS:
        if mechanism in mechanisms:
            ladder.append(BindAttempt(last.transport, mechanism, last.host, last.port))
    return ladder


class BindStrategyEngine:
    """Authenticate a credential by climbing the bind ladder.

    Args:
        client: The directory client that opens connections for each attempt.
        bind_timeout: Seconds allowed for a single attempt. A timeout is an
            infrastructure failure.
        request_timeout: Seconds allowed for the whole ladder. When it elapses
            the in-flight connection is closed and no further rungs are tried.
        tls_port: Port used by the implicit TLS fallback rung.
    """
    def __init__(
        self,
        client: DirectoryClient,
        bind_timeout: float = 5.0,
        request_timeout: float = 30.0,
        tls_port: int = 636
    ) -> None:
        self.client = client
        self.bind_timeout = bind_timeout
        self.request_timeout = request_timeout
        self.tls_port = tls_port

    async def authenticate(
        self,
        endpoint: DirectoryEndpoint,
        credential: NormalizedCredential
    ) -> AuthOutcome:
        """Run the ladder and return exactly one of `Authenticated`, `Rejected`
        or `Failed`.
        """
        ladder = build_ladder(endpoint, self.client.mechanisms, self.tls_port)
        try:
            with anyio.fail_after(self.request_timeout):
                return await self._climb(ladder, credential)
        except TimeoutError:
            _LOGGER.error(
                "Authentication against %s:%i exceeded the %s second deadline",
                endpoint.host,
                endpoint.port,
                self.request_timeout
            )
            return Failed(reason="The directory did not respond before the request deadline.")

    async def _climb(
        self,
        ladder: Sequence[BindAttempt],
        credential: NormalizedCredential
    ) -> AuthOutcome:
        identity = simple_bind_name(credential)
        for attempt in ladder:
            failure, err = await self._attempt(attempt, credential)
            if failure is None:
                _LOGGER.debug("Authenticated %s with %s", identity, attempt)
                return Authenticated(identity=identity)
            if failure is BindFailure.REJECTED:
                _LOGGER.info("Directory rejected %s for %s", identity, attempt)
                return Rejected()
            if failure is BindFailure.INFRASTRUCTURE:
                reason = str(err) or err.__class__.__name__
                _LOGGER.error("%s failed: %s", str(attempt).capitalize(), reason)
                return Failed(reason=f"Directory unavailable: {reason}")
            _LOGGER.info("%s was not accepted (%s), escalating", str(attempt).capitalize(), err)
        return Failed(
            reason=(
                "The directory requires a stronger authentication method than any "
                "available bind strategy, or the remaining strategies could not be used."
            )
        )

    @contextlib.asynccontextmanager
    async def _connection(self, attempt: BindAttempt) -> AsyncGenerator[DirectoryConnection, None]:
        """Open a connection for one attempt, released on every exit path."""
        conn = self.client.open(attempt)
        try:
            yield conn
        finally:
            conn.close()
            _LOGGER.debug("Connection released")

    async def _attempt(
        self,
        attempt: BindAttempt,
        credential: NormalizedCredential
    ) -> Tuple[BindFailure | None, Exception | None]:
        user, realm = mechanism_bind_credentials(credential, attempt.mechanism)
        async with self._connection(attempt) as conn:
            try:
                with anyio.fail_after(self.bind_timeout):
                    await anyio.to_thread.run_sync(
                        conn.bind,
                        user,
                        credential.password.get_secret_value(),
                        realm,
                        abandon_on_cancel=True
                    )
            except Exception as err:
                return classify(err), err
        return None, None
