import logging
import re
import threading
from collections.abc import Iterable
from typing import FrozenSet

from bonsai import LDAPClient, LDAPConnection
from bonsai.errors import AuthenticationError, LDAPError, PasswordPolicyError
from bonsai.errors import ConnectionError as LDAPConnectionError
from bonsai.errors import TimeoutError as LDAPTimeoutError

from dcauth.auth.exceptions import DirectoryError, DirectoryUnavailable, MechanismUnavailable
from dcauth.auth.models import BindAttempt, Mechanism, Transport



_LOGGER = logging.getLogger("dcauth.auth.activedirectory")
# bonsai formats result codes into the message as "(0x0031 [49])"
_CODE_PATTERN = re.compile(r"\[(-?\d+)\]\)\s*$")
INVALID_CREDENTIALS = 49

MECHANISM_NAMES = {
    Mechanism.SIMPLE: "SIMPLE",
    Mechanism.NEGOTIATE: "GSS-SPNEGO",
    Mechanism.NTLM: "NTLM",
}


def get_url(attempt: BindAttempt) -> str:
    """Build the LDAP URL for an attempt."""
    host = f"[{attempt.host}]" if ":" in attempt.host else attempt.host
    scheme = "ldaps" if attempt.transport is Transport.IMPLICIT_TLS else "ldap"
    return f"{scheme}://{host}:{attempt.port}"


def get_client(
    attempt: BindAttempt,
    user: str,
    password: str,
    realm: str | None = None,
    cert_policy: str = "demand",
    ca_cert: str | None = None
) -> LDAPClient:
    """Create an `LDAPClient` for a single bind attempt.
    
    StartTLS is requested through the `tls` flag, implicit TLS through the
    `ldaps` scheme.
    """
    client = LDAPClient(get_url(attempt), attempt.transport is Transport.STARTTLS)
    mechanism = MECHANISM_NAMES[attempt.mechanism]
    if attempt.mechanism is Mechanism.SIMPLE:
        client.set_credentials(mechanism, user=user, password=password)
    else:
        client.set_credentials(mechanism, user=user, password=password, realm=realm)
    client.set_cert_policy(cert_policy)
    if ca_cert:
        client.set_ca_cert(ca_cert)
    return client


def get_result_code(err: LDAPError) -> int | None:
    """Extract the LDAP result code from a bonsai error."""
    match = _CODE_PATTERN.search(str(err))
    if match is not None:
        return int(match.group(1))
    return getattr(err, "code", None)


def is_authentication_failure(err: LDAPError, code: int | None) -> bool:
    """The directory evaluated the credentials and refused them."""
    return isinstance(err, (AuthenticationError, PasswordPolicyError)) or code == INVALID_CREDENTIALS


def map_error(attempt: BindAttempt, err: LDAPError) -> DirectoryError:
    """Translate a bonsai error raised by `connect` for an attempt.

    - Timeouts and connection errors outside of StartTLS are unavailability.
    - Authentication failures are always directory refusals.
    - Any other failure on the StartTLS rung means the upgrade itself failed
        (refused extended operation, TLS setup error), the credentials were
        never presented so the attempt is escalated.
    - Negative result codes are raised by the local client library (SASL,
        local and encoding errors). On alternate mechanisms the next mechanism
        is tried, on a simple bind they are treated as unavailability.
    """
    code = get_result_code(err)
    message = str(err)
    if isinstance(err, LDAPTimeoutError):
        return DirectoryUnavailable(message, code)
    if is_authentication_failure(err, code):
        return DirectoryError(message, code)
    if attempt.transport is Transport.STARTTLS:
        return MechanismUnavailable(message, code)
    if isinstance(err, LDAPConnectionError):
        return DirectoryUnavailable(message, code)
    if code is not None and code < 0:
        if attempt.mechanism is Mechanism.SIMPLE:
            return DirectoryUnavailable(message, code)
        return MechanismUnavailable(message, code)
    return DirectoryError(message, code)


def close_connection(conn: LDAPConnection) -> None:
    try:
        conn.close()
    except LDAPError:
        _LOGGER.warning("Exception closing directory connection", exc_info=True)


class ActiveDirectoryConnection:
    """A single bind attempt against a domain controller.

    `close` may be called from the event loop while `bind` is still running
    in a worker thread. If that happens the connection is closed by the
    worker as soon as the connect returns.
    """
    def __init__(
        self,
        attempt: BindAttempt,
        timeout: float,
        cert_policy: str,
        ca_cert: str | None
    ) -> None:
        self.attempt = attempt
        self._timeout = timeout
        self._cert_policy = cert_policy
        self._ca_cert = ca_cert
        self._lock = threading.Lock()
        self._conn: LDAPConnection | None = None
        self._closed = False

    def bind(self, user: str, password: str, realm: str | None) -> None:
        """Connect and bind.

        Raises:
            DirectoryUnavailable: Connection error, timeout or local client error.
            MechanismUnavailable: The StartTLS upgrade or the SASL mechanism
                could not be used.
            DirectoryError: The server refused the bind.
        """
        client = get_client(
            self.attempt,
            user,
            password,
            realm=realm,
            cert_policy=self._cert_policy,
            ca_cert=self._ca_cert
        )
        try:
            conn = client.connect(timeout=self._timeout)
        except LDAPError as err:
            raise map_error(self.attempt, err) from err
        
        with self._lock:
            if not self._closed:
                self._conn = conn
                _LOGGER.debug("Bound to %s", get_url(self.attempt))
                return
        close_connection(conn)
        raise DirectoryUnavailable("Connection abandoned before the bind completed")

    def close(self) -> None:
        with self._lock:
            self._closed = True
            conn, self._conn = self._conn, None
        if conn is not None:
            close_connection(conn)


class ActiveDirectoryClient:
    """Directory client for binding against Active Directory domain controllers
    with bonsai.

    The client holds configuration only, every call to `open` produces a new
    connection that is never pooled or reused.

    Args:
        mechanisms: The bind mechanisms to expose to the bind ladder. SIMPLE is
            always available.
        timeout: Seconds allowed for connect and bind.
        cert_policy: TLS certificate policy ("never", "allow", "try", "demand").
        ca_cert: Path to a CA certificate used to verify the server.

    Note: Bonsai does not support the `ProactorEventLoop` therefore all I/O is
    run in a worker thread.
    """
    def __init__(
        self,
        mechanisms: Iterable[Mechanism] = tuple(Mechanism),
        timeout: float = 5.0,
        cert_policy: str = "demand",
        ca_cert: str | None = None
    ) -> None:
        self._mechanisms = frozenset(mechanisms) | {Mechanism.SIMPLE}
        self._timeout = timeout
        self._cert_policy = cert_policy
        self._ca_cert = ca_cert

    @property
    def mechanisms(self) -> FrozenSet[Mechanism]:
        return self._mechanisms

    def open(self, attempt: BindAttempt) -> ActiveDirectoryConnection:
        if attempt.mechanism not in self._mechanisms:
            raise ValueError(f"Mechanism {attempt.mechanism.value} is not enabled")
        return ActiveDirectoryConnection(
            attempt,
            timeout=self._timeout,
            cert_policy=self._cert_policy,
            ca_cert=self._ca_cert
        )
