import time

import pytest

from dcauth.auth import (
    Authenticated,
    BindAttempt,
    BindFailure,
    BindStrategyEngine,
    DirectoryEndpoint,
    DirectoryError,
    DirectoryUnavailable,
    Failed,
    Mechanism,
    MechanismUnavailable,
    Rejected,
    Transport,
    build_ladder,
    classify,
    normalize,
)



pytestmark = pytest.mark.anyio

STRONG_AUTH = DirectoryError("Strong(er) authentication required", 8)
INVALID_CREDENTIALS = DirectoryError("Invalid credentials", 49)
UNREACHABLE = DirectoryUnavailable("Can't contact LDAP server", -1)

PLAIN_ENDPOINT = DirectoryEndpoint(host="dc1.example.com", port=389)
TLS_ENDPOINT = DirectoryEndpoint(host="dc1.example.com", port=636, implicit_tls=True)


@pytest.mark.parametrize(
    "err,expected",
    [
        (STRONG_AUTH, BindFailure.ESCALATE),
        (DirectoryError("Auth method not supported", 7), BindFailure.ESCALATE),
        (DirectoryError("Strong(er) authentication required"), BindFailure.ESCALATE),
        (DirectoryError("00002028: LdapErr: The server requires binds to turn on integrity checking, strong authentication"), BindFailure.ESCALATE),
        (DirectoryUnavailable("Error initializing SSL/TLS"), BindFailure.ESCALATE),
        (INVALID_CREDENTIALS, BindFailure.REJECTED),
        (DirectoryError("Insufficient access", 50), BindFailure.REJECTED),
        (MechanismUnavailable("Protocol error.", 2), BindFailure.ESCALATE),
        (MechanismUnavailable("Local error.", -2), BindFailure.ESCALATE),
        (UNREACHABLE, BindFailure.INFRASTRUCTURE),
        (TimeoutError(), BindFailure.INFRASTRUCTURE),
        (ConnectionRefusedError("refused"), BindFailure.INFRASTRUCTURE),
        (RuntimeError("boom"), BindFailure.INFRASTRUCTURE),
    ]
)
def test_classify(err: BaseException, expected: BindFailure):
    assert classify(err) is expected


def test_ladder_plain_endpoint():
    ladder = build_ladder(PLAIN_ENDPOINT, frozenset(Mechanism))
    assert ladder == [
        BindAttempt(Transport.PLAIN, Mechanism.SIMPLE, "dc1.example.com", 389),
        BindAttempt(Transport.STARTTLS, Mechanism.SIMPLE, "dc1.example.com", 389),
        BindAttempt(Transport.IMPLICIT_TLS, Mechanism.SIMPLE, "dc1.example.com", 636),
        BindAttempt(Transport.IMPLICIT_TLS, Mechanism.NEGOTIATE, "dc1.example.com", 636),
        BindAttempt(Transport.IMPLICIT_TLS, Mechanism.NTLM, "dc1.example.com", 636),
    ]


def test_ladder_implicit_tls_endpoint_not_repeated():
    ladder = build_ladder(TLS_ENDPOINT, frozenset(Mechanism))
    assert [(a.transport, a.mechanism) for a in ladder] == [
        (Transport.IMPLICIT_TLS, Mechanism.SIMPLE),
        (Transport.IMPLICIT_TLS, Mechanism.NEGOTIATE),
        (Transport.IMPLICIT_TLS, Mechanism.NTLM),
    ]


def test_ladder_implicit_tls_custom_port():
    endpoint = DirectoryEndpoint(host="dc1.example.com", port=3269, implicit_tls=True)
    ladder = build_ladder(endpoint, frozenset([Mechanism.SIMPLE]))
    assert [a.port for a in ladder] == [3269, 636]
    assert all(a.transport is Transport.IMPLICIT_TLS for a in ladder)


def test_ladder_simple_only():
    ladder = build_ladder(PLAIN_ENDPOINT, frozenset([Mechanism.SIMPLE]))
    assert len(ladder) == 3
    assert all(a.mechanism is Mechanism.SIMPLE for a in ladder)


async def test_primary_success(directory_factory):
    directory = directory_factory()
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("alice@corp.example.com", password="correct"))
    assert outcome == Authenticated(identity="alice@corp.example.com")
    assert len(directory.attempts) == 1
    assert directory.connections[0].bound_as == ("alice@corp.example.com", "correct", None)
    assert directory.all_closed


async def test_rejected_on_primary_stops(directory_factory):
    directory = directory_factory([INVALID_CREDENTIALS])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", "CORP", "wrong"))
    assert outcome == Rejected()
    assert len(directory.attempts) == 1
    assert directory.all_closed


async def test_escalates_to_starttls(directory_factory):
    directory = directory_factory([STRONG_AUTH, None])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("CORP\\bob", password="correct"))
    assert outcome == Authenticated(identity="CORP\\bob")
    assert [a.transport for a in directory.attempts] == [Transport.PLAIN, Transport.STARTTLS]
    assert directory.all_closed
    assert not directory.overlapped


async def test_rejected_after_escalation(directory_factory):
    directory = directory_factory([STRONG_AUTH, INVALID_CREDENTIALS])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("CORP\\bob", password="wrong"))
    assert outcome == Rejected()
    assert len(directory.attempts) == 2


async def test_infrastructure_failure_is_terminal(directory_factory):
    directory = directory_factory([STRONG_AUTH, UNREACHABLE])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("CORP\\bob", password="correct"))
    assert isinstance(outcome, Failed)
    assert "Can't contact LDAP server" in outcome.reason
    assert len(directory.attempts) == 2
    assert directory.all_closed


async def test_unexpected_error_is_failure(directory_factory):
    directory = directory_factory([RuntimeError("boom")])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", password="pw"))
    assert isinstance(outcome, Failed)
    assert len(directory.attempts) == 1


async def test_exhausted_ladder(directory_factory):
    directory = directory_factory(default=STRONG_AUTH)
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("CORP\\bob", password="correct"))
    assert isinstance(outcome, Failed)
    assert "stronger authentication" in outcome.reason
    assert len(directory.attempts) == 5
    assert directory.all_closed
    assert not directory.overlapped


async def test_exhausted_ladder_simple_only(directory_factory):
    directory = directory_factory(default=STRONG_AUTH, mechanisms=frozenset([Mechanism.SIMPLE]))
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("CORP\\bob", password="correct"))
    assert isinstance(outcome, Failed)
    assert len(directory.attempts) == 3


async def test_alternate_mechanism_binds_with_realm(directory_factory):
    directory = directory_factory([STRONG_AUTH, STRONG_AUTH, STRONG_AUTH, None])
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", "CORP", "correct"))
    assert outcome == Authenticated(identity="CORP\\bob")
    last = directory.connections[-1]
    assert last.attempt.mechanism is Mechanism.NEGOTIATE
    assert last.bound_as == ("bob", "correct", "CORP")


async def test_bind_timeout_closes_connection(directory_factory):
    directory = directory_factory([lambda: time.sleep(0.5)])
    engine = BindStrategyEngine(directory, bind_timeout=0.05)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", password="pw"))
    assert isinstance(outcome, Failed)
    assert len(directory.attempts) == 1
    assert directory.all_closed


async def test_request_deadline(directory_factory):
    directory = directory_factory([STRONG_AUTH, lambda: time.sleep(0.5)])
    engine = BindStrategyEngine(directory, bind_timeout=5, request_timeout=0.1)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", password="pw"))
    assert isinstance(outcome, Failed)
    assert "deadline" in outcome.reason
    assert len(directory.attempts) == 2
    assert directory.all_closed


async def test_unusable_mechanisms_escalate(directory_factory):
    directory = directory_factory(
        [
            STRONG_AUTH,
            MechanismUnavailable("Protocol error.", 2),
            STRONG_AUTH,
            MechanismUnavailable("Local error.", -2),
            None,
        ]
    )
    engine = BindStrategyEngine(directory)
    outcome = await engine.authenticate(PLAIN_ENDPOINT, normalize("bob", "CORP", "correct"))
    assert outcome == Authenticated(identity="CORP\\bob")
    assert directory.attempts[-1].mechanism is Mechanism.NTLM
    assert directory.all_closed


@pytest.mark.parametrize(
    "err,expected",
    [
        (DirectoryError("Can't contact LDAP server. (0xFFFF [-1])", -1), "Can't contact LDAP server. (0xFFFF [-1])"),
        (DirectoryError("Invalid credentials", 49), "Invalid credentials (result code 49)"),
        (DirectoryError("Invalid credentials"), "Invalid credentials"),
    ]
)
def test_directory_error_message(err: DirectoryError, expected: str):
    assert str(err) == expected
