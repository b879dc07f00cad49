import functools
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from dcauth.tests.fakes import DictSettings, FakeDirectory



@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def directory_factory() -> Callable[..., FakeDirectory]:
    return FakeDirectory


@pytest.fixture
def settings() -> DictSettings:
    return DictSettings(
        {
            "DomainController:Url": "ldap://dc1.example.com",
            "Jwt:Key": "test-signing-key",
        }
    )


@pytest.fixture
def test_client_factory() -> Callable[..., TestClient]:
    return functools.partial(TestClient, raise_server_exceptions=False)
