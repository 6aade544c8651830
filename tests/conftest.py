"""Shared fixtures for the credential service tests."""

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from credstore import AppConfig, configure_fastapi_app
from credstore.auth import CredentialStore, PasswordHasher, RegistrationIntent
from credstore.common import Role

# Lowest bcrypt cost keeps the suite fast.
TEST_ROUNDS = 4
TEST_PASSWORD = "abcDE!"  # noqa: S105


@pytest.fixture
def hasher() -> PasswordHasher:
    """Create a cheap password hasher."""
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def store(hasher: PasswordHasher) -> CredentialStore:
    """Create an empty credential store."""
    return CredentialStore(hasher)


@pytest.fixture
def make_intent() -> Callable[..., RegistrationIntent]:
    """Build validated registration intents with overridable fields."""

    def factory(
        username: str = "alice",
        email: str = "alice@example.com",
        role: Role = Role.USER,
        password: str = TEST_PASSWORD,
    ) -> RegistrationIntent:
        return RegistrationIntent(
            username=username,
            email=email,
            role=role,
            password=password,
        )

    return factory


@pytest.fixture
def registration() -> dict[str, str]:
    """A registration payload that passes every rule."""
    return {
        "username": "alice",
        "email": "alice@example.com",
        "role": "user",
        "password": TEST_PASSWORD,
    }


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Run the application with a fresh store for each test."""
    config = AppConfig(logging_level="DEBUG", root_path="", bcrypt_rounds=TEST_ROUNDS)
    app = configure_fastapi_app(config)
    with TestClient(app) as test_client:
        yield test_client
