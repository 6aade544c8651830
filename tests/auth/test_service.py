"""Tests for the register and verify operations."""

from typing import Any

import pytest

from credstore.auth import (
    CredentialStore,
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredentials,
    MissingCredentials,
    ValidationViolations,
    service,
)
from credstore.common import Role, User


@pytest.mark.asyncio
class TestRegister:
    """Test suite for service.register."""

    async def test_register_valid_payload(
        self,
        store: CredentialStore,
        registration: dict[str, str],
    ) -> None:
        user = await service.register(store, registration)

        assert user == User("alice", role=Role.USER)
        assert "alice" in store

    async def test_invalid_payload_raises_violations(self, store: CredentialStore) -> None:
        with pytest.raises(ValidationViolations) as exc_info:
            await service.register(
                store,
                {"username": "ab", "email": "not-an-email", "role": "user", "password": "Abc12"},
            )

        fields = [violation.field for violation in exc_info.value.violations]
        assert fields == ["username", "email", "password"]
        assert exc_info.value.status_code == 400  # noqa: PLR2004
        assert len(store) == 0

    async def test_duplicates(
        self,
        store: CredentialStore,
        registration: dict[str, str],
    ) -> None:
        await service.register(store, registration)

        with pytest.raises(DuplicateUsername):
            await service.register(store, {**registration, "email": "new@example.com"})
        with pytest.raises(DuplicateEmail):
            await service.register(store, {**registration, "username": "bobby"})


@pytest.mark.asyncio
class TestVerify:
    """Test suite for service.verify."""

    async def test_verify_round_trip(
        self,
        store: CredentialStore,
        registration: dict[str, str],
    ) -> None:
        await service.register(store, registration)

        user = await service.verify(store, {"username": "alice", "password": "abcDE!"})

        assert user.username == "alice"

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "alice",
            {},
            {"username": "alice"},
            {"password": "abcDE!"},
            {"username": "", "password": "abcDE!"},
        ],
    )
    async def test_missing_credentials(self, store: CredentialStore, payload: Any) -> None:
        with pytest.raises(MissingCredentials):
            await service.verify(store, payload)

    async def test_invalid_credentials(
        self,
        store: CredentialStore,
        registration: dict[str, str],
    ) -> None:
        await service.register(store, registration)

        with pytest.raises(InvalidCredentials):
            await service.verify(store, {"username": "alice", "password": "abcDE?"})
