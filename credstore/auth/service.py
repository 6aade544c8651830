"""Register and verify operations exposed to the HTTP layer.

Each function takes a raw, deserialized request body and either returns the
affected user or raises a :class:`~credstore.auth.errors.CredentialError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .errors import ValidationViolations
from .validation import validate_registration

if TYPE_CHECKING:
    from credstore.common import User

    from .store import CredentialStore


async def register(store: CredentialStore, payload: Any) -> User:
    """Validate a registration payload and store the credential.

    :param store: Store to register into
    :param payload: Raw registration body
    :return: The registered user
    :raises ValidationViolations: If any field rule fails
    :raises DuplicateUsername: If the username is taken
    :raises DuplicateEmail: If the email is taken
    """
    result = validate_registration(payload)
    if isinstance(result, list):
        raise ValidationViolations(result)
    return await store.register(result)


async def verify(store: CredentialStore, payload: Any) -> User:
    """Verify a login payload holding ``username`` and ``password``.

    :param store: Store holding the credentials
    :param payload: Raw login body
    :return: The authenticated user
    :raises MissingCredentials: If either value is absent or empty
    :raises InvalidCredentials: If the credentials do not match
    """
    if not isinstance(payload, Mapping):
        payload = {}
    return await store.verify(payload.get("username"), payload.get("password"))
