"""In-memory credential store.

The store owns every :class:`CredentialRecord`, keyed by username with a
secondary index on email. Hashing runs on a thread pool so the event loop
keeps serving requests; only the final check-then-insert is serialized.

**Example Usage:**

.. code-block:: python

    async with CredentialStore(PasswordHasher()) as store:
        await store.register(intent)
        user = await store.verify("alice", "abcDE!")
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Self, TypeVar

from credstore.common import Role, User

from .errors import DuplicateEmail, DuplicateUsername, InvalidCredentials, MissingCredentials

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from .hashing import PasswordHasher
    from .validation import RegistrationIntent

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)

T = TypeVar("T")


@dataclass(frozen=True)
class CredentialRecord:
    """Stored representation of one registered account."""

    username: str
    email: str
    role: Role
    salt: bytes = field(repr=False)
    password_hash: bytes = field(repr=False)

    def to_user(self) -> User:
        """Return the non-secret view of this record."""
        return User(self.username, role=self.role)


class CredentialStore:
    """Keyed collection of credentials with register and verify operations.

    Can be used as an async context manager, in which case it owns a
    dedicated thread pool for hashing. Otherwise the event loop's default
    executor is used.
    """

    def __init__(self, hasher: PasswordHasher, max_workers: int | None = None) -> None:
        """Create an empty store.

        :param hasher: Password hashing primitive
        :param max_workers: Size of the hashing thread pool, None lets the
            executor decide
        """
        self.hasher = hasher
        self.max_workers = max_workers
        self._records: dict[str, CredentialRecord] = {}
        self._emails: dict[str, str] = {}
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None

    async def __aenter__(self) -> Self:
        """Start the hashing thread pool."""
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="credstore-hash",
        )
        LOGGER.debug("Started hashing pool with max_workers=%s", self.max_workers)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the hashing thread pool, waiting for running hashes."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            LOGGER.debug("Stopped hashing pool")

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, username: object) -> bool:
        return username in self._records

    def find_by_username(self, username: str) -> CredentialRecord | None:
        """Return the record stored under a username, if any."""
        return self._records.get(username)

    def find_by_email(self, email: str) -> CredentialRecord | None:
        """Return the record using an email, if any.

        Matching is exact: no case folding or trimming.
        """
        username = self._emails.get(email)
        if username is None:
            return None
        return self._records.get(username)

    async def _run_hashing(self, func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func)

    def _check_unique(self, intent: RegistrationIntent) -> None:
        # Username first so collisions on both keys report deterministically.
        if intent.username in self._records:
            raise DuplicateUsername
        if intent.email in self._emails:
            raise DuplicateEmail

    def _derive_record(self, intent: RegistrationIntent) -> CredentialRecord:
        salt = self.hasher.generate_salt()
        password_hash = self.hasher.hash_password(intent.password, salt)
        return CredentialRecord(
            username=intent.username,
            email=intent.email,
            role=intent.role,
            salt=salt,
            password_hash=password_hash,
        )

    async def register(self, intent: RegistrationIntent) -> User:
        """Hash and store a validated registration.

        :param intent: Registration that already passed validation
        :return: The newly registered user
        :raises DuplicateUsername: If the username is taken
        :raises DuplicateEmail: If another account uses the email
        """
        # Cheap early rejection before paying for the hash.
        self._check_unique(intent)

        record = await self._run_hashing(partial(self._derive_record, intent))

        with self._lock:
            try:
                self._check_unique(intent)
            except (DuplicateUsername, DuplicateEmail) as exc:
                LOGGER.info(
                    "Registration for %s lost a race: %s",
                    intent.username,
                    exc,
                )
                raise
            self._records[record.username] = record
            self._emails[record.email] = record.username

        LOGGER.info("Registered user %s with role %s", record.username, record.role.value)
        return record.to_user()

    async def verify(self, username: str | None, password: str | None) -> User:
        """Check a login attempt against the stored hash.

        An unknown username and a wrong password fail the same way and cost
        one hash computation each.

        :param username: Account identifier
        :param password: Plaintext attempt
        :return: The authenticated user
        :raises MissingCredentials: If either value is empty or not a string
        :raises InvalidCredentials: If the attempt does not match
        """
        if (
            not isinstance(username, str)
            or not isinstance(password, str)
            or not username
            or not password
        ):
            raise MissingCredentials

        record = self._records.get(username)
        if record is None:
            await self._run_hashing(partial(self.hasher.dummy_check, password))
            LOGGER.debug("Login failed for %s", username)
            raise InvalidCredentials

        matched = await self._run_hashing(
            partial(
                self.hasher.check_password,
                password,
                record.salt,
                record.password_hash,
            ),
        )
        if not matched:
            LOGGER.debug("Login failed for %s", username)
            raise InvalidCredentials

        LOGGER.debug("Login succeeded for %s", username)
        return record.to_user()
