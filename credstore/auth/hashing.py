"""Salted, adaptive password hashing built on bcrypt."""

from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import ClassVar

from bcrypt import gensalt, hashpw

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)


@dataclass
class PasswordHasher:
    """Derive and check bcrypt password hashes.

    :cvar DEFAULT_ROUNDS: Default bcrypt cost factor (2**rounds iterations)
    :cvar MAX_PASSWORD_BYTES: Longest input bcrypt will hash

    :param rounds: bcrypt cost factor used for new salts
    """

    DEFAULT_ROUNDS: ClassVar[int] = 10
    MIN_ROUNDS: ClassVar[int] = 4
    MAX_ROUNDS: ClassVar[int] = 31
    MAX_PASSWORD_BYTES: ClassVar[int] = 72

    rounds: int = DEFAULT_ROUNDS

    _dummy_salt: bytes = field(init=False, repr=False)
    _dummy_hash: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Check the cost factor and prepare the record used for unknown users."""
        if not self.valid_rounds(self.rounds):
            msg = (
                f"bcrypt rounds must be between {self.MIN_ROUNDS} "
                f"and {self.MAX_ROUNDS}, got: {self.rounds}"
            )
            raise ValueError(msg)

        self._dummy_salt = self.generate_salt()
        self._dummy_hash = self.hash_password(secrets.token_urlsafe(16), self._dummy_salt)

    @classmethod
    def valid_rounds(cls, rounds: int) -> bool:
        """Return True if bcrypt accepts the given cost factor."""
        return cls.MIN_ROUNDS <= rounds <= cls.MAX_ROUNDS

    def generate_salt(self) -> bytes:
        """Return a fresh random salt carrying this hasher's cost factor."""
        return gensalt(rounds=self.rounds)

    def hash_password(self, password: str, salt: bytes) -> bytes:
        """Hash a password with the given salt.

        The same password and salt always give the same hash.

        :param password: Plaintext password
        :param salt: Salt from :meth:`generate_salt`
        :return: The bcrypt hash
        :raises ValueError: If bcrypt cannot hash the password
        """
        encoded = password.encode()
        if len(encoded) > self.MAX_PASSWORD_BYTES:
            msg = f"Password is longer than {self.MAX_PASSWORD_BYTES} bytes"
            raise ValueError(msg)
        return hashpw(encoded, salt)

    def check_password(self, password: str, salt: bytes, password_hash: bytes) -> bool:
        """Recompute the hash of an attempt and compare it in constant time.

        :param password: Plaintext attempt
        :param salt: Salt stored with the credential
        :param password_hash: Hash stored with the credential
        :return: True if the attempt matches
        """
        try:
            candidate = self.hash_password(password, salt)
        except ValueError:
            LOGGER.debug("Password attempt could not be hashed, treating as mismatch")
            return False
        return hmac.compare_digest(candidate, password_hash)

    def dummy_check(self, password: str) -> bool:
        """Spend one hash computation on an attempt with no matching account.

        Always returns False.
        """
        self.check_password(password, self._dummy_salt, self._dummy_hash)
        return False
