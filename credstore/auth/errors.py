"""Exceptions raised by credential registration and verification.

None of these are fatal: each is an expected outcome that the HTTP layer
turns into a status code and a short message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .validation import Violation


class CredentialError(Exception):
    """Base class for credential outcomes reported back to the caller.

    :cvar status_code: HTTP status the transport maps this error to
    :cvar message: Public message for the response body
    """

    status_code: ClassVar[int] = 400
    message: ClassVar[str] = "Credential error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class ValidationViolations(CredentialError):
    """Raised when a registration payload breaks one or more field rules."""

    status_code = 400
    message = "Invalid user data"

    def __init__(self, violations: list[Violation]) -> None:
        super().__init__()
        self.violations = violations


class DuplicateUsername(CredentialError):
    """Raised when the username is already registered."""

    status_code = 409
    message = "Username already exists"


class DuplicateEmail(CredentialError):
    """Raised when another account already uses the email."""

    status_code = 409
    message = "Email already exists"


class MissingCredentials(CredentialError):
    """Raised when a login request lacks a username or password."""

    status_code = 400
    message = "Username and password required"


class InvalidCredentials(CredentialError):
    """Raised for an unknown username or a wrong password, without saying which."""

    status_code = 401
    message = "Invalid credentials"
