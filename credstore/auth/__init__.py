"""Credential validation, storage and verification."""

from . import service
from .auth_routes import (
    configure_auth_router,
    credential_error_handler,
    request_validation_error_handler,
)
from .errors import (
    CredentialError,
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredentials,
    MissingCredentials,
    ValidationViolations,
)
from .hashing import PasswordHasher
from .store import CredentialRecord, CredentialStore
from .validation import RegistrationIntent, Violation, validate_registration

__all__ = [
    "CredentialError",
    "CredentialRecord",
    "CredentialStore",
    "DuplicateEmail",
    "DuplicateUsername",
    "InvalidCredentials",
    "MissingCredentials",
    "PasswordHasher",
    "RegistrationIntent",
    "ValidationViolations",
    "Violation",
    "configure_auth_router",
    "credential_error_handler",
    "request_validation_error_handler",
    "service",
    "validate_registration",
]
