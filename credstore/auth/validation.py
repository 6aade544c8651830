"""Registration payload validation.

Turns an untyped registration payload into a :class:`RegistrationIntent`, or
into the list of field violations that explain why it was refused. Malformed
input is never raised as an exception here; it is reported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from credstore.common import Role

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 24
PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_LENGTH = 24

SPECIAL_CHARACTERS = "!@#$%^&*()_+"

_ALLOWED_PASSWORD_CHARACTERS = re.compile(r"[A-Za-z!@#$%^&*()_+]+")

RULES = [
    (
        lambda x: not any(c.islower() for c in x),
        "at least one lowercase letter",
    ),
    (
        lambda x: not any(c.isupper() for c in x),
        "at least one uppercase letter",
    ),
    (
        lambda x: not any(c in SPECIAL_CHARACTERS for c in x),
        f"at least one special character in {SPECIAL_CHARACTERS}",
    ),
]


@dataclass(frozen=True)
class Violation:
    """A single reason a registration field was refused.

    :param field: Name of the offending payload field
    :param message: Human readable reason
    :param code: Machine readable error type
    """

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class RegistrationIntent:
    """A registration request that passed every field rule.

    The plaintext password lives only as long as this object and is kept out
    of its repr.
    """

    username: str
    email: str
    role: Role
    password: str = field(repr=False)


def password_requirements(password: str) -> str | None:
    """Check the password composition policy.

    Passwords may only use ASCII letters and the characters in
    SPECIAL_CHARACTERS, and must contain a lowercase letter, an uppercase
    letter and one of those special characters.

    :param password: The password to check
    :return: An error message if the password breaks the policy, None otherwise
    """
    if not _ALLOWED_PASSWORD_CHARACTERS.fullmatch(password):
        return f"Password may only contain letters and characters in {SPECIAL_CHARACTERS}"

    missing = [message for rule, message in RULES if rule(password)]
    if missing:
        return "Password must contain " + ", ".join(missing)

    return None


class RegistrationRequest(BaseModel):
    """Field rules for a registration payload."""

    model_config = ConfigDict(extra="forbid", hide_input_in_errors=True)

    username: StrictStr = Field(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
    )
    email: StrictStr
    role: Literal["user", "admin"]
    password: StrictStr = Field(
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, value: str) -> str:
        # Shape check only: the address is kept exactly as submitted.
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise PydanticCustomError(
                "email_invalid",
                "Email must be a valid email address: {reason}",
                {"reason": str(exc)},
            ) from exc
        return value

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, value: str) -> str:
        error = password_requirements(value)
        if error:
            raise PydanticCustomError("password_policy", error)
        return value


def _violations_from_error(error: ValidationError) -> list[Violation]:
    violations = []
    for detail in error.errors():
        location = detail.get("loc") or ("body",)
        violations.append(
            Violation(
                field=".".join(str(part) for part in location),
                message=detail["msg"],
                code=detail["type"],
            ),
        )
    return violations


def validate_registration(payload: Any) -> RegistrationIntent | list[Violation]:
    """Validate a raw registration payload.

    Every field is checked so one call reports all of the problems. A payload
    that is not a mapping is treated as an empty one.

    :param payload: Deserialized request body
    :return: The validated intent, or a non-empty list of violations
    """
    if not isinstance(payload, Mapping):
        LOGGER.debug("Registration payload is not an object: %s", type(payload).__name__)
        payload = {}

    try:
        request = RegistrationRequest.model_validate(dict(payload))
    except ValidationError as exc:
        violations = _violations_from_error(exc)
        LOGGER.debug(
            "Registration payload refused: %s",
            ", ".join(f"{v.field} ({v.code})" for v in violations),
        )
        return violations

    return RegistrationIntent(
        username=request.username,
        email=request.email,
        role=Role.parse(request.role),
        password=request.password,
    )
