"""Models for auth-related responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from .validation import Violation


class MessageResponse(BaseModel):
    """Plain confirmation or failure message."""

    message: str


class ViolationDetail(BaseModel):
    """One refused registration field.

    :param field: Name of the offending field
    :param message: Why the value was refused
    :param code: Machine readable error type
    """

    field: str
    message: str
    code: str

    @classmethod
    def from_violation(cls, violation: Violation) -> ViolationDetail:
        """Create a ViolationDetail from a validation Violation.

        :param violation: Violation instance
        :return: ViolationDetail instance
        """
        return cls(field=violation.field, message=violation.message, code=violation.code)


class ValidationErrorResponse(MessageResponse):
    """Response body for a refused registration."""

    details: list[ViolationDetail]
