"""Fundamental user data model for app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Account roles accepted at registration."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Look up a role by its exact (case-sensitive) string value.

        :param value: Raw value from a request payload
        :return: The matching Role, or None if there is no match
        """
        for role in cls:
            if role.value == value:
                return role
        return None


@dataclass(frozen=True)
class User:
    """Non-secret view of a registered account."""

    username: str
    role: Role
