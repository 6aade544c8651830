"""Common data models and utilities for the application."""

from .user import Role, User

__all__ = ["Role", "User"]
