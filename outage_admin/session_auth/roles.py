"""Closed set of account roles."""

from __future__ import annotations

import enum


class Role(str, enum.Enum):
    """
    Authorization label carried by a session.

    ``UNKNOWN`` is never stored on an account. It stands for any role string
    that is not one of the five real roles, and it grants no capability.
    """

    VIEWER = "VIEWER"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    SUPERVISOR = "SUPERVISOR"
    USER = "USER"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Exact, case-sensitive match. Anything else is ``UNKNOWN``."""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str) or value == cls.UNKNOWN.value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def assignable(cls) -> tuple["Role", ...]:
        """Roles that may be stored on a user account."""
        return tuple(r for r in cls if r is not cls.UNKNOWN)
