"""Session record and the three states a session can be observed in."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SessionRecord:
    """
    Authenticated identity and claims for one signed-in user.

    Owned by the session provider; everything downstream treats it as read-only.
    """

    user_id: int
    employee_id: str
    full_name: str
    role: str | None
    """Raw role claim. Interpreted through ``Role.parse``."""

    work_center_id: int | None = None
    work_center_name: str | None = None
    branch_id: int | None = None
    branch_name: str | None = None
    email: str | None = None

    def to_claims(self) -> dict[str, Any]:
        """Return JWT claims. ``sub`` carries the user id as a string."""
        return {
            "sub": str(self.user_id),
            "employee_id": self.employee_id,
            "name": self.full_name,
            "email": self.email,
            "role": self.role,
            "work_center_id": self.work_center_id,
            "work_center_name": self.work_center_name,
            "branch_id": self.branch_id,
            "branch_name": self.branch_name,
        }

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "SessionRecord":
        raw_role = claims.get("role")
        return cls(
            user_id=int(claims["sub"]),
            employee_id=str(claims.get("employee_id") or ""),
            full_name=str(claims.get("name") or ""),
            email=claims.get("email"),
            role=str(raw_role) if raw_role is not None else None,
            work_center_id=claims.get("work_center_id"),
            work_center_name=claims.get("work_center_name"),
            branch_id=claims.get("branch_id"),
            branch_name=claims.get("branch_name"),
        )


class SessionStatus(str, enum.Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    session: SessionRecord | None = None

    def __post_init__(self) -> None:
        if self.status is SessionStatus.AUTHENTICATED and self.session is None:
            raise ValueError("Authenticated session state requires a session record")
        if self.status is not SessionStatus.AUTHENTICATED and self.session is not None:
            raise ValueError(f"Session record not allowed in {self.status.value} state")

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(SessionStatus.LOADING)

    @classmethod
    def unauthenticated(cls) -> "SessionState":
        return cls(SessionStatus.UNAUTHENTICATED)

    @classmethod
    def authenticated(cls, session: SessionRecord) -> "SessionState":
        return cls(SessionStatus.AUTHENTICATED, session)
