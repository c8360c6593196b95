"""
Capability flags derived from a session state.

Background:
    Pages and data queries never look at the role string directly. They read an
    ``AuthorizationView``: five role flags plus the caller's organizational
    scope (work center and branch). The view is a pure function of the current
    ``SessionState``:

    * ``LOADING``         -> every flag false, ``is_loading`` true, no scope.
    * ``UNAUTHENTICATED`` -> every flag false, no scope.
    * ``AUTHENTICATED``   -> the flag matching the role is true, scope copied
      from the session. A role outside the closed set parses to
      ``Role.UNKNOWN`` and sets no flag (fail-closed).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .context import SessionState, SessionStatus
from .provider import SessionProvider
from .roles import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizationView:
    is_admin: bool = False
    is_user: bool = False
    is_viewer: bool = False
    is_manager: bool = False
    is_supervisor: bool = False

    user_id: int | None = None
    user_work_center_id: int | None = None
    user_work_center_name: str | None = None
    user_branch_id: int | None = None
    user_branch_name: str | None = None

    is_loading: bool = False

    @property
    def role(self) -> Role:
        for role, flag in (
            (Role.ADMIN, self.is_admin),
            (Role.USER, self.is_user),
            (Role.VIEWER, self.is_viewer),
            (Role.MANAGER, self.is_manager),
            (Role.SUPERVISOR, self.is_supervisor),
        ):
            if flag:
                return role
        return Role.UNKNOWN

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON shape; organizational keys are left out when absent."""
        data: dict[str, Any] = {
            "isAdmin": self.is_admin,
            "isUser": self.is_user,
            "isViewer": self.is_viewer,
            "isManager": self.is_manager,
            "isSupervisor": self.is_supervisor,
        }
        optional = {
            "userWorkCenterId": self.user_work_center_id,
            "userWorkCenterName": self.user_work_center_name,
            "userBranchId": self.user_branch_id,
            "userBranchName": self.user_branch_name,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        data["isLoading"] = self.is_loading
        return data


LOADING_VIEW = AuthorizationView(is_loading=True)
SIGNED_OUT_VIEW = AuthorizationView()


def derive_authorization(state: SessionState) -> AuthorizationView:
    if state.status is SessionStatus.LOADING:
        return LOADING_VIEW
    if state.status is SessionStatus.UNAUTHENTICATED or state.session is None:
        return SIGNED_OUT_VIEW

    session = state.session
    role = Role.parse(session.role)
    if role is Role.UNKNOWN:
        logger.info("Unrecognized role on session user_id=%s; no capabilities granted", session.user_id)

    return AuthorizationView(
        is_admin=role is Role.ADMIN,
        is_user=role is Role.USER,
        is_viewer=role is Role.VIEWER,
        is_manager=role is Role.MANAGER,
        is_supervisor=role is Role.SUPERVISOR,
        user_id=session.user_id,
        user_work_center_id=session.work_center_id,
        user_work_center_name=session.work_center_name,
        user_branch_id=session.branch_id,
        user_branch_name=session.branch_name,
        is_loading=False,
    )


class AuthorizationDeriver:
    """
    Keeps an ``AuthorizationView`` in step with a ``SessionProvider``.

    Subscribes on construction and recomputes only when the published state
    differs from the last state it saw. Consumers read ``view`` synchronously.
    """

    def __init__(
        self,
        provider: SessionProvider,
        derive: Callable[[SessionState], AuthorizationView] = derive_authorization,
    ) -> None:
        self._derive = derive
        self._last_state: SessionState | None = None
        self._view = LOADING_VIEW
        self.recompute_count = 0
        self._unsubscribe: Callable[[], None] | None = provider.subscribe(self._on_state)

    @property
    def view(self) -> AuthorizationView:
        return self._view

    def _on_state(self, state: SessionState) -> None:
        if state == self._last_state:
            return
        self._last_state = state
        self._view = self._derive(state)
        self.recompute_count += 1

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
