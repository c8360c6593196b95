from __future__ import annotations

from dataclasses import dataclass

from outage_admin.session_auth import AuthorizationView


@dataclass(frozen=True)
class AuthzContext:
    """
    Per-request authorization context.

    Attached to ``request.state`` (FastAPI request lifetime) and
    ``Session.info`` (SQLAlchemy session lifetime).
    """

    view: AuthorizationView

    # Scope decision (driven by config / decorators)
    filter_by_work_center: bool

    @property
    def can_view_all_work_centers(self) -> bool:
        return self.view.is_admin or self.view.is_viewer
