from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session, with_loader_criteria


@event.listens_for(Session, "do_orm_execute")
def _apply_work_center_scope(execute_state) -> None:
    """
    Transparent data scoping.

    Plain ``select(PowerOutageRequest)`` in a handler still returns only the
    caller's work center when the route asks for it and the caller is neither
    admin nor viewer.
    """

    if not execute_state.is_select:
        return

    authz = execute_state.session.info.get("authz")
    if authz is None or not authz.filter_by_work_center or authz.can_view_all_work_centers:
        return

    # Local import to avoid cycles.
    from outage_admin.models.outage import PowerOutageRequest  # noqa: WPS433 (local import)

    work_center_id = authz.view.user_work_center_id
    if work_center_id is None:
        # Authenticated without a work center: nothing is in scope.
        criteria = lambda cls: cls.id.is_(None)  # noqa: E731
    else:
        criteria = lambda cls: cls.work_center_id == work_center_id  # noqa: E731

    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(PowerOutageRequest, criteria, include_aliases=True),
    )
