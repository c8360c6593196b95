"""
Record-level permission checks.

All checks read an ``AuthorizationView`` so they work the same for HTTP
handlers and for background code that builds a view by hand.
"""

from __future__ import annotations

from outage_admin.models.outage import RequestStatus
from outage_admin.session_auth import AuthorizationView


def can_access_work_center(view: AuthorizationView, target_work_center_id: int) -> bool:
    # Admin and viewer see every work center.
    if view.is_admin or view.is_viewer:
        return True
    if not view.is_authenticated:
        return False
    return view.user_work_center_id == target_work_center_id


def can_edit_request(view: AuthorizationView, request_creator_id: int, request_status: RequestStatus | str) -> bool:
    if view.is_admin:
        return True
    if view.is_viewer:
        return False
    if view.is_user:
        return view.user_id == request_creator_id and RequestStatus(request_status) is RequestStatus.NOT
    return False


def can_update_oms_status(view: AuthorizationView) -> bool:
    return view.is_admin or view.is_supervisor


def can_update_request_status(view: AuthorizationView) -> bool:
    return view.is_admin or view.is_manager or view.is_supervisor


def can_manage_users(view: AuthorizationView) -> bool:
    return view.is_admin
