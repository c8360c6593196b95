from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from outage_admin.dates import local_now, local_today
from outage_admin.db.session import get_db
from outage_admin.models.outage import OMSStatus, RequestStatus
from outage_admin.schemas.common import ActionResult
from outage_admin.schemas.outage import (
    BatchResult,
    OMSStatusIn,
    PowerOutageRequestDetailOut,
    PowerOutageRequestIn,
    PowerOutageRequestPage,
    PowerOutageRequestUpdateIn,
    RequestStatusIn,
)
from outage_admin.security.decorators import filter_by_work_center, require_roles
from outage_admin.security.dependencies import get_authorization
from outage_admin.security.policy import can_access_work_center, can_edit_request
from outage_admin.services import outage_requests as service
from outage_admin.session_auth import AuthorizationView
from outage_admin.settings import get_settings

router = APIRouter(prefix="/power-outage-requests", tags=["power_outage_requests"])


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _load_or_404(db: Session, id: int):
    row = service.get_request(db, id)
    if row is None:
        # Rows outside the caller's work center look the same as missing ones.
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Power outage request not found")
    return row


@router.get("", response_model=PowerOutageRequestPage)
@filter_by_work_center()
def list_requests(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=1000),
    work_center_id: int | None = None,
    oms_status: OMSStatus | None = None,
    status_request: RequestStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
) -> PowerOutageRequestPage:
    filters = service.RequestFilters(
        work_center_id=work_center_id,
        oms_status=oms_status,
        status_request=status_request,
        start_date=start_date,
        end_date=end_date,
    )
    return service.paginated_requests(db, page=page, limit=limit, today=local_today(), filters=filters)


@router.get("/sorted", response_model=list[PowerOutageRequestDetailOut])
@filter_by_work_center()
def list_sorted(db: Session = Depends(get_db)) -> list[PowerOutageRequestDetailOut]:
    return service.sorted_requests(db, today=local_today())


@router.get("/{id}", response_model=PowerOutageRequestDetailOut)
@filter_by_work_center()
def get_request(id: int, db: Session = Depends(get_db)) -> PowerOutageRequestDetailOut:
    return service.to_detail(_load_or_404(db, id), local_today())


@router.post("", response_model=ActionResult)
def create_request(
    body: PowerOutageRequestIn,
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> ActionResult:
    if not can_access_work_center(view, body.work_center_id):
        raise _forbidden("Cannot create requests for another work center")
    return service.create_request(
        db, body, created_by_id=view.user_id, today=local_today(), min_lead_days=get_settings().min_lead_days
    )


@router.post("/batch", response_model=BatchResult)
def create_batch(
    items: list[dict[str, Any]] = Body(...),
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> BatchResult:
    for item in items:
        try:
            work_center_id = int(item.get("work_center_id"))
        except (TypeError, ValueError):
            # Reported per item by validation.
            continue
        if not can_access_work_center(view, work_center_id):
            raise _forbidden("Cannot create requests for another work center")
    return service.create_many(
        db, items, created_by_id=view.user_id, today=local_today(), min_lead_days=get_settings().min_lead_days
    )


@router.put("/{id}", response_model=ActionResult)
@filter_by_work_center()
def update_request(
    id: int,
    body: PowerOutageRequestUpdateIn,
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> ActionResult:
    row = _load_or_404(db, id)
    if not can_edit_request(view, row.created_by_id, row.status_request):
        raise _forbidden("Not allowed to edit this request")
    return service.update_request(db, id, body)


@router.delete("/{id}", response_model=ActionResult)
@filter_by_work_center()
def delete_request(
    id: int,
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> ActionResult:
    row = _load_or_404(db, id)
    if not can_edit_request(view, row.created_by_id, row.status_request):
        raise _forbidden("Not allowed to delete this request")
    return service.delete_request(db, id)


@router.patch("/{id}/oms-status", response_model=ActionResult)
@require_roles(["ADMIN", "SUPERVISOR"])
@filter_by_work_center()
def update_oms_status(
    id: int,
    body: OMSStatusIn,
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> ActionResult:
    _load_or_404(db, id)
    return service.update_oms_status(db, id, body.oms_status, updated_by_id=view.user_id, now=local_now())


@router.patch("/{id}/status", response_model=ActionResult)
@require_roles(["ADMIN", "MANAGER", "SUPERVISOR"])
@filter_by_work_center()
def update_request_status(
    id: int,
    body: RequestStatusIn,
    db: Session = Depends(get_db),
    view: AuthorizationView = Depends(get_authorization),
) -> ActionResult:
    _load_or_404(db, id)
    return service.update_request_status(db, id, body.status_request, updated_by_id=view.user_id, now=local_now())
