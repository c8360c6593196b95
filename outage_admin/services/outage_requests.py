"""
Power-outage request lifecycle.

A request is created by a field user for one transformer on one day, then
moves through two independent status tracks:

* ``status_request`` (NOT -> CONFIRM | CANCELLED), set by managers/supervisors.
* ``oms_status`` (NOT_ADDED -> PROCESSED | CANCELLED), set once the outage has
  been entered into the outage management system.

Queries here go through ``select()`` so the work-center scope listener in
``outage_admin.db.filters`` applies to every read.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from outage_admin.dates import combine, days_until
from outage_admin.models.outage import OMSStatus, PowerOutageRequest, RequestStatus
from outage_admin.schemas.common import ActionResult, PageInfo
from outage_admin.schemas.outage import (
    BatchItemError,
    BatchResult,
    PowerOutageRequestDetailOut,
    PowerOutageRequestIn,
    PowerOutageRequestOut,
    PowerOutageRequestPage,
    PowerOutageRequestUpdateIn,
)

logger = logging.getLogger(__name__)


class Urgency(str, enum.Enum):
    COMPLETED = "completed"
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"
    NONE = ""


@dataclass(frozen=True)
class RequestFilters:
    work_center_id: int | None = None
    oms_status: OMSStatus | None = None
    status_request: RequestStatus | None = None
    start_date: date | None = None
    end_date: date | None = None

    def conditions(self) -> list[Any]:
        out: list[Any] = []
        if self.work_center_id:
            out.append(PowerOutageRequest.work_center_id == self.work_center_id)
        if self.oms_status:
            out.append(PowerOutageRequest.oms_status == self.oms_status)
        if self.status_request:
            out.append(PowerOutageRequest.status_request == self.status_request)
        if self.start_date:
            out.append(PowerOutageRequest.outage_date >= self.start_date)
        if self.end_date:
            out.append(PowerOutageRequest.outage_date <= self.end_date)
        return out


def _with_relations():
    return (
        selectinload(PowerOutageRequest.created_by),
        selectinload(PowerOutageRequest.work_center),
        selectinload(PowerOutageRequest.branch),
    )


def _dump(row: PowerOutageRequest) -> dict[str, Any]:
    return PowerOutageRequestOut.model_validate(row).model_dump(mode="json")


def validate_outage_date(outage_date: date, today: date, min_lead_days: int = 10) -> str | None:
    """Return an error message when the outage is too soon, else None."""
    if days_until(outage_date, today) < min_lead_days:
        return f"Outage date must be at least {min_lead_days} days from today"
    return None


def urgency(oms_status: OMSStatus, status_request: RequestStatus, outage_date: date, today: date) -> Urgency:
    if oms_status is OMSStatus.PROCESSED and status_request is RequestStatus.CONFIRM:
        return Urgency.COMPLETED

    if status_request is not RequestStatus.CANCELLED:
        days = days_until(outage_date, today)
        if 0 <= days <= 5:
            return Urgency.CRITICAL
        if 5 < days <= 7:
            return Urgency.WARNING
        if 7 < days <= 15:
            return Urgency.NORMAL

    return Urgency.NONE


def sort_requests(rows: Iterable[PowerOutageRequest], today: date) -> list[PowerOutageRequest]:
    """
    Display order for the request list.

    1. CONFIRM, outage today or later: nearest date first, then earliest start.
    2. CONFIRM, outage already past: most recent date first, then latest start.
    3. Everything not confirmed: newest created first.
    4. CONFIRM + PROCESSED (finished work): newest created first, at the end.
    """

    def key(r: PowerOutageRequest) -> tuple:
        if r.oms_status is OMSStatus.PROCESSED and r.status_request is RequestStatus.CONFIRM:
            return (3, -r.created_at.timestamp(), 0)
        if r.status_request is RequestStatus.CONFIRM:
            if r.outage_date >= today:
                return (0, r.outage_date.toordinal(), r.start_time.timestamp())
            return (1, -r.outage_date.toordinal(), -r.start_time.timestamp())
        return (2, -r.created_at.timestamp(), 0)

    return sorted(rows, key=key)


def to_detail(row: PowerOutageRequest, today: date) -> PowerOutageRequestDetailOut:
    detail = PowerOutageRequestDetailOut.model_validate(row)
    detail.urgency = urgency(row.oms_status, row.status_request, row.outage_date, today).value
    return detail


def _new_row(payload: PowerOutageRequestIn, created_by_id: int) -> PowerOutageRequest:
    return PowerOutageRequest(
        outage_date=payload.outage_date,
        start_time=combine(payload.outage_date, payload.start_time),
        end_time=combine(payload.outage_date, payload.end_time),
        work_center_id=payload.work_center_id,
        branch_id=payload.branch_id,
        transformer_number=payload.transformer_number,
        gis_details=payload.gis_details,
        area=payload.area,
        created_by_id=created_by_id,
        oms_status=OMSStatus.NOT_ADDED,
        status_request=RequestStatus.NOT,
    )


def get_request(db: Session, request_id: int) -> PowerOutageRequest | None:
    stmt = select(PowerOutageRequest).where(PowerOutageRequest.id == request_id).options(*_with_relations())
    return db.scalars(stmt).first()


def create_request(
    db: Session,
    payload: PowerOutageRequestIn,
    created_by_id: int,
    today: date,
    min_lead_days: int = 10,
) -> ActionResult:
    error = validate_outage_date(payload.outage_date, today, min_lead_days)
    if error:
        return ActionResult.fail(error)

    row = _new_row(payload, created_by_id)
    try:
        db.add(row)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Duplicate outage request rejected")
        return ActionResult.fail("Request duplicates an existing record")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create power outage request")
        return ActionResult.fail("Failed to create power outage request")

    db.refresh(row)
    logger.info("Created power outage request id=%s by user_id=%s", row.id, created_by_id)
    return ActionResult.ok(_dump(row))


def create_many(
    db: Session,
    items: list[dict[str, Any]],
    created_by_id: int,
    today: date,
    min_lead_days: int = 10,
) -> BatchResult:
    """
    All-or-nothing batch create.

    Every item is validated first; if any fails, nothing is written and the
    per-item errors (1-based index) are returned.
    """

    total = len(items)
    rows: list[PowerOutageRequest] = []
    errors: list[BatchItemError] = []

    for index, raw in enumerate(items, start=1):
        try:
            payload = PowerOutageRequestIn.model_validate(raw)
        except ValidationError as exc:
            messages = ", ".join(err["msg"] for err in exc.errors())
            errors.append(BatchItemError(index=index, error=f"Invalid data: {messages}"))
            continue

        date_error = validate_outage_date(payload.outage_date, today, min_lead_days)
        if date_error:
            errors.append(BatchItemError(index=index, error=date_error))
            continue

        rows.append(_new_row(payload, created_by_id))

    if errors:
        return BatchResult(
            success=False,
            message="Validation failed for one or more items",
            validation_errors=errors,
            total_count=total,
        )

    try:
        db.add_all(rows)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Batch rejected: duplicate records")
        return BatchResult(success=False, message="Batch contains records that already exist", total_count=total)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create power outage request batch")
        return BatchResult(success=False, message="Failed to create power outage requests", total_count=total)

    for row in rows:
        db.refresh(row)
    logger.info("Created %s power outage requests by user_id=%s", len(rows), created_by_id)
    return BatchResult(
        success=True,
        data=[PowerOutageRequestOut.model_validate(r) for r in rows],
        message=f"Saved all {len(rows)} power outage requests",
        success_count=len(rows),
        total_count=total,
    )


def _save(db: Session, row: PowerOutageRequest, what: str) -> ActionResult:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update %s id=%s", what, row.id)
        return ActionResult.fail(f"Failed to update {what}")
    db.refresh(row)
    return ActionResult.ok(_dump(row))


def update_request(db: Session, request_id: int, payload: PowerOutageRequestUpdateIn) -> ActionResult:
    row = get_request(db, request_id)
    if row is None:
        return ActionResult.fail("Power outage request not found")

    row.start_time = combine(payload.outage_date, payload.start_time)
    row.end_time = combine(payload.outage_date, payload.end_time)
    row.area = payload.area
    return _save(db, row, "power outage request")


def update_oms_status(
    db: Session, request_id: int, oms_status: OMSStatus, updated_by_id: int, now: datetime
) -> ActionResult:
    row = get_request(db, request_id)
    if row is None:
        return ActionResult.fail("Power outage request not found")

    row.oms_status = oms_status
    row.oms_updated_at = now
    row.oms_updated_by_id = updated_by_id
    return _save(db, row, "OMS status")


def update_request_status(
    db: Session, request_id: int, status_request: RequestStatus, updated_by_id: int, now: datetime
) -> ActionResult:
    row = get_request(db, request_id)
    if row is None:
        return ActionResult.fail("Power outage request not found")

    row.status_request = status_request
    row.status_updated_at = now
    row.status_updated_by_id = updated_by_id
    return _save(db, row, "request status")


def delete_request(db: Session, request_id: int) -> ActionResult:
    row = get_request(db, request_id)
    if row is None:
        return ActionResult.fail("Power outage request not found")
    try:
        db.delete(row)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete power outage request id=%s", request_id)
        return ActionResult.fail("Failed to delete request")
    return ActionResult.ok(message="Request deleted")


def paginated_requests(
    db: Session,
    page: int,
    limit: int,
    today: date,
    filters: RequestFilters | None = None,
) -> PowerOutageRequestPage:
    conditions = (filters or RequestFilters()).conditions()

    total = db.scalar(select(func.count()).select_from(PowerOutageRequest).where(*conditions)) or 0
    rows = db.scalars(
        select(PowerOutageRequest)
        .where(*conditions)
        .options(*_with_relations())
        .order_by(PowerOutageRequest.created_at.desc(), PowerOutageRequest.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    total_pages = math.ceil(total / limit) if limit else 0
    return PowerOutageRequestPage(
        data=[to_detail(r, today) for r in rows],
        pagination=PageInfo(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


def sorted_requests(db: Session, today: date) -> list[PowerOutageRequestDetailOut]:
    rows = db.scalars(select(PowerOutageRequest).options(*_with_relations())).all()
    return [to_detail(r, today) for r in sort_requests(rows, today)]
