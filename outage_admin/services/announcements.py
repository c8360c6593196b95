from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from outage_admin.models.org import Branch
from outage_admin.models.outage import PowerOutageRequest
from outage_admin.schemas.outage import AnnouncementQuery, AnnouncementRow

logger = logging.getLogger(__name__)


def announcement_rows(db: Session, query: AnnouncementQuery) -> list[AnnouncementRow]:
    """Rows for the printed outage announcement of one branch on one day. Empty on DB failure."""

    stmt = (
        select(PowerOutageRequest, Branch)
        .join(Branch, PowerOutageRequest.branch_id == Branch.id)
        .where(
            PowerOutageRequest.work_center_id == query.work_center_id,
            PowerOutageRequest.branch_id == query.branch_id,
            PowerOutageRequest.outage_date == query.outage_date,
        )
        .order_by(PowerOutageRequest.start_time)
    )
    try:
        result = db.execute(stmt).all()
    except SQLAlchemyError:
        logger.exception("Failed to load announcement data")
        return []

    return [
        AnnouncementRow(
            outage_date=request.outage_date,
            start_time=request.start_time,
            end_time=request.end_time,
            area=request.area,
            gis_details=request.gis_details,
            branch_full_name=branch.full_name,
            branch_phone_number=branch.phone_number,
        )
        for request, branch in result
    ]
