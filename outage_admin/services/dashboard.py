from __future__ import annotations

from collections import Counter
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from outage_admin.dates import days_until
from outage_admin.models.org import WorkCenter
from outage_admin.models.outage import OMSStatus, PowerOutageRequest, RequestStatus
from outage_admin.schemas.dashboard import (
    OMSDistributionOut,
    OMSStatusByWorkCenterOut,
    OutagePoint,
    StatusSummaryOut,
)


def _requests_by_work_center(db: Session) -> list[tuple[WorkCenter, list[PowerOutageRequest]]]:
    centers = list(db.scalars(select(WorkCenter).order_by(WorkCenter.id)))
    requests = db.scalars(select(PowerOutageRequest)).all()

    grouped: dict[int, list[PowerOutageRequest]] = {c.id: [] for c in centers}
    for r in requests:
        grouped.setdefault(r.work_center_id, []).append(r)
    return [(c, grouped[c.id]) for c in centers]


def oms_distribution_by_work_center(db: Session, today: date) -> list[OMSDistributionOut]:
    """
    Confirmed requests still waiting for OMS entry, bucketed by days until the outage.
    """

    out: list[OMSDistributionOut] = []
    for center, requests in _requests_by_work_center(db):
        buckets = Counter()
        for r in requests:
            if r.status_request is not RequestStatus.CONFIRM or r.oms_status is not OMSStatus.NOT_ADDED:
                continue
            days = days_until(r.outage_date, today)
            if days > 15:
                buckets["over_15_days"] += 1
            elif days > 7:
                buckets["days_8_to_15"] += 1
            elif days > 5:
                buckets["days_6_to_7"] += 1
            elif days >= 1:
                buckets["days_1_to_5"] += 1
            else:
                buckets["overdue"] += 1

        out.append(
            OMSDistributionOut(
                work_center_id=center.id,
                work_center_name=center.name,
                over_15_days=buckets["over_15_days"],
                days_8_to_15=buckets["days_8_to_15"],
                days_6_to_7=buckets["days_6_to_7"],
                days_1_to_5=buckets["days_1_to_5"],
                overdue=buckets["overdue"],
            )
        )
    return out


def oms_status_by_work_center(db: Session, today: date) -> list[OMSStatusByWorkCenterOut]:
    out: list[OMSStatusByWorkCenterOut] = []
    for center, requests in _requests_by_work_center(db):
        confirmed = [r for r in requests if r.status_request is RequestStatus.CONFIRM]
        out.append(
            OMSStatusByWorkCenterOut(
                name=center.name,
                # Only pending entries whose outage has not passed yet.
                not_added=sum(1 for r in confirmed if r.oms_status is OMSStatus.NOT_ADDED and r.outage_date >= today),
                processed=sum(1 for r in confirmed if r.oms_status is OMSStatus.PROCESSED),
                cancelled=sum(1 for r in confirmed if r.oms_status is OMSStatus.CANCELLED),
                outages=[OutagePoint(outage_date=r.outage_date, oms_status=r.oms_status) for r in confirmed],
            )
        )
    return out


def request_status_summary(db: Session) -> StatusSummaryOut:
    rows = db.execute(select(PowerOutageRequest.status_request, PowerOutageRequest.oms_status)).all()
    by_request = Counter(status.value for status, _ in rows)
    by_oms = Counter(oms.value for _, oms in rows)
    return StatusSummaryOut(
        total=len(rows),
        by_request_status={s.value: by_request[s.value] for s in RequestStatus},
        by_oms_status={s.value: by_oms[s.value] for s in OMSStatus},
    )
