from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from outage_admin.models.outage import OMSStatus


class OMSDistributionOut(BaseModel):
    work_center_id: int
    work_center_name: str
    over_15_days: int
    days_8_to_15: int
    days_6_to_7: int
    days_1_to_5: int
    overdue: int


class OutagePoint(BaseModel):
    outage_date: date
    oms_status: OMSStatus


class OMSStatusByWorkCenterOut(BaseModel):
    name: str
    not_added: int
    processed: int
    cancelled: int
    outages: list[OutagePoint]


class StatusSummaryOut(BaseModel):
    total: int
    by_request_status: dict[str, int]
    by_oms_status: dict[str, int]
