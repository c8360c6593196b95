from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from outage_admin.models.outage import OMSStatus, RequestStatus
from outage_admin.schemas.common import PageInfo

HHMM_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

WORKING_DAY_START = 6 * 60
WORKING_DAY_END = 20 * 60
MIN_OUTAGE_MINUTES = 30


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


class PowerOutageRequestIn(BaseModel):
    outage_date: date
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    work_center_id: int = Field(gt=0)
    branch_id: int = Field(gt=0)
    transformer_number: str = Field(min_length=1)
    gis_details: str = ""
    area: str | None = None

    @model_validator(mode="after")
    def _check_time_window(self) -> "PowerOutageRequestIn":
        start = _minutes(self.start_time)
        end = _minutes(self.end_time)
        if start < WORKING_DAY_START or end > WORKING_DAY_END:
            raise ValueError("Outage must fall within working hours 06:00 - 20:00")
        if end < start + MIN_OUTAGE_MINUTES:
            raise ValueError("End time must be at least 30 minutes after start time")
        return self


class PowerOutageRequestUpdateIn(BaseModel):
    outage_date: date
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    area: str | None = None


class OMSStatusIn(BaseModel):
    oms_status: OMSStatus


class RequestStatusIn(BaseModel):
    status_request: RequestStatus


class _CreatorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    full_name: str


class _WorkCenterRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class _BranchRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    short_name: str


class PowerOutageRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    outage_date: date
    start_time: datetime
    end_time: datetime
    work_center_id: int
    branch_id: int
    transformer_number: str
    gis_details: str
    area: str | None
    created_by_id: int
    oms_status: OMSStatus
    status_request: RequestStatus
    oms_updated_at: datetime | None
    status_updated_at: datetime | None
    created_at: datetime


class PowerOutageRequestDetailOut(PowerOutageRequestOut):
    created_by: _CreatorOut
    work_center: _WorkCenterRef
    branch: _BranchRef
    urgency: str = ""


class PowerOutageRequestPage(BaseModel):
    data: list[PowerOutageRequestDetailOut]
    pagination: PageInfo


class BatchItemError(BaseModel):
    index: int
    error: str


class BatchResult(BaseModel):
    success: bool
    data: list[PowerOutageRequestOut] = Field(default_factory=list)
    message: str | None = None
    validation_errors: list[BatchItemError] = Field(default_factory=list)
    success_count: int = 0
    total_count: int = 0


class AnnouncementQuery(BaseModel):
    work_center_id: int | None = None
    branch_id: int | None = None
    outage_date: date | None = None

    @model_validator(mode="after")
    def _require_all(self) -> "AnnouncementQuery":
        if self.outage_date is None:
            raise ValueError("Please specify the outage date")
        if self.branch_id is None:
            raise ValueError("Please select a branch")
        if self.work_center_id is None:
            raise ValueError("Please select a work center")
        return self


class AnnouncementRow(BaseModel):
    outage_date: date
    start_time: datetime
    end_time: datetime
    area: str | None
    gis_details: str
    branch_full_name: str
    branch_phone_number: str | None


class PdfRequestIn(BaseModel):
    """Payload forwarded verbatim to the PDF service; field aliases are its wire names."""

    model_config = ConfigDict(populate_by_name=True)

    pea_no: str = Field(alias="peaNo")
    name: str
    cutoff_date: str = Field(alias="cutoffDate")
    announce_date: str = Field(alias="annouceDate")
    tel: str
