from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from outage_admin.db.base import Base
from outage_admin.models.org import Branch, WorkCenter
from outage_admin.models.user import User


class OMSStatus(str, enum.Enum):
    NOT_ADDED = "NOT_ADDED"
    PROCESSED = "PROCESSED"
    CANCELLED = "CANCELLED"


class RequestStatus(str, enum.Enum):
    NOT = "NOT"
    CONFIRM = "CONFIRM"
    CANCELLED = "CANCELLED"


class PowerOutageRequest(Base):
    __tablename__ = "power_outage_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    outage_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    # Local (utility timezone) wall-clock times on outage_date.
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    work_center_id: Mapped[int] = mapped_column(ForeignKey("work_centers.id"), nullable=False, index=True)
    branch_id: Mapped[int] = mapped_column(ForeignKey("branches.id"), nullable=False, index=True)

    transformer_number: Mapped[str] = mapped_column(String(50), nullable=False)
    gis_details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    area: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    oms_status: Mapped[OMSStatus] = mapped_column(
        Enum(OMSStatus, native_enum=False, length=20), default=OMSStatus.NOT_ADDED, nullable=False
    )
    oms_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    oms_updated_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    status_request: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, native_enum=False, length=20), default=RequestStatus.NOT, nullable=False
    )
    status_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status_updated_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    work_center: Mapped[WorkCenter] = relationship()
    branch: Mapped[Branch] = relationship()
    created_by: Mapped[User] = relationship(foreign_keys=[created_by_id])
