from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from outage_admin.dates import local_today
from outage_admin.db.session import get_db
from outage_admin.schemas.dashboard import OMSDistributionOut, OMSStatusByWorkCenterOut, StatusSummaryOut
from outage_admin.services import dashboard as service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/oms-distribution", response_model=list[OMSDistributionOut])
def oms_distribution(db: Session = Depends(get_db)) -> list[OMSDistributionOut]:
    return service.oms_distribution_by_work_center(db, today=local_today())


@router.get("/oms-status", response_model=list[OMSStatusByWorkCenterOut])
def oms_status(db: Session = Depends(get_db)) -> list[OMSStatusByWorkCenterOut]:
    return service.oms_status_by_work_center(db, today=local_today())


@router.get("/summary", response_model=StatusSummaryOut)
def summary(db: Session = Depends(get_db)) -> StatusSummaryOut:
    return service.request_status_summary(db)
