from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from outage_admin.db.session import get_db
from outage_admin.models.org import Branch, WorkCenter
from outage_admin.schemas.org import BranchDetailOut, BranchOut, WorkCenterOut, WorkCenterWithBranchesOut
from outage_admin.services import work_centers as service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["work_centers"])


@router.get("/work-centers", response_model=list[WorkCenterOut])
def list_work_centers(db: Session = Depends(get_db)) -> list[WorkCenter]:
    try:
        return service.list_work_centers(db)
    except SQLAlchemyError as exc:
        logger.exception("Error in /work-centers")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch work centers") from exc


@router.get("/work-centers/with-branches", response_model=list[WorkCenterWithBranchesOut])
def list_work_centers_with_branches(db: Session = Depends(get_db)) -> list[WorkCenter]:
    return service.work_centers_with_branches(db)


@router.get("/work-centers/{id}/branches", response_model=list[BranchOut])
def list_branches_for_work_center(id: int, db: Session = Depends(get_db)) -> list[Branch]:
    try:
        return service.branches_for_work_center(db, id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch branches work_center_id=%s", id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch branches") from exc


@router.get("/branches", response_model=list[BranchDetailOut])
def list_branches(db: Session = Depends(get_db)) -> list[Branch]:
    return service.list_branches(db)
