from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from outage_admin.db.session import get_db
from outage_admin.schemas.common import ActionResult
from outage_admin.schemas.outage import AnnouncementQuery, AnnouncementRow, PdfRequestIn
from outage_admin.services.announcements import announcement_rows
from outage_admin.services.pdf_client import PdfGenerationError, generate_pdf
from outage_admin.settings import get_settings

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.post("/data", response_model=list[AnnouncementRow])
def announcement_data(body: AnnouncementQuery, db: Session = Depends(get_db)) -> list[AnnouncementRow]:
    return announcement_rows(db, body)


@router.post("/pdf", response_model=ActionResult)
def announcement_pdf(body: PdfRequestIn) -> ActionResult:
    settings = get_settings()
    try:
        result = generate_pdf(body, settings.pdf_service_url, timeout=settings.pdf_timeout_seconds)
    except PdfGenerationError as exc:
        return ActionResult.fail(str(exc))
    return ActionResult.ok(result["data"], message=result["message"])
