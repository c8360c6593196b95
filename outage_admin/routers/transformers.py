from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from outage_admin.db.session import get_db
from outage_admin.models.org import Transformer
from outage_admin.schemas.org import TransformerOut
from outage_admin.services.transformers import search_transformers

router = APIRouter(tags=["transformers"])


@router.get("/transformers", response_model=list[TransformerOut])
def search(q: str = Query(default=""), db: Session = Depends(get_db)) -> list[Transformer]:
    return search_transformers(db, q)
