from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from outage_admin.models.org import Transformer


def search_transformers(db: Session, term: str, limit: int = 10) -> list[Transformer]:
    if not term.strip():
        return []
    pattern = f"%{term.lower()}%"
    stmt = (
        select(Transformer)
        .where(or_(func.lower(Transformer.transformer_number).like(pattern), func.lower(Transformer.gis_details).like(pattern)))
        .order_by(Transformer.transformer_number)
        .limit(limit)
    )
    return list(db.scalars(stmt))


def get_transformer(db: Session, transformer_number: str) -> Transformer | None:
    return db.scalars(select(Transformer).where(Transformer.transformer_number == transformer_number)).first()


def create_transformer(db: Session, transformer_number: str, gis_details: str) -> Transformer:
    transformer = Transformer(transformer_number=transformer_number, gis_details=gis_details)
    db.add(transformer)
    db.commit()
    db.refresh(transformer)
    return transformer


def update_transformer(db: Session, transformer_number: str, gis_details: str) -> Transformer | None:
    transformer = get_transformer(db, transformer_number)
    if transformer is None:
        return None
    transformer.gis_details = gis_details
    db.commit()
    return transformer


def transformer_exists(db: Session, transformer_number: str) -> bool:
    return get_transformer(db, transformer_number) is not None
