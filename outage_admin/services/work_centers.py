from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from outage_admin.models.org import Branch, WorkCenter
from outage_admin.models.outage import PowerOutageRequest
from outage_admin.models.user import User


def list_work_centers(db: Session) -> list[WorkCenter]:
    return list(db.scalars(select(WorkCenter).order_by(WorkCenter.name)))


def work_centers_with_branches(db: Session) -> list[WorkCenter]:
    # Branch order comes from the relationship (short_name).
    return list(db.scalars(select(WorkCenter).options(selectinload(WorkCenter.branches)).order_by(WorkCenter.id)))


def get_work_center(db: Session, work_center_id: int) -> WorkCenter | None:
    return db.get(WorkCenter, work_center_id)


def branches_for_work_center(db: Session, work_center_id: int) -> list[Branch]:
    return list(db.scalars(select(Branch).where(Branch.work_center_id == work_center_id).order_by(Branch.short_name)))


def list_branches(db: Session) -> list[Branch]:
    stmt = (
        select(Branch)
        .join(Branch.work_center)
        .options(selectinload(Branch.work_center))
        .order_by(WorkCenter.name, Branch.short_name)
    )
    return list(db.scalars(stmt))


def get_branch(db: Session, branch_id: int) -> Branch | None:
    return db.get(Branch, branch_id)


def create_work_center(db: Session, name: str) -> WorkCenter:
    center = WorkCenter(name=name)
    db.add(center)
    db.commit()
    db.refresh(center)
    return center


def create_branch(db: Session, work_center_id: int, full_name: str, short_name: str, phone_number: str | None) -> Branch:
    branch = Branch(work_center_id=work_center_id, full_name=full_name, short_name=short_name, phone_number=phone_number)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch


def update_work_center(db: Session, work_center_id: int, name: str) -> WorkCenter | None:
    center = db.get(WorkCenter, work_center_id)
    if center is None:
        return None
    center.name = name
    db.commit()
    return center


def update_branch(db: Session, branch_id: int, **fields: str | None) -> Branch | None:
    branch = db.get(Branch, branch_id)
    if branch is None:
        return None
    for key in ("full_name", "short_name", "phone_number"):
        if key in fields:
            setattr(branch, key, fields[key])
    db.commit()
    return branch


def delete_work_center(db: Session, work_center_id: int) -> None:
    center = db.get(WorkCenter, work_center_id)
    if center is not None:
        db.delete(center)
        db.commit()


def delete_branch(db: Session, branch_id: int) -> None:
    branch = db.get(Branch, branch_id)
    if branch is not None:
        db.delete(branch)
        db.commit()


def _count(db: Session, column, value: int) -> int:
    return db.scalar(select(func.count()).where(column == value)) or 0


def is_work_center_in_use(db: Session, work_center_id: int) -> bool:
    return any(
        _count(db, column, work_center_id) > 0
        for column in (Branch.work_center_id, User.work_center_id, PowerOutageRequest.work_center_id)
    )


def is_branch_in_use(db: Session, branch_id: int) -> bool:
    return any(_count(db, column, branch_id) > 0 for column in (User.branch_id, PowerOutageRequest.branch_id))
