from __future__ import annotations

import logging
import math

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from outage_admin.models.user import User
from outage_admin.schemas.common import ActionResult
from outage_admin.schemas.user import CreateUserIn, UpdateUserIn, UserListItem, UserListOut, UserOut
from outage_admin.security.passwords import hash_password
from outage_admin.session_auth import Role

logger = logging.getLogger(__name__)


def _with_org():
    return (selectinload(User.work_center), selectinload(User.branch))


def create_user(db: Session, payload: CreateUserIn, rounds: int = 12) -> ActionResult:
    if employee_id_exists(db, payload.employee_id):
        return ActionResult.fail("This Employee ID is already in use")

    user = User(
        employee_id=payload.employee_id,
        full_name=payload.full_name,
        email=payload.email,
        password_hash=hash_password(payload.password, rounds=rounds),
        role=payload.role,
        status=payload.status,
        work_center_id=payload.work_center_id,
        branch_id=payload.branch_id,
    )
    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create user employee_id=%s", payload.employee_id)
        return ActionResult.fail("Failed to create user. Please try again.")

    db.refresh(user)
    logger.info("Created user id=%s role=%s", user.id, user.role)
    return ActionResult.ok(UserOut.model_validate(user).model_dump(mode="json"))


def list_users(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    search: str = "",
    work_center_id: int | None = None,
) -> UserListOut:
    conditions = []
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(or_(func.lower(User.employee_id).like(pattern), func.lower(User.full_name).like(pattern)))
    if work_center_id:
        conditions.append(User.work_center_id == work_center_id)

    total = db.scalar(select(func.count(User.id)).where(*conditions)) or 0
    rows = db.scalars(
        select(User)
        .where(*conditions)
        .options(*_with_org())
        .order_by(User.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()

    return UserListOut(
        users=[
            UserListItem(
                id=u.id,
                full_name=u.full_name,
                employee_id=u.employee_id,
                role=u.role,
                work_center_name=u.work_center.name,
                branch_name=u.branch.full_name,
            )
            for u in rows
        ],
        total_count=total,
        total_pages=math.ceil(total / page_size) if page_size else 0,
    )


def get_user(db: Session, user_id: int) -> User | None:
    return db.scalars(select(User).where(User.id == user_id).options(*_with_org())).first()


def get_user_by_employee_id(db: Session, employee_id: str) -> User | None:
    return db.scalars(select(User).where(User.employee_id == employee_id).options(*_with_org())).first()


def employee_id_exists(db: Session, employee_id: str, exclude_id: int | None = None) -> bool:
    stmt = select(func.count(User.id)).where(User.employee_id == employee_id)
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    return (db.scalar(stmt) or 0) > 0


def _update(db: Session, user_id: int, what: str, **values) -> ActionResult:
    user = db.get(User, user_id)
    if user is None:
        return ActionResult.fail(f"Failed to update user {what}")
    for key, value in values.items():
        setattr(user, key, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update user %s id=%s", what, user_id)
        return ActionResult.fail(f"Failed to update user {what}")
    return ActionResult.ok({"id": user.id, "full_name": user.full_name, "role": user.role})


def update_user(db: Session, user_id: int, payload: UpdateUserIn, rounds: int = 12) -> ActionResult:
    if employee_id_exists(db, payload.employee_id, exclude_id=user_id):
        return ActionResult.fail("This Employee ID is already in use")

    values = payload.model_dump(exclude={"password"})
    if payload.password:
        values["password_hash"] = hash_password(payload.password, rounds=rounds)
    return _update(db, user_id, "details", **values)


def update_user_role(db: Session, user_id: int, role: str) -> ActionResult:
    return _update(db, user_id, "role", role=role)


def update_user_name(db: Session, user_id: int, full_name: str) -> ActionResult:
    return _update(db, user_id, "name", full_name=full_name)


def delete_user(db: Session, user_id: int) -> ActionResult:
    user = db.get(User, user_id)
    if user is None:
        return ActionResult.fail("User not found")
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete user id=%s", user_id)
        return ActionResult.fail("Failed to delete user")
    return ActionResult.ok(message="User deleted")


def users_by_work_center(db: Session, work_center_id: int) -> list[User]:
    return list(
        db.scalars(select(User).where(User.work_center_id == work_center_id).options(*_with_org()).order_by(User.full_name))
    )


def users_by_branch(db: Session, branch_id: int) -> list[User]:
    return list(db.scalars(select(User).where(User.branch_id == branch_id).options(*_with_org()).order_by(User.full_name)))


def users_by_role(db: Session, role: Role) -> list[User]:
    return list(db.scalars(select(User).where(User.role == role.value).options(*_with_org()).order_by(User.full_name)))
