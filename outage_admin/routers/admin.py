from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from outage_admin.db.session import get_db
from outage_admin.schemas.common import ActionResult
from outage_admin.schemas.user import CreateUserIn, UpdateNameIn, UpdateRoleIn, UpdateUserIn, UserListOut
from outage_admin.services import users as service
from outage_admin.settings import get_settings

# Role requirements for /admin/* live in config/security_config.yaml.
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListOut)
def list_users(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    search: str = "",
    work_center_id: int | None = None,
    db: Session = Depends(get_db),
) -> UserListOut:
    return service.list_users(db, page=page, page_size=page_size, search=search, work_center_id=work_center_id)


@router.post("/users", response_model=ActionResult)
def create_user(body: CreateUserIn, db: Session = Depends(get_db)) -> ActionResult:
    return service.create_user(db, body, rounds=get_settings().bcrypt_rounds)


@router.put("/users/{id}", response_model=ActionResult)
def update_user(id: int, body: UpdateUserIn, db: Session = Depends(get_db)) -> ActionResult:
    return service.update_user(db, id, body, rounds=get_settings().bcrypt_rounds)


@router.patch("/users/{id}/role", response_model=ActionResult)
def update_role(id: int, body: UpdateRoleIn, db: Session = Depends(get_db)) -> ActionResult:
    return service.update_user_role(db, id, body.role)


@router.patch("/users/{id}/name", response_model=ActionResult)
def update_name(id: int, body: UpdateNameIn, db: Session = Depends(get_db)) -> ActionResult:
    return service.update_user_name(db, id, body.full_name)


@router.delete("/users/{id}", response_model=ActionResult)
def delete_user(id: int, db: Session = Depends(get_db)) -> ActionResult:
    return service.delete_user(db, id)
