from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from outage_admin.models.user import UserStatus

RoleName = Literal["VIEWER", "ADMIN", "MANAGER", "SUPERVISOR", "USER"]


class CreateUserIn(BaseModel):
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=2, max_length=100)
    employee_id: str = Field(pattern=r"^\d{6}$")
    email: str | None = Field(default=None, max_length=100)
    work_center_id: int = Field(gt=0)
    branch_id: int = Field(gt=0)
    role: RoleName
    status: UserStatus = UserStatus.ACTIVE


class UpdateUserIn(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
    employee_id: str = Field(pattern=r"^\d{6}$")
    email: str | None = Field(default=None, max_length=100)
    work_center_id: int = Field(gt=0)
    branch_id: int = Field(gt=0)
    role: RoleName
    status: UserStatus = UserStatus.ACTIVE
    # Left empty to keep the current password.
    password: str | None = Field(default=None, min_length=6)


class UpdateRoleIn(BaseModel):
    role: RoleName


class UpdateNameIn(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: str
    full_name: str
    email: str | None
    role: str
    status: UserStatus
    work_center_id: int
    branch_id: int
    created_at: datetime


class UserListItem(BaseModel):
    id: int
    full_name: str
    employee_id: str
    role: str
    work_center_name: str
    branch_name: str


class UserListOut(BaseModel):
    users: list[UserListItem]
    total_count: int
    total_pages: int
