from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LoginIn(BaseModel):
    employee_id: str | None = None
    password: str | None = None


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    authorization: dict[str, Any]
