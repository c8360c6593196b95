from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ActionResult(BaseModel):
    """Envelope returned by every create/update/delete style endpoint."""

    success: bool
    data: Any = None
    message: str | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None) -> "ActionResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(success=False, data=data, message=message)


class PageInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
