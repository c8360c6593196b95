from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WorkCenterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class BranchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    short_name: str
    work_center_id: int


class BranchDetailOut(BranchOut):
    full_name: str
    phone_number: str | None
    work_center: WorkCenterOut


class WorkCenterWithBranchesOut(WorkCenterOut):
    branches: list[BranchOut]


class TransformerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transformer_number: str
    gis_details: str
