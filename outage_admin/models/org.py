from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from outage_admin.db.base import Base


class WorkCenter(Base):
    __tablename__ = "work_centers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    branches: Mapped[list["Branch"]] = relationship(
        back_populates="work_center",
        cascade="all, delete-orphan",
        order_by="Branch.short_name",
    )


class Branch(Base):
    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    work_center_id: Mapped[int] = mapped_column(ForeignKey("work_centers.id"), nullable=False, index=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    short_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    work_center: Mapped[WorkCenter] = relationship(back_populates="branches")


class Transformer(Base):
    __tablename__ = "transformers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    transformer_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    gis_details: Mapped[str] = mapped_column(Text, nullable=False, default="")
