"""
db/models/memorial.py

Memorial profile model shared by partner-entered and registry-imported records.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, Float, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class MemorialSource:
    PARTNER = "PARTNER"
    INSEE = "INSEE"
    MERGED = "MERGED"


class MemorialSex:
    MALE = "MALE"
    FEMALE = "FEMALE"


class Memorial(Base, TimestampMixin):
    __tablename__ = "memorials"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Public URL identifier, unique across all provenances",
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    death_date: Mapped[date] = mapped_column(Date, nullable=False)
    sex: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="MALE, FEMALE",
    )
    birth_place_code: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="Official geographic code (COG) of the birth place",
    )
    birth_place_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    death_place_code: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="Official geographic code (COG) of the death place",
    )
    death_place_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pin_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    pin_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    source: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=MemorialSource.PARTNER,
        comment="PARTNER, INSEE, MERGED",
    )
    insee_num_acte: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        comment="Registry dedup key: death place code, death date, certificate id",
    )

    __table_args__ = (
        Index("ix_memorials_source", "source"),
        Index("ix_memorials_death_date", "death_date"),
        Index("ix_memorials_last_name_first_name", "last_name", "first_name"),
    )
