"""
db/models/registry_sync_job.py

One row per death registry sync attempt.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class RegistrySyncJobStatus:
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    TERMINAL = frozenset({COMPLETED, FAILED, CANCELLED})


class RegistrySyncJob(Base, TimestampMixin):
    __tablename__ = "registry_sync_jobs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    file_name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Source label, e.g. matchid-api-202512",
    )
    file_month: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="Target period label: YYYY-MM or YYYY",
    )
    record_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_profiles: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=RegistrySyncJobStatus.RUNNING,
        comment="RUNNING, COMPLETED, FAILED, CANCELLED",
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_registry_sync_jobs_status", "status"),
        Index("ix_registry_sync_jobs_started_at", "started_at"),
    )
