"""
Schemas for registry sync trigger, stop and status endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SyncMonthRequest(BaseModel):
    year_month: str = Field(
        ...,
        pattern=r"^\d{6}$",
        description="Year and month in YYYYMM format",
        examples=["202512"],
    )


class SyncYearRequest(BaseModel):
    year: str = Field(
        ...,
        pattern=r"^\d{4}$",
        description="Year in YYYY format",
        examples=["2025"],
    )


class SyncResultResponse(BaseModel):
    message: str
    job_id: UUID
    records_processed: int = Field(..., ge=0)
    new_profiles: int = Field(..., ge=0)
    skipped_duplicates: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    duration_ms: int = Field(..., ge=0)


class StopSyncResponse(BaseModel):
    message: str
    stopped: bool
    job_id: UUID | None = None


class RegistrySyncJobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    file_name: str
    file_month: str
    record_count: int
    processed_count: int
    new_profiles: int
    status: str
    error_message: str | None = None
    started_at: datetime
    completed_at: datetime | None = None


class SyncStatusResponse(BaseModel):
    is_syncing: bool
    current_job_id: UUID | None = None
    total_imported: int = Field(..., ge=0)
    recent_jobs: list[RegistrySyncJobResponse] = Field(default_factory=list)
