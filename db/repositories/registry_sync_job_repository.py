"""
Repository for registry sync job lifecycle persistence and status lookup.

A job is created RUNNING and moves to exactly one terminal state. Every
mutator refuses to touch a job that is already terminal and returns None.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.registry_sync_job import RegistrySyncJob, RegistrySyncJobStatus


class RegistrySyncJobRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_job(self, *, file_name: str, file_month: str) -> RegistrySyncJob:
        job = RegistrySyncJob(
            file_name=file_name,
            file_month=file_month,
            record_count=0,
            processed_count=0,
            new_profiles=0,
            status=RegistrySyncJobStatus.RUNNING,
            started_at=datetime.now(timezone.utc),
        )
        self._session.add(job)
        self._session.flush()
        self._session.refresh(job)
        return job

    def get_job(self, job_id: uuid.UUID) -> RegistrySyncJob | None:
        return self._session.get(RegistrySyncJob, job_id)

    def list_by_status(self, status: str) -> list[RegistrySyncJob]:
        stmt: Select[tuple[RegistrySyncJob]] = (
            select(RegistrySyncJob)
            .where(RegistrySyncJob.status == status)
            .order_by(RegistrySyncJob.started_at.asc())
        )
        return list(self._session.scalars(stmt).all())

    def list_recent(self, *, limit: int = 10) -> list[RegistrySyncJob]:
        stmt: Select[tuple[RegistrySyncJob]] = (
            select(RegistrySyncJob)
            .order_by(RegistrySyncJob.started_at.desc())
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def update_progress(
        self,
        *,
        job_id: uuid.UUID,
        processed_count: int,
        new_profiles: int,
    ) -> RegistrySyncJob | None:
        job = self._get_running_job(job_id)
        if job is None:
            return None
        job.processed_count = max(job.processed_count, processed_count)
        job.new_profiles = max(job.new_profiles, new_profiles)
        self._session.flush()
        return job

    def mark_completed(
        self,
        *,
        job_id: uuid.UUID,
        processed_count: int,
        new_profiles: int,
    ) -> RegistrySyncJob | None:
        return self._finish(
            job_id=job_id,
            status=RegistrySyncJobStatus.COMPLETED,
            processed_count=processed_count,
            new_profiles=new_profiles,
            error_message=None,
        )

    def mark_cancelled(
        self,
        *,
        job_id: uuid.UUID,
        processed_count: int,
        new_profiles: int,
        error_message: str,
    ) -> RegistrySyncJob | None:
        return self._finish(
            job_id=job_id,
            status=RegistrySyncJobStatus.CANCELLED,
            processed_count=processed_count,
            new_profiles=new_profiles,
            error_message=error_message,
        )

    def mark_failed(self, *, job_id: uuid.UUID, error_message: str) -> RegistrySyncJob | None:
        job = self._get_running_job(job_id)
        if job is None:
            return None
        job.status = RegistrySyncJobStatus.FAILED
        job.error_message = error_message
        job.completed_at = datetime.now(timezone.utc)
        self._session.flush()
        return job

    def fail_orphaned_jobs(self, *, error_message: str) -> int:
        """
        Force every RUNNING job to FAILED. Returns the number of jobs updated.
        """

        orphaned = self.list_by_status(RegistrySyncJobStatus.RUNNING)
        for job in orphaned:
            job.status = RegistrySyncJobStatus.FAILED
            job.error_message = error_message
            job.completed_at = datetime.now(timezone.utc)
        self._session.flush()
        return len(orphaned)

    def _finish(
        self,
        *,
        job_id: uuid.UUID,
        status: str,
        processed_count: int,
        new_profiles: int,
        error_message: str | None,
    ) -> RegistrySyncJob | None:
        job = self._get_running_job(job_id)
        if job is None:
            return None
        job.processed_count = max(job.processed_count, processed_count)
        job.new_profiles = max(job.new_profiles, new_profiles)
        job.record_count = job.processed_count
        job.status = status
        job.error_message = error_message
        job.completed_at = datetime.now(timezone.utc)
        self._session.flush()
        return job

    def _get_running_job(self, job_id: uuid.UUID) -> RegistrySyncJob | None:
        # Reload and lock: another process may have finalized the row since
        # this session last saw it.
        job = self._session.get(
            RegistrySyncJob,
            job_id,
            populate_existing=True,
            with_for_update=True,
        )
        if job is None or job.status in RegistrySyncJobStatus.TERMINAL:
            return None
        return job
