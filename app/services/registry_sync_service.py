"""
app/services/registry_sync_service.py

Orchestrates death registry syncs: pull batch, import each record,
checkpoint progress, finalize the job.

Job lifecycle
-------------
    Idle -> Running -> Completed | Failed | Cancelled

A stop request moves a running sync into a transient "stopping" state; the
flag is observed only between batches, so the batch in flight always
finishes and is checkpointed. Whatever happens, the guard is released in a
``finally`` block.

Only one sync runs per process. The guard is an in-process lock: separate
replicas each have their own guard and are not coordinated.

Crash recovery
--------------
Jobs still RUNNING when the process starts were orphaned by a previous
instance. ``recover_orphaned_jobs`` marks them FAILED. It runs at startup
and, failing that, before the first sync this process accepts. Hosts that
may run beside a live server (the CLI) disable the lazy pass with
``recover_on_first_sync=False``.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from functools import lru_cache
from typing import Protocol

from sqlalchemy.orm import Session

from app.config import RegistrySyncSettings, get_registry_api_settings, get_registry_sync_settings
from app.connectors.registry_connector import DeathRegistryConnector
from app.domain.death_registry import RegistryPerson
from app.domain.registry_sync import StopSyncResult, SyncCounters, SyncResult, SyncStatus
from app.domain.sync_period import SyncPeriod
from app.repositories.memorial_repository import MemorialRepository
from app.services.memorial_import_service import MemorialImportService
from db.models.memorial import MemorialSource
from db.repositories.registry_sync_job_repository import RegistrySyncJobRepository

logger = logging.getLogger(__name__)

STOPPED_BY_USER_MESSAGE = "Stopped by user"
SERVER_RESTARTED_MESSAGE = "Server restarted while job was running"

_MAX_ERROR_MESSAGE_CHARS = 2000


class SyncAlreadyRunningError(RuntimeError):
    """
    Raised when a sync is requested while another one is running.
    """


class RegistryBatchSource(Protocol):
    def fetch_for_period(self, period: str) -> Iterator[list[RegistryPerson]]:
        ...


class SyncGuard:
    """
    Single-flight guard with a cooperative stop flag.

    ``try_acquire`` is a compare-and-swap: it never blocks and never queues.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._job_id: uuid.UUID | None = None

    @property
    def is_held(self) -> bool:
        return self._lock.locked()

    @property
    def job_id(self) -> uuid.UUID | None:
        return self._job_id

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def try_acquire(self) -> bool:
        acquired = self._lock.acquire(blocking=False)
        if acquired:
            self._stop_requested.clear()
            self._job_id = None
        return acquired

    def attach_job(self, job_id: uuid.UUID) -> None:
        self._job_id = job_id

    def request_stop(self) -> uuid.UUID | None:
        job_id = self._job_id
        if not self.is_held or job_id is None:
            return None
        self._stop_requested.set()
        return job_id

    def release(self) -> None:
        self._job_id = None
        self._stop_requested.clear()
        self._lock.release()


class RegistrySyncService:
    """
    Runs registry syncs and tracks each one as a RegistrySyncJob row.
    """

    def __init__(
        self,
        *,
        connector: RegistryBatchSource | None = None,
        session_factory: Callable[[], Session] | None = None,
        importer: MemorialImportService | None = None,
        settings: RegistrySyncSettings | None = None,
        guard: SyncGuard | None = None,
        recover_on_first_sync: bool = True,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        self._connector = connector or DeathRegistryConnector(settings=get_registry_api_settings())
        self._importer = importer or MemorialImportService()
        self._settings = settings or get_registry_sync_settings()
        self._guard = guard or SyncGuard()
        self._recovered = not recover_on_first_sync

    @property
    def is_syncing(self) -> bool:
        return self._guard.is_held

    def recover_orphaned_jobs(self) -> int:
        """
        Mark RUNNING jobs left by a previous process as FAILED.
        """

        if not self._guard.try_acquire():
            raise SyncAlreadyRunningError("Cannot recover jobs while a sync is in progress")
        try:
            return self._recover_orphaned_jobs()
        finally:
            self._guard.release()

    def sync_month(self, year_month: str) -> SyncResult:
        """
        Sync one month, e.g. "202512".
        """

        return self._run_sync(SyncPeriod.month_of(year_month))

    def sync_year(self, year: str) -> SyncResult:
        """
        Sync a full year, e.g. "2025" (initial data load).
        """

        return self._run_sync(SyncPeriod.year_of(year))

    def stop_sync(self) -> StopSyncResult:
        job_id = self._guard.request_stop()
        if job_id is None:
            return StopSyncResult(stopped=False, job_id=None)

        logger.info("Registry sync stop requested job_id=%s", job_id)
        return StopSyncResult(stopped=True, job_id=job_id)

    def get_sync_status(self, *, limit: int | None = None) -> SyncStatus:
        with self._session_factory() as db:
            recent_jobs = RegistrySyncJobRepository(db).list_recent(
                limit=limit or self._settings.recent_jobs_limit
            )
            total_imported = MemorialRepository(db).count_by_source(MemorialSource.INSEE)

        return SyncStatus(
            is_syncing=self.is_syncing,
            total_imported=total_imported,
            current_job_id=self._guard.job_id,
            recent_jobs=recent_jobs,
        )

    def run_weekly_sync(self) -> SyncResult | None:
        """
        Scheduled entry point: sync the current UTC month. Failures are logged,
        not raised, so the scheduler thread keeps running.
        """

        year_month = datetime.now(timezone.utc).strftime("%Y%m")
        logger.info("Weekly registry sync starting year_month=%s", year_month)
        try:
            return self.sync_month(year_month)
        except SyncAlreadyRunningError:
            logger.warning("Weekly registry sync skipped: a sync is already in progress")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Weekly registry sync failed year_month=%s error=%s", year_month, exc)
        return None

    def _run_sync(self, period: SyncPeriod) -> SyncResult:
        if not self._guard.try_acquire():
            raise SyncAlreadyRunningError("Sync already in progress")

        try:
            if not self._recovered:
                self._recover_orphaned_jobs()

            started = time.monotonic()
            counters = SyncCounters()
            with self._session_factory() as db:
                jobs = RegistrySyncJobRepository(db)
                job = jobs.create_job(
                    file_name=f"matchid-api-{period.code}",
                    file_month=period.label,
                )
                db.commit()
                job_id = job.id
                self._guard.attach_job(job_id)
                logger.info("Registry sync started job_id=%s period=%s", job_id, period.label)

                try:
                    stopped = self._process_batches(db=db, job_id=job_id, period=period, counters=counters)
                    if stopped:
                        finished = jobs.mark_cancelled(
                            job_id=job_id,
                            processed_count=counters.processed,
                            new_profiles=counters.new_profiles,
                            error_message=STOPPED_BY_USER_MESSAGE,
                        )
                    else:
                        finished = jobs.mark_completed(
                            job_id=job_id,
                            processed_count=counters.processed,
                            new_profiles=counters.new_profiles,
                        )
                    db.commit()
                    if finished is None:
                        logger.warning(
                            "Registry sync job was finalized elsewhere; terminal state kept job_id=%s",
                            job_id,
                        )
                except Exception as exc:
                    self._mark_job_failed(db=db, job_id=job_id, exc=exc)
                    raise

            logger.info(
                "Registry sync %s job_id=%s processed=%s new=%s duplicates=%s invalid=%s errors=%s",
                "stopped" if stopped else "completed",
                job_id,
                counters.processed,
                counters.new_profiles,
                counters.skipped_duplicates,
                counters.skipped_invalid,
                counters.errors,
            )
            return SyncResult(
                job_id=job_id,
                records_processed=counters.processed,
                new_profiles=counters.new_profiles,
                skipped_duplicates=counters.skipped_duplicates,
                errors=counters.errors,
                duration_ms=int((time.monotonic() - started) * 1000),
            )
        finally:
            self._guard.release()

    def _process_batches(
        self,
        *,
        db: Session,
        job_id: uuid.UUID,
        period: SyncPeriod,
        counters: SyncCounters,
    ) -> bool:
        """
        Drive the batch loop. Returns True when the run was stopped by request or
        its job row was finalized by another process.
        """

        jobs = RegistrySyncJobRepository(db)
        for batch in self._connector.fetch_for_period(period.code):
            if self._guard.stop_requested:
                logger.info("Registry sync stop observed job_id=%s; discarding fetched batch", job_id)
                return True

            for person in batch:
                counters.add(self._importer.import_person(db=db, person=person))

            # Checkpoint: commits this batch's memorials together with progress.
            progressed = jobs.update_progress(
                job_id=job_id,
                processed_count=counters.processed,
                new_profiles=counters.new_profiles,
            )
            db.commit()

            if progressed is None:
                logger.warning("Registry sync job is no longer RUNNING job_id=%s; stopping", job_id)
                return True

            if self._guard.stop_requested:
                logger.info("Registry sync stop observed job_id=%s", job_id)
                return True
        return False

    def _recover_orphaned_jobs(self) -> int:
        with self._session_factory() as db:
            repository = RegistrySyncJobRepository(db)
            count = repository.fail_orphaned_jobs(error_message=SERVER_RESTARTED_MESSAGE)
            db.commit()

        self._recovered = True
        if count:
            logger.warning(
                "Marked %s orphaned RUNNING registry sync job(s) from a previous instance as FAILED",
                count,
            )
        return count

    def _mark_job_failed(self, *, db: Session, job_id: uuid.UUID, exc: Exception) -> None:
        error_message = f"{type(exc).__name__}: {exc}"[:_MAX_ERROR_MESSAGE_CHARS]
        logger.exception("Registry sync failed job_id=%s error=%s", job_id, error_message)
        try:
            db.rollback()
            failed_job = RegistrySyncJobRepository(db).mark_failed(
                job_id=job_id,
                error_message=error_message,
            )
            if failed_job is None:
                logger.error("Unable to mark registry sync job as failed id=%s", job_id)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to persist failed registry sync job state id=%s", job_id)


@lru_cache(maxsize=1)
def get_registry_sync_service() -> RegistrySyncService:
    """
    Build and cache the process-wide registry sync service.
    """

    return RegistrySyncService()
