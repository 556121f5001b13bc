from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from db.models.registry_sync_job import RegistrySyncJobStatus
from db.repositories.registry_sync_job_repository import RegistrySyncJobRepository


@pytest.fixture()
def jobs(db_session) -> RegistrySyncJobRepository:
    return RegistrySyncJobRepository(db_session)


def test_create_job_starts_running_with_zero_counters(jobs) -> None:
    job = jobs.create_job(file_name="matchid-api-202512", file_month="2025-12")

    assert job.status == RegistrySyncJobStatus.RUNNING
    assert (job.record_count, job.processed_count, job.new_profiles) == (0, 0, 0)
    assert job.started_at is not None
    assert job.completed_at is None


def test_progress_counters_never_decrease(jobs) -> None:
    job = jobs.create_job(file_name="matchid-api-202512", file_month="2025-12")

    jobs.update_progress(job_id=job.id, processed_count=20, new_profiles=18)
    jobs.update_progress(job_id=job.id, processed_count=5, new_profiles=1)

    assert (job.processed_count, job.new_profiles) == (20, 18)


def test_terminal_state_is_reached_once(jobs) -> None:
    job = jobs.create_job(file_name="matchid-api-2025", file_month="2025")

    completed = jobs.mark_completed(job_id=job.id, processed_count=44, new_profiles=42)

    assert completed is not None
    assert completed.status == RegistrySyncJobStatus.COMPLETED
    assert completed.record_count == 44
    assert completed.completed_at is not None

    assert jobs.mark_failed(job_id=job.id, error_message="late failure") is None
    assert jobs.mark_cancelled(
        job_id=job.id, processed_count=1, new_profiles=1, error_message="Stopped by user"
    ) is None
    assert jobs.update_progress(job_id=job.id, processed_count=99, new_profiles=99) is None
    assert job.status == RegistrySyncJobStatus.COMPLETED
    assert job.processed_count == 44
    assert job.error_message is None


def test_mark_cancelled_keeps_message_and_counts(jobs) -> None:
    job = jobs.create_job(file_name="matchid-api-202512", file_month="2025-12")
    jobs.update_progress(job_id=job.id, processed_count=20, new_profiles=20)

    cancelled = jobs.mark_cancelled(
        job_id=job.id, processed_count=20, new_profiles=20, error_message="Stopped by user"
    )

    assert cancelled.status == RegistrySyncJobStatus.CANCELLED
    assert cancelled.error_message == "Stopped by user"
    assert cancelled.record_count == 20


def test_failure_committed_by_another_session_is_not_overwritten(
    jobs, db_session, session_factory
) -> None:
    job = jobs.create_job(file_name="matchid-api-202512", file_month="2025-12")
    jobs.update_progress(job_id=job.id, processed_count=20, new_profiles=20)
    db_session.commit()

    with session_factory() as other:
        RegistrySyncJobRepository(other).fail_orphaned_jobs(error_message="Server restarted")
        other.commit()

    # ``job`` is still cached as RUNNING in this session.
    assert jobs.update_progress(job_id=job.id, processed_count=40, new_profiles=40) is None
    assert jobs.mark_completed(job_id=job.id, processed_count=40, new_profiles=40) is None
    db_session.commit()

    with session_factory() as fresh:
        stored = RegistrySyncJobRepository(fresh).get_job(job.id)
    assert stored.status == RegistrySyncJobStatus.FAILED
    assert stored.error_message == "Server restarted"
    assert stored.processed_count == 20


def test_unknown_job_is_ignored(jobs) -> None:
    assert jobs.mark_failed(job_id=uuid.uuid4(), error_message="x") is None


def test_fail_orphaned_jobs_only_touches_running(jobs, db_session) -> None:
    orphan_a = jobs.create_job(file_name="matchid-api-202511", file_month="2025-11")
    orphan_b = jobs.create_job(file_name="matchid-api-202512", file_month="2025-12")
    done = jobs.create_job(file_name="matchid-api-202510", file_month="2025-10")
    jobs.mark_completed(job_id=done.id, processed_count=3, new_profiles=3)
    db_session.commit()

    count = jobs.fail_orphaned_jobs(error_message="Server restarted while job was running")
    db_session.commit()

    assert count == 2
    for job in (orphan_a, orphan_b):
        assert job.status == RegistrySyncJobStatus.FAILED
        assert job.error_message == "Server restarted while job was running"
        assert job.completed_at is not None
    assert done.status == RegistrySyncJobStatus.COMPLETED
    assert jobs.list_by_status(RegistrySyncJobStatus.RUNNING) == []


def test_list_recent_orders_by_start_time_desc(jobs, db_session) -> None:
    base = datetime(2025, 12, 1, tzinfo=timezone.utc)
    for offset in range(4):
        job = jobs.create_job(file_name=f"matchid-api-{offset}", file_month="2025-12")
        job.started_at = base + timedelta(days=offset)
    db_session.commit()

    recent = jobs.list_recent(limit=3)

    assert [job.file_name for job in recent] == ["matchid-api-3", "matchid-api-2", "matchid-api-1"]
