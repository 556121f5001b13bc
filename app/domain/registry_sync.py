"""
app/domain/registry_sync.py

Domain models for registry sync runs: per-record results and run summaries.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field

from db.models.registry_sync_job import RegistrySyncJob


class RecordOutcome(str, enum.Enum):
    CREATED = "created"
    DUPLICATE = "duplicate"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RecordResult:
    """
    Outcome of importing one registry record.
    """

    outcome: RecordOutcome
    person_id: str
    slug: str | None = None
    error: str | None = None

    @classmethod
    def created(cls, person_id: str, slug: str) -> RecordResult:
        return cls(outcome=RecordOutcome.CREATED, person_id=person_id, slug=slug)

    @classmethod
    def duplicate(cls, person_id: str) -> RecordResult:
        return cls(outcome=RecordOutcome.DUPLICATE, person_id=person_id)

    @classmethod
    def skipped(cls, person_id: str, reason: str) -> RecordResult:
        return cls(outcome=RecordOutcome.SKIPPED, person_id=person_id, error=reason)

    @classmethod
    def failed(cls, person_id: str, error: str) -> RecordResult:
        return cls(outcome=RecordOutcome.FAILED, person_id=person_id, error=error)


@dataclass
class SyncCounters:
    """
    Run-level counters accumulated from per-record results.

    ``processed`` counts created and duplicate records only; skipped and
    failed records are tracked separately.
    """

    processed: int = 0
    new_profiles: int = 0
    skipped_duplicates: int = 0
    skipped_invalid: int = 0
    errors: int = 0

    def add(self, result: RecordResult) -> None:
        if result.outcome is RecordOutcome.CREATED:
            self.processed += 1
            self.new_profiles += 1
        elif result.outcome is RecordOutcome.DUPLICATE:
            self.processed += 1
            self.skipped_duplicates += 1
        elif result.outcome is RecordOutcome.SKIPPED:
            self.skipped_invalid += 1
        else:
            self.errors += 1


@dataclass(frozen=True)
class SyncResult:
    job_id: uuid.UUID
    records_processed: int
    new_profiles: int
    skipped_duplicates: int
    errors: int
    duration_ms: int


@dataclass(frozen=True)
class StopSyncResult:
    stopped: bool
    job_id: uuid.UUID | None = None


@dataclass(frozen=True)
class SyncStatus:
    is_syncing: bool
    total_imported: int
    current_job_id: uuid.UUID | None = None
    recent_jobs: list[RegistrySyncJob] = field(default_factory=list)
