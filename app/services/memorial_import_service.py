"""
app/services/memorial_import_service.py

Imports one registry record into the memorial store: skip check, dedup
lookup, slug resolution and insert. Every call returns a RecordResult;
per-record failures never propagate to the sync loop.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.domain.death_registry import RegistryPerson
from app.domain.registry_sync import RecordResult
from app.mappers.memorial_mapper import MemorialMapper
from app.repositories.memorial_repository import MemorialRepository

logger = logging.getLogger(__name__)


def resolve_unique_slug(repository: MemorialRepository, base_slug: str) -> str:
    """
    Return ``base_slug`` or the first free ``base_slug-N`` (N = 1, 2, ...).
    """

    candidate = base_slug
    suffix = 1
    while repository.slug_exists(candidate):
        candidate = f"{base_slug}-{suffix}"
        suffix += 1
    return candidate


class MemorialImportService:
    def __init__(self, *, mapper: MemorialMapper | None = None) -> None:
        self._mapper = mapper or MemorialMapper()

    def import_person(self, *, db: Session, person: RegistryPerson) -> RecordResult:
        try:
            if not person.id and not person.death.certificate_id:
                logger.warning("Skipping registry record without record or certificate id")
                return RecordResult.skipped(person.id, "missing record identifier")

            memorial = self._mapper.to_memorial(person)
            if memorial is None:
                logger.warning(
                    "Skipping registry record with invalid death date id=%s death_date=%r",
                    person.id,
                    person.death.date,
                )
                return RecordResult.skipped(person.id, "invalid death date")

            repository = MemorialRepository(db)
            # Savepoint: a failed insert only rolls back this record.
            with db.begin_nested():
                if repository.find_by_dedup_key(memorial.insee_num_acte) is not None:
                    return RecordResult.duplicate(person.id)

                slug = resolve_unique_slug(repository, memorial.slug)
                repository.create(memorial, slug=slug)
            return RecordResult.created(person.id, slug)
        except Exception as exc:
            logger.exception("Failed to import registry record id=%s error=%s", person.id, exc)
            return RecordResult.failed(person.id, f"{type(exc).__name__}: {exc}")
