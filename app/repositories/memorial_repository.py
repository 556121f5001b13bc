"""
app/repositories/memorial_repository.py

DB persistence and lookups for memorial profiles.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.memorial import MemorialInput
from db.models.memorial import Memorial


class MemorialRepository:
    """
    Record store used by the registry import: find by dedup key or slug, create.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_dedup_key(self, dedup_key: str) -> Memorial | None:
        stmt = select(Memorial).where(Memorial.insee_num_acte == dedup_key).limit(1)
        return self._session.scalars(stmt).first()

    def find_by_slug(self, slug: str) -> Memorial | None:
        stmt = select(Memorial).where(Memorial.slug == slug).limit(1)
        return self._session.scalars(stmt).first()

    def slug_exists(self, slug: str) -> bool:
        return self.find_by_slug(slug) is not None

    def count_by_source(self, source: str) -> int:
        stmt = select(func.count()).select_from(Memorial).where(Memorial.source == source)
        return int(self._session.scalar(stmt) or 0)

    def create(self, record: MemorialInput, *, slug: str) -> Memorial:
        """
        Insert one memorial under the resolved ``slug`` and flush it so later
        lookups in the same transaction see it.
        """

        memorial = Memorial(
            slug=slug,
            first_name=record.first_name,
            last_name=record.last_name,
            birth_date=record.birth_date,
            death_date=record.death_date,
            sex=record.sex,
            birth_place_code=record.birth_place_code,
            birth_place_label=record.birth_place_label,
            death_place_code=record.death_place_code,
            death_place_label=record.death_place_label,
            pin_lat=record.pin_lat,
            pin_lng=record.pin_lng,
            source=record.source,
            insee_num_acte=record.insee_num_acte,
        )
        self._session.add(memorial)
        self._session.flush()
        return memorial
