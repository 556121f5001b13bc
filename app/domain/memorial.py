"""
app/domain/memorial.py

Canonical memorial shape produced from a registry record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class MemorialInput:
    """
    Typed memorial prepared for persistence. ``slug`` is the base slug,
    before collision suffixes are applied.
    """

    slug: str
    first_name: str
    last_name: str
    death_date: date
    source: str
    insee_num_acte: str
    birth_date: date | None = None
    sex: str | None = None
    birth_place_code: str | None = None
    birth_place_label: str | None = None
    death_place_code: str | None = None
    death_place_label: str | None = None
    pin_lat: float | None = None
    pin_lng: float | None = None
