"""
app/domain/death_registry.py

Typed view of the death registry (matchID) search payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistryLocation:
    """
    Place of a birth or death event.

    ``city`` is either one name or a list of historical name variants,
    most recent first.
    """

    city: str | list[str] | None = None
    code: str | None = None
    department_code: str | None = None
    country: str | None = None
    country_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class RegistryEvent:
    """
    Birth or death sub-record. ``date`` is the raw YYYYMMDD string.
    """

    date: str = ""
    location: RegistryLocation = field(default_factory=RegistryLocation)
    certificate_id: str | None = None
    age: int | None = None


@dataclass(frozen=True)
class RegistryName:
    first: list[str] = field(default_factory=list)
    last: str = ""


@dataclass(frozen=True)
class RegistryPerson:
    """
    One civil-registry death entry as returned by the search API.
    """

    id: str
    name: RegistryName
    birth: RegistryEvent
    death: RegistryEvent
    score: float | None = None
    source: str | None = None
    source_line: int | None = None
    sex: str | None = None


@dataclass(frozen=True)
class RegistrySearchParams:
    """
    Search request parameters.

    ``death_date`` is either a year ("2024") or a DD/MM/YYYY-DD/MM/YYYY range.
    ``scroll`` is the scroll context TTL ("5m"); ``scroll_id`` continues a scroll.
    """

    page: int = 1
    size: int | None = None
    death_date: str | None = None
    scroll: str | None = None
    scroll_id: str | None = None


@dataclass(frozen=True)
class RegistrySearchResult:
    total: int
    page: int
    size: int
    persons: list[RegistryPerson] = field(default_factory=list)
    scroll_id: str | None = None
