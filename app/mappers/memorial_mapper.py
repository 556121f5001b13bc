"""
app/mappers/memorial_mapper.py

Mapping from one registry death record to the canonical memorial shape.

Dedup key
---------
``{death place code or "unknown"}-{raw death date}-{certificate id or record id}``.
The key, not the registry record id alone, decides whether a record was
already imported: two registry entries with the same key are one memorial.

Slug
----
``{first}-{last}`` folded to lowercase ASCII, then the raw YYYYMMDD death
date, then a 6-char base-36 hash of first+last+death date. The hash only
narrows collisions; uniqueness is enforced by the importer's suffix loop.
"""

from __future__ import annotations

import re
import unicodedata

from app.connectors.registry_connector import parse_registry_date
from app.domain.death_registry import RegistryPerson
from app.domain.memorial import MemorialInput
from db.models.memorial import MemorialSex, MemorialSource

UNKNOWN_NAME = "Unknown"
UNKNOWN_PLACE_CODE = "unknown"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def build_dedup_key(person: RegistryPerson) -> str:
    death = person.death
    place_code = death.location.code or UNKNOWN_PLACE_CODE
    certificate = death.certificate_id or person.id
    return f"{place_code}-{death.date}-{certificate}"


def slugify(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("-", ascii_only).strip("-")


def short_hash(value: str, length: int = 6) -> str:
    """
    32-bit ``h * 31 + unit`` string hash over UTF-16 code units, rendered as
    base 36 and truncated. Kept stable so slugs of existing rows stay valid.
    """

    encoded = value.encode("utf-16-le")
    acc = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        acc = (acc * 31 + unit) & 0xFFFFFFFF
    if acc >= 0x80000000:
        acc -= 0x100000000
    return _to_base36(abs(acc))[:length]


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_slug(first_name: str, last_name: str, death_date_raw: str) -> str:
    name_part = slugify(f"{first_name}-{last_name}")
    date_part = death_date_raw[:8]
    digest = short_hash(f"{first_name}{last_name}{death_date_raw}")
    return f"{name_part}-{date_part}-{digest}"


def extract_place_label(city: str | list[str] | None) -> str | None:
    """
    Place names may arrive as a list of historical variants; the first wins.
    """

    if not city:
        return None
    if isinstance(city, list):
        return city[0] or None
    return city


def map_sex(raw: str | None) -> str | None:
    if raw == "M":
        return MemorialSex.MALE
    if raw == "F":
        return MemorialSex.FEMALE
    return None


class MemorialMapper:
    """
    Converts registry records into memorial inputs.
    """

    def to_memorial(self, person: RegistryPerson) -> MemorialInput | None:
        """
        Return the memorial candidate, or None when the death date cannot be
        parsed (the record must be skipped).
        """

        death_date = parse_registry_date(person.death.date)
        if death_date is None:
            return None

        first_name = person.name.first[0] if person.name.first else UNKNOWN_NAME
        last_name = person.name.last or UNKNOWN_NAME
        birth_location = person.birth.location
        death_location = person.death.location

        return MemorialInput(
            slug=generate_slug(first_name, last_name, person.death.date),
            first_name=first_name,
            last_name=last_name,
            birth_date=parse_registry_date(person.birth.date),
            death_date=death_date,
            sex=map_sex(person.sex),
            birth_place_code=birth_location.code,
            birth_place_label=extract_place_label(birth_location.city),
            death_place_code=death_location.code,
            death_place_label=extract_place_label(death_location.city),
            pin_lat=death_location.latitude,
            pin_lng=death_location.longitude,
            source=MemorialSource.INSEE,
            insee_num_acte=build_dedup_key(person),
        )
