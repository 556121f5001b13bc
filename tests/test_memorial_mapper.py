from __future__ import annotations

import unittest
from datetime import date

from app.domain.death_registry import RegistryEvent, RegistryLocation, RegistryName, RegistryPerson
from app.mappers.memorial_mapper import (
    MemorialMapper,
    build_dedup_key,
    extract_place_label,
    generate_slug,
    short_hash,
    slugify,
)
from db.models.memorial import MemorialSex, MemorialSource


def _person(
    *,
    person_id: str = "abc123",
    first: list[str] | None = None,
    last: str = "Lefèvre",
    death_date: str = "20251215",
    death_code: str | None = "75115",
    certificate_id: str | None = "42",
    city: str | list[str] | None = "Paris",
    sex: str | None = "F",
) -> RegistryPerson:
    return RegistryPerson(
        id=person_id,
        name=RegistryName(first=["Hélène", "Marie"] if first is None else first, last=last),
        birth=RegistryEvent(date="19300517", location=RegistryLocation(city="Nantes", code="44109")),
        death=RegistryEvent(
            date=death_date,
            location=RegistryLocation(city=city, code=death_code, latitude=48.8, longitude=2.3),
            certificate_id=certificate_id,
        ),
        sex=sex,
    )


class TestDedupKey(unittest.TestCase):
    def test_uses_place_code_date_and_certificate(self) -> None:
        self.assertEqual(build_dedup_key(_person()), "75115-20251215-42")

    def test_falls_back_to_unknown_place_and_record_id(self) -> None:
        person = _person(death_code=None, certificate_id=None)
        self.assertEqual(build_dedup_key(person), "unknown-20251215-abc123")

    def test_same_key_for_same_record_from_different_fetches(self) -> None:
        first_fetch = _person(person_id="x1")
        second_fetch = _person(person_id="x2")
        self.assertEqual(build_dedup_key(first_fetch), build_dedup_key(second_fetch))


class TestSlug(unittest.TestCase):
    def test_slugify_strips_diacritics_and_collapses_separators(self) -> None:
        self.assertEqual(slugify("Hélène-Lefèvre"), "helene-lefevre")
        self.assertEqual(slugify("  Jean  d'Arc--Ça!  "), "jean-d-arc-ca")
        self.assertEqual(slugify("---"), "")

    def test_short_hash_is_deterministic_base36(self) -> None:
        self.assertEqual(short_hash(""), "0")
        self.assertEqual(short_hash("a"), "2p")
        self.assertEqual(short_hash("ab"), "2e9")
        self.assertEqual(short_hash("Jean Martin 20251215"), short_hash("Jean Martin 20251215"))

    def test_short_hash_is_bounded_for_long_input(self) -> None:
        digest = short_hash("Marie-Thérèse de la Fontaine-Beaumarchais 19991231" * 4)
        self.assertLessEqual(len(digest), 6)
        self.assertRegex(digest, r"^[0-9a-z]+$")

    def test_generate_slug_layout(self) -> None:
        slug = generate_slug("Hélène", "Lefèvre", "20251215")
        expected_hash = short_hash("HélèneLefèvre20251215")
        self.assertEqual(slug, f"helene-lefevre-20251215-{expected_hash}")


class TestPlaceLabel(unittest.TestCase):
    def test_first_variant_wins(self) -> None:
        self.assertEqual(extract_place_label(["Paris 15e", "Paris"]), "Paris 15e")

    def test_single_string_and_empty(self) -> None:
        self.assertEqual(extract_place_label("Lyon"), "Lyon")
        self.assertIsNone(extract_place_label([]))
        self.assertIsNone(extract_place_label(None))


class TestMemorialMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = MemorialMapper()

    def test_maps_all_fields(self) -> None:
        memorial = self.mapper.to_memorial(_person(city=["Paris 15e", "Paris"]))

        assert memorial is not None
        self.assertEqual(memorial.first_name, "Hélène")
        self.assertEqual(memorial.last_name, "Lefèvre")
        self.assertEqual(memorial.death_date, date(2025, 12, 15))
        self.assertEqual(memorial.birth_date, date(1930, 5, 17))
        self.assertEqual(memorial.sex, MemorialSex.FEMALE)
        self.assertEqual(memorial.birth_place_label, "Nantes")
        self.assertEqual(memorial.death_place_code, "75115")
        self.assertEqual(memorial.death_place_label, "Paris 15e")
        self.assertEqual(memorial.pin_lat, 48.8)
        self.assertEqual(memorial.source, MemorialSource.INSEE)
        self.assertEqual(memorial.insee_num_acte, "75115-20251215-42")
        self.assertTrue(memorial.slug.startswith("helene-lefevre-20251215-"))

    def test_missing_names_use_placeholder(self) -> None:
        memorial = self.mapper.to_memorial(_person(first=[], last=""))

        assert memorial is not None
        self.assertEqual(memorial.first_name, "Unknown")
        self.assertEqual(memorial.last_name, "Unknown")
        self.assertTrue(memorial.slug.startswith("unknown-unknown-20251215-"))

    def test_invalid_death_date_returns_none(self) -> None:
        self.assertIsNone(self.mapper.to_memorial(_person(death_date="20251341")))
        self.assertIsNone(self.mapper.to_memorial(_person(death_date="")))

    def test_unknown_sex_and_bad_birth_date_are_optional(self) -> None:
        person = RegistryPerson(
            id="z",
            name=RegistryName(first=["Paul"], last="Morel"),
            birth=RegistryEvent(date="1930"),
            death=RegistryEvent(date="20250101"),
            sex="X",
        )

        memorial = self.mapper.to_memorial(person)

        assert memorial is not None
        self.assertIsNone(memorial.birth_date)
        self.assertIsNone(memorial.sex)
        self.assertIsNone(memorial.death_place_label)
        self.assertEqual(memorial.insee_num_acte, "unknown-20250101-z")


if __name__ == "__main__":
    unittest.main()
