"""
app/connectors/registry_connector.py

Death registry connector for the matchID search API.

API docs: https://deces.matchid.io/link/api

Large result sets are walked with the API's scroll cursor: the first search
opens a scroll context and returns a ``scrollId``; each follow-up request
sends only that id and gets the next page. Scroll ids are strictly
sequential, so pages are always requested one after another.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from datetime import date
from typing import Any

import requests

from app.config import RegistryAPISettings
from app.connectors.base import BaseConnector, RemoteAPIError
from app.domain.death_registry import (
    RegistryEvent,
    RegistryLocation,
    RegistryName,
    RegistryPerson,
    RegistrySearchParams,
    RegistrySearchResult,
)
from app.domain.sync_period import SyncPeriod

logger = logging.getLogger(__name__)


def parse_registry_date(raw: str | None) -> date | None:
    """
    Parse a YYYYMMDD registry date. Malformed input yields None, never raises.
    """

    if not raw or len(raw) != 8 or not raw.isdigit():
        return None
    try:
        return date(int(raw[0:4]), int(raw[4:6]), int(raw[6:8]))
    except ValueError:
        return None


class DeathRegistryConnector(BaseConnector):
    """
    Connector for paging through civil-registry death records.
    """

    def __init__(
        self,
        *,
        settings: RegistryAPISettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(
            source="matchid",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings
        self._sleep = sleep

    def search(self, params: RegistrySearchParams) -> RegistrySearchResult:
        """
        Run one search or scroll request.
        """

        body: dict[str, Any] = {
            "page": params.page or 1,
            "size": params.size or self._settings.page_size,
            "sort": [{"score": "desc"}],
            "fuzzy": "false",
        }
        if params.death_date:
            body["deathDate"] = params.death_date
        if params.scroll:
            body["scroll"] = params.scroll
        if params.scroll_id:
            body["scrollId"] = params.scroll_id

        logger.debug("Registry search request source=%s body=%s", self.source, body)
        payload = self._request_json(method="POST", url=self._settings.base_url, json_body=body)
        return self._parse_search_result(payload)

    def fetch_for_period(self, period: str) -> Iterator[list[RegistryPerson]]:
        """
        Yield record batches for a month ("YYYYMM") or a year ("YYYY").
        """

        return self._iter_batches(SyncPeriod.parse(period))

    def fetch_for_month(self, year_month: str) -> Iterator[list[RegistryPerson]]:
        return self._iter_batches(SyncPeriod.month_of(year_month))

    def fetch_for_year(self, year: str) -> Iterator[list[RegistryPerson]]:
        return self._iter_batches(SyncPeriod.year_of(year))

    def _iter_batches(self, period: SyncPeriod) -> Iterator[list[RegistryPerson]]:
        death_date = period.death_date_filter
        logger.info("Registry fetch starting period=%s deathDate=%s", period.label, death_date)

        result = self.search(
            RegistrySearchParams(
                page=1,
                size=self._settings.page_size,
                death_date=death_date,
                scroll=self._settings.scroll_ttl,
            )
        )
        total = result.total
        logger.info("Registry fetch total period=%s total=%s", period.label, total)

        if not result.persons:
            logger.info("Registry fetch found no records period=%s", period.label)
            return

        yield result.persons
        fetched = len(result.persons)
        scroll_id = result.scroll_id

        while fetched < total and scroll_id:
            if self._settings.scroll_delay_seconds > 0:
                self._sleep(self._settings.scroll_delay_seconds)

            result = self.search(
                RegistrySearchParams(scroll=self._settings.scroll_ttl, scroll_id=scroll_id)
            )
            if not result.persons:
                break

            yield result.persons
            fetched += len(result.persons)
            scroll_id = result.scroll_id
            logger.info("Registry fetch progress period=%s fetched=%s/%s", period.label, fetched, total)

        logger.info("Registry fetch completed period=%s fetched=%s", period.label, fetched)

    def _parse_search_result(self, payload: Any) -> RegistrySearchResult:
        response = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(response, dict):
            raise RemoteAPIError(f"{self.source} API error: unexpected payload shape.")

        persons: list[RegistryPerson] = []
        for index, raw_person in enumerate(response.get("persons") or []):
            person = _parse_person(raw_person)
            if person is None:
                logger.warning("Skipping malformed registry person index=%s", index)
                continue
            persons.append(person)

        scroll_id = response.get("scrollId")
        return RegistrySearchResult(
            total=_as_int(response.get("total")) or 0,
            page=_as_int(response.get("page")) or 1,
            size=_as_int(response.get("size")) or len(persons),
            persons=persons,
            scroll_id=str(scroll_id) if scroll_id else None,
        )


def _parse_person(raw: Any) -> RegistryPerson | None:
    # A missing id is kept as "": the importer decides whether the record is usable.
    if not isinstance(raw, dict):
        return None

    raw_name = raw.get("name") if isinstance(raw.get("name"), dict) else {}
    first = raw_name.get("first")
    if isinstance(first, str):
        first = [first]
    elif not isinstance(first, list):
        first = []

    return RegistryPerson(
        id=str(raw.get("id") or ""),
        name=RegistryName(
            first=[str(part) for part in first if part],
            last=str(raw_name.get("last") or ""),
        ),
        birth=_parse_event(raw.get("birth")),
        death=_parse_event(raw.get("death")),
        score=_as_float(raw.get("score")),
        source=raw.get("source"),
        source_line=_as_int(raw.get("sourceLine")),
        sex=raw.get("sex") if raw.get("sex") in ("M", "F") else None,
    )


def _parse_event(raw: Any) -> RegistryEvent:
    if not isinstance(raw, dict):
        return RegistryEvent()

    certificate_id = raw.get("certificateId")
    return RegistryEvent(
        date=str(raw.get("date") or ""),
        location=_parse_location(raw.get("location")),
        certificate_id=str(certificate_id) if certificate_id else None,
        age=_as_int(raw.get("age")),
    )


def _parse_location(raw: Any) -> RegistryLocation:
    if not isinstance(raw, dict):
        return RegistryLocation()

    city = raw.get("city")
    if isinstance(city, list):
        city = [str(name) for name in city if name]
    elif city is not None:
        city = str(city)

    return RegistryLocation(
        city=city,
        code=str(raw["code"]) if raw.get("code") else None,
        department_code=raw.get("departmentCode") or None,
        country=raw.get("country") or None,
        country_code=raw.get("countryCode") or None,
        latitude=_as_float(raw.get("latitude")),
        longitude=_as_float(raw.get("longitude")),
    )


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
