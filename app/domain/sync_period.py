"""
app/domain/sync_period.py

Target period of a registry sync: one calendar month (YYYYMM) or one year (YYYY).
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass

_MONTH_PATTERN = re.compile(r"^(\d{4})(0[1-9]|1[0-2])$")
_YEAR_PATTERN = re.compile(r"^\d{4}$")


@dataclass(frozen=True)
class SyncPeriod:
    year: str
    month: str | None = None

    @classmethod
    def parse(cls, period: str) -> SyncPeriod:
        value = (period or "").strip()
        month_match = _MONTH_PATTERN.match(value)
        if month_match:
            return cls(year=month_match.group(1), month=month_match.group(2))
        if _YEAR_PATTERN.match(value):
            return cls(year=value)
        raise ValueError(f"Invalid sync period '{period}'. Expected YYYYMM or YYYY.")

    @classmethod
    def month_of(cls, year_month: str) -> SyncPeriod:
        parsed = cls.parse(year_month)
        if not parsed.is_month:
            raise ValueError(f"Invalid month '{year_month}'. Expected YYYYMM, e.g. 202512.")
        return parsed

    @classmethod
    def year_of(cls, year: str) -> SyncPeriod:
        parsed = cls.parse(year)
        if parsed.is_month:
            raise ValueError(f"Invalid year '{year}'. Expected YYYY, e.g. 2025.")
        return parsed

    @property
    def is_month(self) -> bool:
        return self.month is not None

    @property
    def code(self) -> str:
        """Compact form: 202512 or 2025."""
        return f"{self.year}{self.month}" if self.month else self.year

    @property
    def label(self) -> str:
        """Job label: 2025-12 or 2025."""
        return f"{self.year}-{self.month}" if self.month else self.year

    @property
    def death_date_filter(self) -> str:
        """
        Registry ``deathDate`` filter: the bare year, or a DD/MM/YYYY-DD/MM/YYYY
        range covering the whole month.
        """

        if self.month is None:
            return self.year
        last_day = calendar.monthrange(int(self.year), int(self.month))[1]
        return f"01/{self.month}/{self.year}-{last_day:02d}/{self.month}/{self.year}"
