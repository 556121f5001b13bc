"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

MATCHID_SEARCH_URL = "https://deces.matchid.io/deces/api/v1/search"

# The registry API rejects page sizes above 20.
MAX_REGISTRY_PAGE_SIZE = 20


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class RegistryAPISettings:
    """
    Death registry (matchID) search API settings.
    """

    base_url: str = MATCHID_SEARCH_URL
    page_size: int = MAX_REGISTRY_PAGE_SIZE
    scroll_ttl: str = "5m"
    scroll_delay_seconds: float = 0.1
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class RegistrySyncSettings:
    """
    Runtime settings for registry sync orchestration and scheduling.
    """

    enabled: bool = True
    recent_jobs_limit: int = 10
    day_of_week: str = "sun"
    hour: int = 3
    minute: int = 0


@lru_cache(maxsize=1)
def get_registry_api_settings() -> RegistryAPISettings:
    """
    Return cached registry API settings from environment variables.
    """

    page_size = _get_int_env("REGISTRY_API_PAGE_SIZE", MAX_REGISTRY_PAGE_SIZE)
    return RegistryAPISettings(
        base_url=_get_str_env("REGISTRY_API_URL", MATCHID_SEARCH_URL),
        page_size=min(MAX_REGISTRY_PAGE_SIZE, max(1, page_size)),
        scroll_ttl=_get_str_env("REGISTRY_API_SCROLL_TTL", "5m"),
        scroll_delay_seconds=max(0.0, _get_float_env("REGISTRY_API_SCROLL_DELAY_SECONDS", 0.1)),
        timeout_seconds=max(1.0, _get_float_env("REGISTRY_API_TIMEOUT_SECONDS", 30.0)),
    )


@lru_cache(maxsize=1)
def get_registry_sync_settings() -> RegistrySyncSettings:
    """
    Return cached registry sync settings from environment variables.
    """

    return RegistrySyncSettings(
        enabled=_get_bool_env("REGISTRY_SYNC_ENABLED", True),
        recent_jobs_limit=max(1, _get_int_env("REGISTRY_SYNC_RECENT_JOBS_LIMIT", 10)),
        day_of_week=_get_str_env("REGISTRY_SYNC_DAY_OF_WEEK", "sun").lower(),
        hour=min(23, max(0, _get_int_env("REGISTRY_SYNC_HOUR", 3))),
        minute=min(59, max(0, _get_int_env("REGISTRY_SYNC_MINUTE", 0))),
    )
