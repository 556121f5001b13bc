"""
app/domain package marker.
"""

from app.domain.death_registry import (
    RegistryEvent,
    RegistryLocation,
    RegistryName,
    RegistryPerson,
    RegistrySearchParams,
    RegistrySearchResult,
)
from app.domain.memorial import MemorialInput
from app.domain.registry_sync import (
    RecordOutcome,
    RecordResult,
    StopSyncResult,
    SyncCounters,
    SyncResult,
    SyncStatus,
)
from app.domain.sync_period import SyncPeriod

__all__ = [
    "MemorialInput",
    "RecordOutcome",
    "RecordResult",
    "RegistryEvent",
    "RegistryLocation",
    "RegistryName",
    "RegistryPerson",
    "RegistrySearchParams",
    "RegistrySearchResult",
    "StopSyncResult",
    "SyncCounters",
    "SyncPeriod",
    "SyncResult",
    "SyncStatus",
]
