"""
app/schemas package marker.
"""

from app.schemas.registry_sync import (
    RegistrySyncJobResponse,
    StopSyncResponse,
    SyncMonthRequest,
    SyncResultResponse,
    SyncStatusResponse,
    SyncYearRequest,
)

__all__ = [
    "RegistrySyncJobResponse",
    "StopSyncResponse",
    "SyncMonthRequest",
    "SyncResultResponse",
    "SyncStatusResponse",
    "SyncYearRequest",
]
