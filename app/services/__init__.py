"""
app/services package marker.
"""

from app.services.memorial_import_service import MemorialImportService, resolve_unique_slug
from app.services.registry_sync_service import (
    RegistrySyncService,
    SyncAlreadyRunningError,
    SyncGuard,
    get_registry_sync_service,
)

__all__ = [
    "MemorialImportService",
    "RegistrySyncService",
    "SyncAlreadyRunningError",
    "SyncGuard",
    "get_registry_sync_service",
    "resolve_unique_slug",
]
