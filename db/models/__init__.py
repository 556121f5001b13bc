"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.memorial import Memorial, MemorialSex, MemorialSource
from db.models.registry_sync_job import RegistrySyncJob, RegistrySyncJobStatus

__all__ = [
    "Memorial",
    "MemorialSex",
    "MemorialSource",
    "RegistrySyncJob",
    "RegistrySyncJobStatus",
]
