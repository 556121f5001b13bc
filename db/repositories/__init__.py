"""
Repository layer exports.
"""

from db.repositories.registry_sync_job_repository import RegistrySyncJobRepository

__all__ = [
    "RegistrySyncJobRepository",
]
