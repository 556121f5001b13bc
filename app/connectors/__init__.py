"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, RemoteAPIError
from app.connectors.registry_connector import DeathRegistryConnector, parse_registry_date

__all__ = [
    "BaseConnector",
    "DeathRegistryConnector",
    "RemoteAPIError",
    "parse_registry_date",
]
