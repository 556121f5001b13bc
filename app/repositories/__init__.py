"""
app/repositories package marker.
"""

from app.repositories.memorial_repository import MemorialRepository

__all__ = [
    "MemorialRepository",
]
