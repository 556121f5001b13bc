"""
app/mappers package marker.
"""

from app.mappers.memorial_mapper import (
    MemorialMapper,
    build_dedup_key,
    generate_slug,
    short_hash,
    slugify,
)

__all__ = [
    "MemorialMapper",
    "build_dedup_key",
    "generate_slug",
    "short_hash",
    "slugify",
]
