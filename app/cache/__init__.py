"""
Cache layer: Redis-backed cache service and the list page cache.
"""
from app.cache.cache_service import (
    CacheService,
    ListCache,
    escape_glob,
)

__all__ = [
    "CacheService",
    "ListCache",
    "escape_glob",
]
