"""
Table Metadata Cache
====================

A thread-safe in-memory map from TableKey to TableMetadata.

Features:
- Thread-safe operations
- Structural keys (app_id, database, table)
- No TTL and no eviction: entries live for the process lifetime

Usage:
    from metadata_store.utils.cache import MetadataCache
    from metadata_store.models.table_metadata import TableKey

    cache = MetadataCache()
    cache.set(TableKey("app1", "db1", "orders"), metadata)
    metadata = cache.get(TableKey("app1", "db1", "orders"))
"""

from threading import Lock
from typing import Any, Dict, Optional

from ..models.table_metadata import TableKey, TableMetadata


class MetadataCache:
    """
    Thread-safe unbounded metadata cache.

    Attributes:
        _cache: Dictionary storing documents by key
        _lock: Threading lock for thread safety
    """

    def __init__(self):
        self._cache: Dict[TableKey, TableMetadata] = {}
        self._lock = Lock()

    def get(self, key: TableKey) -> Optional[TableMetadata]:
        """
        Get cached document.

        Args:
            key: Table key

        Returns:
            Cached document, None if absent
        """
        with self._lock:
            return self._cache.get(key)

    def set(self, key: TableKey, value: TableMetadata) -> None:
        """
        Store document in cache, replacing any previous value (last write wins).

        Args:
            key: Table key
            value: Document to cache
        """
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: TableKey) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict[str, Any]:
        """
        Get cache statistics for monitoring.

        Returns:
            Dictionary with cache stats
        """
        with self._lock:
            return {
                "total_entries": len(self._cache),
                "apps": len({key.app_id for key in self._cache}),
            }
