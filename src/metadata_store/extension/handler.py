"""
Table Metadata Store - Table Metadata Handler
Public entry point for maintaining and querying table metadata.

Modes (fixed by ExtensionSettings for the process lifetime):
- Inactive: documents live only in the in-memory cache.
- Active: writes go to the relational store only (write-around); reads
  check the cache first and populate it from the store on a miss
  (read-through). The cache is never invalidated.

Usage:
    from metadata_store.extension.handler import get_table_metadata_handler

    handler = get_table_metadata_handler()
    handler.maintain_table_metadata("app1", "db1", "orders", "mongodb", metadata)
    metadata = handler.query_table_metadata("app1", "db1", "orders", "mongodb")
"""

from threading import Lock
from typing import Any, Mapping, Optional, Union

from ..database.connection import DatabaseConnection
from ..database.repositories.table_metadata_repository import TableMetadataRepository
from ..models.table_metadata import TableKey, TableMetadata
from ..utils.cache import MetadataCache
from ..utils.logger import logger, log_metadata_cache_hit, log_metadata_maintained
from ..utils.metadata_codec import CodecError, MetadataCodec, as_table_metadata
from .settings import ExtensionSettings, get_extension_settings

Document = Union[TableMetadata, Mapping[str, Any]]


class TableMetadataHandler:
    """
    Composes the in-memory cache with the relational repository.

    Failures in the codec or the store are logged here and reported to
    callers only as an absent value (reads) or a completed call (writes).
    """

    def __init__(
        self,
        settings: ExtensionSettings,
        cache: Optional[MetadataCache] = None,
        repository: Optional[TableMetadataRepository] = None,
        codec: Optional[MetadataCodec] = None
    ):
        """
        Initialize handler.

        Args:
            settings: Activation decision and connection parameters
            cache: In-memory cache (a new MetadataCache if omitted)
            repository: Relational repository; built from settings when active and omitted
            codec: Codec shared with the repository
        """
        self.settings = settings
        self.cache = cache if cache is not None else MetadataCache()
        self._codec = codec or (repository.codec if repository is not None else MetadataCodec())

        if repository is None and settings.is_active():
            repository = TableMetadataRepository(
                DatabaseConnection(settings.connection_url(), settings.schema),
                self._codec,
            )
        self.repository = repository

    @property
    def active(self) -> bool:
        return self.settings.is_active()

    @property
    def codec(self) -> MetadataCodec:
        return self._codec

    def put(self, key: TableKey, document: Document, database_type: str = "") -> None:
        """
        Store a document.

        Inactive: cache only. Active: relational store only; the cache is left
        untouched and picks the document up on the next read miss.
        """
        if not self.active:
            try:
                metadata = as_table_metadata(document)
            except CodecError as e:
                logger.error("Failed to cache table metadata", extra={
                    "key": key.token,
                    "error_message": str(e)
                })
                return
            self.cache.set(key, metadata)
            log_metadata_maintained(key.token, "memory")
            return

        result = self.repository.write(key.app_id, key.database, key.table, database_type, document)
        if not result.ok:
            logger.warning("Failed to maintain table metadata", extra={
                "key": key.token,
                "error_type": type(result.error).__name__,
                "error_message": str(result.error)
            })
            return
        log_metadata_maintained(key.token, "database")

    def get(self, key: TableKey, database_type: Optional[str] = None) -> Optional[TableMetadata]:
        """
        Look up a document.

        Returns:
            The document, or None when absent or when the store failed
        """
        cached = self.cache.get(key)
        if cached is not None:
            log_metadata_cache_hit(key.token)
            return cached

        if not self.active:
            return None

        result = self.repository.read(key.app_id, key.database, key.table, database_type)
        if not result.ok:
            logger.warning("Failed to query table metadata", extra={
                "key": key.token,
                "error_type": type(result.error).__name__,
                "error_message": str(result.error)
            })
            return None
        if result.value is None:
            return None

        self.cache.set(key, result.value)
        return result.value

    def maintain_table_metadata(
        self,
        app_id: str,
        database: str,
        table: str,
        database_type: str,
        document: Document
    ) -> None:
        """Store metadata for a table. Never raises; failures are logged."""
        self.put(TableKey(app_id, database, table), document, database_type)

    def query_table_metadata(
        self,
        app_id: str,
        database: str,
        table: str,
        database_type: Optional[str] = None
    ) -> Optional[TableMetadata]:
        """Fetch metadata for a table, None if absent."""
        return self.get(TableKey(app_id, database, table), database_type)

    def cache_metadata(self, app_id: str, database: str, table: str, document: Document) -> None:
        """
        Seed the in-memory cache directly, in either mode.

        Raises:
            CodecError: If the document is malformed
        """
        self.cache.set(TableKey(app_id, database, table), as_table_metadata(document))


# Global handler instance
_handler: Optional[TableMetadataHandler] = None
_handler_lock = Lock()


def get_table_metadata_handler() -> TableMetadataHandler:
    """
    Get the process-wide handler, built from get_extension_settings().

    Raises:
        ConfigurationError: If the extension is active but misconfigured
    """
    global _handler
    if _handler is None:
        with _handler_lock:
            if _handler is None:
                _handler = TableMetadataHandler(get_extension_settings())
    return _handler


def reset_table_metadata_handler() -> None:
    """Reset the global handler (useful for testing)."""
    global _handler
    with _handler_lock:
        _handler = None
