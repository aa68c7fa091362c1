from .table_metadata_repository import (
    StorageError,
    StorageResult,
    TableMetadataRepository,
)

__all__ = [
    "StorageError",
    "StorageResult",
    "TableMetadataRepository",
]
