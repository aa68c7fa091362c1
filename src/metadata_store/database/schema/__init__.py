"""
Table Metadata Store - SQLAlchemy Table Definitions
===================================================

Usage:
    from metadata_store.database.schema import trino_table_metadata

    stmt = select(trino_table_metadata.c.metadata).where(
        trino_table_metadata.c.app_id == app_id
    )
"""

from .metadata import metadata
from .metadata_tables import (
    METADATA_SCHEMA,
    METADATA_TABLE,
    trino_table_metadata,
)

__all__ = [
    "metadata",
    "METADATA_SCHEMA",
    "METADATA_TABLE",
    "trino_table_metadata",
]
