"""
Table Metadata Store - Table Metadata Repository
Durable storage for table metadata documents (trino_table_metadata).

Operations never raise: they return a StorageResult carrying either the value
or the CodecError/StorageError that stopped them.
"""

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from sqlalchemy import select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import Connection
from sqlalchemy.schema import CreateSchema, CreateTable

from ...models.table_metadata import TableKey, TableMetadata
from ...utils.logger import logger, log_codec_error, log_database_error
from ...utils.metadata_codec import CodecError, MetadataCodec
from ..connection import DatabaseConnection
from ..schema import trino_table_metadata

T = TypeVar('T')

_KEY_COLUMNS = ("app_id", "database_name", "table_name")


class StorageError(Exception):
    """Raised when the relational store fails (connect, statement, commit, rollback)."""
    pass


@dataclass
class StorageResult(Generic[T]):
    """
    Outcome of a repository operation.

    Attributes:
        value: Document read (None for writes and for absent rows)
        error: CodecError or StorageError if the operation failed
    """
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def found(self) -> bool:
        return self.ok and self.value is not None


class TableMetadataRepository:
    """
    Repository for trino_table_metadata rows.

    Implements:
    - write(): create database/table if needed, upsert metadata, commit
    - read(): point lookup by (app_id, database_name, table_name)
    """

    def __init__(self, db: DatabaseConnection, codec: Optional[MetadataCodec] = None):
        """
        Initialize repository.

        Args:
            db: Connection manager for the metadata database
            codec: Metadata codec (a new MetadataCodec if omitted)
        """
        self.db = db
        self.codec = codec or MetadataCodec()

    def write(
        self,
        app_id: str,
        database: str,
        table: str,
        database_type: str,
        document: Union[TableMetadata, Mapping[str, Any]]
    ) -> StorageResult[None]:
        """
        Insert or overwrite the metadata row for a table.

        The encoded document is written in one transaction together with the
        idempotent database/table creation. Nothing is written if encoding fails.

        Returns:
            StorageResult with error set on failure
        """
        try:
            encoded = self.codec.encode(document)
        except CodecError as e:
            log_codec_error(e, TableKey(app_id, database, table).token)
            return StorageResult(error=e)

        try:
            with self.db.transaction() as conn:
                self.ensure_schema(conn)
                conn.execute(self._upsert_statement(conn, {
                    "app_id": app_id,
                    "database_name": database,
                    "table_name": table,
                    "database_type": database_type,
                    "metadata": encoded,
                }))
        except Exception as e:
            log_database_error(e, "Failed to maintain table metadata")
            return StorageResult(error=StorageError(f"Failed to maintain table metadata: {e}"))

        return StorageResult()

    def read(
        self,
        app_id: str,
        database: str,
        table: str,
        database_type: Optional[str] = None
    ) -> StorageResult[TableMetadata]:
        """
        Fetch the metadata document for a table.

        Args:
            database_type: Accepted for symmetry with write(); not part of the lookup

        Returns:
            StorageResult with the decoded document, None if no row exists
        """
        stmt = select(trino_table_metadata.c["metadata"]).where(
            trino_table_metadata.c.app_id == app_id,
            trino_table_metadata.c.database_name == database,
            trino_table_metadata.c.table_name == table,
        )

        try:
            with self.db.connect() as conn:
                row = conn.execute(stmt).first()
        except Exception as e:
            log_database_error(e, "Failed to query table metadata")
            return StorageResult(error=StorageError(f"Failed to query table metadata: {e}"))

        if row is None:
            return StorageResult()

        try:
            return StorageResult(value=self.codec.decode(row[0]))
        except CodecError as e:
            log_codec_error(e, TableKey(app_id, database, table).token)
            return StorageResult(error=e)

    def ensure_schema(self, conn: Connection) -> None:
        """Create the metadata database and table if they don't exist."""
        schema = conn.schema_for_object(trino_table_metadata)
        if schema is not None and conn.dialect.name != "sqlite":
            conn.execute(CreateSchema(schema, if_not_exists=True))
        conn.execute(CreateTable(trino_table_metadata, if_not_exists=True))

    def _upsert_statement(self, conn: Connection, values: dict):
        """
        Build the dialect's insert-or-update on the primary key.

        Raises:
            StorageError: If the dialect has no upsert support
        """
        dialect = conn.dialect.name

        if dialect in ("mysql", "mariadb"):
            stmt = mysql.insert(trino_table_metadata).values(**values)
            return stmt.on_duplicate_key_update(metadata=stmt.inserted["metadata"])

        if dialect in ("postgresql", "sqlite"):
            module = postgresql if dialect == "postgresql" else sqlite
            stmt = module.insert(trino_table_metadata).values(**values)
            return stmt.on_conflict_do_update(
                index_elements=list(_KEY_COLUMNS),
                set_={"metadata": stmt.excluded["metadata"]},
            )

        logger.warning("No upsert support for dialect", extra={"dialect": dialect})
        raise StorageError(f"Unsupported dialect for metadata upsert: {dialect}")
