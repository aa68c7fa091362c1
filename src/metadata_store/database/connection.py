"""
Table Metadata Store - Database Connection Management
Provides SQLAlchemy Core connections for the relational metadata store.

Every operation opens its own connection and closes it when done:
- connect() yields a connection for reads (no explicit transaction)
- transaction() yields a connection inside a transaction that commits on
  success and rolls back on error
Connection pooling is intentionally left to the host process; the engine
uses NullPool so close() really closes the DBAPI connection.
"""

from contextlib import contextmanager
from threading import Lock
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Connection, URL
from sqlalchemy.pool import NullPool

from ..utils.logger import logger, log_database_error
from .schema import METADATA_SCHEMA


class DatabaseConnection:
    """
    Manages connections to the metadata database.

    Features:
    - Lazily created engine, one per DatabaseConnection (thread-safe)
    - No pooling (NullPool): one DBAPI connection per operation
    - Metadata schema remapped per connection (schema_translate_map)
    - Passwords hidden from logs (hide_parameters, hidden URL rendering)
    """

    def __init__(self, url: URL, schema: Optional[str] = METADATA_SCHEMA):
        self.url = url
        self.schema = schema or None
        self._engine: Engine = None
        self._engine_lock = Lock()

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Returns:
            SQLAlchemy Engine instance

        Raises:
            DatabaseConnectionError: If the engine can't be created
        """
        if self._engine is None:
            with self._engine_lock:
                # Double-check locking pattern
                if self._engine is None:
                    try:
                        self._engine = create_engine(
                            self.url,
                            poolclass=NullPool,
                            echo=False,
                            hide_parameters=True,
                        )

                        logger.info("Metadata database engine initialized", extra={
                            "url": self.url.render_as_string(hide_password=True),
                            "schema": self.schema,
                        })

                    except Exception as e:
                        log_database_error(e, "Failed to create database engine")
                        raise DatabaseConnectionError(f"Failed to create database engine: {e}") from e

        return self._engine

    def _open(self) -> Connection:
        connection = self.get_engine().connect()
        if self.schema != METADATA_SCHEMA:
            connection = connection.execution_options(
                schema_translate_map={METADATA_SCHEMA: self.schema}
            )
        return connection

    def _close(self, connection: Connection) -> None:
        try:
            connection.close()
        except Exception as e:
            log_database_error(e, "Failed to close connection")

    @contextmanager
    def connect(self) -> Generator[Connection, None, None]:
        """
        Context manager for a single read connection.

        Yields:
            SQLAlchemy Connection object, closed on exit

        Example:
            >>> with db.connect() as conn:
            ...     row = conn.execute(stmt).first()
        """
        connection = self._open()
        try:
            yield connection
        finally:
            self._close(connection)

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Context manager for a connection inside one transaction.

        Commits when the block completes, rolls back when it raises (a failed
        rollback is logged and the original error re-raised), and always closes.

        Example:
            >>> with db.transaction() as conn:
            ...     conn.execute(upsert_stmt)
        """
        connection = self._open()
        try:
            connection.begin()
            yield connection
            connection.commit()
        except Exception:
            try:
                connection.rollback()
            except Exception as rollback_error:
                log_database_error(rollback_error, "Failed to rollback transaction")
            raise
        finally:
            self._close(connection)

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Metadata database connection test successful")
            return True
        except Exception as e:
            logger.error("Metadata database connection test failed", extra={
                "error": str(e)
            })
            return False

    def close(self):
        """Dispose of the engine."""
        with self._engine_lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info("Metadata database engine disposed")


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass
