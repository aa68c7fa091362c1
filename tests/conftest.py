"""
Table Metadata Store - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Sample metadata documents
- Properties files and configuration snapshots
- SQLite-backed active settings (no external database needed)

Note: MySQL fixtures are in tests/integration/conftest.py
"""

import logging

import pytest
from sqlalchemy import create_engine, func, select

from metadata_store.database.schema import trino_table_metadata
from metadata_store.extension.handler import reset_table_metadata_handler
from metadata_store.extension.settings import ExtensionSettings, reset_extension_settings
from metadata_store.models.table_metadata import FieldDescriptor, TableKey, TableMetadata
from metadata_store.utils.config import Config
from metadata_store.utils.logger import logger

CONFIG_ENV_VARS = [
    'DB_URL', 'DB_USER', 'DB_PASSWORD', 'DB_DRIVER', 'DB_ACTIVE', 'DB_SCHEMA',
    'EXTENSION_CONFIG_FILE',
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep host DB_* variables and process-wide singletons out of every test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_extension_settings()
    reset_table_metadata_handler()
    yield
    reset_extension_settings()
    reset_table_metadata_handler()


@pytest.fixture
def propagate_logs():
    """Let caplog see records from the non-propagating JSON logger."""
    logger.propagate = True
    yield logger
    logger.propagate = False


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def orders_key():
    return TableKey("app1", "db1", "orders")


@pytest.fixture
def orders_metadata():
    """Single-column metadata for the orders table."""
    return TableMetadata(
        table="orders",
        fields=[FieldDescriptor(name="id", type="BIGINT", hidden=False)],
    )


@pytest.fixture
def customers_metadata():
    """Multi-column metadata, including a row type with quoted field names."""
    return TableMetadata(
        table="customers",
        fields=[
            FieldDescriptor(name="_id", type="ObjectId", hidden=True),
            FieldDescriptor(name="name", type="VARCHAR", hidden=False),
            FieldDescriptor(name="address", type='ROW("street" VARCHAR, "zip" VARCHAR)', hidden=False),
            FieldDescriptor(name="created_at", type="TIMESTAMP(3)", hidden=False),
        ],
    )


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def write_properties(tmp_path):
    """
    Factory writing a properties file and returning its path.

    Example:
        path = write_properties({"db.active": "false"})
    """
    def _write(values: dict, name: str = "extension.properties") -> str:
        path = tmp_path / name
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
        return str(path)
    return _write


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'metadata.db'}"


@pytest.fixture
def sqlite_properties(sqlite_url):
    """Active-mode properties pointing at a SQLite file database."""
    return {
        "db.active": "true",
        "db.url": sqlite_url,
        "db.user": "",
        "db.password": "",
        "db.driver": "sqlite+pysqlite",
        "db.schema": "",
    }


@pytest.fixture
def sqlite_settings(sqlite_properties):
    """Active ExtensionSettings backed by a SQLite file database."""
    return ExtensionSettings.from_config(Config(sqlite_properties))


@pytest.fixture
def inactive_settings():
    return ExtensionSettings(active=False)


@pytest.fixture
def count_rows(sqlite_url):
    """Return a function counting trino_table_metadata rows in the SQLite store."""
    engine = create_engine(sqlite_url)

    def _count(**where) -> int:
        stmt = select(func.count()).select_from(trino_table_metadata)
        for column, value in where.items():
            stmt = stmt.where(trino_table_metadata.c[column] == value)
        with engine.connect().execution_options(
                schema_translate_map={"trino_metadata": None}) as conn:
            return conn.execute(stmt).scalar_one()

    yield _count
    engine.dispose()


@pytest.fixture
def stored_metadata(sqlite_url):
    """Return a function fetching the raw metadata column for a key from SQLite."""
    engine = create_engine(sqlite_url)

    def _fetch(app_id: str, database: str, table: str):
        stmt = select(trino_table_metadata.c["metadata"]).where(
            trino_table_metadata.c.app_id == app_id,
            trino_table_metadata.c.database_name == database,
            trino_table_metadata.c.table_name == table,
        )
        with engine.connect().execution_options(
                schema_translate_map={"trino_metadata": None}) as conn:
            return conn.execute(stmt).scalar_one_or_none()

    yield _fetch
    engine.dispose()


@pytest.fixture
def caplog_warnings(caplog, propagate_logs):
    caplog.set_level(logging.WARNING, logger="table_metadata")
    return caplog
