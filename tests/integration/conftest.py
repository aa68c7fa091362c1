"""
Integration test fixtures and configuration.

Provides MySQL fixtures for integration testing of the relational store.

Tests are skipped unless these environment variables are set:
- TEST_DB_HOST
- TEST_DB_USER
- TEST_DB_PASSWORD
- TEST_DB_PORT (optional, default 3306)
- TEST_DB_SCHEMA (optional, default trino_metadata_test)

Rows written by a test are deleted afterwards; the metadata database
itself is created by the code under test and left in place.
"""

import os
import uuid

import pytest
from sqlalchemy import create_engine, delete

from metadata_store.database.schema import trino_table_metadata
from metadata_store.extension.settings import ExtensionSettings

REQUIRED_VARS = ['TEST_DB_HOST', 'TEST_DB_USER', 'TEST_DB_PASSWORD']


def get_mysql_settings() -> ExtensionSettings:
    """
    Build active ExtensionSettings from TEST_DB_* environment variables.

    Raises:
        ValueError: If required environment variables are not set
    """
    missing_vars = [var for var in REQUIRED_VARS if os.getenv(var) is None]

    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_vars)}. "
            "Set these before running integration tests."
        )

    host = os.getenv('TEST_DB_HOST')
    port = os.getenv('TEST_DB_PORT', '3306')

    return ExtensionSettings(
        active=True,
        url=f"mysql://{host}:{port}/",
        user=os.getenv('TEST_DB_USER'),
        password=os.getenv('TEST_DB_PASSWORD'),
        driver="mysql+pymysql",
        schema=os.getenv('TEST_DB_SCHEMA', 'trino_metadata_test'),
    )


@pytest.fixture(scope='session')
def mysql_settings():
    """Session-wide MySQL settings; skips the integration suite when unconfigured."""
    try:
        return get_mysql_settings()
    except ValueError as e:
        pytest.skip(str(e))


@pytest.fixture
def app_id():
    """Unique application id so concurrent runs never share rows."""
    return f"it-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def mysql_rows(mysql_settings, app_id):
    """
    Engine scoped to the test schema; deletes this test's rows on teardown.

    Yields:
        SQLAlchemy connection with the metadata schema translated
    """
    engine = create_engine(mysql_settings.connection_url())
    conn = engine.connect().execution_options(
        schema_translate_map={"trino_metadata": mysql_settings.schema}
    )

    yield conn

    conn.rollback()
    try:
        conn.execute(delete(trino_table_metadata).where(trino_table_metadata.c.app_id == app_id))
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
        engine.dispose()
