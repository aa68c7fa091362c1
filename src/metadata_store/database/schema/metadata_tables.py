"""
Table Metadata Tables
=====================

One row per (app_id, database_name, table_name) holding the JSON-encoded
column description of that table.

Database: MySQL/MariaDB (PostgreSQL and SQLite also work for the same statements)
"""

from sqlalchemy import Table, Column, String, Text
from sqlalchemy.dialects import mysql

from .metadata import metadata

# Logical schema name; remapped per connection via schema_translate_map
METADATA_SCHEMA = "trino_metadata"
METADATA_TABLE = "trino_table_metadata"


# =============================================================================
# TRINO_TABLE_METADATA TABLE
# =============================================================================
# Key columns for queries:
#   - app_id, database_name, table_name: composite primary key (point lookups)
#   - database_type: stored on insert, not part of the lookup
#   - metadata: JSON document, overwritten on conflicting insert
# =============================================================================

trino_table_metadata = Table(
    METADATA_TABLE,
    metadata,
    Column("app_id", String(255), primary_key=True, nullable=False),
    Column("database_name", String(255), primary_key=True, nullable=False),
    Column("table_name", String(255), primary_key=True, nullable=False),
    Column("database_type", String(255), nullable=False),
    Column("metadata", Text().with_variant(mysql.LONGTEXT(), "mysql", "mariadb"), nullable=False),
    schema=METADATA_SCHEMA,
    mysql_engine="InnoDB",
    mysql_charset="utf8mb4",
)
