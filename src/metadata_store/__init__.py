"""
Table Metadata Store
Caches and persists per-table column metadata for data-source connectors.

Package layout:
- utils/       configuration, logging, in-memory cache, JSON codec
- models/      TableKey, FieldDescriptor, TableMetadata
- database/    connection scope, table definition, repository
- extension/   activation settings and the public handler
"""

__version__ = "0.1.0"
