"""
Table Metadata Store - Models
"""

from .table_metadata import FieldDescriptor, TableKey, TableMetadata

__all__ = ["FieldDescriptor", "TableKey", "TableMetadata"]
