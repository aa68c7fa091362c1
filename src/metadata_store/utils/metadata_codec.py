"""
Metadata Codec
==============

JSON (de)serialization of TableMetadata documents for the relational store.

Quote marker contract:
    Type strings such as ROW("a" VARCHAR) contain double quotes. Callers store
    them with each '"' replaced by the marker '@' (see escape()). encode() writes
    the document as-is; decode() turns every '@' back into '"'.

Usage:
    codec = MetadataCodec()
    text = codec.encode(codec.escape(document))
    document = codec.decode(text)
"""

import json
from dataclasses import replace
from typing import Any, Mapping, Union

from ..models.table_metadata import FieldDescriptor, TableMetadata

QUOTE = '"'
QUOTE_MARKER = '@'


class CodecError(Exception):
    """Raised when a metadata document can't be encoded or decoded."""
    pass


def as_table_metadata(document: Union[TableMetadata, Mapping[str, Any]]) -> TableMetadata:
    if isinstance(document, TableMetadata):
        fields = document.fields
        if not isinstance(fields, list) or not all(isinstance(f, FieldDescriptor) for f in fields):
            raise CodecError(f"Invalid metadata document: fields of table '{document.table}' "
                             f"must be a list of FieldDescriptor")
        return document
    try:
        return TableMetadata.from_dict(document)
    except (KeyError, TypeError, AttributeError) as e:
        raise CodecError(f"Invalid metadata document: {type(e).__name__}: {e}") from e


class MetadataCodec:
    """Stateless encoder/decoder; safe to share between threads."""

    def encode(self, document: Union[TableMetadata, Mapping[str, Any]]) -> str:
        """
        Serialize a document to JSON.

        Args:
            document: TableMetadata or plain {"table", "fields"} mapping

        Returns:
            JSON string, fields in document order

        Raises:
            CodecError: If the document is malformed or not serializable
        """
        metadata = as_table_metadata(document)
        try:
            return json.dumps(metadata.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError, AttributeError) as e:
            raise CodecError(f"Failed to serialize metadata for table '{metadata.table}': {e}") from e

    def decode(self, text: str) -> TableMetadata:
        """
        Deserialize JSON into a TableMetadata, turning quote markers back into quotes.

        Raises:
            CodecError: On malformed JSON or a document missing required keys
        """
        try:
            raw = json.loads(text)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Malformed metadata JSON: {e}") from e

        if not isinstance(raw, Mapping):
            raise CodecError(f"Metadata JSON must be an object, got {type(raw).__name__}")

        metadata = as_table_metadata(raw)
        if not isinstance(metadata.table, str) or any(
                not isinstance(f.type, str) for f in metadata.fields):
            raise CodecError("Metadata 'table' and field 'type' values must be strings")

        return TableMetadata(
            table=metadata.table,
            fields=[replace(f, type=unescape_type(f.type)) for f in metadata.fields],
        )

    def escape(self, document: Union[TableMetadata, Mapping[str, Any]]) -> TableMetadata:
        """Copy of the document with every quote in field types replaced by the marker."""
        metadata = as_table_metadata(document)
        return TableMetadata(
            table=metadata.table,
            fields=[replace(f, type=escape_type(f.type)) for f in metadata.fields],
        )


def escape_type(type_name: str) -> str:
    """ROW("a" VARCHAR) -> ROW(@a@ VARCHAR)"""
    return type_name.replace(QUOTE, QUOTE_MARKER)


def unescape_type(type_name: str) -> str:
    """ROW(@a@ VARCHAR) -> ROW("a" VARCHAR)"""
    return type_name.replace(QUOTE_MARKER, QUOTE)
