"""
Table Metadata Store - Table Metadata Models
Composite key and column-description document stored per data-source table.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple


class TableKey(NamedTuple):
    """
    Identity of one table's metadata document.

    Compared and hashed structurally, so components containing '-' can't collide.
    """
    app_id: str
    database: str
    table: str

    @property
    def token(self) -> str:
        """Legacy 'app-database-table' string, for log context only."""
        return f"{self.app_id}-{self.database}-{self.table}"


@dataclass
class FieldDescriptor:
    """One column of a table."""
    name: str
    type: str
    hidden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "hidden": self.hidden}


@dataclass
class TableMetadata:
    """
    Metadata document for a table.

    Field order is column order and is preserved through storage.
    """
    table: str
    fields: List[FieldDescriptor] = field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        """Plain document form: {"table": ..., "fields": [{name, type, hidden}, ...]}."""
        return {
            "table": self.table,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> 'TableMetadata':
        """
        Build from the plain document form.

        Raises:
            KeyError: If 'table', 'fields' or a field's 'name'/'type' is missing
            TypeError: If 'fields' is not a sequence of mappings or 'hidden' is not a boolean
        """
        fields = document["fields"]
        if isinstance(fields, (str, bytes, Mapping)) or not isinstance(fields, (list, tuple)):
            raise TypeError(f"'fields' must be a list, got {type(fields).__name__}")
        return cls(table=document["table"], fields=[_field_from_dict(f) for f in fields])


def _field_from_dict(document: Mapping[str, Any]) -> FieldDescriptor:
    hidden = document.get("hidden", False)
    if not isinstance(hidden, bool):
        raise TypeError(f"'hidden' of field '{document['name']}' must be a boolean, "
                        f"got {type(hidden).__name__}")
    return FieldDescriptor(name=document["name"], type=document["type"], hidden=hidden)
