"""Shared behaviour for the typed table records."""

from __future__ import annotations

from dataclasses import fields as dataclass_fields
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple

from ..repositories.field_mapper import TypeTransformers, convert_value


class RecordModel:
    """Mixin for dataclass records stored in a Supabase table.

    Subclasses declare ``FIELD_TYPES`` (field name -> converter kind) and get
    coercion on construction plus conversion to and from database rows.
    """

    FIELD_TYPES: ClassVar[Dict[str, str]] = {}
    READ_ONLY_FIELDS: ClassVar[Tuple[str, ...]] = ('id', 'created_at')

    def __post_init__(self):
        """Coerce raw values (form strings, JSON numbers, ISO dates) to field types."""
        for name, kind in self.FIELD_TYPES.items():
            setattr(self, name, convert_value(getattr(self, name), kind))

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in dataclass_fields(cls))

    @classmethod
    def from_row(cls, row: Dict[str, Any]):
        """Create a record from a database row, ignoring unknown columns.

        Args:
            row: Mapping returned by the REST API

        Returns:
            Record instance
        """
        known = set(cls.field_names())
        return cls(**{key: value for key, value in row.items() if key in known})

    def to_payload(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary for insert/update calls.

        Read-only columns (``id``, ``created_at``) are left out so the
        database assigns them.

        Args:
            fields: Optional subset of fields to include

        Returns:
            Dictionary of column -> value
        """
        names = list(fields) if fields is not None else list(self.field_names())
        return {
            name: TypeTransformers.to_db_value(getattr(self, name))
            for name in names
            if name not in self.READ_ONLY_FIELDS
        }

    def to_dict(self) -> Dict[str, Any]:
        """All fields including read-only ones, JSON-ready."""
        return {name: TypeTransformers.to_db_value(getattr(self, name)) for name in self.field_names()}

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)
