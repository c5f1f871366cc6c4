"""Cattle-by-pen assignment model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from .base import RecordModel

Number = Union[int, float]


@dataclass
class GroupByPen(RecordModel):
    """How many head of a group are standing in a pen."""
    id: Optional[int] = None
    group_name: Optional[str] = None
    pen_name: Optional[str] = None
    head: Optional[Number] = None
    created_at: Optional[datetime] = None

    FIELD_TYPES = {
        'id': 'number',
        'group_name': 'text',
        'pen_name': 'text',
        'head': 'number',
        'created_at': 'datetime',
    }

    @property
    def is_empty(self) -> bool:
        """A row with neither a group nor a pen name carries nothing to store."""
        return not self.group_name and not self.pen_name
