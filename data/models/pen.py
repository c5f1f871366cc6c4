"""Pen data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union
import logging

from .base import RecordModel

logger = logging.getLogger(__name__)

Number = Union[int, float]


class PenType(str, Enum):
    NOT_APPLICABLE = "N/A"
    OPEN_LOT = "Open Lot"
    LOT_WITH_SHED = "Lot with Shed"
    CONFINEMENT = "Confinement"

    @classmethod
    def choices(cls):
        return [member.value for member in cls]


DEFAULT_PEN_TYPE = PenType.OPEN_LOT


@dataclass
class Pen(RecordModel):
    """A physical pen at the feedlot."""
    id: Optional[int] = None
    pen_name: Optional[str] = None
    pen_square_feet: Optional[Number] = None
    pen_type: Optional[Union[PenType, str]] = None
    bunk_space_ft: Optional[Number] = None
    pre_ship: bool = False
    created_at: Optional[datetime] = None

    FIELD_TYPES = {
        'id': 'number',
        'pen_name': 'text',
        'pen_square_feet': 'number',
        'bunk_space_ft': 'number',
        'pre_ship': 'bool',
        'created_at': 'datetime',
    }

    def __post_init__(self):
        super().__post_init__()
        if self.pen_type is not None and not isinstance(self.pen_type, PenType):
            try:
                self.pen_type = PenType(str(self.pen_type).strip())
            except ValueError:
                # Unknown types from older rows are kept as plain text
                logger.warning(f"Unknown pen type '{self.pen_type}' on pen {self.pen_name}")

    @property
    def pen_type_label(self) -> str:
        if isinstance(self.pen_type, PenType):
            return self.pen_type.value
        return self.pen_type or "-"
