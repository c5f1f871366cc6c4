"""Futures hedging position model and futures-month helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union
import logging

from .base import RecordModel
from ..repositories.field_mapper import TypeTransformers

logger = logging.getLogger(__name__)

Number = Union[int, float]

MONTH_ABBREVIATIONS = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)


class CattleType(str, Enum):
    FEEDER = "Feeder Cattle"
    LIVE = "Live Cattle"

    @classmethod
    def choices(cls):
        return [member.value for member in cls]


def first_of_month(value: Any) -> Optional[date]:
    """Normalise a date-like value to the first day of its month."""
    parsed = TypeTransformers.to_date(value)
    if parsed is None:
        return None
    return parsed.replace(day=1)


def futures_month_from_input(value: str) -> Optional[date]:
    """Parse a month input ("2025-03") into the stored date (2025-03-01).

    Full dates are accepted as well and moved to the first of the month.
    """
    if TypeTransformers.is_blank(value):
        return None
    text = str(value).strip()
    if len(text) == 7:
        text = f"{text}-01"
    return first_of_month(text)


def futures_month_from_parts(month: Any, year: Any) -> Optional[date]:
    """Build the stored futures month from separate month (1-12) and year inputs."""
    if TypeTransformers.is_blank(month) or TypeTransformers.is_blank(year):
        return None
    try:
        return date(int(year), int(month), 1)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid futures month {month}/{year}: {e}")
        return None


def format_futures_month(value: Any) -> str:
    """Display a futures month as the contract code style "Jan25"."""
    parsed = TypeTransformers.to_date(value)
    if parsed is None:
        return '-'
    return f"{MONTH_ABBREVIATIONS[parsed.month - 1]}{parsed.year % 100:02d}"


def month_input_value(value: Any) -> str:
    """Render a stored futures month back into "YYYY-MM" for a month input."""
    parsed = TypeTransformers.to_date(value)
    if parsed is None:
        return ''
    return f"{parsed.year:04d}-{parsed.month:02d}"


@dataclass
class HedgingRecord(RecordModel):
    """Open futures positions for one contract month."""
    id: Optional[int] = None
    cattle_type: Optional[Union[CattleType, str]] = None
    futures_month: Optional[date] = None
    positions: Optional[Number] = None
    created_at: Optional[datetime] = None

    FIELD_TYPES = {
        'id': 'number',
        'futures_month': 'date',
        'positions': 'number',
        'created_at': 'datetime',
    }

    def __post_init__(self):
        super().__post_init__()
        if self.futures_month is not None:
            self.futures_month = self.futures_month.replace(day=1)
        if self.cattle_type is not None and not isinstance(self.cattle_type, CattleType):
            try:
                self.cattle_type = CattleType(str(self.cattle_type).strip())
            except ValueError:
                logger.warning(f"Unknown cattle type '{self.cattle_type}' on hedging row {self.id}")

    @property
    def is_feeder(self) -> bool:
        return self.cattle_type == CattleType.FEEDER

    @property
    def is_live(self) -> bool:
        return self.cattle_type == CattleType.LIVE

    @property
    def month_label(self) -> str:
        return format_futures_month(self.futures_month)
