"""Field mapping utilities for converting between record models and database rows."""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union
import logging

logger = logging.getLogger(__name__)

Number = Union[int, float]

_TRUE_STRINGS = {'true', 't', 'yes', 'y', '1'}
_FALSE_STRINGS = {'false', 'f', 'no', 'n', '0', ''}


class TypeTransformers:
    """Type conversion utilities."""

    @staticmethod
    def is_blank(value: Any) -> bool:
        """True for None, empty/whitespace strings and 'nan'/'none' markers."""
        if value is None:
            return True
        if isinstance(value, float) and math.isnan(value):
            return True
        if isinstance(value, str):
            stripped = value.strip()
            return not stripped or stripped.lower() in ('nan', 'none', 'null')
        return False

    @staticmethod
    def to_text(value: Any) -> Optional[str]:
        if TypeTransformers.is_blank(value):
            return None
        return str(value).strip()

    @staticmethod
    def to_number(value: Any) -> Optional[Number]:
        """Convert to int when integral, float otherwise.

        Thousands separators and currency symbols from pasted spreadsheets
        are accepted. Unparseable values become None.
        """
        if TypeTransformers.is_blank(value) or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            if isinstance(value, str):
                value = value.strip().replace(',', '').replace('$', '')
            number = float(value)
        except (ValueError, TypeError):
            logger.debug(f"Could not convert '{value}' to a number")
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return int(number) if number.is_integer() else number

    @staticmethod
    def to_date(value: Any) -> Optional[date]:
        if TypeTransformers.is_blank(value):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            text = str(value).strip()
            if len(text) > 10:
                return TypeTransformers.iso_to_datetime(text).date()
            return date.fromisoformat(text)
        except ValueError as e:
            logger.error(f"Failed to parse date '{value}': {e}")
            return None

    @staticmethod
    def iso_to_datetime(iso_string: str) -> datetime:
        """Convert ISO format string to datetime object."""
        return datetime.fromisoformat(iso_string.replace('Z', '+00:00'))

    @staticmethod
    def to_datetime(value: Any) -> Optional[datetime]:
        if TypeTransformers.is_blank(value):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        try:
            return TypeTransformers.iso_to_datetime(str(value).strip())
        except ValueError as e:
            logger.error(f"Failed to parse datetime '{value}': {e}")
            return None

    @staticmethod
    def to_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        logger.warning(f"Unrecognised boolean value '{value}', treating as False")
        return False

    @staticmethod
    def to_db_value(value: Any) -> Any:
        """Convert a model value into something the REST API accepts as JSON."""
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return value


CONVERTERS = {
    'text': TypeTransformers.to_text,
    'number': TypeTransformers.to_number,
    'date': TypeTransformers.to_date,
    'datetime': TypeTransformers.to_datetime,
    'bool': TypeTransformers.to_bool,
}


def convert_value(value: Any, kind: str) -> Any:
    """Convert a raw value using the converter registered for ``kind``."""
    return CONVERTERS[kind](value)


def row_to_payload(row: Dict[str, Any], fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Build a JSON-ready payload from a mapping, optionally limited to ``fields``."""
    keys = list(fields) if fields is not None else list(row.keys())
    return {key: TypeTransformers.to_db_value(row.get(key)) for key in keys if key in row}
