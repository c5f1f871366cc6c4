"""Data models for the feedlot records app.

Each model mirrors one Supabase table and converts to and from the plain
row mappings exchanged with the REST API.
"""

from .base import RecordModel
from .closeout import HomeCloseout
from .pen import Pen, PenType, DEFAULT_PEN_TYPE
from .group_by_pen import GroupByPen
from .hedging import (
    CattleType,
    HedgingRecord,
    format_futures_month,
    futures_month_from_input,
    futures_month_from_parts,
)

__all__ = [
    'RecordModel',
    'HomeCloseout',
    'Pen',
    'PenType',
    'DEFAULT_PEN_TYPE',
    'GroupByPen',
    'CattleType',
    'HedgingRecord',
    'format_futures_month',
    'futures_month_from_input',
    'futures_month_from_parts',
]
