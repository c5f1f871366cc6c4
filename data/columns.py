"""Column registry for the closeout screens.

Every column of ``home_closeouts`` is listed once with its display label,
display type and editability. Screens pick named subsets of keys for their
forms and tables and use ``format_value`` to render cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence
import logging

from config.constants import NOTE_PREVIEW_LENGTH
from data.repositories.field_mapper import TypeTransformers

logger = logging.getLogger(__name__)

COLUMN_TYPES = ('text', 'number', 'currency', 'date', 'datetime')


@dataclass(frozen=True)
class ColumnDef:
    key: str
    label: str
    type: str = 'text'
    editable: bool = True


ALL_COLUMNS: List[ColumnDef] = [
    ColumnDef('id', 'ID', 'number', editable=False),
    ColumnDef('sort1', 'Sort 1', 'text'),
    ColumnDef('sort2', 'Sort 2', 'text'),
    ColumnDef('origin', 'Origin', 'text'),
    ColumnDef('lot', 'Lot', 'text'),
    ColumnDef('purchase_date', 'Purchase Date', 'date'),
    ColumnDef('processing_date', 'Processing Date', 'date'),
    ColumnDef('hd_purchased', 'HD Purchased', 'number'),
    ColumnDef('hd_sold', 'HD Sold', 'number'),
    ColumnDef('died', 'Died', 'number'),
    ColumnDef('death_loss', 'Death Loss %', 'number'),
    ColumnDef('cattle_on_feed', 'Cattle on Feed', 'number'),
    ColumnDef('purchase_wgt', 'Purchase Wgt', 'number'),
    ColumnDef('pb_initial_wgt', 'PB Initial Wgt', 'number'),
    ColumnDef('purchase_price_per_cwt', 'Purchase $/CWT', 'currency'),
    ColumnDef('ave_dof_deads_out', 'Ave DOF (Deads Out)', 'number'),
    ColumnDef('sold_wgt_deads_out', 'Sold Wgt (Deads Out)', 'number'),
    ColumnDef('pb_sold_wgt', 'PB Sold Wgt', 'number'),
    ColumnDef('dm_per_hd_per_day_deads_out', 'DM/HD/Day (Deads Out)', 'number'),
    ColumnDef('ave_feed_intake_per_hd_per_day_deads_out', 'Ave Feed Intake/HD/Day', 'number'),
    ColumnDef('adg_deads_out', 'ADG (Deads Out)', 'number'),
    ColumnDef('dm_feed_per_gain_deads_out', 'DM Feed/Gain (Deads Out)', 'number'),
    ColumnDef('feed_cost_per_gain_deads_out', 'Feed Cost/Gain (Deads Out)', 'currency'),
    ColumnDef('cog_deads_in', 'COG (Deads In)', 'currency'),
    ColumnDef('cog_deads_out', 'COG (Deads Out)', 'currency'),
    ColumnDef('dm_cost_per_ton', 'DM Cost/Ton', 'currency'),
    ColumnDef('sold_price_per_cwt', 'Sold $/CWT', 'currency'),
    ColumnDef('vet_med_per_hd_deads_in', 'Vet/Med/HD (Deads In)', 'currency'),
    ColumnDef('trucking_per_cwt_deads_in', 'Trucking/CWT (Deads In)', 'currency'),
    ColumnDef('profit_loss_per_hd_deads_in', 'P/L per HD (Deads In)', 'currency'),
    ColumnDef('profit_loss_per_hd_deads_out', 'P/L per HD (Deads Out)', 'currency'),
    ColumnDef('corrected_purchase_price', 'Corrected Purchase Price', 'currency'),
    ColumnDef('notes_on_group', 'Notes', 'text'),
    ColumnDef('profit_loss_group_deads_in', 'P/L Group (Deads In)', 'currency'),
    ColumnDef('hedge_profit_loss', 'Hedge P/L', 'currency'),
    ColumnDef('created_at', 'Created At', 'datetime', editable=False),
]

_COLUMNS_BY_KEY: Dict[str, ColumnDef] = {col.key: col for col in ALL_COLUMNS}

NEW_GROUP_FIELDS = ['lot', 'purchase_date', 'hd_purchased', 'purchase_wgt', 'purchase_price_per_cwt']
NEW_GROUP_TABLE_COLUMNS = ['lot', 'purchase_date', 'hd_purchased', 'purchase_wgt', 'purchase_price_per_cwt']
KEY_DETAILS_FIELDS = [
    'lot', 'purchase_date', 'hd_purchased', 'purchase_wgt', 'purchase_price_per_cwt',
    'origin', 'died', 'hd_sold', 'trucking_per_cwt_deads_in', 'vet_med_per_hd_deads_in',
    'dm_cost_per_ton', 'notes_on_group',
]
KEY_DETAILS_TABLE_COLUMNS = ['lot', 'purchase_date', 'hd_purchased', 'origin', 'died', 'hd_sold', 'notes_on_group']
ALL_DETAILS_TABLE_COLUMNS = [
    'lot', 'origin', 'purchase_date', 'hd_purchased', 'hd_sold',
    'purchase_wgt', 'sold_wgt_deads_out', 'profit_loss_per_hd_deads_out',
]
EDITABLE_FIELDS = [col.key for col in ALL_COLUMNS if col.editable]

NOTES_COLUMN = 'notes_on_group'

# Column sets for the non-closeout tables: key -> (label, type)
PEN_COLUMNS: List[ColumnDef] = [
    ColumnDef('pen_name', 'Pen Name', 'text'),
    ColumnDef('pen_square_feet', 'Sq Foot', 'number'),
    ColumnDef('pen_type', 'Pen Type', 'text'),
    ColumnDef('bunk_space_ft', 'Bunk Space (ft)', 'number'),
    ColumnDef('pre_ship', 'Pre-Ship', 'text'),
]
GROUP_BY_PEN_COLUMNS: List[ColumnDef] = [
    ColumnDef('group_name', 'Group Name', 'text'),
    ColumnDef('pen_name', 'Pen Name', 'text'),
    ColumnDef('head', 'Head', 'number'),
]
HEDGING_COLUMNS: List[ColumnDef] = [
    ColumnDef('futures_month', 'Futures Month', 'text'),
    ColumnDef('positions', 'Positions', 'number'),
]


def get_column(key: str) -> Optional[ColumnDef]:
    return _COLUMNS_BY_KEY.get(key)


def label_for(key: str, columns: Optional[Sequence[ColumnDef]] = None) -> str:
    """Display label for ``key``; falls back to the key itself."""
    if columns is not None:
        for col in columns:
            if col.key == key:
                return col.label
        return key
    col = get_column(key)
    return col.label if col else key


def columns_for(keys: Sequence[str]) -> List[ColumnDef]:
    """Resolve keys to column definitions, keeping order and skipping unknown keys."""
    resolved = []
    for key in keys:
        col = get_column(key)
        if col is None:
            logger.warning(f"Unknown column key '{key}'")
            continue
        resolved.append(col)
    return resolved


def _format_number(value: Any) -> str:
    number = TypeTransformers.to_number(value)
    if number is None:
        return str(value)
    text = f"{number:,.2f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def _format_date(value: Any) -> str:
    parsed = TypeTransformers.to_date(value)
    return parsed.strftime('%m/%d/%Y') if parsed else '-'


def _format_datetime(value: Any) -> str:
    parsed = TypeTransformers.to_datetime(value)
    if parsed is None:
        return '-'
    if parsed.tzinfo is not None:
        from utils.timezone_utils import to_display_timezone
        parsed = to_display_timezone(parsed)
    return parsed.strftime('%m/%d/%Y, %I:%M:%S %p')


def format_value(value: Any, column_type: Optional[str] = None) -> str:
    """Render a cell value for display.

    Args:
        value: Raw value from the record
        column_type: One of ``COLUMN_TYPES``; unknown types render as text

    Returns:
        Display string ("-" for missing values)
    """
    if value is None:
        return '-'
    if column_type == 'currency':
        number = TypeTransformers.to_number(value)
        return f"${number:.2f}" if number is not None else str(value)
    if column_type == 'date':
        return _format_date(value) if value != '' else '-'
    if column_type == 'datetime':
        return _format_datetime(value) if value != '' else '-'
    if column_type == 'number':
        return _format_number(value)
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def format_date_for_input(value: Any) -> str:
    """ISO ``YYYY-MM-DD`` for a date input, or an empty string."""
    if not value:
        return ''
    parsed = TypeTransformers.to_date(value)
    return parsed.isoformat() if parsed else ''


def truncate_note(text: Optional[str], length: int = NOTE_PREVIEW_LENGTH) -> str:
    """Shorten a note for table display, "-" when there is none."""
    text = text or ''
    if len(text) > length:
        return text[:length] + '...'
    return text or '-'
