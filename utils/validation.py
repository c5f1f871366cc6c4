"""Record validation rules for the feedlot tables."""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Pattern as RegexPattern, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pattern:
    regex: Union[str, RegexPattern]
    message: str

    def matches(self, value: str) -> bool:
        return re.search(self.regex, value) is not None


@dataclass(frozen=True)
class ValidationRule:
    """Constraints for one field. Unset constraints are not checked."""
    required: bool = False
    max_length: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[Pattern] = None


ValidationRules = Dict[str, ValidationRule]


def _is_empty(value: Any) -> bool:
    return value is None or value == ''


def _as_number(value: Any) -> float:
    """Numeric value for range checks; NaN when the value is not numeric.

    NaN never compares below a minimum or above a maximum, so non-numeric
    values pass range checks.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def validate(record: Any, rules: ValidationRules) -> Optional[str]:
    """
    Check a record against rules in declaration order.

    Args:
        record: Mapping of field -> value (form input) or a record model
        rules: Field name -> ValidationRule

    Returns:
        Message for the first violation found, or None when the record is valid
    """
    for field, rule in rules.items():
        value = _field_value(record, field)
        label = field.replace('_', ' ')

        if rule.required and _is_empty(value):
            return f"{label} is required"

        if _is_empty(value):
            continue

        if rule.max_length is not None and isinstance(value, str) and len(value) > rule.max_length:
            return f"{label} must be at most {rule.max_length} characters"

        if rule.min is not None and _as_number(value) < rule.min:
            return f"{label} must be at least {rule.min}"

        if rule.max is not None and _as_number(value) > rule.max:
            return f"{label} must be at most {rule.max}"

        if rule.pattern is not None and isinstance(value, str) and not rule.pattern.matches(value):
            return rule.pattern.message

    return None


HOME_CLOSEOUT_RULES: ValidationRules = {
    'lot': ValidationRule(required=True, max_length=50),
    'purchase_date': ValidationRule(required=True),
    'hd_purchased': ValidationRule(min=0, max=100000),
    'purchase_wgt': ValidationRule(min=0, max=5000),
    'purchase_price_per_cwt': ValidationRule(min=0, max=10000),
    'hd_sold': ValidationRule(min=0, max=100000),
    'died': ValidationRule(min=0, max=100000),
}

PEN_RULES: ValidationRules = {
    'pen_name': ValidationRule(required=True, max_length=50),
    'pen_square_feet': ValidationRule(min=0, max=10000000),
    'bunk_space_ft': ValidationRule(min=0, max=999),
}

GROUP_BY_PEN_RULES: ValidationRules = {
    'group_name': ValidationRule(max_length=100),
    'pen_name': ValidationRule(max_length=100),
    'head': ValidationRule(min=0, max=100000),
}

HEDGING_RULES: ValidationRules = {
    'positions': ValidationRule(min=0, max=100000),
}


PRE_SHIP_NAME_ERROR = 'Pre-Ship pens cannot have a name starting with "B"'
BROCKOFF_LOT_ERROR = 'Brockoff lot names must start with "B"'


def check_pre_ship_name(pen_name: Optional[str], pre_ship: bool) -> Optional[str]:
    """Pre-ship pens may not use a "B" name (any case); those are reserved for Brockoff."""
    if pre_ship and (pen_name or '').upper().startswith('B'):
        logger.debug(f"Rejected pre-ship pen name '{pen_name}'")
        return PRE_SHIP_NAME_ERROR
    return None


def check_brockoff_lot(lot: Optional[str]) -> Optional[str]:
    """Brockoff lots must start with an uppercase "B"."""
    if not (lot or '').startswith('B'):
        return BROCKOFF_LOT_ERROR
    return None
