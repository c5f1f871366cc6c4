"""Home closeout (cattle group) data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from .base import RecordModel

Number = Union[int, float]

BROCKOFF_PREFIX = "B"

PERFORMANCE_METRIC_FIELDS = (
    'ave_feed_intake_per_hd_per_day_deads_out',
    'dm_feed_per_gain_deads_out',
    'adg_deads_out',
)

_TEXT_FIELDS = ('sort1', 'sort2', 'origin', 'lot', 'notes_on_group')
_DATE_FIELDS = ('purchase_date', 'processing_date')


@dataclass
class HomeCloseout(RecordModel):
    """One group of cattle from purchase through closeout.

    Lots whose name starts with "B" are Brockoff groups; every other lot,
    including one with no name, is a home group.
    """
    id: Optional[int] = None
    sort1: Optional[str] = None
    sort2: Optional[str] = None
    origin: Optional[str] = None
    lot: Optional[str] = None
    purchase_date: Optional[date] = None
    processing_date: Optional[date] = None
    hd_purchased: Optional[Number] = None
    hd_sold: Optional[Number] = None
    died: Optional[Number] = None
    death_loss: Optional[Number] = None
    cattle_on_feed: Optional[Number] = None
    purchase_wgt: Optional[Number] = None
    pb_initial_wgt: Optional[Number] = None
    purchase_price_per_cwt: Optional[Number] = None
    ave_dof_deads_out: Optional[Number] = None
    sold_wgt_deads_out: Optional[Number] = None
    pb_sold_wgt: Optional[Number] = None
    dm_per_hd_per_day_deads_out: Optional[Number] = None
    ave_feed_intake_per_hd_per_day_deads_out: Optional[Number] = None
    adg_deads_out: Optional[Number] = None
    dm_feed_per_gain_deads_out: Optional[Number] = None
    feed_cost_per_gain_deads_out: Optional[Number] = None
    cog_deads_in: Optional[Number] = None
    cog_deads_out: Optional[Number] = None
    dm_cost_per_ton: Optional[Number] = None
    sold_price_per_cwt: Optional[Number] = None
    vet_med_per_hd_deads_in: Optional[Number] = None
    trucking_per_cwt_deads_in: Optional[Number] = None
    profit_loss_per_hd_deads_in: Optional[Number] = None
    profit_loss_per_hd_deads_out: Optional[Number] = None
    corrected_purchase_price: Optional[Number] = None
    notes_on_group: Optional[str] = None
    profit_loss_group_deads_in: Optional[Number] = None
    hedge_profit_loss: Optional[Number] = None
    created_at: Optional[datetime] = None

    @property
    def is_brockoff(self) -> bool:
        return bool(self.lot) and self.lot.startswith(BROCKOFF_PREFIX)

    @property
    def is_home(self) -> bool:
        return not self.is_brockoff

    @property
    def head_out(self) -> Number:
        """Head that have left the group (dead or sold); missing counts are 0."""
        return (self.died or 0) + (self.hd_sold or 0)

    @property
    def is_active(self) -> bool:
        """A group is still on feed while dead + sold is below head purchased.

        Once they are equal the group is closed out.
        """
        if not self.purchase_date:
            return False
        return self.head_out < (self.hd_purchased or 0)

    @property
    def has_performance_data(self) -> bool:
        if not (self.purchase_date and self.lot):
            return False
        # A zero metric counts as missing
        return any(getattr(self, name) for name in PERFORMANCE_METRIC_FIELDS)


HomeCloseout.FIELD_TYPES = {
    name: (
        'text' if name in _TEXT_FIELDS
        else 'date' if name in _DATE_FIELDS
        else 'datetime' if name == 'created_at'
        else 'number'
    )
    for name in HomeCloseout.field_names()
}
