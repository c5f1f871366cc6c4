"""Group performance comparison: group selection and chart series."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from data.models.closeout import HomeCloseout

logger = logging.getLogger(__name__)

CHART_TITLE = 'Group Performance Comparison'
CHART_TYPES = ('bar', 'line')
PRIMARY_AXIS_TITLE = 'Feed / Conversion'
SECONDARY_AXIS_TITLE = 'Daily Gain (lbs)'


@dataclass(frozen=True)
class PerformanceMetric:
    key: str
    label: str
    field: str
    axis: str
    color: str
    toggle_label: str


METRICS: Tuple[PerformanceMetric, ...] = (
    PerformanceMetric('avg_daily_feed', 'Avg Daily Feed (lbs)',
                      'ave_feed_intake_per_hd_per_day_deads_out', 'y', 'rgb(59, 130, 246)', 'Avg Daily Feed'),
    PerformanceMetric('feed_conversion', 'Feed Conversion',
                      'dm_feed_per_gain_deads_out', 'y', 'rgb(239, 68, 68)', 'Feed Conversion'),
    PerformanceMetric('avg_daily_gain', 'Avg Daily Gain (lbs)',
                      'adg_deads_out', 'y1', 'rgb(34, 197, 94)', 'Avg Daily Gain'),
)

METRICS_BY_KEY: Dict[str, PerformanceMetric] = {metric.key: metric for metric in METRICS}


@dataclass(frozen=True)
class ChartSeries:
    label: str
    values: List[Optional[float]]
    axis: str
    color: str


def available_groups(closeouts: Iterable[HomeCloseout]) -> List[HomeCloseout]:
    """Groups with a lot, a purchase date and some performance data, newest first."""
    groups = [c for c in closeouts if c.has_performance_data]
    return sorted(groups, key=lambda c: c.purchase_date, reverse=True)


def search_groups(groups: Sequence[HomeCloseout], search: str) -> List[HomeCloseout]:
    term = (search or '').lower()
    return [
        g for g in groups
        if term in (g.lot or '').lower() or term in (g.origin or '').lower()
    ]


def recent_group_ids(groups: Sequence[HomeCloseout], count: int) -> List[int]:
    return [g.id for g in groups[:count]]


def selected_in_date_order(groups: Sequence[HomeCloseout], selected_ids: Iterable[int]) -> List[HomeCloseout]:
    """Selected groups, oldest purchase first (the chart's x-axis order)."""
    wanted = set(selected_ids)
    chosen = [g for g in groups if g.id in wanted]
    return sorted(chosen, key=lambda g: g.purchase_date)


def build_series(groups: Sequence[HomeCloseout], visible_metrics: Dict[str, bool]) -> Tuple[List[str], List[ChartSeries]]:
    """Chart labels (lot names) and one series per visible metric.

    Args:
        groups: Selected groups in chart order
        visible_metrics: Metric key -> shown

    Returns:
        Tuple of (labels, series)
    """
    labels = [g.lot for g in groups]
    series = [
        ChartSeries(
            label=metric.label,
            values=[getattr(g, metric.field) for g in groups],
            axis=metric.axis,
            color=metric.color,
        )
        for metric in METRICS
        if visible_metrics.get(metric.key, False)
    ]
    logger.debug(f"Built {len(series)} performance series for {len(groups)} groups")
    return labels, series


def format_metric(value: Optional[float]) -> str:
    """Two-decimal metric for the selected-groups table ("-" when missing)."""
    if value is None:
        return '-'
    return f"{value:.2f}"
