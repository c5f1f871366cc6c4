#!/usr/bin/env python3
"""
Chart utilities for the group performance page with Plotly.

Features:
- Bar or line comparison of selected groups, one trace per metric
- Daily gain on a secondary axis so it is readable next to feed figures
- Selected-groups summary table as a DataFrame
"""

from typing import List, Sequence

import pandas as pd
import plotly.graph_objs as go

from data.columns import format_value
from data.models.closeout import HomeCloseout
from utils.performance import (
    CHART_TITLE,
    PRIMARY_AXIS_TITLE,
    SECONDARY_AXIS_TITLE,
    ChartSeries,
    format_metric,
)


def _rgba(color: str, alpha: float) -> str:
    """Turn 'rgb(r, g, b)' into 'rgba(r, g, b, alpha)'."""
    if color.startswith('rgb('):
        return f"rgba({color[4:-1]}, {alpha})"
    return color


def create_performance_chart(labels: List[str], series: Sequence[ChartSeries], chart_type: str = 'bar') -> go.Figure:
    """Create the group performance comparison chart.

    Args:
        labels: Lot names in x-axis order
        series: One ChartSeries per visible metric
        chart_type: 'bar' or 'line'

    Returns:
        Plotly figure
    """
    fig = go.Figure()

    if not labels or not series:
        fig.add_annotation(
            text="No metrics selected",
            xref="paper", yref="paper",
            x=0.5, y=0.5, showarrow=False
        )

    for item in series:
        yaxis = 'y2' if item.axis == 'y1' else 'y'
        if chart_type == 'line':
            fig.add_trace(go.Scatter(
                x=labels,
                y=item.values,
                name=item.label,
                mode='lines+markers',
                line=dict(color=item.color, width=2),
                yaxis=yaxis,
                hovertemplate='%{x}<br>%{y:,.2f}<extra>' + item.label + '</extra>'
            ))
        else:
            fig.add_trace(go.Bar(
                x=labels,
                y=item.values,
                name=item.label,
                marker_color=_rgba(item.color, 0.7),
                marker_line_color=item.color,
                yaxis=yaxis,
                # Bars on the secondary axis get their own offset group
                offsetgroup=item.label,
                hovertemplate='%{x}<br>%{y:,.2f}<extra>' + item.label + '</extra>'
            ))

    fig.update_layout(
        title=CHART_TITLE,
        xaxis_title="Lot",
        yaxis=dict(title=PRIMARY_AXIS_TITLE, side='left'),
        yaxis2=dict(title=SECONDARY_AXIS_TITLE, side='right', overlaying='y', showgrid=False),
        barmode='group',
        hovermode='x unified',
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='left', x=0),
        template='plotly_white',
        height=450
    )

    return fig


def selected_groups_frame(groups: Sequence[HomeCloseout]) -> pd.DataFrame:
    """Table of the charted groups with their three metrics."""
    return pd.DataFrame([
        {
            'Lot': g.lot,
            'Purchase Date': format_value(g.purchase_date, 'date'),
            'Origin': g.origin or '-',
            'Avg Daily Feed': format_metric(g.ave_feed_intake_per_hd_per_day_deads_out),
            'Feed Conversion': format_metric(g.dm_feed_per_gain_deads_out),
            'Avg Daily Gain': format_metric(g.adg_deads_out),
        }
        for g in groups
    ], columns=['Lot', 'Purchase Date', 'Origin', 'Avg Daily Feed', 'Feed Conversion', 'Avg Daily Gain'])
