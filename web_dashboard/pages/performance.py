#!/usr/bin/env python3
"""
Performance Charts page
Compare feed, conversion and gain across selected home groups
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from chart_utils import create_performance_chart, selected_groups_frame
from config.constants import RECENT_GROUP_SELECTIONS
from data.columns import format_value
from navigation import render_navigation
from page_controllers import PerformanceController
from streamlit_utils import get_controller, init_logging, render_error_banner, render_page_header, render_search
from utils.performance import CHART_TYPES, METRICS

st.set_page_config(page_title="Performance Charts", page_icon="📊", layout="wide")
init_logging()
render_navigation()

controller = get_controller(PerformanceController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)

if controller.loading:
    st.info("Loading...")
    st.stop()

col_groups, col_chart = st.columns([1, 3])

with col_groups:
    st.subheader("Groups")
    render_search(controller, "performance", placeholder="Lot or origin")

    quick = st.columns(2 + len(RECENT_GROUP_SELECTIONS))
    if quick[0].button("All", key="perf_select_all"):
        controller.select_all()
        st.rerun()
    if quick[1].button("None", key="perf_select_none"):
        controller.select_none()
        st.rerun()
    for col, count in zip(quick[2:], RECENT_GROUP_SELECTIONS):
        if col.button(f"Last {count}", key=f"perf_recent_{count}"):
            controller.select_recent(count)
            st.rerun()

    groups = controller.filtered_groups
    if not groups:
        st.info("No groups with performance data")
    for group in groups:
        key = f"perf_group_{group.id}"
        # Widget state follows the controller so bulk selections show up
        st.session_state[key] = group.id in controller.selected_ids
        st.checkbox(
            f"{group.lot} ({format_value(group.purchase_date, 'date')})",
            key=key, on_change=controller.toggle_group, args=(group.id,),
        )

with col_chart:
    toggles = st.columns(len(METRICS) + 1)
    for col, metric in zip(toggles, METRICS):
        key = f"perf_metric_{metric.key}"
        st.session_state[key] = controller.visible_metrics.get(metric.key, False)
        col.checkbox(metric.toggle_label, key=key, on_change=controller.toggle_metric, args=(metric.key,))
    with toggles[-1]:
        st.session_state["perf_chart_type"] = controller.chart_type
        st.radio(
            "Chart type", CHART_TYPES, format_func=str.title, horizontal=True, key="perf_chart_type",
            on_change=lambda: controller.set_chart_type(st.session_state["perf_chart_type"]),
        )

    selected = controller.selected_groups
    if not selected:
        st.info("Select one or more groups to compare")
    else:
        labels, series = controller.chart_series()
        st.plotly_chart(create_performance_chart(labels, series, controller.chart_type), use_container_width=True)

        st.subheader("Selected Groups")
        st.dataframe(selected_groups_frame(selected), use_container_width=True, hide_index=True)
