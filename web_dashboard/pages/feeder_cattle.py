#!/usr/bin/env python3
"""
Feeder Cattle Hedging page
Feeder cattle positions entered with separate month and year pickers
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import ColumnDef, HEDGING_COLUMNS
from data.models.hedging import MONTH_ABBREVIATIONS, format_futures_month
from navigation import render_navigation
from page_controllers import FeederCattleController, year_options
from streamlit_utils import (
    get_controller,
    handle_form_result,
    init_logging,
    render_data_table,
    render_delete_confirm,
    render_error_banner,
    render_page_header,
    render_record_form,
)

FORM_COLUMNS = [
    ColumnDef('month', 'Month', 'text'),
    ColumnDef('year', 'Year', 'text'),
    ColumnDef('positions', 'Positions', 'number'),
]

st.set_page_config(page_title="Feeder Cattle Hedging", page_icon="🌾", layout="wide")
init_logging()
render_navigation()

controller = get_controller(FeederCattleController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "feeder_cattle")

if not controller.view.show_form:
    if st.button("➕ Add Position", key="feeder_cattle_add", type="primary"):
        controller.open_add_form()
        st.rerun()

record = controller.editing_record
if controller.view.show_form:
    years = year_options()
    defaults = controller.form_defaults(record)
    action, values = render_record_form(
        f"feeder_cattle_form_{controller.view.editing_id or 'new'}",
        FORM_COLUMNS,
        defaults,
        widgets={'month': list(range(1, 13)), 'year': years},
        title="Edit Position" if record else "New Position",
    )
    handle_form_result(controller, action, values, controller.save_feeder_position)
    st.caption("Months: " + ", ".join(f"{i} = {name}" for i, name in enumerate(MONTH_ABBREVIATIONS, start=1)))

render_data_table(
    controller,
    HEDGING_COLUMNS,
    "feeder_cattle",
    formatters={'futures_month': format_futures_month},
)
