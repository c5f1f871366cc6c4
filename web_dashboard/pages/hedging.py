#!/usr/bin/env python3
"""
Hedging page
Feeder and live cattle futures positions by contract month
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import ColumnDef, HEDGING_COLUMNS
from data.models.hedging import CattleType, format_futures_month
from navigation import render_navigation
from page_controllers import HedgingController
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

MONTH_INPUT = ColumnDef('futures_month', 'Futures Month (YYYY-MM)', 'text')
FORM_COLUMNS = [MONTH_INPUT, ColumnDef('positions', 'Positions', 'number')]

st.set_page_config(page_title="Hedging", page_icon="📈", layout="wide")
init_logging()
render_navigation()

controller = get_controller(HedgingController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "hedging")

record = controller.editing_record
sections = st.columns(len(CattleType))
for col, cattle_type in zip(sections, CattleType):
    key = f"hedging_{cattle_type.name.lower()}"
    with col:
        st.subheader(cattle_type.value)

        if controller.view.show_form and controller.view.form_context == cattle_type.value:
            action, values = render_record_form(
                f"{key}_form_{controller.view.editing_id or 'new'}",
                FORM_COLUMNS,
                controller.form_defaults(record),
                title="Edit Position" if record else "New Position",
                per_row=2,
            )
            handle_form_result(
                controller, action, values,
                lambda values, cattle_type=cattle_type: controller.save_position(cattle_type, values),
            )
        elif st.button("➕ Add Position", key=f"{key}_add", type="primary"):
            controller.open_add_form(cattle_type.value)
            st.rerun()

        render_data_table(
            controller,
            HEDGING_COLUMNS,
            key,
            formatters={'futures_month': format_futures_month},
            rows=controller.records_for(cattle_type),
        )
