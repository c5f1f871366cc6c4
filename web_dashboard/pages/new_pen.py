#!/usr/bin/env python3
"""
New Pen page
Add pens one at a time or import them from a CSV file
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import PEN_COLUMNS
from data.models.pen import PenType
from navigation import render_navigation
from page_controllers import NewPenController
from streamlit_utils import (
    get_controller,
    init_logging,
    render_csv_importer,
    render_error_banner,
    render_page_header,
    render_record_form,
)

st.set_page_config(page_title="New Pen", page_icon="➕", layout="wide")
init_logging()
render_navigation()

controller = get_controller(NewPenController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)

# Form stays open on this page; every save adds a new pen
form_counter = st.session_state.setdefault("new_pen_form_counter", 0)
action, values = render_record_form(
    f"new_pen_form_{form_counter}",
    PEN_COLUMNS,
    controller.form_defaults(),
    widgets={'pen_type': PenType.choices(), 'pre_ship': 'checkbox'},
    title="Pen Details",
    submit_label="➕ Add Pen",
    per_row=5,
)
if action == "save":
    if controller.save_pen(values):
        # New form key resets the inputs
        st.session_state["new_pen_form_counter"] = form_counter + 1
    st.rerun()
elif action == "cancel":
    st.session_state["new_pen_form_counter"] = form_counter + 1
    st.rerun()

st.divider()
st.subheader("📁 Import Pens from CSV")
st.caption("Columns: " + ", ".join(controller.import_fields))
render_csv_importer(controller, "new_pen")

st.caption(f"{len(controller.rows)} pens on file")
