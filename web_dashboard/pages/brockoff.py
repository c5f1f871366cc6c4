#!/usr/bin/env python3
"""
Brockoff Add-Edit Group page
Groups whose lot starts with "B", with spreadsheet copy/paste
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import NEW_GROUP_FIELDS, NEW_GROUP_TABLE_COLUMNS, columns_for
from navigation import render_navigation
from page_controllers import BrockoffController
from streamlit_utils import (
    get_controller,
    handle_form_result,
    init_logging,
    render_clipboard_controls,
    render_data_table,
    render_delete_confirm,
    render_error_banner,
    render_page_header,
    render_record_form,
)

st.set_page_config(page_title="Brockoff Add-Edit Group", page_icon="🐂", layout="wide")
init_logging()
render_navigation()

controller = get_controller(BrockoffController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "brockoff")

with st.expander("📋 Copy / Paste", expanded=False):
    st.caption("Columns: " + ", ".join(controller.clipboard_headers))
    render_clipboard_controls(controller, "brockoff")

if not controller.view.show_form:
    if st.button("➕ Add Brockoff Group", key="brockoff_add", type="primary"):
        controller.open_add_form()
        st.rerun()

record = controller.editing_record
if controller.view.show_form:
    action, values = render_record_form(
        f"brockoff_form_{controller.view.editing_id or 'new'}",
        columns_for(NEW_GROUP_FIELDS),
        controller.form_defaults(record),
        title=f"Edit {record.lot}" if record else "New Brockoff Group",
    )
    handle_form_result(controller, action, values, controller.save_edit if record else controller.add_group)

render_data_table(controller, columns_for(NEW_GROUP_TABLE_COLUMNS), "brockoff")
