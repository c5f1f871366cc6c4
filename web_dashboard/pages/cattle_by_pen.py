#!/usr/bin/env python3
"""
Edit Cattle by Pen page
Which group is in which pen and how many head, with copy/paste and CSV import
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import GROUP_BY_PEN_COLUMNS
from navigation import render_navigation
from page_controllers import CattleByPenController
from streamlit_utils import (
    get_controller,
    handle_form_result,
    init_logging,
    render_clipboard_controls,
    render_csv_importer,
    render_data_table,
    render_delete_confirm,
    render_error_banner,
    render_page_header,
    render_record_form,
)

st.set_page_config(page_title="Edit Cattle by Pen", page_icon="🐄", layout="wide")
init_logging()
render_navigation()

controller = get_controller(CattleByPenController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "cattle_by_pen")

if controller.view.confirm_clear:
    st.warning(controller.clear_message)
    col_yes, col_no, _ = st.columns([1, 1, 4])
    with col_yes:
        if st.button("Delete All", key="cattle_by_pen_confirm_clear", type="primary"):
            controller.clear_all()
            st.rerun()
    with col_no:
        if st.button("Cancel", key="cattle_by_pen_cancel_clear"):
            controller.cancel_clear()
            st.rerun()

col_add, col_clear, _ = st.columns([1, 1, 4])
with col_add:
    if not controller.view.show_form and st.button("➕ Add Row", key="cattle_by_pen_add", type="primary"):
        controller.open_add_form()
        st.rerun()
with col_clear:
    if st.button("🗑️ Clear All", key="cattle_by_pen_clear", disabled=not controller.rows):
        controller.request_clear()
        st.rerun()

with st.expander("📋 Copy / Paste", expanded=False):
    st.caption("Columns: " + ", ".join(controller.clipboard_headers))
    render_clipboard_controls(controller, "cattle_by_pen")

with st.expander("📁 Import from CSV", expanded=controller.csv_session.is_open):
    render_csv_importer(controller, "cattle_by_pen")

record = controller.editing_record
if controller.view.show_form:
    action, values = render_record_form(
        f"cattle_by_pen_form_{controller.view.editing_id or 'new'}",
        GROUP_BY_PEN_COLUMNS,
        controller.form_defaults(record),
        title="Edit Row" if record else "New Row",
    )
    handle_form_result(controller, action, values, controller.save_record)

render_data_table(controller, GROUP_BY_PEN_COLUMNS, "cattle_by_pen")
