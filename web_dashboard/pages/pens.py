#!/usr/bin/env python3
"""
Edit Pens page
Add, edit and delete pens
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
from page_controllers import PensController
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

PEN_WIDGETS = {'pen_type': PenType.choices(), 'pre_ship': 'checkbox'}
PEN_FORMATTERS = {
    'pen_type': lambda value: value.value if isinstance(value, PenType) else (value or '-'),
    'pre_ship': lambda value: 'Yes' if value else 'No',
}

st.set_page_config(page_title="Edit Pens", page_icon="🏠", layout="wide")
init_logging()
render_navigation()

controller = get_controller(PensController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "pens")

if not controller.view.show_form:
    if st.button("➕ Add Pen", key="pens_add", type="primary"):
        controller.open_add_form()
        st.rerun()

form_columns = [col for col in PEN_COLUMNS if col.key in controller.form_fields]

pen = controller.editing_record
if controller.view.show_form:
    action, values = render_record_form(
        f"pens_form_{controller.view.editing_id or 'new'}",
        form_columns,
        controller.form_defaults(pen),
        widgets=PEN_WIDGETS,
        title=f"Edit {pen.pen_name}" if pen else "New Pen",
        per_row=4,
    )
    handle_form_result(controller, action, values, controller.save_pen)

render_data_table(controller, form_columns, "pens", formatters=PEN_FORMATTERS)
