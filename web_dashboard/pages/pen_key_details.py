#!/usr/bin/env python3
"""
Edit Key Pen Details page
Pen type, bunk space and pre-ship flag, searchable by name or type
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
from page_controllers import PenKeyDetailsController
from streamlit_utils import (
    get_controller,
    handle_form_result,
    init_logging,
    render_data_table,
    render_delete_confirm,
    render_error_banner,
    render_page_header,
    render_record_form,
    render_search,
)

st.set_page_config(page_title="Edit Key Pen Details", page_icon="🔑", layout="wide")
init_logging()
render_navigation()

controller = get_controller(PenKeyDetailsController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "pen_key_details")

form_columns = [col for col in PEN_COLUMNS if col.key in controller.form_fields]

pen = controller.editing_record
if controller.view.show_form and pen is not None:
    action, values = render_record_form(
        f"pen_key_details_form_{pen.id}",
        form_columns,
        controller.form_defaults(pen),
        widgets={'pen_type': PenType.choices(), 'pre_ship': 'checkbox'},
        title=f"Edit {pen.pen_name}",
        per_row=4,
    )
    handle_form_result(controller, action, values, controller.save_pen)

render_search(controller, "pen_key_details", placeholder="Pen name or type")
render_data_table(
    controller,
    form_columns,
    "pen_key_details",
    formatters={
        'pen_type': lambda value: value.value if isinstance(value, PenType) else (value or '-'),
        'pre_ship': lambda value: 'Yes' if value else 'No',
    },
)
