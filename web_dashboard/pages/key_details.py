#!/usr/bin/env python3
"""
Edit Key Group Details page
Active home groups (head still on feed) with the fields edited most often
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import KEY_DETAILS_FIELDS, KEY_DETAILS_TABLE_COLUMNS, NOTES_COLUMN, columns_for, truncate_note
from navigation import render_navigation
from page_controllers import KeyDetailsController
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

st.set_page_config(page_title="Edit Key Group Details", page_icon="✏️", layout="wide")
init_logging()
render_navigation()

controller = get_controller(KeyDetailsController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "key_details")

record = controller.editing_record
if controller.view.show_form and record is not None:
    action, values = render_record_form(
        f"key_details_form_{record.id}",
        columns_for(KEY_DETAILS_FIELDS),
        controller.form_defaults(record),
        widgets={NOTES_COLUMN: 'textarea'},
        title=f"Edit {record.lot}",
    )
    handle_form_result(controller, action, values, controller.save_edit)

render_search(controller, "key_details", placeholder="Lot, origin or notes")
render_data_table(
    controller,
    columns_for(KEY_DETAILS_TABLE_COLUMNS),
    "key_details",
    formatters={NOTES_COLUMN: truncate_note},
)
