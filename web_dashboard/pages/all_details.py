#!/usr/bin/env python3
"""
Edit All Group Details page
Every editable closeout column for home lots, plus CSV import
"""

import sys
from pathlib import Path

import streamlit as st

# Add parent directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from data.columns import ALL_DETAILS_TABLE_COLUMNS, EDITABLE_FIELDS, NOTES_COLUMN, columns_for
from navigation import render_navigation
from page_controllers import AllDetailsController
from streamlit_utils import (
    get_controller,
    handle_form_result,
    init_logging,
    render_csv_importer,
    render_data_table,
    render_delete_confirm,
    render_error_banner,
    render_page_header,
    render_record_form,
    render_search,
)

st.set_page_config(page_title="Edit All Group Details", page_icon="📋", layout="wide")
init_logging()
render_navigation()

controller = get_controller(AllDetailsController)
if controller is None:
    st.stop()

render_page_header(controller)
render_error_banner(controller)
render_delete_confirm(controller, "all_details")

with st.expander("📁 Import from CSV", expanded=controller.csv_session.is_open):
    render_csv_importer(controller, "all_details")

record = controller.editing_record
if controller.view.show_form and record is not None:
    action, values = render_record_form(
        f"all_details_form_{record.id}",
        columns_for(EDITABLE_FIELDS),
        controller.form_defaults(record),
        widgets={NOTES_COLUMN: 'textarea'},
        title=f"Edit {record.lot}",
        per_row=4,
    )
    handle_form_result(controller, action, values, controller.save_edit)

render_search(controller, "all_details", placeholder="Lot or origin")
render_data_table(controller, columns_for(ALL_DETAILS_TABLE_COLUMNS), "all_details")
