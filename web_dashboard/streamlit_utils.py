#!/usr/bin/env python3
"""
Streamlit utilities shared by the feedlot pages: client and controller
access, the error banner, paginated tables, record forms and the bulk
copy/paste and CSV import widgets.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from config.settings import configure_system, get_settings
from data.columns import ColumnDef, format_value
from supabase_client import SupabaseClient
from utils.csv_importer import SKIP
from utils.pagination import Page

logger = logging.getLogger(__name__)

# Widget overrides for render_record_form: 'checkbox', 'textarea' or a list of choices
WidgetSpec = Any


@st.cache_resource
def init_logging() -> str:
    """Load settings, then attach the app log handlers, once per server process."""
    from log_handler import setup_logging
    settings = configure_system()
    level = getattr(logging, settings.get_logging_config().get("level", "INFO"), logging.INFO)
    return setup_logging(level)


@st.cache_resource
def get_supabase_client() -> Optional[SupabaseClient]:
    """Get the shared Supabase client, or None when it cannot be created."""
    try:
        client = SupabaseClient()
        logger.debug("Supabase client initialized successfully")
        return client
    except Exception as e:
        logger.error(f"Exception initializing Supabase client: {e}", exc_info=True)
        return None


def get_controller(controller_cls):
    """Session-scoped controller for one screen; loads its table on first use.

    Returns:
        Controller instance, or None when Supabase is not configured
    """
    state_key = f"controller_{controller_cls.__name__}"
    if state_key not in st.session_state:
        client = get_supabase_client()
        if client is None:
            st.error("❌ Could not connect to Supabase. Check SUPABASE_URL and SUPABASE_ANON_KEY.")
            return None
        controller = controller_cls.create(client.supabase, get_settings())
        controller.load()
        st.session_state[state_key] = controller
    return st.session_state[state_key]


class SessionClipboard:
    """Clipboard backend kept in the Streamlit session.

    The browser clipboard is out of reach of server code, so copied text is
    shown for the user to copy and pasted text comes from a text area.
    """

    def __init__(self, state_key: str):
        self.state_key = state_key

    def write_text(self, text: str) -> None:
        st.session_state[self.state_key] = text

    def read_text(self) -> str:
        return st.session_state.get(self.state_key, '')


def render_page_header(controller) -> None:
    """Title, Refresh button and any pending notice."""
    col_title, col_refresh = st.columns([5, 1])
    with col_title:
        st.title(controller.title)
    with col_refresh:
        st.write("")
        if st.button("🔄 Refresh", key=f"{controller.title}_refresh", use_container_width=True):
            controller.load()
            st.rerun()

    notice = controller.pop_notice()
    if notice:
        st.toast(notice)


def render_error_banner(controller) -> None:
    """Show the table's error with a dismiss button."""
    if not controller.error:
        return
    col_msg, col_close = st.columns([10, 1])
    with col_msg:
        st.error(controller.error)
    with col_close:
        if st.button("✕", key=f"{controller.title}_dismiss_error", help="Dismiss"):
            controller.clear_error()
            st.rerun()


def render_pagination(controller, page: Page, key: str) -> None:
    col_prev, col_label, col_next = st.columns([1, 2, 1])
    with col_prev:
        if st.button("◀ Previous", key=f"{key}_prev", disabled=not page.has_previous):
            controller.go_to_page(page.page - 1)
            st.rerun()
    with col_label:
        st.markdown(f"<div style='text-align: center'>{page.label}</div>", unsafe_allow_html=True)
    with col_next:
        if st.button("Next ▶", key=f"{key}_next", disabled=not page.has_next):
            controller.go_to_page(page.page + 1)
            st.rerun()


def cell_text(row: Any, column: ColumnDef, formatters: Optional[Dict[str, Callable[[Any], str]]] = None) -> str:
    value = row.get(column.key) if hasattr(row, 'get') else getattr(row, column.key, None)
    if formatters and column.key in formatters:
        return formatters[column.key](value)
    return format_value(value, column.type)


def render_data_table(controller, columns: Sequence[ColumnDef], key: str,
                      formatters: Optional[Dict[str, Callable[[Any], str]]] = None,
                      editable: bool = True, deletable: bool = True,
                      rows: Optional[Sequence[Any]] = None) -> None:
    """Paginated table with per-row Edit and Delete buttons.

    Args:
        controller: Screen controller
        columns: Columns to show, in order
        key: Widget key prefix
        formatters: Per-column display overrides
        editable: Show Edit buttons
        deletable: Show Delete buttons
        rows: Rows to show instead of the controller's current page
    """
    if controller.loading:
        st.info("Loading...")
        return

    page = None
    if rows is None:
        page = controller.current_page()
        rows = page.items

    if not rows:
        st.info("No records found")
        return

    action_count = int(editable) + int(deletable)
    widths = [2] * len(columns) + [1] * action_count

    header = st.columns(widths)
    for col, column in zip(header, columns):
        col.markdown(f"**{column.label}**")

    for row in rows:
        cells = st.columns(widths)
        for col, column in zip(cells, columns):
            col.write(cell_text(row, column, formatters))
        action_cols = cells[len(columns):]
        if editable:
            if action_cols[0].button("✏️", key=f"{key}_edit_{row.id}", help="Edit"):
                controller.start_edit(row.id)
                st.rerun()
        if deletable:
            if action_cols[-1].button("🗑️", key=f"{key}_delete_{row.id}", help="Delete"):
                controller.request_delete(row.id)
                st.rerun()

    if page is not None:
        st.caption(page.summary)
        render_pagination(controller, page, key)


def _number_default(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _date_default(value: Any) -> Optional[date]:
    from data.repositories.field_mapper import TypeTransformers
    return TypeTransformers.to_date(value) if value else None


def _render_field(column: ColumnDef, default: Any, widget: WidgetSpec, key: str) -> Any:
    if widget == 'checkbox':
        return st.checkbox(column.label, value=bool(default), key=key)
    if widget == 'textarea':
        return st.text_area(column.label, value=default or '', key=key)
    if isinstance(widget, (list, tuple)):
        options = list(widget)
        index = options.index(default) if default in options else 0
        return st.selectbox(column.label, options, index=index, key=key)
    if column.type == 'date':
        return st.date_input(column.label, value=_date_default(default), key=key, format="MM/DD/YYYY")
    if column.type in ('number', 'currency'):
        return st.number_input(column.label, value=_number_default(default), step=1.0 if column.type == 'number' else 0.01,
                               format="%.2f" if column.type == 'currency' else "%g", key=key)
    return st.text_input(column.label, value='' if default is None else str(default), key=key)


def render_record_form(form_key: str, columns: Sequence[ColumnDef], defaults: Dict[str, Any],
                       widgets: Optional[Dict[str, WidgetSpec]] = None, title: str = '',
                       submit_label: str = "💾 Save", per_row: int = 3) -> Tuple[Optional[str], Dict[str, Any]]:
    """Render an add/edit form.

    Returns:
        ("save", values), ("cancel", {}) or (None, {}) when nothing was clicked
    """
    widgets = widgets or {}
    values: Dict[str, Any] = {}
    with st.form(form_key):
        if title:
            st.subheader(title)
        for start in range(0, len(columns), per_row):
            chunk = columns[start:start + per_row]
            for col, column in zip(st.columns(per_row), chunk):
                with col:
                    values[column.key] = _render_field(
                        column, defaults.get(column.key), widgets.get(column.key), f"{form_key}_{column.key}"
                    )

        col_save, col_cancel, _ = st.columns([1, 1, 4])
        with col_save:
            saved = st.form_submit_button(submit_label, type="primary")
        with col_cancel:
            cancelled = st.form_submit_button("Cancel")

    if saved:
        return "save", values
    if cancelled:
        return "cancel", {}
    return None, {}


def handle_form_result(controller, action: Optional[str], values: Dict[str, Any],
                       save: Callable[[Dict[str, Any]], bool]) -> None:
    """Run ``save`` on submit, then rerun so the table or error banner updates."""
    if action == "cancel":
        controller.cancel_form()
        st.rerun()
    elif action == "save":
        # Failures land in the error banner at the top of the page
        save(values)
        st.rerun()


def render_delete_confirm(controller, key: str) -> None:
    if controller.view.pending_delete is None:
        return
    st.warning("Are you sure you want to delete this record?")
    col_yes, col_no, _ = st.columns([1, 1, 4])
    with col_yes:
        if st.button("Delete", key=f"{key}_confirm_delete", type="primary"):
            controller.confirm_delete()
            st.rerun()
    with col_no:
        if st.button("Cancel", key=f"{key}_cancel_delete"):
            controller.cancel_delete()
            st.rerun()


def render_clipboard_controls(controller, key: str) -> None:
    """Copy the screen's rows as tab-separated text, or paste rows from a spreadsheet."""
    backend = SessionClipboard(f"{key}_clipboard")
    transfer = controller.attach_clipboard(backend, status_seconds=get_settings().get_status_seconds())

    col_copy, col_paste = st.columns(2)
    with col_copy:
        if st.button("📋 Copy to Clipboard", key=f"{key}_copy"):
            transfer.copy()
        if transfer.copy_status:
            st.caption(transfer.copy_status)
        copied = backend.read_text()
        if copied:
            with st.expander("Copied rows", expanded=True):
                st.code(copied, language=None)

    with col_paste:
        pasted = st.text_area("Paste rows (header line first)", key=f"{key}_paste_text", height=120)
        if st.button("📥 Paste from Clipboard", key=f"{key}_paste"):
            backend.write_text(pasted)
            transfer.paste()
            # Clear the copy buffer so it is not mistaken for pasted rows
            backend.write_text('')
            st.rerun()
        if transfer.paste_status:
            st.caption(transfer.paste_status)


def csv_upload_key(key: str) -> str:
    """Widget key of the current file uploader; changes after each reset."""
    return f"{key}_csv_upload_{st.session_state.get(f'{key}_csv_round', 0)}"


def reset_csv_upload(key: str) -> None:
    """Forget the uploaded file and empty the uploader, so the same file can be imported again."""
    st.session_state.pop(f"{key}_csv_loaded", None)
    st.session_state[f"{key}_csv_round"] = st.session_state.get(f"{key}_csv_round", 0) + 1


def render_csv_importer(controller, key: str) -> None:
    """Upload a CSV, adjust the column mapping, then import in batches."""
    session = controller.csv_session
    loaded_key = f"{key}_csv_loaded"

    uploaded = st.file_uploader("📁 Import CSV", type=["csv"], key=csv_upload_key(key))
    if uploaded is not None:
        file_marker = f"{uploaded.name}:{uploaded.size}"
        if st.session_state.get(loaded_key) != file_marker:
            st.session_state[loaded_key] = file_marker
            if not controller.load_csv(uploaded.getvalue()):
                st.rerun()

    if not session.is_open:
        return

    st.subheader("Map CSV Columns")
    st.caption(f"{len(session.rows)} rows found, {session.mapped_field_count} columns mapped")

    preview = session.preview()
    width = len(session.headers)
    padded = [(row + [''] * width)[:width] for row in preview]
    st.dataframe(pd.DataFrame(padded, columns=session.headers), use_container_width=True, hide_index=True)

    options = [SKIP] + session.allowed_fields
    for index, header in enumerate(session.headers):
        current = session.mapping.get(index, SKIP)
        choice = st.selectbox(
            header, options,
            index=options.index(current) if current in options else 0,
            key=f"{key}_csv_map_{index}",
        )
        session.set_mapping(index, choice)

    col_import, col_cancel, _ = st.columns([1, 1, 4])
    with col_import:
        if st.button(f"Import {len(session.rows)} rows", key=f"{key}_csv_import", type="primary",
                     disabled=session.importing):
            if controller.import_csv().success:
                reset_csv_upload(key)
            st.rerun()
    with col_cancel:
        if st.button("Cancel", key=f"{key}_csv_cancel"):
            controller.cancel_csv()
            reset_csv_upload(key)
            st.rerun()


def render_search(controller, key: str, placeholder: str = "Search...") -> None:
    term = st.text_input("🔍 Search", value=controller.view.search, key=f"{key}_search", placeholder=placeholder)
    controller.set_search(term)
