#!/usr/bin/env python3
"""
Page controllers for the feedlot screens.

Each controller owns one SupabaseTable plus the screen's view state
(page, search text, open form, pending confirmations). Pages render what
a controller exposes and call its methods on user actions; controllers
never import streamlit, so the screen logic is testable on its own.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from config.constants import (
    DEFAULT_PAGE_SIZE,
    GROUPS_BY_PEN_TABLE,
    HEDGING_TABLE,
    HOME_CLOSEOUTS_TABLE,
    PENS_TABLE,
    TABLE_ORDERING,
)
from config.settings import Settings, get_settings
from data.columns import (
    ALL_DETAILS_TABLE_COLUMNS,
    EDITABLE_FIELDS,
    GROUP_BY_PEN_COLUMNS,
    KEY_DETAILS_FIELDS,
    KEY_DETAILS_TABLE_COLUMNS,
    NEW_GROUP_FIELDS,
    NEW_GROUP_TABLE_COLUMNS,
    label_for,
)
from data.models.closeout import HomeCloseout
from data.models.group_by_pen import GroupByPen
from data.models.hedging import (
    CattleType,
    HedgingRecord,
    futures_month_from_input,
    futures_month_from_parts,
    month_input_value,
)
from data.models.pen import DEFAULT_PEN_TYPE, Pen, PenType
from data.repositories.base_repository import DataNotFoundError
from data.repositories.field_mapper import TypeTransformers, row_to_payload
from data.repositories.supabase_table import SupabaseTable
from log_handler import log_execution_time
from utils import performance
from utils.clipboard import ClipboardBackend, ClipboardTransfer
from utils.csv_importer import CsvImportSession, ImportResult, decode_upload
from utils.pagination import Page, paginate
from utils.validation import (
    GROUP_BY_PEN_RULES,
    HEDGING_RULES,
    HOME_CLOSEOUT_RULES,
    PEN_RULES,
    ValidationRules,
    check_brockoff_lot,
    check_pre_ship_name,
    validate,
)

logger = logging.getLogger(__name__)


@dataclass
class ViewState:
    """What one screen is showing, apart from the table rows themselves."""
    page: int = 1
    search: str = ''
    show_form: bool = False
    editing_id: Optional[int] = None
    form_context: Optional[str] = None
    pending_delete: Optional[int] = None
    confirm_clear: bool = False
    notice: Optional[str] = None

    def go_to_page(self, page: int) -> None:
        self.page = max(1, page)

    def searched(self, term: str) -> None:
        # A new search always starts from the first page
        if term != self.search:
            self.search = term
            self.page = 1

    def form_opened(self, context: Optional[str] = None) -> None:
        self.show_form = True
        self.editing_id = None
        self.form_context = context

    def edit_started(self, record_id: int, context: Optional[str] = None) -> None:
        self.show_form = True
        self.editing_id = record_id
        self.form_context = context

    def form_closed(self) -> None:
        self.show_form = False
        self.editing_id = None
        self.form_context = None

    def delete_requested(self, record_id: int) -> None:
        self.pending_delete = record_id

    def delete_cancelled(self) -> None:
        self.pending_delete = None

    def clear_requested(self) -> None:
        self.confirm_clear = True

    def clear_cancelled(self) -> None:
        self.confirm_clear = False


def clean_form(values: Dict[str, Any]) -> Dict[str, Any]:
    """Blank form inputs become None so they are stored as NULL."""
    cleaned = {}
    for key, value in values.items():
        if isinstance(value, str) and value.strip() == '':
            value = None
        cleaned[key] = value
    return cleaned


def floor_number(value: Any) -> Optional[int]:
    number = TypeTransformers.to_number(value)
    if number is None:
        return None
    return int(number // 1)


def _contains(value: Optional[str], term: str) -> bool:
    return term in (value or '').lower()


class TableController:
    """Shared list/edit/delete behaviour for one table screen."""

    title = ''
    table_key = ''
    model: Optional[type] = None

    def __init__(self, table: SupabaseTable, page_size: int = DEFAULT_PAGE_SIZE):
        self.table = table
        self.page_size = page_size
        self.view = ViewState()

    @classmethod
    def create(cls, client: Any, settings: Optional[Settings] = None):
        """Build the controller and its table accessor from configuration."""
        settings = settings or get_settings()
        order_column, ascending = TABLE_ORDERING[cls.table_key]
        table = SupabaseTable(
            client,
            settings.get_table_name(cls.table_key),
            order_column,
            ascending=ascending,
            model=cls.model,
        )
        return cls(table, page_size=settings.get_page_size())

    # Table state

    @property
    def loading(self) -> bool:
        return self.table.loading

    @property
    def error(self) -> Optional[str]:
        return self.table.error

    def clear_error(self) -> None:
        self.table.clear_error()

    def fail(self, message: str) -> bool:
        """Show ``message`` in the error banner; always returns False."""
        logger.warning(f"{self.title}: {message}")
        self.table.set_error(message)
        return False

    @log_execution_time()
    def load(self) -> bool:
        return self.table.fetch_all()

    def pop_notice(self) -> Optional[str]:
        notice, self.view.notice = self.view.notice, None
        return notice

    # Filtering and pagination

    def include(self, row: Any) -> bool:
        """Screen-level filter applied to every loaded row."""
        return True

    def matches_search(self, row: Any, term: str) -> bool:
        return True

    @property
    def rows(self) -> List[Any]:
        return [row for row in self.table.rows if self.include(row)]

    @property
    def visible_rows(self) -> List[Any]:
        term = self.view.search.lower()
        if not term:
            return self.rows
        return [row for row in self.rows if self.matches_search(row, term)]

    def current_page(self) -> Page:
        page = paginate(self.visible_rows, self.view.page, self.page_size)
        self.view.page = page.page
        return page

    def go_to_page(self, page: int) -> None:
        self.view.go_to_page(page)

    def set_search(self, term: str) -> None:
        self.view.searched(term or '')

    # Forms

    def open_add_form(self, context: Optional[str] = None) -> None:
        self.view.form_opened(context)

    def start_edit(self, record_id: int, context: Optional[str] = None) -> bool:
        try:
            self.table.find(record_id)
        except DataNotFoundError as e:
            return self.fail(str(e))
        self.view.edit_started(record_id, context)
        return True

    def cancel_form(self) -> None:
        self.view.form_closed()

    @property
    def editing_record(self) -> Optional[Any]:
        if self.view.editing_id is None:
            return None
        try:
            return self.table.find(self.view.editing_id)
        except DataNotFoundError:
            # Row vanished on reload (deleted elsewhere)
            self.view.form_closed()
            return None

    def _store(self, payload: Dict[str, Any], notice: str) -> bool:
        """Insert or update depending on the open form; closes it on success."""
        if self.view.editing_id is not None:
            success = self.table.update(self.view.editing_id, payload)
        else:
            success = self.table.insert(payload)
        if success:
            self.view.form_closed()
            self.view.notice = notice
        return success

    # Deletes

    def request_delete(self, record_id: int) -> None:
        self.view.delete_requested(record_id)

    def cancel_delete(self) -> None:
        self.view.delete_cancelled()

    def confirm_delete(self) -> bool:
        record_id = self.view.pending_delete
        if record_id is None:
            return False
        if self.table.remove(record_id):
            self.view.delete_cancelled()
            if self.view.editing_id == record_id:
                self.view.form_closed()
            self.view.notice = "🗑️ Record deleted"
            return True
        return False


class ClipboardMixin:
    """Tab-separated copy/paste for a table screen."""

    clipboard_columns: Sequence[str] = ()
    clipboard_headers: Sequence[str] = ()
    clipboard: Optional[ClipboardTransfer] = None

    def parse_clipboard_row(self, values: List[str]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def clipboard_insert(self, record: Dict[str, Any]) -> bool:
        return self.table.insert(record, refetch=False)

    def clipboard_rows(self) -> List[Any]:
        return self.rows

    def attach_clipboard(self, backend: ClipboardBackend, status_seconds: Optional[float] = None,
                         clock: Optional[Callable[[], float]] = None) -> ClipboardTransfer:
        """Create the copy/paste controller once; later calls swap the backend only."""
        if self.clipboard is None:
            kwargs = {}
            if status_seconds is not None:
                kwargs['status_seconds'] = status_seconds
            if clock is not None:
                kwargs['clock'] = clock
            self.clipboard = ClipboardTransfer(
                columns=self.clipboard_columns,
                headers=self.clipboard_headers,
                parse_row=self.parse_clipboard_row,
                insert=self.clipboard_insert,
                on_complete=self.load,
                get_rows=self.clipboard_rows,
                clipboard=backend,
                **kwargs,
            )
        else:
            self.clipboard.clipboard = backend
        return self.clipboard


class CsvImportMixin:
    """Upload-map-confirm CSV import into the controller's table."""

    import_fields: Sequence[str] = ()
    _csv_session: Optional[CsvImportSession] = None

    @property
    def csv_session(self) -> CsvImportSession:
        if self._csv_session is None:
            self._csv_session = CsvImportSession(
                self.import_fields,
                batch_size=get_settings().get_import_batch_size(),
            )
        return self._csv_session

    def load_csv(self, data) -> bool:
        if self.csv_session.load_text(decode_upload(data)):
            return True
        return self.fail(self.csv_session.error)

    def import_csv(self) -> ImportResult:
        result = self.csv_session.run_import(
            insert_batch=lambda batch: self.table.insert_many(batch),
            on_complete=self.load,
            get_error=lambda: self.table.error,
        )
        if result.success:
            self.view.notice = f"✅ Imported {result.inserted} records"
        else:
            self.fail(result.error)
        return result

    def cancel_csv(self) -> None:
        self.csv_session.reset()


# Closeout screens


class CloseoutController(TableController):
    """Screens over ``home_closeouts``; subclasses pick the population and fields."""

    table_key = HOME_CLOSEOUTS_TABLE
    model = HomeCloseout
    form_fields: Sequence[str] = NEW_GROUP_FIELDS
    table_columns: Sequence[str] = NEW_GROUP_TABLE_COLUMNS
    rules: ValidationRules = HOME_CLOSEOUT_RULES

    def include(self, row: HomeCloseout) -> bool:
        return row.is_home

    def form_defaults(self, record: Optional[HomeCloseout] = None) -> Dict[str, Any]:
        return {key: (record.get(key) if record else None) for key in self.form_fields}

    def _check(self, merged: Dict[str, Any]) -> Optional[str]:
        return validate(merged, self.rules)

    def add_group(self, values: Dict[str, Any]) -> bool:
        record = clean_form({key: values.get(key) for key in self.form_fields})
        problem = self._check(record)
        if problem:
            return self.fail(problem)
        payload = row_to_payload(record)
        if self.table.insert(payload):
            self.view.form_closed()
            self.view.notice = f"✅ Group {record.get('lot')} added"
            return True
        return False

    def save_edit(self, values: Dict[str, Any]) -> bool:
        record = self.editing_record
        if record is None:
            return self.fail("No record selected for editing")
        changes = clean_form({key: values.get(key) for key in self.form_fields})
        merged = {**record.to_dict(), **changes}
        problem = self._check(merged)
        if problem:
            return self.fail(problem)
        if self.table.update(record.id, row_to_payload(changes)):
            self.view.form_closed()
            self.view.notice = f"✅ Saved {merged.get('lot') or f'ID {record.id}'}"
            return True
        return False


class NewGroupController(CloseoutController):
    title = "New Group"

    def include(self, row: HomeCloseout) -> bool:
        return row.is_home and row.purchase_date is not None


class KeyDetailsController(CloseoutController):
    title = "Edit Key Group Details"
    form_fields = KEY_DETAILS_FIELDS
    table_columns = KEY_DETAILS_TABLE_COLUMNS

    def include(self, row: HomeCloseout) -> bool:
        return row.is_home and row.is_active

    def matches_search(self, row: HomeCloseout, term: str) -> bool:
        return (_contains(row.lot, term) or _contains(row.origin, term)
                or _contains(row.notes_on_group, term))


class AllDetailsController(CsvImportMixin, CloseoutController):
    title = "Edit All Group Details"
    form_fields = EDITABLE_FIELDS
    table_columns = ALL_DETAILS_TABLE_COLUMNS
    import_fields = EDITABLE_FIELDS

    def matches_search(self, row: HomeCloseout, term: str) -> bool:
        return _contains(row.lot, term) or _contains(row.origin, term)


class BrockoffController(ClipboardMixin, CloseoutController):
    title = "Brockoff Add-Edit Group"
    clipboard_columns = NEW_GROUP_TABLE_COLUMNS
    clipboard_headers = [label_for(key) for key in NEW_GROUP_TABLE_COLUMNS]

    def include(self, row: HomeCloseout) -> bool:
        return row.is_brockoff

    def _check(self, merged: Dict[str, Any]) -> Optional[str]:
        return check_brockoff_lot(merged.get('lot')) or validate(merged, self.rules)

    def parse_clipboard_row(self, values: List[str]) -> Optional[Dict[str, Any]]:
        if len(values) < len(self.clipboard_columns):
            return None
        record = {}
        for key, value in zip(self.clipboard_columns, values):
            value = value.strip()
            if value:
                record[key] = value
        if not record.get('lot'):
            return None
        return record


class PerformanceController(CloseoutController):
    """Group selection and metric toggles for the performance chart."""

    title = "Performance Charts"

    def __init__(self, table: SupabaseTable, page_size: int = DEFAULT_PAGE_SIZE):
        super().__init__(table, page_size)
        self.selected_ids: List[int] = []
        self.visible_metrics: Dict[str, bool] = {metric.key: True for metric in performance.METRICS}
        self.chart_type = 'bar'

    @property
    def available_groups(self) -> List[HomeCloseout]:
        return performance.available_groups(self.rows)

    @property
    def filtered_groups(self) -> List[HomeCloseout]:
        return performance.search_groups(self.available_groups, self.view.search)

    def toggle_group(self, group_id: int) -> None:
        if group_id in self.selected_ids:
            self.selected_ids.remove(group_id)
        else:
            self.selected_ids.append(group_id)

    def select_all(self) -> None:
        self.selected_ids = [g.id for g in self.filtered_groups]

    def select_none(self) -> None:
        self.selected_ids = []

    def select_recent(self, count: int) -> None:
        self.selected_ids = performance.recent_group_ids(self.available_groups, count)

    def toggle_metric(self, key: str) -> None:
        self.visible_metrics[key] = not self.visible_metrics.get(key, False)

    def set_chart_type(self, chart_type: str) -> None:
        if chart_type not in performance.CHART_TYPES:
            raise ValueError(f"Unsupported chart type: {chart_type}")
        self.chart_type = chart_type

    @property
    def selected_groups(self) -> List[HomeCloseout]:
        return performance.selected_in_date_order(self.available_groups, self.selected_ids)

    def chart_series(self):
        return performance.build_series(self.selected_groups, self.visible_metrics)


# Pen screens


class PenController(TableController):
    table_key = PENS_TABLE
    model = Pen
    form_fields: Sequence[str] = ('pen_name', 'pen_square_feet', 'pen_type', 'pre_ship')

    def form_defaults(self, pen: Optional[Pen] = None) -> Dict[str, Any]:
        defaults = {
            'pen_name': '',
            'pen_square_feet': None,
            'pen_type': DEFAULT_PEN_TYPE.value,
            'bunk_space_ft': None,
            'pre_ship': False,
        }
        if pen is not None:
            defaults.update({
                'pen_name': pen.pen_name or '',
                'pen_square_feet': pen.pen_square_feet,
                'pen_type': pen.pen_type_label if pen.pen_type else DEFAULT_PEN_TYPE.value,
                'bunk_space_ft': pen.bunk_space_ft,
                'pre_ship': pen.pre_ship,
            })
        return {key: defaults[key] for key in self.form_fields}

    def build_payload(self, values: Dict[str, Any]) -> Dict[str, Any]:
        payload = {key: values.get(key) for key in self.form_fields}
        payload['pre_ship'] = TypeTransformers.to_bool(payload.get('pre_ship'))
        if isinstance(payload.get('pen_type'), PenType):
            payload['pen_type'] = payload['pen_type'].value
        if 'pen_square_feet' in payload:
            payload['pen_square_feet'] = TypeTransformers.to_number(payload['pen_square_feet'])
        if 'bunk_space_ft' in payload:
            payload['bunk_space_ft'] = floor_number(payload['bunk_space_ft'])
        return payload

    def save_pen(self, values: Dict[str, Any]) -> bool:
        """Check the pre-ship naming rule and field limits, then insert or update."""
        problem = check_pre_ship_name(values.get('pen_name'), TypeTransformers.to_bool(values.get('pre_ship')))
        if problem:
            return self.fail(problem)
        problem = validate(values, PEN_RULES)
        if problem:
            return self.fail(problem)
        payload = self.build_payload(values)
        return self._store(payload, f"✅ Saved pen {payload.get('pen_name')}")


class PensController(PenController):
    title = "Edit Pens"


class PenKeyDetailsController(PenController):
    title = "Edit Key Pen Details"
    form_fields = ('pen_name', 'pen_type', 'bunk_space_ft', 'pre_ship')

    def matches_search(self, row: Pen, term: str) -> bool:
        return _contains(row.pen_name, term) or _contains(row.pen_type_label if row.pen_type else None, term)

    def save_pen(self, values: Dict[str, Any]) -> bool:
        # Edit-only screen
        if self.view.editing_id is None:
            return False
        return super().save_pen(values)


class NewPenController(CsvImportMixin, PenController):
    title = "New Pen"
    form_fields = ('pen_name', 'pen_square_feet', 'pen_type', 'bunk_space_ft', 'pre_ship')
    import_fields = form_fields


# Cattle by pen


class CattleByPenController(CsvImportMixin, ClipboardMixin, TableController):
    title = "Edit Cattle by Pen"
    table_key = GROUPS_BY_PEN_TABLE
    model = GroupByPen
    clipboard_columns = [col.key for col in GROUP_BY_PEN_COLUMNS]
    clipboard_headers = [col.label for col in GROUP_BY_PEN_COLUMNS]
    import_fields = clipboard_columns

    def form_defaults(self, record: Optional[GroupByPen] = None) -> Dict[str, Any]:
        if record is None:
            return {'group_name': '', 'pen_name': '', 'head': None}
        return {
            'group_name': record.group_name or '',
            'pen_name': record.pen_name or '',
            'head': record.head,
        }

    def save_record(self, values: Dict[str, Any]) -> bool:
        record = {
            'group_name': values.get('group_name'),
            'pen_name': values.get('pen_name'),
            'head': TypeTransformers.to_number(values.get('head')) if values.get('head') not in (None, '') else None,
        }
        problem = validate(record, GROUP_BY_PEN_RULES)
        if problem:
            return self.fail(problem)
        return self._store(record, f"✅ Saved {record.get('group_name') or record.get('pen_name')}")

    def parse_clipboard_row(self, values: List[str]) -> Optional[Dict[str, Any]]:
        if len(values) < 3:
            return None
        head = values[2].strip()
        return {
            'group_name': values[0].strip() or None,
            'pen_name': values[1].strip() or None,
            'head': TypeTransformers.to_number(head) if head else None,
        }

    def clipboard_insert(self, record: Dict[str, Any]) -> bool:
        if not record.get('group_name') and not record.get('pen_name'):
            return False
        return self.table.insert(record, refetch=False)

    @property
    def clear_message(self) -> str:
        count = len(self.rows)
        return f"Are you sure you want to delete ALL {count} records? This action cannot be undone."

    def request_clear(self) -> None:
        self.view.clear_requested()

    def cancel_clear(self) -> None:
        self.view.clear_cancelled()

    def clear_all(self) -> bool:
        """Delete every loaded row in one call."""
        ids = [row.id for row in self.rows]
        if not ids:
            return False
        if self.table.remove_many(ids):
            self.view.clear_cancelled()
            self.view.notice = f"🗑️ Deleted {len(ids)} records"
            return True
        return False


# Hedging


class HedgingController(TableController):
    title = "Hedging"
    table_key = HEDGING_TABLE
    model = HedgingRecord

    def records_for(self, cattle_type: CattleType) -> List[HedgingRecord]:
        return [row for row in self.rows if row.cattle_type == cattle_type]

    def start_edit(self, record_id: int, context: Optional[str] = None) -> bool:
        if context is None:
            try:
                record = self.table.find(record_id)
            except DataNotFoundError as e:
                return self.fail(str(e))
            cattle_type = record.cattle_type
            context = cattle_type.value if isinstance(cattle_type, CattleType) else cattle_type
        return super().start_edit(record_id, context)

    def form_defaults(self, record: Optional[HedgingRecord] = None) -> Dict[str, Any]:
        if record is None:
            return {'futures_month': '', 'positions': None}
        return {
            'futures_month': month_input_value(record.futures_month),
            'positions': record.positions,
        }

    def _save_position(self, cattle_type: CattleType, futures_month: Optional[date], positions: Any) -> bool:
        record = {
            'cattle_type': cattle_type.value,
            'futures_month': futures_month,
            'positions': TypeTransformers.to_number(positions) if positions not in (None, '') else None,
        }
        problem = validate(record, HEDGING_RULES)
        if problem:
            return self.fail(problem)
        return self._store(row_to_payload(record), f"✅ Saved {cattle_type.value} position")

    def save_position(self, cattle_type: CattleType, values: Dict[str, Any]) -> bool:
        """Store a position from the month-input form ("YYYY-MM")."""
        return self._save_position(
            CattleType(cattle_type),
            futures_month_from_input(values.get('futures_month')),
            values.get('positions'),
        )


class FeederCattleController(HedgingController):
    title = "Feeder Cattle Hedging"

    def include(self, row: HedgingRecord) -> bool:
        return row.is_feeder

    def form_defaults(self, record: Optional[HedgingRecord] = None) -> Dict[str, Any]:
        if record is None:
            return {'month': None, 'year': None, 'positions': None}
        if record.futures_month is None:
            return {'month': None, 'year': None, 'positions': record.positions}
        return {
            'month': record.futures_month.month,
            'year': record.futures_month.year,
            'positions': record.positions,
        }

    def save_feeder_position(self, values: Dict[str, Any]) -> bool:
        """Store a position from the separate month and year pickers."""
        return self._save_position(
            CattleType.FEEDER,
            futures_month_from_parts(values.get('month'), values.get('year')),
            values.get('positions'),
        )


def year_options(today: Optional[date] = None, count: int = 6) -> List[int]:
    """Years offered by the feeder month picker: last year plus the next few."""
    today = today or date.today()
    return [today.year + offset - 1 for offset in range(count)]
