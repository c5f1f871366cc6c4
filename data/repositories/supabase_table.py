"""Supabase-backed table accessor.

One ``SupabaseTable`` owns the in-memory copy of a single remote table.
Every mutation is one REST call followed by a full reload, so the rows in
memory always reflect what the database returned last. There is no
locking or row versioning: concurrent edits from two browsers resolve as
last writer wins.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import logging

from .base_repository import BaseTableRepository, DataNotFoundError, DataValidationError, Record
from .field_mapper import row_to_payload

logger = logging.getLogger(__name__)

# Suppress httpx INFO logs (Supabase HTTP requests)
logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass(frozen=True)
class TableState:
    """Snapshot of an accessor: last loaded rows, loading flag, error text."""
    rows: Tuple[Any, ...] = ()
    loading: bool = True
    error: Optional[str] = None

    def started(self) -> TableState:
        return replace(self, loading=True, error=None)

    def loaded(self, rows: Iterable[Any]) -> TableState:
        return replace(self, rows=tuple(rows), loading=False, error=None)

    def failed(self, message: str) -> TableState:
        """Record an error; rows from the previous successful load are kept."""
        return replace(self, loading=False, error=message)

    def error_cleared(self) -> TableState:
        return replace(self, error=None)


def error_message(error: Exception) -> str:
    """Message text for a failed call, as reported by the REST API when available."""
    message = getattr(error, 'message', None)
    return str(message) if message else str(error)


class SupabaseTable(BaseTableRepository):
    """Fetch, insert, update and delete rows of one Supabase table.

    Args:
        client: Supabase ``Client`` (anything exposing ``table(name)``)
        table: Remote table name
        order_column: Column used for the default sort
        ascending: Sort direction
        model: Optional record class with ``from_row``/``to_payload``; rows
            are kept as plain dicts when omitted
    """

    def __init__(self, client: Any, table: str, order_column: str,
                 ascending: bool = True, model: Optional[type] = None):
        self.client = client
        self.table = table
        self.order_column = order_column
        self.ascending = ascending
        self.model = model
        self.state = TableState()

    # State accessors

    @property
    def rows(self) -> List[Any]:
        return list(self.state.rows)

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    def _set_state(self, state: TableState) -> None:
        self.state = state

    def clear_error(self) -> None:
        self._set_state(self.state.error_cleared())

    def set_error(self, message: str) -> None:
        """Show a page-level error (e.g. a failed bulk delete) through the same banner."""
        self._set_state(self.state.failed(message))

    def find(self, record_id: int) -> Any:
        """Return the loaded row with ``record_id``.

        Raises:
            DataNotFoundError: If no loaded row has that id
        """
        for row in self.state.rows:
            if _row_id(row) == record_id:
                return row
        raise DataNotFoundError(f"No row with id {record_id} in {self.table}")

    # Remote operations

    def _query(self):
        return self.client.table(self.table)

    def _to_row(self, raw: Dict[str, Any]) -> Any:
        return self.model.from_row(raw) if self.model is not None else dict(raw)

    def _to_payload(self, record: Record) -> Dict[str, Any]:
        if hasattr(record, 'to_payload'):
            return record.to_payload()
        if isinstance(record, dict):
            return row_to_payload(record)
        raise DataValidationError(f"Cannot store {type(record).__name__} in {self.table}")

    def fetch_all(self) -> bool:
        self._set_state(self.state.started())
        try:
            response = (
                self._query()
                .select("*")
                .order(self.order_column, desc=not self.ascending)
                .execute()
            )
            rows = [self._to_row(raw) for raw in (response.data or [])]
        except Exception as e:
            message = error_message(e)
            logger.error(f"❌ Failed to load {self.table}: {message}")
            self._set_state(self.state.failed(message))
            return False

        logger.debug(f"Loaded {len(rows)} rows from {self.table}")
        self._set_state(self.state.loaded(rows))
        return True

    def _mutate(self, action: str, call: Callable[[], Any], refetch: bool) -> bool:
        try:
            call()
        except Exception as e:
            message = error_message(e)
            logger.error(f"❌ Failed to {action} {self.table}: {message}")
            self._set_state(self.state.failed(message))
            return False

        logger.info(f"✅ {action} {self.table} succeeded")
        if refetch:
            self.fetch_all()
        return True

    def insert(self, record: Record, refetch: bool = True) -> bool:
        def call():
            payload = self._to_payload(record)
            return self._query().insert([payload]).execute()
        return self._mutate("insert into", call, refetch)

    def insert_many(self, records: List[Record], refetch: bool = False) -> bool:
        def call():
            payloads = [self._to_payload(record) for record in records]
            return self._query().insert(payloads).execute()
        return self._mutate(f"insert {len(records)} rows into", call, refetch)

    def update(self, record_id: int, changes: Record) -> bool:
        def call():
            payload = self._to_payload(changes)
            return self._query().update(payload).eq("id", record_id).execute()
        return self._mutate(f"update row {record_id} in", call, refetch=True)

    def remove(self, record_id: int) -> bool:
        def call():
            return self._query().delete().eq("id", record_id).execute()
        return self._mutate(f"delete row {record_id} from", call, refetch=True)

    def remove_many(self, record_ids: Iterable[int]) -> bool:
        ids = list(record_ids)

        def call():
            return self._query().delete().in_("id", ids).execute()
        return self._mutate(f"delete {len(ids)} rows from", call, refetch=True)


def _row_id(row: Any) -> Any:
    if isinstance(row, dict):
        return row.get('id')
    return getattr(row, 'id', None)
