"""Tab-separated bulk copy and paste between tables and spreadsheets.

Copy writes a header line of display labels followed by one line per row.
Paste discards the first line, splits the rest on tabs, and hands each
line to a screen-supplied parser that returns a draft record or None.
"""

import logging
import re
import time
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from config.constants import STATUS_MESSAGE_SECONDS

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = 'No data found in clipboard'

ParseRow = Callable[[List[str]], Optional[Dict[str, Any]]]


class ClipboardBackend(Protocol):
    def write_text(self, text: str) -> None: ...

    def read_text(self) -> str: ...


class MemoryClipboard:
    """Process-local clipboard, used by scripts and tests."""

    def __init__(self, text: str = ''):
        self.text = text

    def write_text(self, text: str) -> None:
        self.text = text

    def read_text(self) -> str:
        return self.text


class TimedStatus:
    """A status message that reads as empty once ``duration`` seconds have passed."""

    def __init__(self, duration: float = STATUS_MESSAGE_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self._clock = clock
        self._message = ''
        self._set_at = 0.0

    def set(self, message: str) -> None:
        # Setting a new message restarts the timer
        self._message = message
        self._set_at = self._clock()

    def clear(self) -> None:
        self._message = ''

    @property
    def message(self) -> str:
        if self._message and self._clock() - self._set_at >= self.duration:
            self._message = ''
        return self._message

    def __bool__(self) -> bool:
        return bool(self.message)


def _cell_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _record_value(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def serialize_rows(headers: Sequence[str], columns: Sequence[str], rows: Sequence[Any]) -> str:
    """Build clipboard text: header labels, then one tab-joined line per row."""
    header_line = '\t'.join(headers)
    lines = ['\t'.join(_cell_text(_record_value(row, key)) for key in columns) for row in rows]
    return header_line + '\n' + '\n'.join(lines)


def split_clipboard_text(text: str) -> Optional[List[List[str]]]:
    """Split pasted text into value lists, header line removed.

    Returns:
        One list of cell strings per data line, or None when the text has
        fewer than two lines (header plus at least one row)
    """
    lines = re.split(r'\r?\n', text or '')
    # Drop blank lines at either end; trailing tabs are empty cells and stay
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    if len(lines) < 2:
        return None
    return [line.split('\t') for line in lines[1:]]


class ClipboardTransfer:
    """Copy/paste controller for one table screen.

    Args:
        columns: Record keys, in clipboard column order
        headers: Display labels written as the header line
        parse_row: Turns one line's values into a draft record, or None to skip it
        insert: Stores one draft; returns True on success
        on_complete: Called after a paste has processed every line
        get_rows: Returns the rows to copy
        clipboard: Backend providing ``write_text``/``read_text``
    """

    def __init__(self, columns: Sequence[str], headers: Sequence[str], parse_row: ParseRow,
                 insert: Callable[[Dict[str, Any]], bool], on_complete: Callable[[], Any],
                 get_rows: Callable[[], Sequence[Any]], clipboard: ClipboardBackend,
                 status_seconds: float = STATUS_MESSAGE_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.columns = list(columns)
        self.headers = list(headers)
        self.parse_row = parse_row
        self.insert = insert
        self.on_complete = on_complete
        self.get_rows = get_rows
        self.clipboard = clipboard
        self._copy_status = TimedStatus(status_seconds, clock)
        self._paste_status = TimedStatus(status_seconds, clock)

    @property
    def copy_status(self) -> str:
        return self._copy_status.message

    @property
    def paste_status(self) -> str:
        return self._paste_status.message

    def copy(self) -> str:
        try:
            rows = list(self.get_rows())
            self.clipboard.write_text(serialize_rows(self.headers, self.columns, rows))
            message = f"Copied {len(rows)} records!"
            logger.info(message)
        except Exception as e:
            logger.error(f"❌ Clipboard copy failed: {e}")
            message = f"Copy failed: {e}"
        self._copy_status.set(message)
        return message

    def paste(self) -> str:
        try:
            value_rows = split_clipboard_text(self.clipboard.read_text())
            if value_rows is None:
                self._paste_status.set(NO_DATA_MESSAGE)
                return NO_DATA_MESSAGE

            added = 0
            for values in value_rows:
                record = self.parse_row(values)
                if record and self.insert(record):
                    added += 1

            message = f"Added {added} records!"
            logger.info(f"{message} ({len(value_rows)} lines pasted)")
            self._paste_status.set(message)
            self.on_complete()
            return message
        except Exception as e:
            logger.error(f"❌ Clipboard paste failed: {e}")
            message = f"Paste failed: {e}"
            self._paste_status.set(message)
            return message
