"""CSV import with interactive column mapping.

A session holds one uploaded file between the upload and the confirm
click: parsed headers and rows, plus the column -> field mapping the user
can adjust before committing. Mapped values are sent as trimmed strings;
the database casts them to the column types.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from config.constants import CSV_IMPORT_BATCH_SIZE, CSV_PREVIEW_ROWS

logger = logging.getLogger(__name__)

SKIP = 'skip'

NOT_ENOUGH_LINES_MESSAGE = 'CSV file must have a header row and at least one data row'
NO_VALID_ROWS_MESSAGE = 'No valid rows to import'


def parse_csv_line(line: str) -> List[str]:
    """Split one CSV line into trimmed fields.

    Double-quoted fields may contain commas; a doubled quote inside a
    quoted field is a literal quote.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if in_quotes:
            if char == '"' and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            elif char == '"':
                in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ',':
            fields.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append(''.join(current).strip())
    return fields


def normalize_header(header: str) -> str:
    """Lowercase; spaces, hyphens and slashes to underscores; drop anything else."""
    normalized = re.sub(r'[\s\-/]', '_', header.lower())
    return re.sub(r'[^a-z0-9_]', '', normalized)


def auto_map_columns(headers: Sequence[str], allowed_fields: Sequence[str]) -> Dict[int, str]:
    """Map header positions to allowed fields; unmatched headers map to ``SKIP``."""
    mapping = {}
    for index, header in enumerate(headers):
        normalized = normalize_header(header)
        match = next((f for f in allowed_fields if f == normalized or f == header), None)
        mapping[index] = match or SKIP
    return mapping


def decode_upload(data: Union[bytes, str]) -> str:
    """Decode uploaded file bytes, tolerating a UTF-8 byte order mark."""
    if isinstance(data, str):
        return data
    return data.decode('utf-8-sig', errors='replace')


@dataclass
class ImportResult:
    success: bool
    inserted: int = 0
    error: Optional[str] = None


class CsvImportSession:
    """State of one CSV import between upload and confirmation.

    Args:
        allowed_fields: Fields a CSV column may be mapped to
        batch_size: Rows per insert call
    """

    def __init__(self, allowed_fields: Sequence[str], batch_size: int = CSV_IMPORT_BATCH_SIZE):
        self.allowed_fields = list(allowed_fields)
        self.batch_size = batch_size
        self.reset()

    def reset(self) -> None:
        """Drop any parsed file and close the mapping dialog."""
        self.headers: List[str] = []
        self.rows: List[List[str]] = []
        self.mapping: Dict[int, str] = {}
        self.error: Optional[str] = None
        self.importing = False

    @property
    def is_open(self) -> bool:
        return bool(self.headers)

    def load_text(self, text: str) -> bool:
        """Parse file contents and propose a mapping.

        Returns:
            True when the file had a header and at least one data row
        """
        self.reset()
        lines = [line for line in re.split(r'\r?\n', text) if line.strip() != '']
        if len(lines) < 2:
            self.error = NOT_ENOUGH_LINES_MESSAGE
            logger.warning(f"CSV rejected: only {len(lines)} non-blank lines")
            return False

        self.headers = parse_csv_line(lines[0])
        self.rows = [parse_csv_line(line) for line in lines[1:]]
        self.mapping = auto_map_columns(self.headers, self.allowed_fields)
        logger.info(f"Loaded CSV with {len(self.rows)} rows, {self.mapped_field_count} columns auto-mapped")
        return True

    def set_mapping(self, index: int, field: str) -> None:
        if field != SKIP and field not in self.allowed_fields:
            raise ValueError(f"'{field}' is not an importable field")
        self.mapping[index] = field

    @property
    def mapped_field_count(self) -> int:
        return sum(1 for field in self.mapping.values() if field and field != SKIP)

    def preview(self, n: int = CSV_PREVIEW_ROWS) -> List[List[str]]:
        return self.rows[:n]

    def build_records(self) -> List[Dict[str, Any]]:
        """Mapped records for every row with at least one non-empty mapped value."""
        records = []
        for row in self.rows:
            record = {}
            for index, field in sorted(self.mapping.items()):
                if field == SKIP:
                    continue
                value = row[index].strip() if index < len(row) else ''
                if value != '':
                    record[field] = value
            if record:
                records.append(record)
        return records

    def run_import(self, insert_batch: Callable[[List[Dict[str, Any]]], bool],
                   on_complete: Optional[Callable[[], Any]] = None,
                   get_error: Optional[Callable[[], Optional[str]]] = None) -> ImportResult:
        """Insert the mapped records in batches.

        The first failing batch stops the import; batches already inserted
        stay in the table.

        Args:
            insert_batch: Inserts a list of records, returns True on success
            on_complete: Called after every batch succeeded
            get_error: Returns the message of the last failed insert

        Returns:
            ImportResult with the inserted row count or the error message
        """
        records = self.build_records()
        if not records:
            self.error = NO_VALID_ROWS_MESSAGE
            return ImportResult(success=False, error=NO_VALID_ROWS_MESSAGE)

        self.importing = True
        inserted = 0
        try:
            for start in range(0, len(records), self.batch_size):
                batch = records[start:start + self.batch_size]
                if not insert_batch(batch):
                    message = (get_error() if get_error else None) or 'Import failed'
                    logger.error(f"❌ CSV import stopped after {inserted} rows: {message}")
                    self.error = message
                    return ImportResult(success=False, inserted=inserted, error=message)
                inserted += len(batch)
        finally:
            self.importing = False

        logger.info(f"✅ Imported {inserted} rows from CSV")
        self.reset()
        if on_complete:
            on_complete()
        return ImportResult(success=True, inserted=inserted)
