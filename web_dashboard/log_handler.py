#!/usr/bin/env python3
"""
Logging for the feedlot dashboard.

The app loggers write to ``logs/app.log`` beside this module and to a
bounded in-memory buffer that the System Logs page can filter. Both use
the same line format so file lines can be parsed back into entries.
"""

import functools
import logging
import os
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from config.constants import DEFAULT_LOG_FORMAT, LOG_DATE_FORMAT, LOG_FILE

LOG_DIR = os.path.join(os.path.dirname(__file__), 'logs')

# Loggers that receive the file handler
APP_MODULES = [
    'app',  # log_message() default
    'streamlit_utils',
    'page_controllers',
    'chart_utils',
    'supabase_client',
    'navigation',
    'log_handler',
    'config',
    'data',
    'utils',
    '__main__',
]

LogEntry = Dict[str, Any]


class LocalTimeFormatter(logging.Formatter):
    """Stamps records in the configured display timezone instead of server time."""

    def formatTime(self, record, datefmt=None):
        from utils.timezone_utils import get_display_timezone
        stamp = datetime.fromtimestamp(record.created, tz=get_display_timezone())
        return stamp.strftime(datefmt or LOG_DATE_FORMAT)


def _formatter() -> LocalTimeFormatter:
    return LocalTimeFormatter(DEFAULT_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def filter_logs(entries: Iterable[LogEntry], n: Optional[int] = None, level: Optional[str] = None,
                module: Optional[str] = None, search: Optional[str] = None) -> List[LogEntry]:
    """Keep entries matching every given filter, then the last ``n`` of them.

    ``level`` must match exactly; ``module`` and ``search`` are
    case-insensitive substring matches on the logger name and message.
    """
    result = list(entries)
    if level:
        result = [e for e in result if e['level'] == level]
    if module:
        wanted = module.lower()
        result = [e for e in result if wanted in e['module'].lower()]
    if search:
        wanted = search.lower()
        result = [e for e in result if wanted in e['message'].lower()]
    return result[-n:] if n else result


class InMemoryLogHandler(logging.Handler):
    """Ring buffer of the most recent ``maxlen`` records."""

    def __init__(self, maxlen: int = 500):
        super().__init__()
        self._entries = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self.setFormatter(_formatter())

    def emit(self, record):
        try:
            entry = {
                'timestamp': datetime.fromtimestamp(record.created),
                'level': record.levelname,
                'module': record.name,
                'message': record.getMessage(),
                'formatted': self.format(record),
            }
        except Exception:
            self.handleError(record)
            return
        with self._lock:
            self._entries.append(entry)

    def get_logs(self, n=None, level=None, module=None, search=None) -> List[LogEntry]:
        with self._lock:
            snapshot = list(self._entries)
        return filter_logs(snapshot, n=n, level=level, module=module, search=search)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_memory_handler: Optional[InMemoryLogHandler] = None


def get_log_handler() -> InMemoryLogHandler:
    """Process-wide in-memory handler shared by every app logger."""
    global _memory_handler
    if _memory_handler is None:
        _memory_handler = InMemoryLogHandler()
    return _memory_handler


def get_log_file(log_dir: Optional[str] = None) -> str:
    from config.settings import get_settings
    return os.path.join(log_dir or LOG_DIR, get_settings().get('logging.file', LOG_FILE))


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None) -> str:
    """Point the app loggers at the log file and the in-memory buffer.

    Only the loggers in ``APP_MODULES`` are touched and they stop
    propagating, so Streamlit's root handlers do not echo app records.
    Calling this again replaces the handlers instead of stacking them.

    Args:
        level: Minimum level for the app loggers
        log_dir: Directory for the log file (default: ``LOG_DIR``)

    Returns:
        Path of the log file
    """
    log_file = get_log_file(log_dir)
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(_formatter())
    file_handler.setLevel(level)

    memory_handler = get_log_handler()
    memory_handler.setLevel(level)

    for name in APP_MODULES:
        app_logger = logging.getLogger(name)
        for old in list(app_logger.handlers):
            app_logger.removeHandler(old)
        app_logger.addHandler(file_handler)
        app_logger.addHandler(memory_handler)
        app_logger.setLevel(level)
        app_logger.propagate = False

    return log_file


def _parse_line(line: str) -> Optional[LogEntry]:
    # "<timestamp> | <LEVEL> | <logger> | <message>"
    parts = line.split(' | ', 3)
    if len(parts) != 4:
        return None
    stamp, level, module, message = parts
    try:
        timestamp = datetime.strptime(stamp, LOG_DATE_FORMAT)
    except ValueError:
        # Continuation of a multi-line message or traceback
        return None
    return {
        'timestamp': timestamp,
        'level': level.strip(),
        'module': module.strip(),
        'message': message.strip(),
        'formatted': line.strip(),
    }


def read_logs_from_file(n=100, level=None, search=None, log_file: Optional[str] = None,
                        module=None) -> List[LogEntry]:
    """Parse the log file into entries, newest last.

    Returns an empty list when the file does not exist yet.
    """
    log_file = log_file or get_log_file()
    if not os.path.exists(log_file):
        return []

    with open(log_file, 'r', encoding='utf-8') as f:
        entries = [entry for entry in map(_parse_line, f) if entry is not None]
    return filter_logs(entries, n=n, level=level, module=module, search=search)


def log_message(message: str, level: str = 'INFO', module: str = 'app'):
    """Log ``message`` on the ``module`` logger; unknown level names log at INFO."""
    logging.getLogger(module).log(getattr(logging, level.upper(), logging.INFO), message)


def log_execution_time(module_name=None):
    """Decorator logging how long each call took.

    Calls over a second are logged at INFO, faster ones at DEBUG.

    Args:
        module_name: Logger to use (default: the function's module)
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - started
                log_message(
                    f"PERF: {func.__name__} took {elapsed:.3f}s",
                    level='INFO' if elapsed > 1.0 else 'DEBUG',
                    module=module_name or func.__module__,
                )
        return wrapper
    return decorator
