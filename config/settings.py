"""Settings for the feedlot records app.

Values come from three layers, later ones winning: built-in defaults, an
optional JSON file and ``FEEDLOT_*`` environment variables. Keys are read
and written with dot paths such as ``display.page_size``.
"""

from __future__ import annotations

import os
import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple
import logging

from .constants import (
    CSV_IMPORT_BATCH_SIZE,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEZONE_NAME,
    GROUPS_BY_PEN_TABLE,
    HEDGING_TABLE,
    HOME_CLOSEOUTS_TABLE,
    LOG_FILE,
    PENS_TABLE,
    STATUS_MESSAGE_SECONDS,
)

logger = logging.getLogger(__name__)

# Environment variable -> (dot path, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    'FEEDLOT_LOG_LEVEL': ('logging.level', str.upper),
    'FEEDLOT_PAGE_SIZE': ('display.page_size', int),
    'FEEDLOT_STATUS_SECONDS': ('display.status_seconds', float),
    'FEEDLOT_CSV_BATCH_SIZE': ('import.batch_size', int),
    'FEEDLOT_TIMEZONE': ('timezone.name', str),
}

# Path of an optional JSON settings file read by configure_system()
CONFIG_FILE_ENV = 'FEEDLOT_CONFIG_FILE'


def default_config() -> Dict[str, Any]:
    return {
        'supabase': {
            'tables': {
                HOME_CLOSEOUTS_TABLE: HOME_CLOSEOUTS_TABLE,
                PENS_TABLE: PENS_TABLE,
                GROUPS_BY_PEN_TABLE: GROUPS_BY_PEN_TABLE,
                HEDGING_TABLE: HEDGING_TABLE,
            },
        },
        'display': {
            'page_size': DEFAULT_PAGE_SIZE,
            'status_seconds': STATUS_MESSAGE_SECONDS,
        },
        'import': {
            'batch_size': CSV_IMPORT_BATCH_SIZE,
        },
        'timezone': {
            'name': DEFAULT_TIMEZONE_NAME,
        },
        'logging': {
            'level': DEFAULT_LOG_LEVEL,
            'file': LOG_FILE,
            'format': DEFAULT_LOG_FORMAT,
        },
    }


def _deep_merge(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
    """Merge ``updates`` into ``target`` in place; nested sections merge key by key."""
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[key] = value


class Settings:
    """Layered app configuration.

    Args:
        config_file: Optional JSON file merged over the defaults
    """

    def __init__(self, config_file: Optional[str] = None):
        self._config: Dict[str, Any] = default_config()
        self._config_file = config_file

        if config_file:
            self.load_from_file(config_file)
        self._apply_environment()

    def _apply_environment(self) -> None:
        for name, (path, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(name)
            if raw:
                self.set(path, convert(raw))

        if self.is_development_mode():
            self.set('logging.level', 'DEBUG')

    def load_from_file(self, config_file: str) -> None:
        """Merge a JSON file over the current values.

        A missing or unreadable file is logged and ignored.
        """
        path = Path(config_file)
        if not path.exists():
            logger.warning(f"Settings file {config_file} does not exist, using defaults")
            return

        try:
            with path.open('r') as f:
                overrides = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"❌ Could not read settings file {config_file}: {e}")
            return

        _deep_merge(self._config, overrides)
        logger.info(f"✅ Settings loaded from {config_file}")

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dot path ``key``, or ``default`` when any segment is missing."""
        node: Any = self._config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` at dot path ``key``, creating sections as needed."""
        *parents, leaf = key.split('.')
        node = self._config
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def get_table_name(self, table: str) -> str:
        """Remote name for a logical table key (unmapped keys are used as-is)."""
        return self.get(f'supabase.tables.{table}', table)

    def get_page_size(self) -> int:
        return int(self.get('display.page_size', DEFAULT_PAGE_SIZE))

    def get_status_seconds(self) -> float:
        return float(self.get('display.status_seconds', STATUS_MESSAGE_SECONDS))

    def get_import_batch_size(self) -> int:
        return int(self.get('import.batch_size', CSV_IMPORT_BATCH_SIZE))

    def get_timezone_name(self) -> str:
        return self.get('timezone.name', DEFAULT_TIMEZONE_NAME)

    def is_development_mode(self) -> bool:
        return os.getenv('FEEDLOT_DEV', 'false').lower() == 'true'

    def get_logging_config(self) -> Dict[str, Any]:
        return self.get('logging', {})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Shared settings, created from defaults and environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure_system(config_file: Optional[str] = None) -> Settings:
    """Replace the shared settings.

    Reads ``config_file``, or the file named by ``FEEDLOT_CONFIG_FILE`` when
    no path is given. Without either, only defaults and environment apply.
    """
    global _settings
    _settings = Settings(config_file or os.getenv(CONFIG_FILE_ENV))
    return _settings
