"""System constants and default values."""

# Supabase tables
HOME_CLOSEOUTS_TABLE = "home_closeouts"
PENS_TABLE = "pens"
GROUPS_BY_PEN_TABLE = "groups_by_pen"
HEDGING_TABLE = "hedging"

# Default sort per table: (column, ascending)
TABLE_ORDERING = {
    HOME_CLOSEOUTS_TABLE: ("purchase_date", False),
    PENS_TABLE: ("pen_name", True),
    GROUPS_BY_PEN_TABLE: ("group_name", True),
    HEDGING_TABLE: ("futures_month", True),
}

# Table display
DEFAULT_PAGE_SIZE = 15
NOTE_PREVIEW_LENGTH = 30

# Bulk operations
CSV_IMPORT_BATCH_SIZE = 100
CSV_PREVIEW_ROWS = 3
STATUS_MESSAGE_SECONDS = 3.0

# Brockoff lots are identified by this (case-sensitive) lot prefix
BROCKOFF_LOT_PREFIX = "B"

# Performance page quick selections
RECENT_GROUP_SELECTIONS = (5, 10)

# Timezone used for log timestamps and datetime display
DEFAULT_TIMEZONE_NAME = "America/Chicago"

# Logging configuration
LOG_FILE = "app.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Version information
VERSION = "1.0.0"
