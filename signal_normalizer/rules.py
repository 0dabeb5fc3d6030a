"""
Fixed heuristic rules for capture normalization.

Everything here is deliberately static: the column classifier is a fixed
heuristic, not a trained model.
"""

FREQUENCY_KEYWORDS = (
    "freq", "frequency", "mhz", "khz", "ghz", "hertz", "hz",
    "channel", "band", "freq.", "f(mhz)",
)
POWER_KEYWORDS = (
    "power", "dbm", "db", "level", "amplitude", "rssi",
    "signal", "strength", "intensity", "sig_str", "pwr",
)

# Added on top of the substring hits when the whole header equals a keyword
EXACT_MATCH_BONUS = 10

# Order matters: longer suffixes first so "dbm" is not cut down to "db"
UNIT_SUFFIXES = ("mhz", "khz", "ghz", "hz", "dbm", "db", "mw", "pwr")

# Delimiter candidates in tie-break priority order
DELIMITER_PRIORITY = ("comma", "semicolon", "tab", "whitespace")
DELIMITER_SAMPLE_LINES = 50

DATA_START_SCAN_LINES = 10
STATISTICAL_SAMPLE_ROWS = 20
ERROR_SAMPLE_ROWS = 5

SAMPLE_WINDOW = 10

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024
SEGMENT_FILE_NAME = "File Segment"
ACCEPTED_EXTENSIONS = (".csv", ".txt")
