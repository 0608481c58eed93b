"""Report file layout and terminal styling for evaluation output."""

from __future__ import annotations

REPORT_FILENAME: str = "report.json"
REPORT_TEMP_PREFIX: str = ".tmp-"
REPORT_TEMP_SUFFIX: str = ".json"

SCHEMA_VERSION: str = "1.0.0"

# ANSI escape codes for terminal colouring.
ANSI_RESET: str = "\033[0m"
ANSI_RED: str = "\033[31;1m"
ANSI_YELLOW: str = "\033[33;1m"
ANSI_GREEN: str = "\033[32;1m"
ANSI_DIM: str = "\033[2m"

SEVERITY_COLORS: dict[str, str] = {
    "error": ANSI_RED,
    "warning": ANSI_YELLOW,
    "info": ANSI_GREEN,
}
