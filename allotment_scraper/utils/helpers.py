"""
Helpers module - Reusable utilities for the Allotment Scraper.

Contains:
- Structured logging
- File-name sanitizing for option labels
- Lenient integer parsing for table cells
"""

import datetime
import re
from typing import List, Optional


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

class StructuredLogger:
    """
    Structured logger that captures logs with timestamps and context.

    Stores logs in a list for inclusion in the crawl report while also
    printing to console for real-time visibility.
    """

    def __init__(self, component: str):
        self.component = component
        self.logs: List[str] = []

    def _format(self, level: str, message: str) -> str:
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        return f"[{timestamp}] [{self.component}] {level}: {message}"

    def info(self, message: str) -> None:
        formatted = self._format("INFO", message)
        print(formatted, flush=True)
        self.logs.append(formatted)

    def warning(self, message: str) -> None:
        formatted = self._format("WARN", message)
        print(f"⚠️ {formatted}", flush=True)
        self.logs.append(formatted)

    def error(self, message: str) -> None:
        formatted = self._format("ERROR", message)
        print(f"❌ {formatted}", flush=True)
        self.logs.append(formatted)

    def success(self, message: str) -> None:
        formatted = self._format("OK", message)
        print(f"✅ {formatted}", flush=True)
        self.logs.append(formatted)

    def debug(self, message: str) -> None:
        formatted = self._format("DEBUG", message)
        # Debug only to console, not stored
        print(f"🔍 {formatted}", flush=True)

    def get_logs(self) -> List[str]:
        """Get all captured logs."""
        return self.logs


# ============================================================================
# FILE NAMES
# ============================================================================

_UNSAFE_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9 ]")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def safe_name(label: str, fallback: str = "unnamed") -> str:
    """
    Turn an option label into a file or directory name.

    Drops everything outside [A-Za-z0-9 ] and replaces each whitespace run
    with a single underscore, e.g. 'CSE (AI & ML)' -> 'CSE_AI_ML'.

    Args:
        label: Dropdown option text
        fallback: Name used when nothing survives the cleaning

    Returns:
        Clean name, never empty
    """
    name = _UNSAFE_CHARS_PATTERN.sub("", label)
    name = _WHITESPACE_PATTERN.sub("_", name)
    return name or fallback


# ============================================================================
# CELL PARSING
# ============================================================================

def parse_int_cell(text: Optional[str]) -> Optional[int]:
    """Integer value of a trimmed cell, or None if the cell is not a number."""
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None
