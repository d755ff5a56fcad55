"""Utility functions and constants."""

from allotment_scraper.utils.helpers import StructuredLogger, parse_int_cell, safe_name

__all__ = ["StructuredLogger", "parse_int_cell", "safe_name"]
