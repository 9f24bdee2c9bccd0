"""
Utilities for the offer tracker.
"""

from .datetime_utils import parse_iso_date, today_iso
from .logger import get_logger, setup_logging

__all__ = [
    "get_logger",
    "parse_iso_date",
    "setup_logging",
    "today_iso",
]
