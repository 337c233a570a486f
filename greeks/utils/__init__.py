"""Utility functions and helpers."""

from greeks.utils.logging import setup_logging
from greeks.utils.helpers import days_to_years, format_greek

__all__ = [
    "setup_logging",
    "days_to_years",
    "format_greek",
]
