"""
Utility helpers.

This module implements:
- setup_logger: Console/file logging setup
- Decimal rounding helpers
- utc_now: Default clock
"""

from .clock import Clock, utc_now
from .decimals import money, quantize, to_decimal
from .logger import level_from_name, setup_logger

__all__ = [
    "Clock",
    "utc_now",
    "money",
    "quantize",
    "to_decimal",
    "level_from_name",
    "setup_logger",
]
