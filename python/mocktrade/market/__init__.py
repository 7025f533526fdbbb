"""
Market layer.

This module implements:
- PriceTick: One price observation
- PriceProcess: Synthetic price generator
"""

from .price_process import PriceProcess, PriceTick

__all__ = [
    "PriceProcess",
    "PriceTick",
]
