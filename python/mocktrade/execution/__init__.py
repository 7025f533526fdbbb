"""
Execution layer.

This module implements:
- SettlementEngine: Periodic order settlement
- FillInfo: Fill information
- compute_pnl: Profit/loss formula
"""

from .settlement import FillInfo, SettlementEngine, compute_pnl

__all__ = [
    "FillInfo",
    "SettlementEngine",
    "compute_pnl",
]
