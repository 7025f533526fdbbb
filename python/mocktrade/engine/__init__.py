"""
Engine layer.

This module implements:
- MarketSimulator: Coordinator and public API
- AccountSnapshot: Read-only account view
- Scheduler / RepeatingTask: Cancellable periodic timers
"""

from .scheduler import RepeatingTask, Scheduler
from .simulator import AccountSnapshot, MarketSimulator

__all__ = [
    "AccountSnapshot",
    "MarketSimulator",
    "RepeatingTask",
    "Scheduler",
]
