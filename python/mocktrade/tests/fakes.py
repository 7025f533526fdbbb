"""
Deterministic stand-ins for the clock and random source used in tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional


class FakeClock:
    """Manually advanced clock; each call returns the current fake time."""

    def __init__(self, start: Optional[datetime] = None, step: float = 0.0):
        self._now = start or datetime(2025, 7, 1, 9, 30, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self._now
        if self.step:
            self._now = self._now + timedelta(seconds=self.step)
        return now

    def advance(self, seconds: float) -> datetime:
        self._now = self._now + timedelta(seconds=seconds)
        return self._now


class ScriptedRandom:
    """Random source replaying scripted draws.

    ``random()`` pops from ``draws`` (default ``fallback`` once exhausted).
    ``uniform(low, high)`` pops a fraction from ``fractions`` and maps it into
    ``[low, high]``; the midpoint is used once exhausted.
    """

    def __init__(self, draws: Iterable[float] = (), fractions: Iterable[float] = (), fallback: float = 0.99):
        self.draws: List[float] = list(draws)
        self.fractions: List[float] = list(fractions)
        self.fallback = fallback

    def random(self) -> float:
        return self.draws.pop(0) if self.draws else self.fallback

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        fraction = self.fractions.pop(0) if self.fractions else 0.5
        return low + (high - low) * fraction
