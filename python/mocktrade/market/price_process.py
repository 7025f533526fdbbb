"""
Synthetic price process.

Produces a plausible, continuously varying price without external input:
a damped-sinusoid warm-up history followed by bounded random-walk ticks.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_DOWN, ROUND_UP, Decimal
from typing import Deque, List, Optional
import logging

import numpy as np
import pandas as pd

from ..config.loader import MarketConfig
from ..feed.event_feed import EventFeed, FeedKind
from ..utils.clock import Clock, utc_now
from ..utils.decimals import quantize, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceTick:
    """One observation of the synthetic price."""

    timestamp: datetime
    price: Decimal

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'timestamp': self.timestamp.isoformat(),
            'price': str(self.price),
        }


class PriceProcess:
    """Bounded random-walk price generator with a rolling history window.

    Randomness comes from an injected generator exposing ``random()`` and
    ``uniform(low, high)`` (``numpy.random.Generator`` by default), so tests
    can script exact price paths.
    """

    def __init__(
        self,
        config: Optional[MarketConfig] = None,
        rng: Optional[np.random.Generator] = None,
        feed: Optional[EventFeed] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize price process.

        Args:
            config: Market configuration (defaults if None).
            rng: Random source.
            feed: Event feed receiving a PRICE event per tick.
            clock: Time source.
        """
        self.config = config or MarketConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.feed = feed
        self.clock = clock or utc_now
        self.precision = self.config.precision
        self._step = Decimal(1).scaleb(-self.precision)
        self.max_delta = to_decimal(self.config.max_delta)
        self.min_price = max(
            to_decimal(self.config.min_price).quantize(self._step, rounding=ROUND_UP),
            self._step,
        )
        self._history: Deque[PriceTick] = deque(maxlen=self.config.history_size)
        self._current: Optional[Decimal] = None

    @property
    def current_price(self) -> Decimal:
        """Latest price; initializes the warm-up history on first access."""
        if self._current is None:
            self.initialize()
        return self._current

    def initialize(self, seed_count: Optional[int] = None) -> List[PriceTick]:
        """
        Generate a warm-up history and seed the current price.

        The i-th warm-up sample is ``base + sin(i / period) * amplitude + U(0, jitter)``,
        spaced one second apart and ending just before now.

        Args:
            seed_count: Number of warm-up samples (config default if None).

        Returns:
            The generated warm-up ticks, oldest first.
        """
        count = seed_count if seed_count is not None else self.config.seed_count
        if count <= 0:
            raise ValueError(f"seed_count must be positive, got {count}")

        now = self.clock()
        waves = np.sin(np.arange(count) / self.config.wave_period)
        base = to_decimal(self.config.base_price)
        amplitude = to_decimal(self.config.wave_amplitude)
        jitter = float(self.config.jitter)

        self._history.clear()
        for i, wave in enumerate(waves):
            raw = base + to_decimal(float(wave)) * amplitude + to_decimal(self.rng.uniform(0.0, jitter))
            price = self._clamp(quantize(raw, self.precision))
            self._history.append(PriceTick(timestamp=now - timedelta(seconds=count - i), price=price))

        self._current = self._history[-1].price
        logger.info(f"Price process initialized with {count} samples, current price {self._current}")
        return list(self._history)[-count:]

    def tick(self) -> PriceTick:
        """
        Advance the price by one bounded random perturbation.

        Returns:
            The new tick (also appended to history and published to the feed).
        """
        previous = self.current_price
        raw_delta = to_decimal(self.rng.uniform(-float(self.max_delta), float(self.max_delta)))
        # Truncate toward zero so the quantized step never exceeds max_delta
        delta = raw_delta.quantize(self._step, rounding=ROUND_DOWN)
        price = self._clamp(previous + delta)

        timestamp = self.clock()
        if self._history and timestamp <= self._history[-1].timestamp:
            timestamp = self._history[-1].timestamp + timedelta(microseconds=1)

        tick = PriceTick(timestamp=timestamp, price=price)
        self._history.append(tick)
        self._current = price

        if self.feed is not None:
            self.feed.publish_text(FeedKind.PRICE, f"Price {price}", timestamp)
        logger.debug(f"Tick {previous} -> {price}")
        return tick

    def history(self) -> List[PriceTick]:
        """Return the rolling window, oldest first."""
        if self._current is None:
            self.initialize()
        return list(self._history)

    def to_frame(self) -> pd.DataFrame:
        """Return the rolling window as a DataFrame with ``timestamp`` and ``price`` columns."""
        ticks = self.history()
        return pd.DataFrame(
            {
                'timestamp': pd.to_datetime([t.timestamp for t in ticks]),
                'price': [float(t.price) for t in ticks],
            }
        )

    def _clamp(self, price: Decimal) -> Decimal:
        return price if price >= self.min_price else self.min_price
