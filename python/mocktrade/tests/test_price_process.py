"""
Unit tests for PriceProcess.

Test warm-up history, bounded ticks, the positive floor and the rolling window.
"""

import unittest
from decimal import Decimal

import numpy as np

from mocktrade.config import MarketConfig
from mocktrade.feed import EventFeed, FeedKind
from mocktrade.market import PriceProcess

from fakes import FakeClock, ScriptedRandom


class TestPriceProcessWarmup(unittest.TestCase):
    """Test warm-up history generation."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.process = PriceProcess(rng=ScriptedRandom(), clock=self.clock)

    def test_initialize_generates_seed_count_samples(self):
        """Warm-up produces seed_count ticks and seeds the current price."""
        ticks = self.process.initialize()

        self.assertEqual(len(ticks), 80)
        self.assertEqual(self.process.current_price, ticks[-1].price)

    def test_warmup_follows_sinusoid_plus_jitter(self):
        """Each sample is base + sin(i / period) * amplitude + jitter, rounded to 5 places."""
        ticks = self.process.initialize(seed_count=3)

        # Scripted jitter draws the midpoint of [0, 0.002]
        self.assertEqual(ticks[0].price, Decimal("1.08100"))
        self.assertEqual(ticks[1].price, Decimal("1.08200"))  # 1.08 + 0.000998 + 0.001
        for tick in ticks:
            self.assertEqual(tick.price, tick.price.quantize(Decimal("0.00001")))

    def test_warmup_timestamps_strictly_increase_and_end_before_now(self):
        """Warm-up samples are one second apart and precede the current time."""
        ticks = self.process.initialize(seed_count=5)
        now = self.clock()

        for older, newer in zip(ticks, ticks[1:]):
            self.assertEqual((newer.timestamp - older.timestamp).total_seconds(), 1.0)
        self.assertLess(ticks[-1].timestamp, now)

    def test_current_price_initializes_lazily(self):
        """Reading the price before initialize() runs the warm-up."""
        self.assertGreater(self.process.current_price, 0)
        self.assertEqual(len(self.process.history()), 80)

    def test_invalid_seed_count(self):
        """A non-positive seed count is rejected."""
        with self.assertRaises(ValueError):
            self.process.initialize(seed_count=0)


class TestPriceProcessTick(unittest.TestCase):
    """Test the random-walk tick."""

    def setUp(self):
        """Set up test fixtures."""
        self.rng = ScriptedRandom()
        self.feed = EventFeed()
        self.process = PriceProcess(rng=self.rng, feed=self.feed, clock=FakeClock())
        self.process.initialize(seed_count=3)
        self.start = self.process.current_price

    def test_tick_moves_by_scripted_delta(self):
        """Upper and lower draws move the price by exactly max_delta."""
        self.rng.fractions = [1.0, 0.0, 0.0]

        self.assertEqual(self.process.tick().price, self.start + Decimal("0.00075"))
        self.assertEqual(self.process.tick().price, self.start)
        self.assertEqual(self.process.tick().price, self.start - Decimal("0.00075"))

    def test_tick_publishes_price_event(self):
        """Each tick appends a PRICE event to the feed."""
        tick = self.process.tick()

        events = self.feed.snapshot()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].kind, FeedKind.PRICE)
        self.assertEqual(events[0].text, f"Price {tick.price}")

    def test_tick_timestamps_strictly_increase_with_frozen_clock(self):
        """A clock that does not move still yields strictly increasing timestamps."""
        ticks = [self.process.tick() for _ in range(5)]

        for older, newer in zip(ticks, ticks[1:]):
            self.assertGreater(newer.timestamp, older.timestamp)

    def test_price_is_floored_at_min_price(self):
        """A downward step below the floor is clamped to a strictly positive price."""
        config = MarketConfig(base_price=Decimal("0.0001"), wave_amplitude=0, jitter=0)
        rng = ScriptedRandom()
        process = PriceProcess(config=config, rng=rng, clock=FakeClock())
        process.initialize(seed_count=1)

        rng.fractions = [0.0]
        tick = process.tick()

        self.assertEqual(tick.price, Decimal("0.00001"))


class TestPriceProcessProperties(unittest.TestCase):
    """Test invariants over a long seeded run."""

    def test_consecutive_ticks_bounded_and_positive(self):
        """|price[i+1] - price[i]| <= max_delta and price > 0 for every tick."""
        process = PriceProcess(rng=np.random.default_rng(7), clock=FakeClock(step=0.95))
        process.initialize()
        max_delta = process.max_delta

        prices = [process.current_price] + [process.tick().price for _ in range(500)]

        for previous, current in zip(prices, prices[1:]):
            self.assertLessEqual(abs(current - previous), max_delta)
            self.assertGreater(current, 0)

    def test_history_window_is_capped(self):
        """The rolling window keeps only the newest history_size ticks."""
        process = PriceProcess(rng=np.random.default_rng(1), clock=FakeClock(step=1.0))
        process.initialize()
        last = None
        for _ in range(300):
            last = process.tick()

        history = process.history()
        self.assertEqual(len(history), 200)
        self.assertEqual(history[-1], last)

    def test_to_frame(self):
        """The history converts to a DataFrame with timestamp and price columns."""
        process = PriceProcess(rng=np.random.default_rng(3), clock=FakeClock())
        process.initialize(seed_count=10)

        frame = process.to_frame()

        self.assertEqual(list(frame.columns), ["timestamp", "price"])
        self.assertEqual(len(frame), 10)
        self.assertAlmostEqual(frame["price"].iloc[-1], float(process.current_price))


if __name__ == "__main__":
    unittest.main()
