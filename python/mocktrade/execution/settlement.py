"""
Settlement engine.

Resolves pending orders into fills against the latest price and books the
resulting profit/loss into the ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional
import logging

import numpy as np

from ..feed.event_feed import EventFeed, FeedKind
from ..state import Ledger, OrderBook, OrderSide
from ..utils.clock import Clock, utc_now
from ..utils.decimals import money, to_decimal

logger = logging.getLogger(__name__)


@dataclass
class FillInfo:
    """Fill information after settlement."""

    order_id: str
    side: OrderSide
    size: Decimal
    entry_price: Decimal
    fill_price: Decimal
    pnl: Decimal
    filled_at: datetime
    balance_after: Decimal

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'order_id': self.order_id,
            'side': self.side.value,
            'size': str(self.size),
            'entry_price': str(self.entry_price),
            'fill_price': str(self.fill_price),
            'pnl': str(self.pnl),
            'filled_at': self.filled_at.isoformat(),
            'balance_after': str(self.balance_after),
        }


def compute_pnl(side: OrderSide, entry_price: Decimal, fill_price: Decimal, size: Decimal,
                multiplier: Decimal = Decimal("100")) -> Decimal:
    """
    Profit/loss of a filled order, rounded to cents.

    BUY earns ``(fill - entry) * size * multiplier``; SELL earns the mirror.
    """
    move = fill_price - entry_price if side == OrderSide.BUY else entry_price - fill_price
    return money(move * size * multiplier)


class SettlementEngine:
    """Periodic settlement sweep.

    Every pending order gets an independent draw per sweep and fills when the
    draw is below ``fill_probability``. Unselected orders stay pending and are
    retried on the next sweep; there is no expiry.
    """

    def __init__(
        self,
        order_book: OrderBook,
        ledger: Ledger,
        price_source: Callable[[], Decimal],
        rng: Optional[np.random.Generator] = None,
        feed: Optional[EventFeed] = None,
        clock: Optional[Clock] = None,
        fill_probability: float = 0.5,
        contract_multiplier: Decimal = Decimal("100"),
    ):
        """
        Initialize settlement engine.

        Args:
            order_book: OrderBook instance.
            ledger: Ledger instance.
            price_source: Callable returning the current price, read at sweep time.
            rng: Random source exposing ``random()``.
            feed: Event feed receiving a TRADE event per fill.
            clock: Time source.
            fill_probability: Chance that a pending order fills in one sweep.
            contract_multiplier: P/L multiplier per unit of size.
        """
        if not 0.0 <= fill_probability <= 1.0:
            raise ValueError(f"fill_probability must be within [0, 1], got {fill_probability}")
        self.order_book = order_book
        self.ledger = ledger
        self.price_source = price_source
        self.rng = rng if rng is not None else np.random.default_rng()
        self.feed = feed
        self.clock = clock or utc_now
        self.fill_probability = fill_probability
        self.contract_multiplier = to_decimal(contract_multiplier)
        self.sweeps = 0
        self.failures = 0

    def sweep(self) -> List[FillInfo]:
        """
        Run one settlement pass over all pending orders.

        Returns:
            Fills produced in this pass, in evaluation order.
        """
        self.sweeps += 1
        pending = self.order_book.pending()
        if not pending:
            return []

        price = self.price_source()
        fills = []
        for order in pending:
            if self.rng.random() >= self.fill_probability:
                continue
            try:
                fills.append(self._settle(order.order_id, order.side, order.size, order.entry_price, price))
            except ArithmeticError:
                # Order stays pending; the rest of the sweep proceeds
                self.failures += 1
                logger.exception(f"Settlement of order {order.order_id} failed")

        logger.debug(
            f"Sweep {self.sweeps}: {len(fills)}/{len(pending)} orders filled at {price}"
        )
        return fills

    def _settle(self, order_id: str, side: OrderSide, size: Decimal,
                entry_price: Decimal, price: Decimal) -> FillInfo:
        pnl = compute_pnl(side, entry_price, price, size, self.contract_multiplier)
        filled_at = self.clock()
        balance = self.ledger.adjust(pnl)
        self.order_book.fill(order_id, price, pnl, filled_at)

        if self.feed is not None:
            self.feed.publish_text(FeedKind.TRADE, f"Order {order_id} filled, P/L {pnl}", filled_at)
        logger.info(f"Order {order_id} filled: {side.value} {size} {entry_price} -> {price}, P/L {pnl}")

        return FillInfo(
            order_id=order_id,
            side=side,
            size=size,
            entry_price=entry_price,
            fill_price=price,
            pnl=pnl,
            filled_at=filled_at,
            balance_after=balance,
        )
