"""
Market simulator.

Coordinator owning the whole simulation context (price process, order book,
ledger, connectivity gate, event feed, settlement engine). Every read and
mutation goes through one re-entrant lock, so timer callbacks and calls from
the presentation layer never interleave inside a single operation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union
import logging
import threading

import numpy as np
import pandas as pd

from ..config.loader import SimulationConfig, load_config
from ..exceptions import InvalidSizeError, NotConnectedError
from ..execution.settlement import FillInfo, SettlementEngine
from ..feed.event_feed import EventFeed, FeedEvent, FeedKind
from ..interfaces.storage import IStorageBackend
from ..market.price_process import PriceProcess, PriceTick
from ..state import ConnectivityGate, Ledger, Order, OrderBook, OrderSide, OrderStatus
from ..storage.memory import MemoryStorage
from ..utils.clock import Clock, utc_now
from ..utils.decimals import Number
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of the account for renderers."""

    symbol: str
    price: Decimal
    balance: Decimal
    connected: bool
    credential: str
    pending_orders: int
    filled_orders: int
    realized_pnl: Decimal

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'symbol': self.symbol,
            'price': str(self.price),
            'balance': str(self.balance),
            'connected': self.connected,
            'credential': self.credential,
            'pending_orders': self.pending_orders,
            'filled_orders': self.filled_orders,
            'realized_pnl': str(self.realized_pnl),
        }


class MarketSimulator:
    """Single-account demo market.

    Typical use::

        with MarketSimulator() as sim:
            order = sim.submit_order("buy", 1)
            ...

    ``start``/``stop`` drive the price tick and settlement sweep on their own
    cadences; ``tick`` and ``sweep`` advance them by hand.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[np.random.Generator] = None,
        settlement_rng: Optional[np.random.Generator] = None,
        clock: Optional[Clock] = None,
        storage: Optional[IStorageBackend] = None,
    ):
        """
        Initialize simulator and generate the warm-up price history.

        Args:
            config: Simulation configuration (defaults if None).
            rng: Random source for prices (and settlement unless settlement_rng is given).
                 Defaults to ``numpy.random.default_rng(config.seed)``.
            settlement_rng: Optional separate random source for fill draws.
            clock: Time source.
            storage: Order record store (MemoryStorage if None).
        """
        self.config = config or SimulationConfig()
        self.clock = clock or utc_now
        rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._lock = threading.RLock()

        self.event_feed = EventFeed(capacity=self.config.feed.capacity, clock=self.clock)
        self.storage = storage if storage is not None else MemoryStorage()
        self.price_process = PriceProcess(
            config=self.config.market,
            rng=rng,
            feed=self.event_feed,
            clock=self.clock,
        )
        self.ledger = Ledger(
            balance=self.config.account.initial_balance,
            max_deposit=self.config.account.max_deposit,
        )
        self.order_book = OrderBook(
            self.storage,
            feed=self.event_feed,
            capacity=self.config.account.order_capacity,
            max_size=self.config.account.max_order_size,
            clock=self.clock,
        )
        self.gate = ConnectivityGate(feed=self.event_feed, credential=self.config.account.credential)
        self.settlement = SettlementEngine(
            order_book=self.order_book,
            ledger=self.ledger,
            price_source=lambda: self.price_process.current_price,
            rng=settlement_rng if settlement_rng is not None else rng,
            feed=self.event_feed,
            clock=self.clock,
            fill_probability=self.config.settlement.fill_probability,
            contract_multiplier=self.config.settlement.contract_multiplier,
        )

        self.scheduler = Scheduler()
        self.scheduler.every("price-tick", self.config.market.tick_interval, self.tick)
        self.scheduler.every("settlement", self.config.settlement.interval, self.sweep)

        self.price_process.initialize()

    @classmethod
    def from_config(cls, config_path: Optional[str] = None, **kwargs) -> "MarketSimulator":
        """Build a simulator from a YAML configuration file (see ``load_config``)."""
        return cls(config=load_config(config_path), **kwargs)

    # ----- lifecycle -----

    def start(self) -> None:
        """Start the price tick and settlement timers."""
        self.scheduler.start()
        logger.info(
            f"Simulator started: {self.config.market.symbol}, tick every "
            f"{self.config.market.tick_interval}s, settlement every {self.config.settlement.interval}s"
        )

    def stop(self) -> None:
        """Stop both timers; in-flight callbacks finish first."""
        self.scheduler.stop()
        logger.info("Simulator stopped")

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def __enter__(self) -> "MarketSimulator":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ----- time-driven transitions -----

    def tick(self) -> PriceTick:
        """Advance the price process by one tick."""
        with self._lock:
            return self.price_process.tick()

    def sweep(self) -> List[FillInfo]:
        """Run one settlement sweep at the current price."""
        with self._lock:
            return self.settlement.sweep()

    # ----- orders -----

    def submit_order(self, side: Union[OrderSide, str], size: Number) -> Order:
        """
        Place a market order at the current price.

        Args:
            side: ``"buy"``/``"sell"`` or an OrderSide.
            size: Positive order size.

        Returns:
            Copy of the new PENDING order.

        Raises:
            InvalidSizeError: If size is not positive.
            NotConnectedError: If ``account.require_connection`` is set and the gate is offline.
        """
        with self._lock:
            if self.config.account.require_connection and not self.gate.connected:
                logger.warning("Order rejected: not connected")
                raise NotConnectedError("Connect to the market before placing orders")
            try:
                order = self.order_book.submit(side, size, self.price_process.current_price)
            except InvalidSizeError as e:
                logger.warning(f"Order rejected: {e}")
                raise
            return self.order_book.get(order.order_id)

    def orders(self) -> List[Order]:
        """Retained orders, newest first (copies)."""
        with self._lock:
            return self.order_book.list()

    def order_record(self, order_id: str) -> Optional[dict]:
        """
        Stored audit record of an order.

        Args:
            order_id: Order ID.

        Returns:
            The record as last written (placement, then fill), or None once the
            order has been evicted or the account reset.
        """
        with self._lock:
            return self.storage.load(f"order:{order_id}")

    # ----- market data -----

    @property
    def current_price(self) -> Decimal:
        with self._lock:
            return self.price_process.current_price

    def price_history(self) -> List[PriceTick]:
        """Rolling price window, oldest first."""
        with self._lock:
            return self.price_process.history()

    def price_frame(self) -> pd.DataFrame:
        """Rolling price window as a DataFrame, for chart renderers."""
        with self._lock:
            return self.price_process.to_frame()

    def feed(self) -> List[FeedEvent]:
        """Retained feed events, newest first."""
        with self._lock:
            return self.event_feed.snapshot()

    # ----- account -----

    @property
    def balance(self) -> Decimal:
        with self._lock:
            return self.ledger.balance

    def deposit(self, amount: Optional[Number] = None) -> Decimal:
        """
        Credit a demo deposit (``account.deposit_amount`` by default).

        Returns:
            New balance.

        Raises:
            InvalidAmountError: If amount is not positive.
        """
        with self._lock:
            value = amount if amount is not None else self.config.account.deposit_amount
            balance = self.ledger.deposit(value)
            self.event_feed.publish_text(FeedKind.SYSTEM, f"Deposited ${value} (demo)")
            logger.info(f"Deposited {value}, balance {balance}")
            return balance

    def reset_account(self) -> Decimal:
        """
        Restore the reset balance and clear every order.

        Returns:
            New balance.
        """
        with self._lock:
            balance = self.ledger.reset(self.config.account.reset_balance)
            self.order_book.clear()
            self.event_feed.publish_text(FeedKind.SYSTEM, "Reset demo state")
            logger.info(f"Account reset, balance {balance}")
            return balance

    def snapshot(self) -> AccountSnapshot:
        """Consistent read-only view of the account."""
        with self._lock:
            orders = self.order_book.list()
            filled = [o for o in orders if o.status == OrderStatus.FILLED]
            return AccountSnapshot(
                symbol=self.config.market.symbol,
                price=self.price_process.current_price,
                balance=self.ledger.balance,
                connected=self.gate.connected,
                credential=self.gate.masked_credential,
                pending_orders=len(orders) - len(filled),
                filled_orders=len(filled),
                realized_pnl=sum((o.pnl for o in filled), Decimal("0.00")),
            )

    # ----- connectivity -----

    @property
    def connected(self) -> bool:
        with self._lock:
            return self.gate.connected

    def configure_credential(self, credential: Optional[str]) -> None:
        """Store the API token used by ``connect``."""
        with self._lock:
            self.gate.configure(credential)

    def connect(self, credential: Optional[str] = None) -> None:
        """
        Connect to the mock market.

        Raises:
            MissingCredentialError: If no credential is given or configured.
        """
        with self._lock:
            self.gate.connect(credential)

    def disconnect(self) -> None:
        with self._lock:
            self.gate.disconnect()

    def toggle_connection(self) -> bool:
        """Connect when offline, disconnect when online; returns the new state."""
        with self._lock:
            return self.gate.toggle()

    # ----- tools -----

    def run_indicator(self) -> FeedEvent:
        """Record a (mock) indicator trigger in the feed."""
        with self._lock:
            return self.event_feed.publish_text(FeedKind.SYSTEM, "Indicator triggered (mock)")
