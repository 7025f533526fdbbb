"""
Order book management.

Owns the orders of the single simulated account and their lifecycle.
"""

from collections import deque
from copy import copy
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Deque, List, Optional, Union
import logging
import uuid

from ..exceptions import InvalidSizeError, OrderStateError
from ..feed.event_feed import EventFeed, FeedKind
from ..interfaces.storage import IStorageBackend
from ..utils.clock import Clock, utc_now
from ..utils.decimals import Number, to_decimal

logger = logging.getLogger(__name__)


class OrderStatus(Enum):
    """Order status enumeration."""
    PENDING = "pending"
    FILLED = "filled"


class OrderSide(Enum):
    """Order side enumeration."""
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: Union["OrderSide", str]) -> "OrderSide":
        """Accept an OrderSide or a case-insensitive ``"buy"``/``"sell"`` string."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown order side: {value!r}") from None


@dataclass
class Order:
    """Order representation.

    Created PENDING at the price current at submission. The only transition
    is PENDING -> FILLED, which sets ``filled_at``, ``fill_price`` and ``pnl``.
    """

    side: OrderSide
    size: Decimal
    entry_price: Decimal
    placed_at: datetime
    order_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: OrderStatus = OrderStatus.PENDING
    filled_at: Optional[datetime] = None
    fill_price: Optional[Decimal] = None
    pnl: Optional[Decimal] = None

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    def mark_filled(self, fill_price: Decimal, pnl: Decimal, filled_at: datetime) -> None:
        """
        Transition PENDING -> FILLED.

        Raises:
            OrderStateError: If the order is already filled.
        """
        if self.status != OrderStatus.PENDING:
            raise OrderStateError(f"Order {self.order_id} is {self.status.value}, cannot fill")
        self.status = OrderStatus.FILLED
        self.fill_price = fill_price
        self.pnl = pnl
        self.filled_at = filled_at

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'order_id': self.order_id,
            'side': self.side.value,
            'size': str(self.size),
            'entry_price': str(self.entry_price),
            'status': self.status.value,
            'placed_at': self.placed_at.isoformat(),
            'filled_at': self.filled_at.isoformat() if self.filled_at else None,
            'fill_price': str(self.fill_price) if self.fill_price is not None else None,
            'pnl': str(self.pnl) if self.pnl is not None else None,
        }


class OrderBook:
    """Order book management.

    Orders are kept newest first and truncated to ``capacity``; the oldest
    order is evicted first. Each order is also recorded in the storage
    backend under ``order:<order_id>``.
    """

    def __init__(
        self,
        storage: IStorageBackend,
        feed: Optional[EventFeed] = None,
        capacity: int = 50,
        max_size: Number = Decimal("1000000"),
        clock: Optional[Clock] = None,
    ):
        """
        Initialize order book.

        Args:
            storage: Storage backend.
            feed: Event feed receiving an ORDER event per submission.
            capacity: Maximum number of retained orders.
            max_size: Largest accepted order size.
            clock: Time source.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.storage = storage
        self.feed = feed
        self.capacity = capacity
        self.max_size = to_decimal(max_size)
        self.clock = clock or utc_now
        self._orders: Deque[Order] = deque()

    def submit(self, side: Union[OrderSide, str], size: Number, price: Decimal) -> Order:
        """
        Submit a new order at the given (current) price.

        Args:
            side: Order side.
            size: Positive order size.
            price: Current market price, recorded as the entry price.

        Returns:
            The new PENDING order.

        Raises:
            InvalidSizeError: If size is not a positive number or exceeds ``max_size``.
            ValueError: If side is unknown.
        """
        try:
            size_value = to_decimal(size)
        except ValueError as e:
            raise InvalidSizeError(f"Order size must be a number, got {size!r}") from e
        if size_value <= 0:
            raise InvalidSizeError(f"Order size must be positive, got {size_value}")
        if size_value > self.max_size:
            raise InvalidSizeError(f"Order size must not exceed {self.max_size}, got {size_value}")
        order_side = OrderSide.parse(side)

        order = Order(
            side=order_side,
            size=size_value,
            entry_price=price,
            placed_at=self.clock(),
        )
        self._orders.appendleft(order)
        self.storage.save(f"order:{order.order_id}", order.to_dict())
        while len(self._orders) > self.capacity:
            evicted = self._orders.pop()
            self.storage.delete(f"order:{evicted.order_id}")
            logger.debug(f"Order evicted from book: {evicted.order_id}")

        if self.feed is not None:
            self.feed.publish_text(
                FeedKind.ORDER,
                f"Placed {order_side.value.upper()} @ {price} size {size_value}",
                order.placed_at,
            )
        logger.debug(
            f"Order submitted: {order.order_id}, {order_side.value} {size_value} @ {price}, "
            f"total_orders={len(self._orders)}"
        )
        return order

    def fill(self, order_id: str, fill_price: Decimal, pnl: Decimal, filled_at: datetime) -> Order:
        """
        Mark a pending order filled and update its stored record.

        Raises:
            KeyError: If the order is not in the book.
            OrderStateError: If the order is already filled.
        """
        order = self._find(order_id)
        if order is None:
            raise KeyError(order_id)
        order.mark_filled(fill_price, pnl, filled_at)
        self.storage.save(f"order:{order_id}", order.to_dict())
        return order

    def get(self, order_id: str) -> Optional[Order]:
        """Return a copy of an order by ID, or None."""
        order = self._find(order_id)
        return copy(order) if order is not None else None

    def list(self) -> List[Order]:
        """Return copies of all retained orders, newest first."""
        return [copy(order) for order in self._orders]

    def pending(self) -> List[Order]:
        """Return the pending orders, oldest first (live objects, for settlement)."""
        return [order for order in reversed(self._orders) if order.is_pending]

    def clear(self) -> None:
        """Remove every order (account reset)."""
        for order in self._orders:
            self.storage.delete(f"order:{order.order_id}")
        self._orders.clear()
        logger.debug("Order book cleared")

    def __len__(self) -> int:
        return len(self._orders)

    def _find(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None
