"""
Demo market simulation and settlement engine.

This package implements the in-process core of a demo trading front-end:
- Market Layer: synthetic price process
- State Layer: Ledger / OrderBook / ConnectivityGate
- Execution Layer: SettlementEngine
- Feed Layer: bounded event feed
- Engine Layer: MarketSimulator coordinator and repeating timers
- Storage Layer: in-memory order records

No real brokerage, persistence or authentication is involved.
"""

__version__ = "0.1.0"

from .config import SimulationConfig, load_config
from .engine import AccountSnapshot, MarketSimulator
from .exceptions import (
    InvalidAmountError,
    InvalidSizeError,
    MissingCredentialError,
    MockTradeError,
    NotConnectedError,
    OrderStateError,
)
from .execution import FillInfo, SettlementEngine
from .feed import EventFeed, FeedEvent, FeedKind
from .market import PriceProcess, PriceTick
from .state import ConnectivityGate, Ledger, Order, OrderBook, OrderSide, OrderStatus
from .storage import MemoryStorage

__all__ = [
    "SimulationConfig",
    "load_config",
    "AccountSnapshot",
    "MarketSimulator",
    "InvalidAmountError",
    "InvalidSizeError",
    "MissingCredentialError",
    "MockTradeError",
    "NotConnectedError",
    "OrderStateError",
    "FillInfo",
    "SettlementEngine",
    "EventFeed",
    "FeedEvent",
    "FeedKind",
    "PriceProcess",
    "PriceTick",
    "ConnectivityGate",
    "Ledger",
    "Order",
    "OrderBook",
    "OrderSide",
    "OrderStatus",
    "MemoryStorage",
]
