"""
State management layer.

This module implements:
- Ledger: Cash balance management
- Order: Order representation
- OrderBook: Order lifecycle management
- ConnectivityGate: Mock market connection
"""

from .connectivity import ConnectionState, ConnectivityGate
from .ledger import Ledger
from .orderbook import Order, OrderBook, OrderSide, OrderStatus

__all__ = [
    "ConnectionState",
    "ConnectivityGate",
    "Ledger",
    "Order",
    "OrderBook",
    "OrderSide",
    "OrderStatus",
]
