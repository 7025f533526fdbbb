"""
Exceptions for the mock trading engine.

All of these are local, recoverable conditions reported back to the caller.
"""


class MockTradeError(Exception):
    """Base class for engine errors."""

    pass


class InvalidSizeError(MockTradeError, ValueError):
    """Raised when an order is submitted with a non-positive size."""

    pass


class InvalidAmountError(MockTradeError, ValueError):
    """Raised when a deposit amount is not positive."""

    pass


class MissingCredentialError(MockTradeError):
    """Raised when connect is attempted without a configured credential."""

    pass


class NotConnectedError(MockTradeError):
    """Raised when strict connectivity is enabled and the account is offline."""

    pass


class OrderStateError(MockTradeError):
    """Raised when an order transition other than PENDING -> FILLED is attempted."""

    pass
