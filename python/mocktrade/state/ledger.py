"""
Account ledger.

Holds the cash balance of the single demo account.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
import logging

from ..exceptions import InvalidAmountError
from ..utils.clock import utc_now
from ..utils.decimals import Number, money, to_decimal

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Cash balance, always rounded to cents.

    Mutated only by settlement (``adjust``) and by manual account actions
    (``deposit``, ``reset``). No negative-balance floor is enforced.
    """

    balance: Decimal = Decimal("1000.00")
    initial_balance: Decimal = field(default=Decimal("0"), init=False)
    max_deposit: Decimal = Decimal("1000000")
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Normalize the opening balance."""
        self.balance = money(self.balance)
        self.initial_balance = self.balance

    def adjust(self, delta: Number) -> Decimal:
        """
        Add a signed amount to the balance.

        Args:
            delta: Amount to add (negative for losses).

        Returns:
            New balance.
        """
        self.balance = money(self.balance + to_decimal(delta))
        if self.balance < 0:
            logger.warning(f"Ledger balance is negative: {self.balance}")
        return self.balance

    def deposit(self, amount: Number) -> Decimal:
        """
        Credit a manual deposit.

        Args:
            amount: Positive amount to deposit.

        Returns:
            New balance.

        Raises:
            InvalidAmountError: If amount is not a positive number or exceeds ``max_deposit``.
        """
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise InvalidAmountError(f"Deposit amount must be a number, got {amount!r}") from e
        if value <= 0:
            raise InvalidAmountError(f"Deposit amount must be positive, got {value}")
        if value > self.max_deposit:
            raise InvalidAmountError(f"Deposit amount must not exceed {self.max_deposit}, got {value}")
        return self.adjust(value)

    def reset(self, value: Number) -> Decimal:
        """Set the balance to an explicit value."""
        self.balance = money(value)
        return self.balance

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'balance': str(self.balance),
            'initial_balance': str(self.initial_balance),
            'created_at': self.created_at.isoformat(),
        }
