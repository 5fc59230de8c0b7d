"""
Balance ledger for grid order execution.

Holds the strategy's base/quote balances and the append-only history of
executed orders. A fill that cannot be funded is skipped rather than raised:
the grid level simply stays unfilled until balance recovers.
"""

import logging
from typing import Optional

from spotgrid.errors import InvalidConfigError
from spotgrid.orders import ExecutedOrder, OrderSide, Position

logger = logging.getLogger(__name__)

# Relative tolerance for balance checks against float rounding
BALANCE_TOLERANCE = 1e-9


def _covers(balance: float, required: float) -> bool:
    """Check balance >= required, forgiving relative float rounding noise."""
    return balance >= required * (1 - BALANCE_TOLERANCE)


class Ledger:
    """
    Base/quote balances plus executed order history.

    Balances never go negative: every fill is checked against the balance
    it spends before anything is mutated.
    """

    def __init__(self, base_balance: float = 0.0, quote_balance: float = 0.0):
        """
        Initialize ledger.

        Args:
            base_balance: Starting base-asset balance
            quote_balance: Starting quote-asset balance

        Raises:
            InvalidConfigError: If either balance is negative
        """
        if base_balance < 0 or quote_balance < 0:
            raise InvalidConfigError(
                f"Initial balances must be non-negative, got base={base_balance}, quote={quote_balance}"
            )
        self._base_balance = float(base_balance)
        self._quote_balance = float(quote_balance)
        self._history: list[ExecutedOrder] = []

    @property
    def base_balance(self) -> float:
        return self._base_balance

    @property
    def quote_balance(self) -> float:
        return self._quote_balance

    @property
    def position(self) -> Position:
        """Snapshot of current balances."""
        return Position(base_balance=self._base_balance, quote_balance=self._quote_balance)

    @property
    def history(self) -> list[ExecutedOrder]:
        """Copy of executed orders in chronological order."""
        return list(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def buy(self, price: float, quantity: float, grid_index: int) -> Optional[ExecutedOrder]:
        """
        Spend quote to acquire base.

        Args:
            price: Fill price
            quantity: Base quantity to acquire
            grid_index: Level that triggered the order

        Returns:
            The executed order, or None if quote balance cannot cover the cost
        """
        self._validate_fill(price, quantity)
        cost = price * quantity
        if not _covers(self._quote_balance, cost):
            logger.debug(
                'Skip buy at level %d: cost %.8f exceeds quote balance %.8f',
                grid_index, cost, self._quote_balance,
            )
            return None

        self._quote_balance = max(self._quote_balance - cost, 0.0)
        self._base_balance += quantity
        return self._record(OrderSide.BUY, price, quantity, grid_index)

    def sell(self, price: float, quantity: float, grid_index: int) -> Optional[ExecutedOrder]:
        """
        Spend base to acquire quote.

        Args:
            price: Fill price
            quantity: Base quantity to sell
            grid_index: Level that triggered the order

        Returns:
            The executed order, or None if base balance cannot cover quantity
        """
        self._validate_fill(price, quantity)
        if self._base_balance <= 0 or not _covers(self._base_balance, quantity):
            logger.debug(
                'Skip sell at level %d: quantity %.8f exceeds base balance %.8f',
                grid_index, quantity, self._base_balance,
            )
            return None

        # Within tolerance the sell is capped at what is actually held
        quantity = min(quantity, self._base_balance)
        self._base_balance -= quantity
        self._quote_balance += price * quantity
        return self._record(OrderSide.SELL, price, quantity, grid_index)

    def _record(self, side: OrderSide, price: float, quantity: float, grid_index: int) -> ExecutedOrder:
        order = ExecutedOrder(side=side, price=price, quantity=quantity, grid_index=grid_index)
        self._history.append(order)
        logger.debug(
            '%s %.8f @ %s (level %d): base=%.8f quote=%.8f',
            side.value, quantity, price, grid_index, self._base_balance, self._quote_balance,
        )
        return order

    @staticmethod
    def _validate_fill(price: float, quantity: float) -> None:
        if price <= 0 or quantity <= 0:
            raise ValueError(f"Invalid fill: price={price}, quantity={quantity}")
