"""
Trade records and balance snapshots.

All records are immutable (frozen dataclasses) so that history handed out
to callers can never alter the engine's own bookkeeping.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum


class OrderSide(StrEnum):
    """Direction of an executed grid order."""
    BUY = "buy"
    SELL = "sell"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExecutedOrder:
    """
    A filled grid order.

    timestamp is wall-clock time for display only; ordering in the
    history list is the chronological order used by PnL calculations.
    """
    side: OrderSide
    price: float
    quantity: float
    grid_index: int
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def notional(self) -> float:
        """Quote value of the fill (price * quantity)."""
        return self.price * self.quantity


@dataclass(frozen=True)
class Position:
    """Base/quote balance snapshot."""
    base_balance: float = 0.0
    quote_balance: float = 0.0

    def value_at(self, price: float) -> float:
        """Total holdings expressed in the quote asset at the given price."""
        return self.quote_balance + self.base_balance * price
