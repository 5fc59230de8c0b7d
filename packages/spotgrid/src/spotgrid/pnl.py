"""Pure PnL calculation functions.

PnL is recomputed from the full executed-order history on every call using
a FIFO cost basis: sells close the oldest open buy lots first, the matched
part is realized, and whatever inventory is left open is marked to the
current price against its average cost.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from spotgrid.errors import InvariantViolationError
from spotgrid.orders import ExecutedOrder, OrderSide


# Quantities below this are float residue of fully consumed lots
QTY_EPSILON = 1e-12


@dataclass(frozen=True)
class OpenLot:
    """Unmatched remainder of a buy order."""
    price: float
    quantity: float


@dataclass(frozen=True)
class PnLBreakdown:
    """Result of a FIFO replay."""
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0
    open_quantity: float = 0.0
    average_open_cost: float = 0.0
    open_lots: tuple[OpenLot, ...] = field(default_factory=tuple)

    @property
    def total_pnl(self) -> float:
        return self.realized_pnl + self.unrealized_pnl


def calc_average_cost(lots: Iterable[OpenLot]) -> float:
    """Quantity-weighted average price of the lots (0 when there are none)."""
    total_qty = 0.0
    total_cost = 0.0
    for lot in lots:
        total_qty += lot.quantity
        total_cost += lot.price * lot.quantity
    if total_qty <= 0:
        return 0.0
    return total_cost / total_qty


def calc_fifo_pnl(
    orders: Iterable[ExecutedOrder],
    current_price: float,
    opening_lots: Iterable[OpenLot] = (),
) -> PnLBreakdown:
    """Replay executed orders against a FIFO queue of open buy lots.

    Args:
        orders: Executed orders in chronological order
        current_price: Price used to mark open inventory
        opening_lots: Inventory held before the first order, oldest first

    Returns:
        Realized/unrealized split plus the remaining open lots

    Raises:
        InvariantViolationError: If a sell exceeds all quantity ever bought
    """
    # Each entry is [price, remaining_quantity]
    lots: deque[list[float]] = deque([lot.price, lot.quantity] for lot in opening_lots)
    realized = 0.0

    for order in orders:
        if order.side == OrderSide.BUY:
            lots.append([order.price, order.quantity])
            continue

        remaining = order.quantity
        while remaining > QTY_EPSILON and lots:
            lot = lots[0]
            used = min(remaining, lot[1])
            realized += (order.price - lot[0]) * used
            lot[1] -= used
            remaining -= used
            if lot[1] <= QTY_EPSILON:
                lots.popleft()

        if remaining > QTY_EPSILON:
            raise InvariantViolationError(
                f"Sell of {order.quantity} at {order.price} (level {order.grid_index}) "
                f"exceeds open inventory by {remaining}"
            )

    open_lots = tuple(OpenLot(price=price, quantity=qty) for price, qty in lots)
    open_quantity = sum(lot.quantity for lot in open_lots)
    average_cost = calc_average_cost(open_lots)
    unrealized = open_quantity * (current_price - average_cost)

    return PnLBreakdown(
        realized_pnl=realized,
        unrealized_pnl=unrealized,
        open_quantity=open_quantity,
        average_open_cost=average_cost,
        open_lots=open_lots,
    )


def calc_profit_and_loss(
    orders: Iterable[ExecutedOrder],
    current_price: float,
    opening_lots: Iterable[OpenLot] = (),
) -> float:
    """Total FIFO PnL (realized + unrealized) at current_price."""
    return calc_fifo_pnl(orders, current_price, opening_lots).total_pnl
