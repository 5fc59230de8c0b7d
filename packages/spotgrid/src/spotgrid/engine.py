"""
Grid trading strategy engine.

Feeds price observations through the grid, turns level crossings into
buy/sell fills on the ledger and reports position and PnL. The engine does
no I/O: callers supply prices one at a time and read snapshots back.

Crossing rules:
- First observation: no crossing; a seeding buy fires only when the price
  starts at level 0
- Index drops: one buy at the landed level's price
- Index rises: one sell at the landed level's price
- Same index: nothing
- A jump across several levels still fires a single order
- Out-of-range prices are skipped and leave all state untouched
"""

import logging
import math
import threading
from typing import Iterable, Optional

from spotgrid.config import GridConfig
from spotgrid.grid import OUT_OF_RANGE, Grid, GridLevel
from spotgrid.ledger import Ledger
from spotgrid.orders import ExecutedOrder, Position
from spotgrid.pnl import OpenLot, PnLBreakdown, calc_fifo_pnl

logger = logging.getLogger(__name__)


class GridStrategy:
    """
    Stateful spot grid simulation for a single base/quote pair.

    All mutation and snapshot reads run under one re-entrant lock, so an
    instance may be observed from one thread and read from another.
    """

    def __init__(
        self,
        config: GridConfig,
        initial_position: Optional[Position] = None,
        initial_cost_basis: Optional[float] = None,
    ):
        """
        Initialize grid strategy.

        Args:
            config: Grid configuration parameters
            initial_position: Optional starting balances. Defaults to no base
                and the full total_investment in quote.
            initial_cost_basis: Price paid for base held in initial_position.
                Defaults to the first in-range observed price.

        Raises:
            InvalidConfigError: If initial balances are negative
            ValueError: If initial_cost_basis is not positive
        """
        self.config = config
        self.grid = Grid(config)
        if initial_position is None:
            initial_position = Position(base_balance=0.0, quote_balance=config.total_investment)
        self._ledger = Ledger(
            base_balance=initial_position.base_balance,
            quote_balance=initial_position.quote_balance,
        )
        if initial_cost_basis is not None and initial_cost_basis <= 0:
            raise ValueError(f"initial_cost_basis must be positive, got {initial_cost_basis}")
        self._initial_base = self._ledger.base_balance
        self._initial_cost_basis = initial_cost_basis
        self._last_observed_price: Optional[float] = None
        self._out_of_range_count = 0
        self._lock = threading.RLock()

        logger.info(
            '%s/%s: grid %s-%s with %d levels, %s per grid',
            config.base_asset, config.quote_asset, config.lower_price, config.upper_price,
            len(self.grid), config.investment_per_grid,
        )

    @property
    def last_observed_price(self) -> Optional[float]:
        """Most recent in-range price, None before the first observation."""
        with self._lock:
            return self._last_observed_price

    @property
    def out_of_range_count(self) -> int:
        """Number of observations skipped because they fell outside the grid."""
        with self._lock:
            return self._out_of_range_count

    def index_of(self, price: float) -> int:
        """Grid index for price, or -1 when it is outside the grid."""
        return self.grid.index_of(price)

    def on_price_observed(self, new_price: float) -> Optional[ExecutedOrder]:
        """
        Process a price observation.

        Args:
            new_price: Latest market price

        Returns:
            The order executed by this observation, or None

        Raises:
            ValueError: If new_price is not a positive finite number
        """
        if not math.isfinite(new_price) or new_price <= 0:
            raise ValueError(f"Price must be a positive finite number, got {new_price}")

        with self._lock:
            curr_index = self.grid.index_of(new_price)
            if curr_index == OUT_OF_RANGE:
                self._out_of_range_count += 1
                logger.warning(
                    'Price %s outside grid range [%s, %s], observation skipped',
                    new_price, self.grid.lower_price, self.grid.upper_price,
                )
                return None

            order: Optional[ExecutedOrder] = None
            if self._last_observed_price is None:
                if self._initial_cost_basis is None:
                    self._initial_cost_basis = new_price
                if curr_index == 0:
                    order = self._buy_at(curr_index)
            else:
                prev_index = self.grid.index_of(self._last_observed_price)
                if curr_index < prev_index:
                    order = self._buy_at(curr_index)
                elif curr_index > prev_index:
                    order = self._sell_at(curr_index)

            self._last_observed_price = new_price
            return order

    def observe_all(self, prices: Iterable[float]) -> list[ExecutedOrder]:
        """Feed a price sequence and return the orders it executed."""
        executed: list[ExecutedOrder] = []
        for price in prices:
            order = self.on_price_observed(price)
            if order is not None:
                executed.append(order)
        return executed

    def _buy_at(self, index: int) -> Optional[ExecutedOrder]:
        level = self.grid.level_at(index)
        return self._ledger.buy(level.price, level.buy_order_size, index)

    def _sell_at(self, index: int) -> Optional[ExecutedOrder]:
        level = self.grid.level_at(index)
        return self._ledger.sell(level.price, level.sell_order_size, index)

    def get_grid_levels(self) -> list[GridLevel]:
        """Snapshot of all grid levels, ascending by price."""
        return self.grid.levels

    def get_trade_history(self) -> list[ExecutedOrder]:
        """Snapshot of executed orders, oldest first."""
        with self._lock:
            return self._ledger.history

    def get_position(self) -> Position:
        """Snapshot of current base/quote balances."""
        with self._lock:
            return self._ledger.position

    def opening_lots(self, current_price: float) -> tuple[OpenLot, ...]:
        """
        Inventory held before the first order, as a FIFO lot.

        Priced at the initial cost basis, or at current_price while no
        observation has fixed it yet.
        """
        with self._lock:
            if self._initial_base <= 0:
                return ()
            basis = self._initial_cost_basis if self._initial_cost_basis is not None else current_price
            return (OpenLot(price=basis, quantity=self._initial_base),)

    def pnl_breakdown(self, current_price: float) -> PnLBreakdown:
        """FIFO realized/unrealized PnL split at current_price."""
        with self._lock:
            history = self._ledger.history
            opening_lots = self.opening_lots(current_price)
        return calc_fifo_pnl(history, current_price, opening_lots)

    def profit_and_loss(self, current_price: float) -> float:
        """
        Total PnL at current_price using FIFO cost basis.

        Recomputed from the full trade history, so repeated calls without
        intervening trades return the same value.
        """
        return self.pnl_breakdown(current_price).total_pnl
