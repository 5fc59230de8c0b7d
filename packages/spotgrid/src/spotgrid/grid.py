"""
Grid level calculations for the spot grid strategy.

The grid is a fixed ladder of grid_count + 1 evenly spaced prices between
the configured lower and upper bounds. Each level carries the order sizes a
fill at that level uses:
- buy_order_size deploys the same quote notional at every level
- sell_order_size carries the lot bought one level below (0 at level 0)
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from spotgrid.config import GridConfig
from spotgrid.errors import OutOfRangeError
from spotgrid.orders import OrderSide

logger = logging.getLogger(__name__)

# Snap applied to (price - lower) / step so a level's own price maps to it
_INDEX_SNAP = 1e-9

OUT_OF_RANGE = -1


@dataclass(frozen=True)
class GridLevel:
    """One price level of the grid."""
    index: int
    price: float
    buy_order_size: float
    sell_order_size: float


def build_grid_levels(config: GridConfig) -> list[GridLevel]:
    """
    Build grid_count + 1 evenly spaced levels from lower to upper price.

    Args:
        config: Validated grid configuration

    Returns:
        Levels ordered by ascending price
    """
    step = config.step
    investment_per_grid = config.investment_per_grid
    levels: list[GridLevel] = []

    for i in range(config.grid_count + 1):
        # Pin the top level so the upper bound is reproduced exactly
        price = config.upper_price if i == config.grid_count else config.lower_price + i * step
        buy_order_size = investment_per_grid / price
        sell_order_size = levels[i - 1].buy_order_size if i > 0 else 0.0
        levels.append(GridLevel(
            index=i,
            price=price,
            buy_order_size=buy_order_size,
            sell_order_size=sell_order_size,
        ))

    return levels


class Grid:
    """
    Immutable price ladder with index lookups.

    Maps observed prices onto level indexes and answers the neighbouring
    level queries the strategy needs.
    """

    def __init__(self, config: GridConfig):
        """
        Build the grid.

        Args:
            config: Validated grid configuration
        """
        self.config = config
        self._levels = build_grid_levels(config)
        logger.debug(
            'Built grid: %d levels from %s to %s (step=%s)',
            len(self._levels), config.lower_price, config.upper_price, config.step,
        )

    def __len__(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> list[GridLevel]:
        """Copy of all grid levels."""
        return list(self._levels)

    @property
    def lower_price(self) -> float:
        return self.config.lower_price

    @property
    def upper_price(self) -> float:
        return self.config.upper_price

    @property
    def grid_count(self) -> int:
        return self.config.grid_count

    @property
    def step(self) -> float:
        return self.config.step

    def contains(self, price: float) -> bool:
        """Check whether price lies inside [lower_price, upper_price]."""
        return self.lower_price <= price <= self.upper_price

    def index_of(self, price: float) -> int:
        """
        Map a price onto the index of the level at or below it.

        Args:
            price: Observed price

        Returns:
            Level index in 0..grid_count, or OUT_OF_RANGE (-1) when the price
            is outside the grid
        """
        if not self.contains(price):
            return OUT_OF_RANGE
        index = math.floor((price - self.lower_price) / self.step + _INDEX_SNAP)
        return min(max(index, 0), self.grid_count)

    def level_at(self, index: int) -> GridLevel:
        """
        Get level by index.

        Raises:
            IndexError: If index is outside 0..grid_count
        """
        if not 0 <= index <= self.grid_count:
            raise IndexError(f"Grid level index {index} outside 0..{self.grid_count}")
        return self._levels[index]

    def next_buy_price(self, price: float) -> Optional[float]:
        """Price of the level below the one price falls in, None at the bottom."""
        index = self.index_of(price)
        if index <= 0:
            return None
        return self._levels[index - 1].price

    def next_sell_price(self, price: float) -> Optional[float]:
        """Price of the level above the one price falls in, None at the top."""
        index = self.index_of(price)
        if index == OUT_OF_RANGE or index >= self.grid_count:
            return None
        return self._levels[index + 1].price

    def order_size_at(self, price: float, side: OrderSide) -> float:
        """
        Order size for a fill at the level price falls in.

        Raises:
            OutOfRangeError: If price is outside the grid
        """
        index = self.index_of(price)
        if index == OUT_OF_RANGE:
            raise OutOfRangeError(price, self.lower_price, self.upper_price)
        level = self._levels[index]
        return level.buy_order_size if side == OrderSide.BUY else level.sell_order_size
