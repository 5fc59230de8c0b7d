"""
spotgrid - Spot grid trading simulation engine with zero exchange dependencies.

Builds an evenly spaced price grid, turns price observations into virtual
buy/sell fills against a base/quote ledger, and reports FIFO profit and loss.
"""

from spotgrid.errors import GridError, InvalidConfigError, OutOfRangeError, InvariantViolationError
from spotgrid.config import GridConfig, is_valid_asset_address
from spotgrid.orders import ExecutedOrder, OrderSide, Position
from spotgrid.grid import Grid, GridLevel, OUT_OF_RANGE, build_grid_levels
from spotgrid.ledger import Ledger
from spotgrid.engine import GridStrategy
from spotgrid.pnl import (
    OpenLot,
    PnLBreakdown,
    calc_average_cost,
    calc_fifo_pnl,
    calc_profit_and_loss,
)

__version__ = "0.1.0"

__all__ = [
    "GridError",
    "InvalidConfigError",
    "OutOfRangeError",
    "InvariantViolationError",
    "GridConfig",
    "is_valid_asset_address",
    "ExecutedOrder",
    "OrderSide",
    "Position",
    "Grid",
    "GridLevel",
    "OUT_OF_RANGE",
    "build_grid_levels",
    "Ledger",
    "GridStrategy",
    "OpenLot",
    "PnLBreakdown",
    "calc_average_cost",
    "calc_fifo_pnl",
    "calc_profit_and_loss",
]
