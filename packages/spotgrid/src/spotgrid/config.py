"""
Configuration model for the grid trading engine.

GridConfig is the immutable parameter set from which every grid level,
order size and starting balance is derived.
"""

import math
import re
from dataclasses import dataclass

from spotgrid.errors import InvalidConfigError

# 0x-prefixed account/object address (20 or 32 bytes), optionally followed
# by Move-style type segments, e.g. 0x2::sui::SUI
ASSET_ADDRESS_PATTERN = re.compile(
    r"^0x(?:[a-fA-F0-9]{40}|[a-fA-F0-9]{64})(?:::[A-Za-z_][A-Za-z0-9_]*){0,2}$"
)


def is_valid_asset_address(asset_id: str) -> bool:
    """Check whether asset_id is a canonical on-chain address or coin type."""
    return bool(ASSET_ADDRESS_PATTERN.match(asset_id))


@dataclass(frozen=True)
class GridConfig:
    """
    Configuration for a spot grid strategy.

    Attributes:
        lower_price: Bottom of the grid range (level 0)
        upper_price: Top of the grid range (level grid_count)
        grid_count: Number of intervals; the grid has grid_count + 1 levels
        total_investment: Quote-asset budget, split evenly across intervals
        base_asset: Identifier of the traded asset (e.g. 'BTC')
        quote_asset: Identifier of the pricing asset (e.g. 'USDT')
        strict_asset_ids: Require both asset ids to be on-chain addresses
    """
    lower_price: float
    upper_price: float
    grid_count: int
    total_investment: float
    base_asset: str = "BASE"
    quote_asset: str = "QUOTE"
    strict_asset_ids: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        for name in ("lower_price", "upper_price", "total_investment"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidConfigError(f"{name} must be a finite number, got {value!r}")
        if self.lower_price <= 0:
            raise InvalidConfigError(f"Lower price must be positive, got {self.lower_price}")
        if self.upper_price <= self.lower_price:
            raise InvalidConfigError("Upper price must be greater than lower price")
        if isinstance(self.grid_count, bool) or not isinstance(self.grid_count, int):
            raise InvalidConfigError(f"Grid count must be an integer, got {self.grid_count!r}")
        if self.grid_count < 2:
            raise InvalidConfigError("Grid count must be at least 2")
        if self.total_investment <= 0:
            raise InvalidConfigError("Total investment must be greater than 0")

        for name in ("base_asset", "quote_asset"):
            asset_id = getattr(self, name)
            if not isinstance(asset_id, str) or not asset_id.strip():
                raise InvalidConfigError(f"{name} cannot be empty")
            if self.strict_asset_ids and not is_valid_asset_address(asset_id):
                raise InvalidConfigError(f"Invalid {name} address format: {asset_id}")

    @property
    def step(self) -> float:
        """Distance between two adjacent grid levels."""
        return (self.upper_price - self.lower_price) / self.grid_count

    @property
    def investment_per_grid(self) -> float:
        """Quote notional deployed by one full-size buy."""
        return self.total_investment / self.grid_count
