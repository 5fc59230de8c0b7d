"""Configuration models for the grid simulator.

Loads simulator configuration from YAML file with Pydantic validation.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from spotgrid import GridConfig, Position

MIN_PRICE = 1e-9
MAX_PRICE = 1e9
MAX_GRID_COUNT = 100
MAX_INVESTMENT = 1e9


class StrategyConfig(BaseModel):
    """Grid strategy parameters for a simulation run."""

    upper_price: float = Field(..., ge=MIN_PRICE, le=MAX_PRICE, description="Top of the grid range")
    lower_price: float = Field(..., ge=MIN_PRICE, le=MAX_PRICE, description="Bottom of the grid range")
    grid_count: int = Field(..., ge=2, le=MAX_GRID_COUNT, description="Number of grid intervals")
    total_investment: float = Field(..., gt=0, le=MAX_INVESTMENT, description="Quote budget for the grid")

    base_asset: str = Field(default="BASE", min_length=1, description="Base asset id or address")
    quote_asset: str = Field(default="QUOTE", min_length=1, description="Quote asset id or address")
    strict_asset_ids: bool = Field(
        default=False,
        description="Require asset ids to be on-chain addresses",
    )

    # Starting balances (default: no base, full investment in quote)
    initial_base_balance: Optional[float] = Field(default=None, ge=0)
    initial_quote_balance: Optional[float] = Field(default=None, ge=0)
    initial_cost_basis: Optional[float] = Field(
        default=None,
        gt=0,
        description="Price paid for initial_base_balance (default: first observed price)",
    )

    @model_validator(mode="after")
    def check_price_range(self) -> "StrategyConfig":
        """Upper price must be greater than lower price."""
        if self.upper_price <= self.lower_price:
            raise ValueError("Upper price must be greater than lower price")
        return self

    def to_grid_config(self) -> GridConfig:
        """Build the engine's GridConfig."""
        return GridConfig(
            lower_price=self.lower_price,
            upper_price=self.upper_price,
            grid_count=self.grid_count,
            total_investment=self.total_investment,
            base_asset=self.base_asset,
            quote_asset=self.quote_asset,
            strict_asset_ids=self.strict_asset_ids,
        )

    def initial_position(self) -> Optional[Position]:
        """Starting balances, or None to let the engine use its default."""
        if self.initial_base_balance is None and self.initial_quote_balance is None:
            return None
        return Position(
            base_balance=self.initial_base_balance or 0.0,
            quote_balance=(
                self.initial_quote_balance
                if self.initial_quote_balance is not None
                else self.total_investment
            ),
        )


class FeedConfig(BaseModel):
    """Recorded price series to replay."""

    prices_path: Optional[str] = Field(default=None, description="CSV file with price observations")
    price_column: str = Field(default="price", description="CSV column holding the price")
    timestamp_column: Optional[str] = Field(
        default="timestamp",
        description="CSV column holding ISO timestamps (optional in the file)",
    )


class SimulatorConfig(BaseModel):
    """Root configuration for the simulator."""

    strategy: StrategyConfig
    feed: FeedConfig = Field(default_factory=FeedConfig)


def load_config(config_path: Optional[str] = None) -> SimulatorConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, checks:
            1. SIMULATOR_CONFIG_PATH environment variable
            2. conf/simulator.yaml
            3. simulator.yaml

    Returns:
        Validated SimulatorConfig

    Raises:
        FileNotFoundError: If no config file found
        pydantic.ValidationError: If config validation fails
    """
    if config_path is None:
        config_path = os.environ.get("SIMULATOR_CONFIG_PATH")

    if config_path is None:
        search_paths = [
            Path("conf/simulator.yaml"),
            Path("simulator.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    if config_path is None:
        raise FileNotFoundError(
            "No config file found. Set SIMULATOR_CONFIG_PATH or create conf/simulator.yaml"
        )

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return SimulatorConfig(**data)
