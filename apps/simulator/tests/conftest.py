"""Test fixtures for simulator package."""

from datetime import datetime, timezone

import pytest

from simulator.config import FeedConfig, SimulatorConfig, StrategyConfig
from simulator.data_provider import InMemoryPriceProvider, PriceTick


@pytest.fixture
def strategy_config():
    """20000-30000 BTC grid with 10 intervals."""
    return StrategyConfig(
        lower_price=20000,
        upper_price=30000,
        grid_count=10,
        total_investment=100000,
        base_asset="BTC",
        quote_asset="USDT",
    )


@pytest.fixture
def sample_config(strategy_config):
    return SimulatorConfig(strategy=strategy_config, feed=FeedConfig())


@pytest.fixture
def sample_timestamp():
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def round_trip_provider():
    """Seed buy at 20000, sell at 21000, buy again at 20000."""
    return InMemoryPriceProvider([20000, 21000, 20000])


@pytest.fixture
def write_prices(tmp_path):
    """Write a CSV price file and return its path."""
    def _write(rows: list[str], name: str = "prices.csv"):
        path = tmp_path / name
        path.write_text("\n".join(rows) + "\n")
        return path
    return _write


@pytest.fixture
def timed_ticks(sample_timestamp):
    return [
        PriceTick(price=25000, timestamp=sample_timestamp),
        PriceTick(price=24000, timestamp=sample_timestamp.replace(hour=13)),
        PriceTick(price=25500, timestamp=sample_timestamp.replace(hour=14)),
    ]
