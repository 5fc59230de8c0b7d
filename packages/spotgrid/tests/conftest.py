"""Test fixtures for spotgrid package."""

import pytest

from spotgrid import GridConfig, GridStrategy


@pytest.fixture
def btc_config():
    """20000-30000 grid with 10 intervals and 100000 quote budget."""
    return GridConfig(
        lower_price=20000,
        upper_price=30000,
        grid_count=10,
        total_investment=100000,
        base_asset="BTC",
        quote_asset="USDT",
    )


@pytest.fixture
def strategy(btc_config):
    """Fresh strategy over the BTC grid."""
    return GridStrategy(btc_config)
