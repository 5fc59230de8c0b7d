"""
Simulator package for replaying recorded prices through a spot grid strategy.

Uses spotgrid's GridStrategy; reads CSV price feeds and reports FIFO PnL.
"""

from simulator.config import SimulatorConfig, StrategyConfig, FeedConfig, load_config
from simulator.data_provider import CsvPriceProvider, InMemoryPriceProvider, PriceTick, DataRangeInfo
from simulator.session import SimulationSession, SimulationMetrics, EquityPoint
from simulator.runner import SimulationRunner
from simulator.reporter import SimulationReporter, print_grid_levels

__all__ = [
    # Config
    "SimulatorConfig",
    "StrategyConfig",
    "FeedConfig",
    "load_config",
    # Feed
    "CsvPriceProvider",
    "InMemoryPriceProvider",
    "PriceTick",
    "DataRangeInfo",
    # Session
    "SimulationSession",
    "SimulationMetrics",
    "EquityPoint",
    # Core
    "SimulationRunner",
    "SimulationReporter",
    "print_grid_levels",
]
