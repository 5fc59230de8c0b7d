"""Simulation runner - feeds a price series through a GridStrategy.

Records every executed order and the equity after each observation into a
SimulationSession, then finalizes metrics at the last observed price.
"""

import logging
from typing import Iterable, Optional

from spotgrid import GridStrategy

from simulator.config import StrategyConfig
from simulator.data_provider import PriceTick
from simulator.session import SimulationSession

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs one grid strategy over one price feed.

    Example:
        runner = SimulationRunner(config.strategy)
        session = runner.run(CsvPriceProvider("prices.csv"))
        print(session.get_summary())
    """

    def __init__(self, strategy_config: StrategyConfig, progress_interval: int = 10000):
        """Initialize runner.

        Args:
            strategy_config: Grid strategy parameters.
            progress_interval: Log progress every N ticks (0 disables).
        """
        self._strategy_config = strategy_config
        self._progress_interval = progress_interval
        self._strategy: Optional[GridStrategy] = None

    @property
    def strategy(self) -> Optional[GridStrategy]:
        """Strategy of the most recent run."""
        return self._strategy

    def run(self, ticks: Iterable[PriceTick], session_id: Optional[str] = None) -> SimulationSession:
        """Run the simulation.

        Args:
            ticks: Price observations in chronological order.
            session_id: Optional session identifier.

        Returns:
            Finalized session.

        Raises:
            InvalidConfigError: If the strategy configuration is rejected by the engine
        """
        strategy = GridStrategy(
            self._strategy_config.to_grid_config(),
            initial_position=self._strategy_config.initial_position(),
            initial_cost_basis=self._strategy_config.initial_cost_basis,
        )
        self._strategy = strategy
        session = SimulationSession(session_id=session_id)

        last_price: Optional[float] = None
        for tick in ticks:
            if last_price is None:
                session.set_initial_equity(strategy.get_position().value_at(tick.price))

            order = strategy.on_price_observed(tick.price)
            if order is not None:
                session.record_trade(order)

            session.update_equity(tick.price, strategy.get_position(), tick.timestamp)
            last_price = tick.price

            if self._progress_interval and session.ticks_processed % self._progress_interval == 0:
                logger.info(
                    'Processed %d ticks, %d trades', session.ticks_processed, len(session.trades),
                )

        if last_price is None:
            logger.warning('Price feed is empty, nothing simulated')
            # No market price: value and mark any initial base at its cost basis,
            # or at 0 when none was configured
            last_price = self._strategy_config.initial_cost_basis or 0.0
            session.set_initial_equity(strategy.get_position().value_at(last_price))

        session.finalize(
            final_price=last_price,
            position=strategy.get_position(),
            pnl=strategy.pnl_breakdown(last_price),
            out_of_range_ticks=strategy.out_of_range_count,
        )
        logger.info(
            'Simulation finished: %d ticks, %d trades, total PnL %.2f',
            session.ticks_processed, len(session.trades), session.metrics.total_pnl,
        )
        return session
