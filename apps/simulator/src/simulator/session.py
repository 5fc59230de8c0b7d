"""Simulation session for in-memory results storage.

Stores executed orders, the equity curve, and calculates final metrics.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from spotgrid import ExecutedOrder, OrderSide, PnLBreakdown, Position


@dataclass
class EquityPoint:
    """Portfolio value after one price observation."""

    tick: int
    price: float
    equity: float
    timestamp: Optional[datetime] = None


@dataclass
class SimulationMetrics:
    """Final metrics for a simulation run."""

    # Trade stats
    total_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    total_volume: float = 0.0

    # PnL (FIFO)
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0
    total_pnl: float = 0.0
    open_quantity: float = 0.0
    average_open_cost: float = 0.0

    # Balances
    final_price: float = 0.0
    final_base_balance: float = 0.0
    final_quote_balance: float = 0.0
    initial_equity: float = 0.0
    final_equity: float = 0.0
    return_pct: float = 0.0

    # Risk
    max_drawdown: float = 0.0
    max_drawdown_pct: float = 0.0

    # Feed
    ticks_processed: int = 0
    out_of_range_ticks: int = 0


class SimulationSession:
    """In-memory storage for simulation results.

    Tracks executed orders and equity, and calculates performance metrics.
    """

    def __init__(self, session_id: Optional[str] = None, initial_equity: float = 0.0):
        """Initialize simulation session.

        Args:
            session_id: Unique session identifier (generated if None)
            initial_equity: Portfolio value in quote before the first tick
        """
        self.session_id = session_id or uuid.uuid4().hex
        self.initial_equity = initial_equity

        self.trades: list[ExecutedOrder] = []
        self.equity_curve: list[EquityPoint] = []
        self.total_volume = 0.0
        self.ticks_processed = 0

        self._peak_equity = initial_equity
        self._max_drawdown = 0.0
        self._max_drawdown_pct = 0.0

        # Populated by finalize()
        self.metrics: Optional[SimulationMetrics] = None

    def set_initial_equity(self, equity: float) -> None:
        """Set the starting portfolio value and reset the drawdown peak."""
        self.initial_equity = equity
        self._peak_equity = equity

    def record_trade(self, order: ExecutedOrder) -> None:
        """Record executed order."""
        self.trades.append(order)
        self.total_volume += order.notional

    def update_equity(self, price: float, position: Position, timestamp: Optional[datetime] = None) -> float:
        """Record equity point and update drawdown.

        Args:
            price: Observed price
            position: Balances after processing the observation
            timestamp: Observation time, if the feed has one

        Returns:
            Current equity
        """
        equity = position.value_at(price)
        self.equity_curve.append(EquityPoint(
            tick=self.ticks_processed,
            price=price,
            equity=equity,
            timestamp=timestamp,
        ))
        self.ticks_processed += 1

        if equity >= self._peak_equity:
            self._peak_equity = equity

        drawdown = self._peak_equity - equity
        if drawdown > self._max_drawdown:
            self._max_drawdown = drawdown
            self._max_drawdown_pct = drawdown / self._peak_equity * 100 if self._peak_equity > 0 else 0.0

        return equity

    def finalize(
        self,
        final_price: float,
        position: Position,
        pnl: PnLBreakdown,
        out_of_range_ticks: int = 0,
    ) -> SimulationMetrics:
        """Calculate final metrics.

        Args:
            final_price: Price used to mark open inventory
            position: Final balances
            pnl: FIFO PnL breakdown at final_price
            out_of_range_ticks: Observations skipped by the engine

        Returns:
            Calculated metrics
        """
        final_equity = position.value_at(final_price)
        return_pct = (
            (final_equity - self.initial_equity) / self.initial_equity * 100
            if self.initial_equity > 0
            else 0.0
        )

        self.metrics = SimulationMetrics(
            total_trades=len(self.trades),
            buy_trades=sum(1 for t in self.trades if t.side == OrderSide.BUY),
            sell_trades=sum(1 for t in self.trades if t.side == OrderSide.SELL),
            total_volume=self.total_volume,
            realized_pnl=pnl.realized_pnl,
            unrealized_pnl=pnl.unrealized_pnl,
            total_pnl=pnl.total_pnl,
            open_quantity=pnl.open_quantity,
            average_open_cost=pnl.average_open_cost,
            final_price=final_price,
            final_base_balance=position.base_balance,
            final_quote_balance=position.quote_balance,
            initial_equity=self.initial_equity,
            final_equity=final_equity,
            return_pct=return_pct,
            max_drawdown=self._max_drawdown,
            max_drawdown_pct=self._max_drawdown_pct,
            ticks_processed=self.ticks_processed,
            out_of_range_ticks=out_of_range_ticks,
        )
        return self.metrics

    def get_summary(self) -> str:
        """Get human-readable summary of results."""
        if self.metrics is None:
            return f"Simulation {self.session_id[:8]}: not finalized"

        m = self.metrics
        return f"""
Grid Simulation Results (Session: {self.session_id[:8]}...)
{'='*50}
Ticks: {m.ticks_processed} (out of range: {m.out_of_range_ticks})
Trades: {m.total_trades} (Buy: {m.buy_trades}, Sell: {m.sell_trades})
Volume: {m.total_volume:.2f}

PnL Breakdown (FIFO @ {m.final_price:.8g}):
  Realized:   {m.realized_pnl:>14.2f}
  Unrealized: {m.unrealized_pnl:>14.2f}
  Total:      {m.total_pnl:>14.2f}
  Open qty:   {m.open_quantity:>14.8f} (avg cost {m.average_open_cost:.2f})

Balances:
  Base:       {m.final_base_balance:>14.8f}
  Quote:      {m.final_quote_balance:>14.2f}
  Equity:     {m.initial_equity:.2f} -> {m.final_equity:.2f} ({m.return_pct:.2f}%)

Risk:
  Max Drawdown: {m.max_drawdown:.2f} ({m.max_drawdown_pct:.2f}%)
"""
