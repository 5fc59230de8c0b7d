"""Simulation reporter for exporting results.

CSV export for trades, equity curve and metrics; rich tables for the
console.
"""

import csv
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.table import Table

from spotgrid import GridLevel

from simulator.session import SimulationMetrics, SimulationSession


class SimulationReporter:
    """Export simulation results to CSV and the console.

    Example:
        session = runner.run(provider)
        reporter = SimulationReporter(session)

        reporter.print_metrics()
        reporter.export_all("output_dir/")
    """

    def __init__(self, session: SimulationSession, console: Optional[Console] = None):
        """Initialize reporter with a finalized simulation session.

        Args:
            session: Simulation session with results.
            console: Console for rich output (default: stdout).

        Raises:
            ValueError: If the session was never finalized.
        """
        if session.metrics is None:
            raise ValueError("Session must be finalized before reporting")
        self._session = session
        self._console = console or Console()

    @property
    def session(self) -> SimulationSession:
        return self._session

    @property
    def metrics(self) -> SimulationMetrics:
        return self._session.metrics

    def _ensure_path(self, path: Union[str, Path]) -> Path:
        """Convert to Path and create parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def export_trades(self, path: Union[str, Path]) -> None:
        """Export executed orders to CSV."""
        path = self._ensure_path(path)

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["timestamp", "side", "grid_index", "price", "quantity", "notional"])

            for order in self._session.trades:
                writer.writerow([
                    order.timestamp.isoformat(),
                    order.side.value,
                    order.grid_index,
                    repr(order.price),
                    repr(order.quantity),
                    repr(order.notional),
                ])

    def export_equity_curve(self, path: Union[str, Path]) -> None:
        """Export per-tick equity to CSV."""
        path = self._ensure_path(path)

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["tick", "timestamp", "price", "equity"])

            for point in self._session.equity_curve:
                writer.writerow([
                    point.tick,
                    point.timestamp.isoformat() if point.timestamp else "",
                    repr(point.price),
                    repr(point.equity),
                ])

    def export_metrics(self, path: Union[str, Path]) -> None:
        """Export metrics summary to CSV."""
        path = self._ensure_path(path)

        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["metric", "value"])
            writer.writerow(["session_id", self._session.session_id])
            for metric, value in self.get_summary_dict().items():
                writer.writerow([metric, value])

    def export_all(self, output_dir: Union[str, Path], prefix: str = "") -> dict[str, Path]:
        """Export all data to a directory.

        Args:
            output_dir: Output directory path.
            prefix: Optional prefix for file names.

        Returns:
            Dict mapping export type to file path.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        prefix = f"{prefix}_" if prefix else ""
        session_id = self._session.session_id[:8]

        paths = {
            "trades": output_dir / f"{prefix}{session_id}_trades.csv",
            "equity_curve": output_dir / f"{prefix}{session_id}_equity.csv",
            "metrics": output_dir / f"{prefix}{session_id}_metrics.csv",
        }

        self.export_trades(paths["trades"])
        self.export_equity_curve(paths["equity_curve"])
        self.export_metrics(paths["metrics"])

        return paths

    def get_summary_dict(self) -> dict:
        """Get metrics as a dictionary."""
        return asdict(self.metrics)

    def print_metrics(self) -> None:
        """Print metrics as a console table."""
        table = Table(title="Grid Simulation", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="white", min_width=22)
        table.add_column("Value", justify="right", min_width=18)

        for metric, value in self.get_summary_dict().items():
            table.add_row(metric, _format_value(value))

        self._console.print(table)

    def print_grid_levels(self, levels: list[GridLevel]) -> None:
        """Print grid levels as a console table."""
        print_grid_levels(levels, console=self._console)


def print_grid_levels(levels: list[GridLevel], console: Optional[Console] = None) -> None:
    """Print grid levels with their buy/sell order sizes."""
    console = console or Console()
    table = Table(title="Grid Levels", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Price", justify="right", min_width=14)
    table.add_column("Buy Size", justify="right", min_width=14)
    table.add_column("Sell Size", justify="right", min_width=14)

    for level in levels:
        table.add_row(
            str(level.index),
            _format_value(level.price),
            _format_value(level.buy_order_size),
            _format_value(level.sell_order_size),
        )

    console.print(table)


def _format_value(val) -> str:
    """Format a value for display."""
    if isinstance(val, float):
        # Show up to 8 decimal places, strip trailing zeros
        return f"{val:.8f}".rstrip("0").rstrip(".")
    return str(val)
