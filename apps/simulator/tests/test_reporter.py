"""Tests for SimulationReporter."""

import csv
import io

import pytest
from rich.console import Console

from spotgrid import build_grid_levels

from simulator.reporter import SimulationReporter, print_grid_levels
from simulator.runner import SimulationRunner
from simulator.session import SimulationSession


def _read_csv(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


class TestSimulationReporter:
    """Tests for SimulationReporter."""

    @pytest.fixture
    def finished_session(self, strategy_config, round_trip_provider) -> SimulationSession:
        return SimulationRunner(strategy_config).run(round_trip_provider, session_id="abcdef1234567890")

    @pytest.fixture
    def console_output(self):
        return io.StringIO()

    @pytest.fixture
    def reporter(self, finished_session, console_output):
        console = Console(file=console_output, width=120, color_system=None)
        return SimulationReporter(finished_session, console=console)

    def test_requires_finalized_session(self):
        with pytest.raises(ValueError, match="finalized"):
            SimulationReporter(SimulationSession())

    def test_export_trades(self, reporter, tmp_path):
        path = tmp_path / "trades.csv"

        reporter.export_trades(path)

        rows = _read_csv(path)
        assert rows[0] == ["timestamp", "side", "grid_index", "price", "quantity", "notional"]
        assert [row[1] for row in rows[1:]] == ["buy", "sell", "buy"]
        assert [int(row[2]) for row in rows[1:]] == [0, 1, 0]
        assert float(rows[2][3]) == 21000
        assert float(rows[2][4]) == pytest.approx(0.5)

    def test_export_creates_parent_dirs(self, reporter, tmp_path):
        path = tmp_path / "nested" / "dir" / "trades.csv"

        reporter.export_trades(path)

        assert path.exists()

    def test_export_equity_curve(self, reporter, tmp_path):
        path = tmp_path / "equity.csv"

        reporter.export_equity_curve(path)

        rows = _read_csv(path)
        assert rows[0] == ["tick", "timestamp", "price", "equity"]
        assert len(rows) == 4
        assert [float(row[3]) for row in rows[1:]] == pytest.approx([100000, 100500, 100500])
        # In-memory feed has no timestamps
        assert rows[1][1] == ""

    def test_export_metrics(self, reporter, tmp_path):
        path = tmp_path / "metrics.csv"

        reporter.export_metrics(path)

        metrics = dict(_read_csv(path)[1:])
        assert metrics["session_id"] == "abcdef1234567890"
        assert metrics["total_trades"] == "3"
        assert float(metrics["total_pnl"]) == pytest.approx(500)

    def test_export_all(self, reporter, tmp_path):
        paths = reporter.export_all(tmp_path / "out", prefix="btc")

        assert set(paths) == {"trades", "equity_curve", "metrics"}
        assert paths["trades"].name == "btc_abcdef12_trades.csv"
        assert paths["equity_curve"].name == "btc_abcdef12_equity.csv"
        assert paths["metrics"].name == "btc_abcdef12_metrics.csv"
        for path in paths.values():
            assert path.exists()

    def test_export_all_without_prefix(self, reporter, tmp_path):
        paths = reporter.export_all(tmp_path)

        assert paths["trades"].name == "abcdef12_trades.csv"

    def test_summary_dict(self, reporter):
        summary = reporter.get_summary_dict()

        assert summary["buy_trades"] == 2
        assert summary["sell_trades"] == 1
        assert summary["realized_pnl"] == pytest.approx(500)

    def test_print_metrics(self, reporter, console_output):
        reporter.print_metrics()

        output = console_output.getvalue()
        assert "Grid Simulation" in output
        assert "total_pnl" in output
        assert "500" in output

    def test_print_grid_levels(self, reporter, console_output, strategy_config):
        reporter.print_grid_levels(build_grid_levels(strategy_config.to_grid_config()))

        output = console_output.getvalue()
        assert "Grid Levels" in output
        assert "30000" in output
        assert "0.5" in output


class TestPrintGridLevels:
    """Tests for the module-level grid table."""

    def test_prints_every_level(self, strategy_config):
        buffer = io.StringIO()
        levels = build_grid_levels(strategy_config.to_grid_config())

        print_grid_levels(levels, console=Console(file=buffer, width=120, color_system=None))

        output = buffer.getvalue()
        for level in levels:
            assert str(int(level.price)) in output
