"""Tests for FIFO PnL calculation functions."""

import pytest

from spotgrid.errors import InvariantViolationError
from spotgrid.orders import ExecutedOrder, OrderSide
from spotgrid.pnl import (
    OpenLot,
    calc_average_cost,
    calc_fifo_pnl,
    calc_profit_and_loss,
)


def _buy(price, quantity, grid_index=0):
    return ExecutedOrder(side=OrderSide.BUY, price=price, quantity=quantity, grid_index=grid_index)


def _sell(price, quantity, grid_index=1):
    return ExecutedOrder(side=OrderSide.SELL, price=price, quantity=quantity, grid_index=grid_index)


class TestCalcAverageCost:
    """Weighted average of open lots."""

    def test_empty(self):
        assert calc_average_cost([]) == 0

    def test_weighted(self):
        lots = [OpenLot(price=100, quantity=1), OpenLot(price=130, quantity=2)]

        assert calc_average_cost(lots) == pytest.approx(120)


class TestCalcFifoPnl:
    """FIFO replay of executed orders."""

    def test_no_history(self):
        result = calc_fifo_pnl([], 25000)

        assert result.realized_pnl == 0
        assert result.unrealized_pnl == 0
        assert result.open_quantity == 0
        assert result.average_open_cost == 0
        assert result.open_lots == ()
        assert result.total_pnl == 0

    def test_open_lot_only(self):
        result = calc_fifo_pnl([_buy(100, 2)], 110)

        assert result.realized_pnl == 0
        assert result.unrealized_pnl == pytest.approx(20)
        assert result.open_quantity == pytest.approx(2)
        assert result.average_open_cost == pytest.approx(100)

    def test_closed_round_trip(self):
        result = calc_fifo_pnl([_buy(100, 1), _sell(110, 1)], 90)

        assert result.realized_pnl == pytest.approx(10)
        assert result.unrealized_pnl == 0
        assert result.open_lots == ()

    def test_oldest_lot_closed_first(self):
        """FIFO matches against 100, not the 120 lot or an average."""
        orders = [_buy(100, 1), _buy(120, 1), _sell(130, 1)]

        result = calc_fifo_pnl(orders, 125)

        assert result.realized_pnl == pytest.approx(30)
        assert result.open_lots == (OpenLot(price=120, quantity=1),)
        assert result.unrealized_pnl == pytest.approx(5)
        assert result.total_pnl == pytest.approx(35)

    def test_partial_lot_consumption(self):
        orders = [_buy(100, 2), _sell(110, 0.5)]

        result = calc_fifo_pnl(orders, 90)

        assert result.realized_pnl == pytest.approx(5)
        assert result.open_quantity == pytest.approx(1.5)
        assert result.average_open_cost == pytest.approx(100)
        assert result.unrealized_pnl == pytest.approx(-15)
        assert result.total_pnl == pytest.approx(-10)

    def test_sell_spans_multiple_lots(self):
        orders = [_buy(100, 1), _buy(200, 1), _sell(300, 1.5)]

        result = calc_fifo_pnl(orders, 300)

        # (300-100)*1 + (300-200)*0.5
        assert result.realized_pnl == pytest.approx(250)
        assert result.open_lots == (OpenLot(price=200, quantity=0.5),)
        assert result.total_pnl == pytest.approx(300)

    def test_oversell_is_invariant_violation(self):
        with pytest.raises(InvariantViolationError, match="exceeds open inventory"):
            calc_fifo_pnl([_buy(100, 1), _sell(110, 2)], 110)

    def test_sell_without_buys_is_invariant_violation(self):
        with pytest.raises(InvariantViolationError):
            calc_fifo_pnl([_sell(110, 1)], 110)

    def test_idempotent(self):
        orders = [_buy(100, 1), _buy(90, 1), _sell(105, 1.5)]

        first = calc_profit_and_loss(orders, 95)
        second = calc_profit_and_loss(orders, 95)

        assert first == second

    def test_replay_does_not_mutate_orders(self):
        orders = [_buy(100, 1), _sell(110, 0.5)]

        calc_fifo_pnl(orders, 100)

        assert orders[0].quantity == 1
        assert orders[1].quantity == 0.5

    def test_opening_lot_sold_first(self):
        breakdown = calc_fifo_pnl(
            [_buy(90, 1), _sell(110, 1)], 100, opening_lots=[OpenLot(price=80, quantity=1)],
        )

        assert breakdown.realized_pnl == pytest.approx(30)
        assert breakdown.open_lots == (OpenLot(price=90, quantity=1),)
        assert breakdown.unrealized_pnl == pytest.approx(10)

    def test_opening_lot_covers_sell_without_buys(self):
        pnl = calc_profit_and_loss([_sell(110, 0.5)], 110, opening_lots=[OpenLot(price=100, quantity=1)])

        assert pnl == pytest.approx(10)
