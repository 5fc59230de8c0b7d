"""
Exception types raised by the grid trading engine.

There is no insufficient-balance error: a grid level that cannot be
funded is skipped.
"""


class GridError(Exception):
    """Base class for all grid engine errors."""


class InvalidConfigError(GridError, ValueError):
    """Grid parameters are out of range or inconsistent."""


class OutOfRangeError(GridError, ValueError):
    """Price lies outside the [lower_price, upper_price] grid range."""

    def __init__(self, price: float, lower_price: float, upper_price: float):
        self.price = price
        self.lower_price = lower_price
        self.upper_price = upper_price
        super().__init__(
            f"Price {price} is outside the grid range [{lower_price}, {upper_price}]"
        )


class InvariantViolationError(GridError, AssertionError):
    """Internal bookkeeping reached a state the ledger should never allow."""
