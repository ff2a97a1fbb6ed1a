"""
Error types raised by the generation, forecasting and indicator functions.

The core never catches these itself; the API routers translate them into
HTTP responses and the CLI runner logs them per model.
"""


class ForecastError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(ForecastError, ValueError):
    """A caller supplied a value outside the function's contract."""


class InsufficientDataError(ForecastError, ValueError):
    """An operation needs at least one historical price and got none."""


class UnknownStockError(ForecastError, KeyError):
    """Symbol is not in the stock catalog."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
