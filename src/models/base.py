"""
Shared forecast simulation loop.

Every model walks a price path forward from the last historical price:

    price_i = price_{i-1} * clip(1 + daily_change(i), 0.01, 100)
    band_i  = price_i * volatility * sqrt(i) * confidence / 100

and emits one row per day with a symmetric confidence band
[price_i - band_i, price_i + band_i]. Subclasses only supply `volatility`
and `daily_change`; nothing here is fitted to the history.
"""

from abc import ABC, abstractmethod
from datetime import timedelta

import numpy as np
import pandas as pd

from ..errors import InsufficientDataError

DEFAULT_FORECAST_DAYS = 30
DEFAULT_CONFIDENCE = 95.0

# Price-unit terms (ARIMA reversion, LSTM trend) can push a day's change
# below -100 % or into the thousands; each day's factor is clipped so the
# path stays positive and finite.
MIN_GROWTH_FACTOR = 0.01
MAX_GROWTH_FACTOR = 100.0
MIN_PRICE = np.finfo(float).tiny

FORECAST_COLUMNS = ["price", "prediction", "lower", "upper", "confidence"]


class ForecastModel(ABC):
    """
    One stochastic forecast generator.

    Attributes
    ----------
    key : short identifier used by the registry and the API ("arima", ...)
    name : display label
    volatility : per-day band scale
    """

    key: str = ""
    name: str = ""
    description: str = ""
    volatility: float = 0.0

    def prepare(self, prices: np.ndarray) -> dict:
        """Per-call state derived once from the historical prices."""
        return {"last_price": float(prices[-1])}

    @abstractmethod
    def daily_change(
        self,
        day: int,
        current_price: float,
        state: dict,
        rng: np.random.Generator,
    ) -> float:
        """Multiplicative change applied to the price path on forecast day `day`."""

    def forecast(
        self,
        history: pd.DataFrame,
        forecast_days: int = DEFAULT_FORECAST_DAYS,
        confidence: float = DEFAULT_CONFIDENCE,
        *,
        rng: np.random.Generator | None = None,
    ) -> pd.DataFrame:
        """
        Simulate `forecast_days` of predictions following `history`.

        Parameters
        ----------
        history : pd.DataFrame
            Historical series with a DatetimeIndex and a `price` column.
        forecast_days : int
            Number of rows to produce. Zero or negative gives an empty frame.
        confidence : float
            Confidence percentage; scales the band and is echoed on every row.
            Not validated.
        rng : np.random.Generator, optional
            Random source, a fresh unseeded generator when omitted.

        Returns
        -------
        pd.DataFrame indexed by date (starting the day after the last
        historical date) with columns price, prediction, lower, upper,
        confidence. `price` is the last historical price on every row.
        """
        if history is None or len(history) == 0:
            raise InsufficientDataError(f"{self.name} forecast needs a non-empty history")

        if forecast_days <= 0:
            return pd.DataFrame(
                columns=FORECAST_COLUMNS,
                index=pd.DatetimeIndex([], name="date"),
                dtype="float64",
            )

        rng = rng if rng is not None else np.random.default_rng()
        prices = np.asarray(history["price"], dtype=float)
        state = self.prepare(prices)
        last_price = state["last_price"]
        last_date = pd.Timestamp(history.index[-1])

        current = last_price
        rows = []
        for i in range(1, forecast_days + 1):
            growth = 1 + self.daily_change(i, current, state, rng)
            current *= min(max(growth, MIN_GROWTH_FACTOR), MAX_GROWTH_FACTOR)
            # long runs on the floor would otherwise underflow to 0.0
            current = max(current, MIN_PRICE)
            band = current * (self.volatility * np.sqrt(i)) * (confidence / 100)
            rows.append((last_price, current, current - band, current + band, confidence))

        index = pd.date_range(
            start=last_date.normalize() + timedelta(days=1),
            periods=forecast_days,
            freq="D",
            name="date",
        )
        return pd.DataFrame(rows, columns=FORECAST_COLUMNS, index=index, dtype="float64")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(volatility={self.volatility})"
