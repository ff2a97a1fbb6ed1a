"""
ARIMA-like forecast: small upward drift plus mean reversion toward the last
observed price.
"""

import numpy as np
import pandas as pd

from .base import DEFAULT_CONFIDENCE, DEFAULT_FORECAST_DAYS, ForecastModel

DRIFT = 0.0005
MEAN_REVERSION = 0.1
VOLATILITY = 0.015


class ArimaModel(ForecastModel):
    key = "arima"
    name = "ARIMA"
    description = "Auto-Regressive Integrated Moving Average"
    volatility = VOLATILITY

    def daily_change(self, day, current_price, state, rng):
        # reversion is in price units, pulling the path back to the last close
        mean_reversion = (state["last_price"] - current_price) * MEAN_REVERSION
        random_walk = rng.uniform(-0.5, 0.5) * self.volatility
        return DRIFT + mean_reversion + random_walk


def forecast_arima_like(
    history: pd.DataFrame,
    forecast_days: int = DEFAULT_FORECAST_DAYS,
    confidence: float = DEFAULT_CONFIDENCE,
    *,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    return ArimaModel().forecast(history, forecast_days, confidence, rng=rng)
