"""
Prophet-like forecast: constant trend with yearly and weekly sinusoidal
components.
"""

import numpy as np
import pandas as pd

from .base import DEFAULT_CONFIDENCE, DEFAULT_FORECAST_DAYS, ForecastModel

TREND = 0.0008
YEARLY_AMPLITUDE = 0.005
WEEKLY_AMPLITUDE = 0.002
VOLATILITY = 0.012


class ProphetModel(ForecastModel):
    key = "prophet"
    name = "Prophet"
    description = "Facebook Prophet Time Series"
    volatility = VOLATILITY

    def daily_change(self, day, current_price, state, rng):
        yearly = np.sin(2 * np.pi * day / 365) * YEARLY_AMPLITUDE
        weekly = np.sin(2 * np.pi * day / 7) * WEEKLY_AMPLITUDE
        return TREND + yearly + weekly + rng.uniform(-0.5, 0.5) * self.volatility


def forecast_prophet_like(
    history: pd.DataFrame,
    forecast_days: int = DEFAULT_FORECAST_DAYS,
    confidence: float = DEFAULT_CONFIDENCE,
    *,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    return ProphetModel().forecast(history, forecast_days, confidence, rng=rng)
