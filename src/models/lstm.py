"""
LSTM-like forecast.

No network is trained. The "learned pattern" is the average per-day move over
the most recent window of prices, applied at half weight on every forecast
day on top of uniform noise.

Pattern
-------
    recent       = last SEQUENCE_LENGTH historical prices (fewer if shorter)
    recent_trend = (recent[-1] - recent[0]) / len(recent)
    change_i     = 0.5 * recent_trend + U(-0.009, 0.009)

`recent_trend` is in price units, so higher-priced stocks get a stronger pull.
"""

import numpy as np
import pandas as pd

from .base import DEFAULT_CONFIDENCE, DEFAULT_FORECAST_DAYS, ForecastModel


SEQUENCE_LENGTH = 10
PATTERN_WEIGHT = 0.5
VOLATILITY = 0.018


class LstmModel(ForecastModel):
    key = "lstm"
    name = "LSTM"
    description = "Long Short-Term Memory Neural Network"
    volatility = VOLATILITY

    def __init__(self, sequence_length: int = SEQUENCE_LENGTH) -> None:
        self.seq_len = sequence_length

    def prepare(self, prices: np.ndarray) -> dict:
        state = super().prepare(prices)
        recent = prices[-self.seq_len:]
        state["recent_trend"] = float((recent[-1] - recent[0]) / len(recent))
        return state

    def daily_change(self, day, current_price, state, rng):
        pattern_influence = state["recent_trend"] * PATTERN_WEIGHT
        return pattern_influence + rng.uniform(-0.5, 0.5) * self.volatility


def forecast_lstm_like(
    history: pd.DataFrame,
    forecast_days: int = DEFAULT_FORECAST_DAYS,
    confidence: float = DEFAULT_CONFIDENCE,
    *,
    rng: np.random.Generator | None = None,
) -> pd.DataFrame:
    return LstmModel().forecast(history, forecast_days, confidence, rng=rng)
