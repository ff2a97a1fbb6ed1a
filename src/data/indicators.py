"""
Technical indicator snapshot.

Computes four indicators from the latest prices of a series and turns each
into a buy / sell / hold signal with a 0-100 strength score:

    SMA 20       latest close vs. its 20-day simple moving average
    SMA 50       latest close vs. its 50-day simple moving average
    RSI          14-change Relative Strength Index
    MACD Signal  SMA 20 vs. SMA 50 crossover

Moving averages always divide by the nominal window (20 or 50), so a series
shorter than the window produces an average below the true mean.

Deterministic: the same series always yields identical results.

Usage:
    from src.data.indicators import compute_indicators
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np
import pandas as pd

from ..errors import InsufficientDataError

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SMA_SHORT = 20
SMA_LONG = 50
RSI_PERIOD = 14
RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
RSI_STRENGTH_SCALE = 3.33
DEVIATION_SCALE = 1000     # 0.1 % deviation → strength 1


class Signal(str, Enum):
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(frozen=True)
class IndicatorResult:
    name: str
    value: float
    signal: Signal
    strength: float
    description: str


# ---------------------------------------------------------------------------
# Indicator math
# ---------------------------------------------------------------------------


def _prices(series: pd.DataFrame | pd.Series | Sequence[float]) -> np.ndarray:
    if isinstance(series, pd.DataFrame):
        series = series["price"]
    return np.asarray(series, dtype=float)


def sma(prices: np.ndarray, window: int) -> float:
    """Sum of the last `window` prices divided by `window`."""
    return float(prices[-window:].sum() / window)


def rsi(prices: np.ndarray, period: int = RSI_PERIOD) -> float:
    """
    Simplified RSI over the most recent `period` day-over-day changes.

    Non-positive changes (including zero) are counted as losses. With no
    gains the result is 0, even for a perfectly flat series.
    """
    gains, losses = [], []
    n = len(prices)
    for k in range(1, min(period + 1, n)):
        change = prices[n - k] - prices[n - k - 1]
        if change > 0:
            gains.append(change)
        else:
            losses.append(abs(change))

    avg_gain = sum(gains) / len(gains) if gains else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0
    rs = avg_gain / (avg_loss or 1)
    return float(100 - 100 / (1 + rs))


def _deviation_strength(a: float, b: float) -> float:
    return float(min(100, abs((a - b) / b) * DEVIATION_SCALE))


def _rsi_signal(value: float) -> tuple[Signal, float]:
    if value > RSI_OVERBOUGHT:
        return Signal.SELL, (value - RSI_OVERBOUGHT) * RSI_STRENGTH_SCALE
    if value < RSI_OVERSOLD:
        return Signal.BUY, (RSI_OVERSOLD - value) * RSI_STRENGTH_SCALE
    return Signal.HOLD, 50.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_indicators(
    series: pd.DataFrame | pd.Series | Sequence[float],
) -> list[IndicatorResult]:
    """
    Return [SMA 20, SMA 50, RSI, MACD Signal] for the given price series.

    Accepts a history DataFrame (its `price` column is used), a Series, or
    any sequence of prices, oldest first.
    """
    prices = _prices(series)
    if len(prices) == 0:
        raise InsufficientDataError("Cannot compute indicators on an empty series")

    latest = float(prices[-1])
    sma20 = sma(prices, SMA_SHORT)
    sma50 = sma(prices, SMA_LONG)
    rsi_value = rsi(prices)
    rsi_sig, rsi_strength = _rsi_signal(rsi_value)

    return [
        IndicatorResult(
            name="SMA 20",
            value=sma20,
            signal=Signal.BUY if latest > sma20 else Signal.SELL,
            strength=_deviation_strength(latest, sma20),
            description="20-day Simple Moving Average",
        ),
        IndicatorResult(
            name="SMA 50",
            value=sma50,
            signal=Signal.BUY if latest > sma50 else Signal.SELL,
            strength=_deviation_strength(latest, sma50),
            description="50-day Simple Moving Average",
        ),
        IndicatorResult(
            name="RSI",
            value=rsi_value,
            signal=rsi_sig,
            strength=float(rsi_strength),
            description="Relative Strength Index",
        ),
        IndicatorResult(
            name="MACD Signal",
            value=latest - sma20,
            signal=Signal.BUY if sma20 > sma50 else Signal.SELL,
            strength=_deviation_strength(sma20, sma50),
            description="Moving Average Convergence Divergence",
        ),
    ]
