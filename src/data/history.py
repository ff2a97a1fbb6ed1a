"""
Synthetic OHLCV price history.

Replaces a market data download: prices follow a random walk with a small
per-series drift, a yearly sinusoidal seasonality and multiplicative noise.
OHLC and volume are synthesized around each day's close.

Model
-----
    trend        ~ U(-0.0005, 0.0005)                 drawn once per series
    seasonality  = 0.1 * sin(2π * i / 365)
    daily_return = trend + seasonality + U(-0.01, 0.01)
    price_i      = price_{i-1} * (1 + daily_return)
    close_i      = price_i * (1 + U(-0.0025, 0.0025))

Dates run from (today - days) to (today - 1); the current day is never
included.

Usage:
    from src.data.history import generate_history
"""

import logging
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pandas as pd

from ..errors import InvalidInputError

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_HISTORY_DAYS = 365
DEFAULT_BASE_PRICE = 100.0

TREND_RANGE = 0.0005        # per-series drift, uniform in ±TREND_RANGE
SEASONAL_AMPLITUDE = 0.1
DAILY_VOLATILITY = 0.02     # return noise spans ±half of this
CLOSE_NOISE = 0.005
OPEN_SPREAD = 0.01
WICK_MAX = 0.02
VOLUME_MIN = 100_000
VOLUME_SPAN = 1_000_000

COLUMNS = ["price", "open", "high", "low", "close", "volume"]

RAW_DIR = Path(__file__).resolve().parents[2] / "data" / "raw"

log = logging.getLogger(__name__)


def _empty_history() -> pd.DataFrame:
    df = pd.DataFrame(columns=COLUMNS, index=pd.DatetimeIndex([], name="date"))
    return df.astype({c: "float64" for c in COLUMNS[:-1]} | {"volume": "int64"})


def generate_history(
    symbol: str,
    days: int = DEFAULT_HISTORY_DAYS,
    base_price: float = DEFAULT_BASE_PRICE,
    *,
    rng: np.random.Generator | None = None,
    today: date | None = None,
) -> pd.DataFrame:
    """
    Generate `days` of daily OHLCV data ending the day before `today`.

    Parameters
    ----------
    symbol : str
        Ticker label, used for logging only.
    days : int
        Number of daily rows. Zero or negative returns an empty frame.
    base_price : float
        Starting price of the walk; must be positive.
    rng : np.random.Generator, optional
        Random source. A fresh unseeded generator is used when omitted.
    today : date, optional
        Reference date, defaults to the current local date.

    Returns
    -------
    pd.DataFrame indexed by a daily DatetimeIndex named "date" with columns
    price, open, high, low, close, volume. `price` equals `close`.
    """
    if base_price <= 0:
        raise InvalidInputError(f"base_price must be positive, got {base_price}")
    if days <= 0:
        return _empty_history()

    rng = rng if rng is not None else np.random.default_rng()
    today = today or date.today()
    start = today - timedelta(days=days)

    current = float(base_price)
    trend = rng.uniform(-TREND_RANGE, TREND_RANGE)

    rows = []
    for i in range(days):
        seasonality = np.sin(2 * np.pi * i / 365) * SEASONAL_AMPLITUDE
        daily_return = trend + seasonality + rng.uniform(-0.5, 0.5) * DAILY_VOLATILITY
        current *= 1 + daily_return

        close = current * (1 + rng.uniform(-0.5, 0.5) * CLOSE_NOISE)
        open_ = close * (1 + rng.uniform(-0.5, 0.5) * OPEN_SPREAD)
        high = max(open_, close) * (1 + rng.uniform(0, WICK_MAX))
        low = min(open_, close) * (1 - rng.uniform(0, WICK_MAX))
        volume = int(rng.integers(VOLUME_MIN, VOLUME_MIN + VOLUME_SPAN))

        rows.append((close, open_, high, low, close, volume))

    index = pd.date_range(start=start, periods=days, freq="D", name="date")
    df = pd.DataFrame(rows, columns=COLUMNS, index=index)
    log.debug("%s  generated %d days from %.2f", symbol, days, base_price)
    return df


def save_history(symbol: str, history: pd.DataFrame, out_dir: Path | None = None) -> Path:
    """Write a generated history to <out_dir>/<SYMBOL>.csv (default RAW_DIR)."""
    out_dir = out_dir or RAW_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{symbol.upper()}.csv"
    history.to_csv(out_path, index_label="date")
    log.info("%s  saved %d rows → %s", symbol, len(history), out_path)
    return out_path
