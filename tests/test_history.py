"""
Synthetic price history tests.

Run with:
    pytest tests/test_history.py -v
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest

from src.data.history import generate_history, save_history
from src.errors import InvalidInputError

REF_DAY = date(2024, 6, 15)


def make_history(days=365, base_price=100.0, seed=42):
    return generate_history("TEST", days, base_price, rng=np.random.default_rng(seed), today=REF_DAY)


# ---------------------------------------------------------------------------
# Shape and dates
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("days", [0, 1, 10, 365])
def test_length_matches_days(days):
    assert len(make_history(days)) == days


def test_dates_consecutive_ending_yesterday():
    df = make_history(30)
    assert df.index[0].date() == REF_DAY - timedelta(days=30)
    assert df.index[-1].date() == REF_DAY - timedelta(days=1)
    gaps = df.index.to_series().diff().dropna()
    assert (gaps == pd.Timedelta(days=1)).all()


def test_default_today_is_current_date():
    df = generate_history("TEST", 10, 100, rng=np.random.default_rng(0))
    assert len(df) == 10
    assert df.index[-1].date() == date.today() - timedelta(days=1)
    assert (df["price"] > 0).all()


def test_columns():
    df = make_history(5)
    assert list(df.columns) == ["price", "open", "high", "low", "close", "volume"]
    assert df.index.name == "date"


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def test_price_equals_close():
    df = make_history()
    assert (df["price"] == df["close"]).all()


def test_ohlc_ordering():
    df = make_history()
    body_low = df[["open", "close"]].min(axis=1)
    body_high = df[["open", "close"]].max(axis=1)
    assert (df["low"] <= body_low).all()
    assert (body_high <= df["high"]).all()


def test_volume_range():
    df = make_history()
    assert (df["volume"] >= 100_000).all()
    assert (df["volume"] < 1_100_000).all()


def test_first_close_near_base_price():
    # one day of walk plus noise moves the price by a few percent at most
    df = make_history(1, base_price=250.0)
    assert df["close"].iloc[0] == pytest.approx(250.0, rel=0.05)


def test_seeded_generator_is_reproducible():
    pd.testing.assert_frame_equal(make_history(50, seed=7), make_history(50, seed=7))


def test_different_seeds_differ():
    assert not make_history(50, seed=1)["price"].equals(make_history(50, seed=2)["price"])


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


def test_negative_days_returns_empty():
    df = make_history(-5)
    assert df.empty
    assert list(df.columns) == ["price", "open", "high", "low", "close", "volume"]


@pytest.mark.parametrize("base_price", [0, -10.0])
def test_non_positive_base_price_rejected(base_price):
    with pytest.raises(InvalidInputError):
        make_history(10, base_price=base_price)


def test_save_history_writes_csv(tmp_path):
    df = make_history(10)
    path = save_history("test", df, out_dir=tmp_path)
    assert path.name == "TEST.csv"
    loaded = pd.read_csv(path, index_col="date", parse_dates=True)
    assert len(loaded) == 10
    np.testing.assert_allclose(loaded["close"].values, df["close"].values)
