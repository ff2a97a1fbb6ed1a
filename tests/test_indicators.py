"""
Technical indicator tests.

Run with:
    pytest tests/test_indicators.py -v
"""

import numpy as np
import pandas as pd
import pytest

from src.data.history import generate_history
from src.data.indicators import Signal, compute_indicators, rsi, sma
from src.errors import InsufficientDataError

NAMES = ["SMA 20", "SMA 50", "RSI", "MACD Signal"]


def by_name(results):
    return {r.name: r for r in results}


@pytest.fixture
def history():
    return generate_history("TEST", 365, 100.0, rng=np.random.default_rng(21))


# ---------------------------------------------------------------------------
# Shape and determinism
# ---------------------------------------------------------------------------


def test_four_indicators_in_order(history):
    assert [r.name for r in compute_indicators(history)] == NAMES


def test_deterministic(history):
    assert compute_indicators(history) == compute_indicators(history.copy())


def test_accepts_price_list():
    prices = [100.0 + i for i in range(60)]
    frame = pd.DataFrame({"price": prices})
    assert compute_indicators(prices) == compute_indicators(frame)


@pytest.mark.parametrize("seed", range(5))
def test_ranges(seed):
    df = generate_history("TEST", 200, 50.0, rng=np.random.default_rng(seed))
    for r in compute_indicators(df):
        assert 0 <= r.strength <= 100
        assert r.signal in (Signal.BUY, Signal.SELL, Signal.HOLD)
    assert 0 <= by_name(compute_indicators(df))["RSI"].value <= 100


@pytest.mark.parametrize("prices", [[], np.array([])])
def test_empty_series_rejected(prices):
    with pytest.raises(InsufficientDataError):
        compute_indicators(prices)


# ---------------------------------------------------------------------------
# Moving averages
# ---------------------------------------------------------------------------


def test_sma_uses_last_window():
    prices = np.arange(1.0, 101.0)
    assert sma(prices, 20) == pytest.approx(np.mean(prices[-20:]))
    assert sma(prices, 50) == pytest.approx(np.mean(prices[-50:]))


def test_sma_short_series_divides_by_nominal_window():
    prices = np.array([10.0] * 10)
    assert sma(prices, 20) == pytest.approx(5.0)
    assert sma(prices, 50) == pytest.approx(2.0)


def test_short_series_reads_as_buy():
    # the shrunken averages sit below the latest price
    results = by_name(compute_indicators([10.0] * 10))
    assert results["SMA 20"].signal == Signal.BUY
    assert results["SMA 20"].strength == 100
    assert results["SMA 50"].signal == Signal.BUY


def test_sma_signal_and_strength():
    prices = [100.0] * 19 + [102.0]
    result = by_name(compute_indicators(prices))["SMA 20"]
    expected_sma = (19 * 100.0 + 102.0) / 20
    assert result.value == pytest.approx(expected_sma)
    assert result.signal == Signal.BUY
    assert result.strength == pytest.approx(abs(102.0 - expected_sma) / expected_sma * 1000)


def test_falling_price_reads_sell():
    prices = [100.0] * 60 + [99.0]
    results = by_name(compute_indicators(prices))
    assert results["SMA 20"].signal == Signal.SELL
    assert results["SMA 50"].signal == Signal.SELL


# ---------------------------------------------------------------------------
# RSI
# ---------------------------------------------------------------------------


def test_rsi_all_gains():
    assert rsi(np.arange(1.0, 31.0)) == pytest.approx(100 - 100 / (1 + 1.0))


def test_rsi_steady_rise_holds():
    prices = [100.0 + 2 * i for i in range(30)]
    result = by_name(compute_indicators(prices))["RSI"]
    # avg_gain = 2, no losses → rs = 2 / 1 → rsi = 66.7
    assert result.value == pytest.approx(100 - 100 / 3)
    assert result.signal == Signal.HOLD
    assert result.strength == 50


def test_rsi_large_gains_sell():
    prices = [100.0 + 10 * i for i in range(30)]
    result = by_name(compute_indicators(prices))["RSI"]
    assert result.value == pytest.approx(100 - 100 / 11)
    assert result.signal == Signal.SELL
    assert result.strength == pytest.approx((result.value - 70) * 3.33)


def test_rsi_only_uses_fourteen_changes():
    # the crash from 100 to 10 is the fifteenth change back and is ignored
    prices = [100.0, 10.0] + [10.0 + i for i in range(1, 15)]
    assert rsi(np.array(prices)) == pytest.approx(50.0)


def test_rsi_mixed_changes():
    prices = np.array([10.0, 12.0, 11.0, 14.0, 13.0])
    # gains 2, 3 → 2.5; losses 1, 1 → 1
    assert rsi(prices) == pytest.approx(100 - 100 / (1 + 2.5))


def test_rsi_single_point_is_zero():
    result = by_name(compute_indicators([42.0]))["RSI"]
    assert result.value == 0
    assert result.signal == Signal.BUY
    assert result.strength == pytest.approx(30 * 3.33)


# ---------------------------------------------------------------------------
# Flat series
# ---------------------------------------------------------------------------


def test_flat_series():
    results = by_name(compute_indicators([100.0] * 60))
    assert results["SMA 20"].value == pytest.approx(100.0)
    assert results["SMA 50"].value == pytest.approx(100.0)
    # zero changes count as zero-valued losses, so there are no gains at all
    assert results["RSI"].value == 0
    assert results["RSI"].signal == Signal.BUY
    assert results["MACD Signal"].value == pytest.approx(0.0)
    assert results["MACD Signal"].strength == pytest.approx(0.0)
    assert results["MACD Signal"].signal == Signal.SELL


# ---------------------------------------------------------------------------
# MACD-like signal
# ---------------------------------------------------------------------------


def test_macd_uptrend_buy():
    prices = [100.0 + i for i in range(60)]
    result = by_name(compute_indicators(prices))["MACD Signal"]
    sma20 = np.mean(prices[-20:])
    sma50 = np.mean(prices[-50:])
    assert result.value == pytest.approx(prices[-1] - sma20)
    assert result.signal == Signal.BUY
    assert result.strength == pytest.approx(min(100, abs(sma20 - sma50) / sma50 * 1000))


def test_macd_strength_clamped():
    prices = [10.0] * 50 + [1000.0] * 20
    result = by_name(compute_indicators(prices))["MACD Signal"]
    assert result.strength == 100
