"""
Forecast orchestration and command-line runner.

Resolves a user-selected model set against the registry, runs each simulator
over one shared history, and merges the first model's predictions onto the
history for display.

Usage:
    python -m src.models.simulate AAPL --models arima prophet lstm --days 30
    python -m src.models.simulate TSLA --seed 7 --export
"""

import argparse
import logging

import numpy as np
import pandas as pd

from ..data.history import DEFAULT_HISTORY_DAYS, generate_history, save_history
from ..data.indicators import compute_indicators
from ..data.stocks import get_stock
from ..errors import InvalidInputError
from .arima import ArimaModel
from .base import DEFAULT_CONFIDENCE, DEFAULT_FORECAST_DAYS, ForecastModel
from .lstm import LstmModel
from .prophet import ProphetModel

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

MODELS: dict[str, ForecastModel] = {
    m.key: m for m in (ArimaModel(), ProphetModel(), LstmModel())
}
MODEL_TYPES = list(MODELS)
DEFAULT_MODELS = ["arima", "prophet"]

TIMEFRAMES = {"3m": 90, "6m": 180, "1y": 365, "2y": 730, "5y": 1825}
DEFAULT_TIMEFRAME = "1y"

log = logging.getLogger(__name__)


def get_model(key: str) -> ForecastModel:
    try:
        return MODELS[key.lower()]
    except KeyError:
        raise InvalidInputError(
            f"Invalid model '{key}'. Choose from {MODEL_TYPES}"
        ) from None


def history_days(timeframe: str = DEFAULT_TIMEFRAME) -> int:
    """Number of history days shown for a timeframe label such as "6m"."""
    try:
        return TIMEFRAMES[timeframe]
    except KeyError:
        raise InvalidInputError(
            f"Invalid timeframe '{timeframe}'. Choose from {list(TIMEFRAMES)}"
        ) from None


def run_forecasts(
    history: pd.DataFrame,
    models: list[str] = DEFAULT_MODELS,
    forecast_days: int = DEFAULT_FORECAST_DAYS,
    confidence: float = DEFAULT_CONFIDENCE,
    rng: np.random.Generator | None = None,
) -> dict[str, pd.DataFrame]:
    """
    Run each requested model over the same history.

    Model keys are validated up front, so an unknown key fails before any
    simulation runs. Results keep the requested order; duplicates run once.
    """
    resolved = [get_model(key) for key in dict.fromkeys(models)]
    rng = rng if rng is not None else np.random.default_rng()
    return {
        model.key: model.forecast(history, forecast_days, confidence, rng=rng)
        for model in resolved
    }


def combine_for_display(
    history: pd.DataFrame,
    forecasts: dict[str, pd.DataFrame],
) -> pd.DataFrame:
    """
    History followed by the first model's forecast, as one chart series.

    Forecast rows carry `price = prediction`; historical rows have a NaN
    `prediction`. Without forecasts the history is returned as a copy.
    """
    combined = history.copy()
    if not forecasts:
        return combined

    first = next(iter(forecasts.values()))
    combined["prediction"] = np.nan
    tail = pd.DataFrame(
        {"price": first["prediction"], "prediction": first["prediction"]},
        index=first.index,
    )
    return pd.concat([combined, tail])


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def simulate_symbol(
    symbol: str,
    models: list[str],
    forecast_days: int,
    confidence: float,
    days: int = DEFAULT_HISTORY_DAYS,
    seed: int | None = None,
    export: bool = False,
) -> dict[str, pd.DataFrame]:
    """Generate history for one catalog stock, log indicators and forecasts."""
    stock = get_stock(symbol)
    rng = np.random.default_rng(seed)

    history = generate_history(stock.symbol, days, stock.price, rng=rng)
    log.info(
        "%s  %s: %d days, last close %.2f",
        stock.symbol, stock.name, len(history), history["price"].iloc[-1],
    )
    if export:
        save_history(stock.symbol, history)

    for ind in compute_indicators(history):
        log.info(
            "%s  %-12s %10.2f  %-4s  strength %5.1f",
            stock.symbol, ind.name, ind.value, ind.signal.value, ind.strength,
        )

    results = {}
    failed = []
    for key in models:
        try:
            model = get_model(key)
            fc = model.forecast(history, forecast_days, confidence, rng=rng)
        except Exception as exc:
            log.error("%s  %s FAILED: %s", stock.symbol, key, exc)
            failed.append(key)
            continue
        results[model.key] = fc
        if fc.empty:
            continue
        last = fc.iloc[-1]
        log.info(
            "%s  %-8s day %d → %.2f  [%.2f, %.2f] @ %g%%",
            stock.symbol, model.name, forecast_days,
            last["prediction"], last["lower"], last["upper"], confidence,
        )

    if failed:
        raise RuntimeError(f"Forecast failed for: {failed}")
    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate forecasts for a catalog stock.")
    parser.add_argument("symbol")
    parser.add_argument("--models", nargs="+", default=DEFAULT_MODELS, choices=MODEL_TYPES)
    parser.add_argument("--days", type=int, default=DEFAULT_FORECAST_DAYS,
                        help="forecast horizon in days")
    parser.add_argument("--confidence", type=float, default=DEFAULT_CONFIDENCE)
    parser.add_argument("--timeframe", default=DEFAULT_TIMEFRAME, choices=list(TIMEFRAMES))
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--export", action="store_true",
                        help="write the generated history to data/raw/")
    args = parser.parse_args(argv)

    simulate_symbol(
        args.symbol,
        args.models,
        args.days,
        args.confidence,
        days=history_days(args.timeframe),
        seed=args.seed,
        export=args.export,
    )


# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )
    main()
