import logging

import numpy as np
from fastapi import APIRouter, HTTPException, Query

from api.metrics import fabricate_metrics
from api.routers.stocks import _get_stock, _resolve_days, get_history, price_points
from api.schemas import ForecastPoint, ForecastResponse, ModelMetrics
from src.errors import InvalidInputError
from src.models.simulate import (
    DEFAULT_MODELS,
    DEFAULT_TIMEFRAME,
    MODEL_TYPES,
    TIMEFRAMES,
    combine_for_display,
    get_model,
    run_forecasts,
)

log = logging.getLogger(__name__)

router = APIRouter()

MIN_FORECAST_DAYS = 7
MAX_FORECAST_DAYS = 90
MIN_CONFIDENCE = 80
MAX_CONFIDENCE = 99


@router.get("/forecast/{symbol}", response_model=ForecastResponse)
def get_forecast(
    symbol: str,
    models: list[str] = Query(default=DEFAULT_MODELS, enum=MODEL_TYPES),
    days: int = Query(default=30, ge=MIN_FORECAST_DAYS, le=MAX_FORECAST_DAYS),
    confidence: float = Query(default=95, ge=MIN_CONFIDENCE, le=MAX_CONFIDENCE),
    timeframe: str = Query(default=DEFAULT_TIMEFRAME, enum=list(TIMEFRAMES)),
):
    """
    Run the selected forecast models over the stock's cached history.

    Returns each model's forecast series, display metrics per model, and the
    history extended with the first selected model's predictions.
    """
    stock = _get_stock(symbol)
    try:
        for key in models:
            get_model(key)
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    history = get_history(stock, _resolve_days(None, timeframe))
    last_price = float(history["price"].iloc[-1])
    rng = np.random.default_rng()

    try:
        results = run_forecasts(history, models, days, confidence, rng=rng)
    except Exception:
        log.exception("%s  forecast failed for models %s", stock.symbol, models)
        raise HTTPException(
            status_code=500,
            detail="Unable to generate forecast. Please try again.",
        )

    forecasts = {
        key: [
            ForecastPoint(
                date=str(date.date()),
                price=round(float(row["price"]), 4),
                prediction=round(float(row["prediction"]), 4),
                lower=round(float(row["lower"]), 4),
                upper=round(float(row["upper"]), 4),
                confidence=float(row["confidence"]),
            )
            for date, row in fc.iterrows()
        ]
        for key, fc in results.items()
    }
    metrics = [
        ModelMetrics(**fabricate_metrics(key, fc, last_price, rng))
        for key, fc in results.items()
    ]
    log.info(
        "%s  %d-day forecast using %d model(s)", stock.symbol, days, len(results),
    )

    return ForecastResponse(
        symbol=stock.symbol,
        forecast_days=days,
        confidence=confidence,
        forecasts=forecasts,
        models=metrics,
        combined=price_points(combine_for_display(history, results)),
    )
