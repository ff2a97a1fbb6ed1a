import time

import numpy as np
import pandas as pd
from fastapi import APIRouter, HTTPException, Query

from api.main import registry
from api.schemas import (
    HistoryResponse,
    IndicatorResponse,
    IndicatorResult,
    PricePoint,
    StockListResponse,
    StockResponse,
)
from src.data.history import DEFAULT_HISTORY_DAYS, generate_history
from src.data.indicators import compute_indicators
from src.data.stocks import StockMeta, search_stocks
from src.errors import InvalidInputError
from src.models.simulate import DEFAULT_TIMEFRAME, TIMEFRAMES, history_days

router = APIRouter()

MAX_HISTORY_DAYS = max(TIMEFRAMES.values())
_cache: dict[tuple, dict] = {}
CACHE_TTL = 3600  # 1 hour


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_stock(symbol: str) -> StockMeta:
    symbol = symbol.upper()
    stock = registry["stocks"].get(symbol)
    if stock is None:
        raise HTTPException(status_code=404, detail=f"Unknown stock symbol '{symbol}'")
    return stock


def _resolve_days(days: int | None, timeframe: str) -> int:
    if days is not None:
        return days
    try:
        return history_days(timeframe)
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


def _evict_expired(now: float) -> None:
    for key in [k for k, e in _cache.items() if now - e["ts"] >= CACHE_TTL]:
        del _cache[key]


def get_history(stock: StockMeta, days: int) -> pd.DataFrame:
    """
    Generated history for a stock, reused for CACHE_TTL so that indicators
    and forecasts see the same series the client was shown.
    """
    now = time.time()
    entry = _cache.get((stock.symbol, days))
    if entry and now - entry["ts"] < CACHE_TTL:
        return entry["data"]
    _evict_expired(now)
    history = generate_history(stock.symbol, days, stock.price)
    _cache[(stock.symbol, days)] = {"data": history, "ts": now}
    return history


def _optional(value, cast):
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return cast(value)


def price_points(df: pd.DataFrame) -> list[PricePoint]:
    """Render history (or a combined history + forecast frame) as PricePoints."""
    points = []
    for date, row in df.iterrows():
        points.append(PricePoint(
            date=str(date.date()),
            price=round(float(row["price"]), 4),
            open=_optional(row.get("open"), lambda v: round(float(v), 4)),
            high=_optional(row.get("high"), lambda v: round(float(v), 4)),
            low=_optional(row.get("low"), lambda v: round(float(v), 4)),
            close=_optional(row.get("close"), lambda v: round(float(v), 4)),
            volume=_optional(row.get("volume"), int),
            prediction=_optional(row.get("prediction"), lambda v: round(float(v), 4)),
        ))
    return points


def _stock_response(stock: StockMeta) -> StockResponse:
    return StockResponse(
        symbol=stock.symbol,
        name=stock.name,
        price=stock.price,
        change=stock.change,
        change_percent=stock.change_percent,
        market_cap=stock.market_cap,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/stocks", response_model=StockListResponse)
def list_stocks(q: str = Query(default="", max_length=50)):
    """Catalog stocks, optionally filtered by symbol or name."""
    return StockListResponse(stocks=[_stock_response(s) for s in search_stocks(q)])


@router.get("/stocks/{symbol}", response_model=StockResponse)
def get_stock(symbol: str):
    return _stock_response(_get_stock(symbol))


@router.get("/history/{symbol}", response_model=HistoryResponse)
def get_price_history(
    symbol: str,
    days: int | None = Query(default=None, ge=1, le=MAX_HISTORY_DAYS),
    timeframe: str = Query(default=DEFAULT_TIMEFRAME, enum=list(TIMEFRAMES)),
):
    """Return a synthetic daily OHLCV history ending yesterday."""
    stock = _get_stock(symbol)
    n_days = _resolve_days(days, timeframe)
    history = get_history(stock, n_days)
    return HistoryResponse(symbol=stock.symbol, days=n_days, data=price_points(history))


@router.get("/indicators/{symbol}", response_model=IndicatorResponse)
def get_indicators(symbol: str):
    """Technical indicators over the stock's one-year history."""
    stock = _get_stock(symbol)
    history = get_history(stock, DEFAULT_HISTORY_DAYS)
    indicators = [
        IndicatorResult(
            name=ind.name,
            value=round(ind.value, 4),
            signal=ind.signal.value,
            strength=round(ind.strength, 2),
            description=ind.description,
        )
        for ind in compute_indicators(history)
    ]
    return IndicatorResponse(symbol=stock.symbol, indicators=indicators)
