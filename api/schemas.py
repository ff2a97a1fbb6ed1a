from pydantic import BaseModel


class StockResponse(BaseModel):
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    market_cap: str | None = None


class StockListResponse(BaseModel):
    stocks: list[StockResponse]


class PricePoint(BaseModel):
    date: str
    price: float
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: int | None = None
    prediction: float | None = None   # only on forecast rows of a combined series


class HistoryResponse(BaseModel):
    symbol: str
    days: int
    data: list[PricePoint]


class IndicatorResult(BaseModel):
    name: str
    value: float
    signal: str          # "buy", "sell" or "hold"
    strength: float
    description: str


class IndicatorResponse(BaseModel):
    symbol: str
    indicators: list[IndicatorResult]


class ForecastPoint(BaseModel):
    date: str
    price: float
    prediction: float
    lower: float
    upper: float
    confidence: float


class ModelMetrics(BaseModel):
    model: str
    name: str
    type: str            # "statistical", "ml" or "deep"
    description: str
    accuracy: float
    mse: float
    mae: float
    rmse: float
    last_prediction: float
    trend: str           # "up" or "down"


class ForecastResponse(BaseModel):
    symbol: str
    forecast_days: int
    confidence: float
    forecasts: dict[str, list[ForecastPoint]]
    models: list[ModelMetrics]
    combined: list[PricePoint]
