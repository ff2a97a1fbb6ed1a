"""
FastAPI application entry point.

Loads the stock catalog and the forecast model registry at startup. Both are
held in `registry` and shared across routers; generated histories are cached
per symbol inside the stocks router.

Usage:
    uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.data.stocks import CATALOG
from src.models.simulate import MODELS

log = logging.getLogger(__name__)

registry: dict = {
    "stocks": {},
    "models": {},
}


def _load_registry() -> None:
    """Index the catalog and forecast models by key."""
    registry["stocks"] = {s.symbol: s for s in CATALOG}
    registry["models"] = dict(MODELS)
    log.info(
        "Registry loaded: %d stocks, %d models",
        len(registry["stocks"]), len(registry["models"]),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _load_registry()
    yield


app = FastAPI(
    title="Stock Forecast Simulator",
    description="Synthetic price histories, simulated ARIMA / Prophet / LSTM forecasts "
                "and technical indicators.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

from api.routers import stocks, forecast  # noqa: E402

app.include_router(stocks.router)
app.include_router(forecast.router)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "stocks_loaded": len(registry["stocks"]),
        "models_loaded": list(registry["models"].keys()),
    }
