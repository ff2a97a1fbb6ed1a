"""
Static stock catalog.

There is no live market data source: each stock carries a fixed reference
price that seeds the synthetic history generator.
"""

from dataclasses import dataclass

from ..errors import UnknownStockError


@dataclass(frozen=True)
class StockMeta:
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    market_cap: str | None = None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

CATALOG = [
    StockMeta("AAPL",  "Apple Inc.",      185.42,  2.34,  1.28, "2.9T"),
    StockMeta("MSFT",  "Microsoft Corp.", 342.15, -1.23, -0.36, "2.5T"),
    StockMeta("GOOGL", "Alphabet Inc.",   125.67,  3.45,  2.82, "1.6T"),
    StockMeta("AMZN",  "Amazon.com Inc.", 142.33,  1.89,  1.35, "1.5T"),
    StockMeta("TSLA",  "Tesla Inc.",      218.45, -5.67, -2.53, "692B"),
    StockMeta("NVDA",  "NVIDIA Corp.",    456.78, 12.34,  2.78, "1.1T"),
    StockMeta("META",  "Meta Platforms",  298.34,  4.56,  1.55, "780B"),
    StockMeta("NFLX",  "Netflix Inc.",    432.10, -2.15, -0.49, "192B"),
]


def get_stock(symbol: str) -> StockMeta:
    """Look up a stock by symbol (case-insensitive)."""
    symbol = symbol.upper()
    for stock in CATALOG:
        if stock.symbol == symbol:
            return stock
    raise UnknownStockError(f"Unknown stock symbol '{symbol}'")


def search_stocks(term: str = "") -> list[StockMeta]:
    """Stocks whose symbol or name contains `term`, ignoring case."""
    term = term.strip().lower()
    if not term:
        return list(CATALOG)
    return [
        s for s in CATALOG
        if term in s.symbol.lower() or term in s.name.lower()
    ]
