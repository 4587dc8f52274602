"""Reference stock universes used for recommendations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence

from core.domain.errors import MarketDataError
from core.domain.portfolio import StockSnapshot
from core.portfolio.sectors import UNKNOWN_SECTOR
from core.ports.market_data import MarketDataPort

logger = logging.getLogger(__name__)

REFERENCE_STOCKS: list[dict[str, object]] = [
    {"symbol": "NVDA", "price": 789.45, "change": 12.5, "changePercent": 1.61, "volume": 23456789,
     "high52Week": 800.12, "low52Week": 400.23, "sector": "Technology", "industry": "Semiconductors",
     "peRatio": 65.2, "dividendYield": 0.02, "marketCap": 1.95e12, "beta": 1.68},
    {"symbol": "AMD", "price": 178.23, "change": 5.67, "changePercent": 3.29, "volume": 45678912,
     "high52Week": 185.45, "low52Week": 95.67, "sector": "Technology", "industry": "Semiconductors",
     "peRatio": 48.7, "dividendYield": None, "marketCap": 2.88e11, "beta": 1.72},
    {"symbol": "JNJ", "price": 156.78, "change": 1.23, "changePercent": 0.79, "volume": 5678912,
     "high52Week": 165.34, "low52Week": 140.23, "sector": "Healthcare", "industry": "Drug Manufacturers",
     "peRatio": 15.4, "dividendYield": 3.05, "marketCap": 3.77e11, "beta": 0.54},
    {"symbol": "UNH", "price": 478.9, "change": 3.45, "changePercent": 0.73, "volume": 2345678,
     "high52Week": 490.12, "low52Week": 420.56, "sector": "Healthcare", "industry": "Healthcare Plans",
     "peRatio": 21.3, "dividendYield": 1.58, "marketCap": 4.42e11, "beta": 0.61},
    {"symbol": "V", "price": 267.89, "change": 2.34, "changePercent": 0.88, "volume": 6789123,
     "high52Week": 275.45, "low52Week": 220.34, "sector": "Financial Services", "industry": "Credit Services",
     "peRatio": 30.1, "dividendYield": 0.78, "marketCap": 5.49e11, "beta": 0.96},
    {"symbol": "JPM", "price": 189.45, "change": 1.56, "changePercent": 0.83, "volume": 8901234,
     "high52Week": 195.67, "low52Week": 150.23, "sector": "Financial Services", "industry": "Banks",
     "peRatio": 11.6, "dividendYield": 2.32, "marketCap": 5.45e11, "beta": 1.12},
    {"symbol": "AMZN", "price": 178.15, "change": -1.42, "changePercent": -0.79, "volume": 38765432,
     "high52Week": 189.77, "low52Week": 118.35, "sector": "Consumer Cyclical", "industry": "Internet Retail",
     "peRatio": 52.8, "dividendYield": None, "marketCap": 1.85e12, "beta": 1.15},
    {"symbol": "HD", "price": 362.4, "change": 2.1, "changePercent": 0.58, "volume": 3456789,
     "high52Week": 396.87, "low52Week": 274.26, "sector": "Consumer Cyclical", "industry": "Home Improvement Retail",
     "peRatio": 24.2, "dividendYield": 2.48, "marketCap": 3.6e11, "beta": 1.01},
    {"symbol": "CAT", "price": 338.5, "change": 4.25, "changePercent": 1.27, "volume": 2789456,
     "high52Week": 350.0, "low52Week": 223.76, "sector": "Industrials", "industry": "Farm & Heavy Construction Machinery",
     "peRatio": 16.1, "dividendYield": 1.54, "marketCap": 1.69e11, "beta": 1.09},
    {"symbol": "HON", "price": 201.35, "change": -0.65, "changePercent": -0.32, "volume": 3123456,
     "high52Week": 214.5, "low52Week": 174.88, "sector": "Industrials", "industry": "Conglomerates",
     "peRatio": 23.5, "dividendYield": 2.14, "marketCap": 1.31e11, "beta": 0.98},
    {"symbol": "PG", "price": 159.88, "change": 0.44, "changePercent": 0.28, "volume": 6234512,
     "high52Week": 165.35, "low52Week": 141.45, "sector": "Consumer Defensive", "industry": "Household & Personal Products",
     "peRatio": 26.3, "dividendYield": 2.36, "marketCap": 3.76e11, "beta": 0.41},
    {"symbol": "KO", "price": 60.12, "change": 0.18, "changePercent": 0.3, "volume": 12456789,
     "high52Week": 64.99, "low52Week": 51.55, "sector": "Consumer Defensive", "industry": "Beverages - Non-Alcoholic",
     "peRatio": 24.1, "dividendYield": 3.06, "marketCap": 2.59e11, "beta": 0.59},
    {"symbol": "XOM", "price": 104.56, "change": -1.12, "changePercent": -1.06, "volume": 16789012,
     "high52Week": 123.75, "low52Week": 95.77, "sector": "Energy", "industry": "Oil & Gas Integrated",
     "peRatio": 11.9, "dividendYield": 3.63, "marketCap": 4.15e11, "beta": 0.92},
    {"symbol": "CVX", "price": 153.2, "change": -0.88, "changePercent": -0.57, "volume": 8456123,
     "high52Week": 171.7, "low52Week": 139.62, "sector": "Energy", "industry": "Oil & Gas Integrated",
     "peRatio": 13.8, "dividendYield": 4.25, "marketCap": 2.86e11, "beta": 1.08},
    {"symbol": "LIN", "price": 456.3, "change": 3.02, "changePercent": 0.67, "volume": 1876543,
     "high52Week": 477.71, "low52Week": 361.02, "sector": "Basic Materials", "industry": "Specialty Chemicals",
     "peRatio": 34.6, "dividendYield": 1.22, "marketCap": 2.2e11, "beta": 0.94},
    {"symbol": "NEM", "price": 35.74, "change": 0.61, "changePercent": 1.74, "volume": 9876543,
     "high52Week": 49.34, "low52Week": 29.42, "sector": "Basic Materials", "industry": "Gold",
     "peRatio": None, "dividendYield": 2.8, "marketCap": 4.12e10, "beta": 0.51},
    {"symbol": "PLD", "price": 128.76, "change": -0.54, "changePercent": -0.42, "volume": 3456123,
     "high52Week": 137.52, "low52Week": 96.64, "sector": "Real Estate", "industry": "REIT - Industrial",
     "peRatio": 38.9, "dividendYield": 2.7, "marketCap": 1.19e11, "beta": 1.05},
    {"symbol": "AMT", "price": 197.45, "change": 1.87, "changePercent": 0.96, "volume": 2123456,
     "high52Week": 219.1, "low52Week": 154.58, "sector": "Real Estate", "industry": "REIT - Specialty",
     "peRatio": 41.2, "dividendYield": 3.28, "marketCap": 9.2e10, "beta": 0.87},
    {"symbol": "NEE", "price": 62.35, "change": 0.35, "changePercent": 0.56, "volume": 10234567,
     "high52Week": 79.45, "low52Week": 47.15, "sector": "Utilities", "industry": "Utilities - Regulated Electric",
     "peRatio": 16.8, "dividendYield": 3.3, "marketCap": 1.28e11, "beta": 0.52},
    {"symbol": "DUK", "price": 96.8, "change": -0.22, "changePercent": -0.23, "volume": 3345678,
     "high52Week": 100.26, "low52Week": 83.06, "sector": "Utilities", "industry": "Utilities - Regulated Electric",
     "peRatio": 19.7, "dividendYield": 4.24, "marketCap": 7.46e10, "beta": 0.45},
    {"symbol": "GOOGL", "price": 141.8, "change": 1.92, "changePercent": 1.37, "volume": 27654321,
     "high52Week": 153.78, "low52Week": 102.21, "sector": "Communication Services", "industry": "Internet Content & Information",
     "peRatio": 24.6, "dividendYield": None, "marketCap": 1.77e12, "beta": 1.05},
    {"symbol": "DIS", "price": 111.95, "change": -0.75, "changePercent": -0.67, "volume": 9123456,
     "high52Week": 123.74, "low52Week": 78.73, "sector": "Communication Services", "industry": "Entertainment",
     "peRatio": 72.4, "dividendYield": 0.27, "marketCap": 2.05e11, "beta": 1.39},
]


class StaticStockCatalog:
    """Catalog backed by fixed reference snapshots."""

    def __init__(self, stocks: Iterable[StockSnapshot | Mapping[str, object]] | None = None) -> None:
        source = REFERENCE_STOCKS if stocks is None else stocks
        self._stocks = [
            stock if isinstance(stock, StockSnapshot) else StockSnapshot.model_validate(stock) for stock in source
        ]

    def candidates(self, sector: str | None = None) -> list[StockSnapshot]:
        if sector is None:
            return list(self._stocks)
        return [stock for stock in self._stocks if stock.sector == sector]

    def get(self, symbol: str) -> StockSnapshot | None:
        symbol = symbol.upper()
        return next((stock for stock in self._stocks if stock.symbol == symbol), None)


class MarketDataCatalog:
    """Catalog whose candidate symbols are resolved live through a market data provider.

    Snapshots are fetched lazily as the caller iterates; symbols the provider cannot
    serve are skipped.
    """

    def __init__(self, market_data: MarketDataPort, universe: Mapping[str, Sequence[str]]) -> None:
        self._market_data = market_data
        self._universe = {sector: [symbol.upper() for symbol in symbols] for sector, symbols in universe.items()}

    @classmethod
    def from_reference(cls, market_data: MarketDataPort) -> MarketDataCatalog:
        universe: dict[str, list[str]] = {}
        for stock in REFERENCE_STOCKS:
            universe.setdefault(str(stock["sector"]), []).append(str(stock["symbol"]))
        return cls(market_data, universe)

    def candidates(self, sector: str | None = None) -> Iterator[StockSnapshot]:
        if sector is None:
            symbols = [symbol for group in self._universe.values() for symbol in group]
        else:
            symbols = list(self._universe.get(sector, []))

        for symbol in symbols:
            try:
                snapshot = self._market_data.fetch_snapshot(symbol)
            except MarketDataError as exc:
                logger.warning("Skipping catalog symbol %s: %s", symbol, exc)
                continue
            if sector is not None and snapshot.sector in (None, "", UNKNOWN_SECTOR):
                snapshot = snapshot.model_copy(update={"sector": sector})
            yield snapshot
