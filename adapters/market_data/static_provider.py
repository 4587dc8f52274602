"""Offline market data served from the reference catalog."""

from __future__ import annotations

import logging
import random
import zlib
from collections.abc import Iterable
from datetime import date, timedelta

from adapters.market_data.catalog import StaticStockCatalog
from core.domain.errors import SymbolNotFound
from core.domain.market_data import HistoryRange, PricePoint, SearchResult, normalize_symbol
from core.domain.portfolio import StockSnapshot

logger = logging.getLogger(__name__)

DAILY_VOLATILITY = 0.015


class StaticMarketData:
    """Deterministic provider for demos and tests: no network, no API key.

    Histories are a random walk seeded by the symbol that ends at the snapshot price,
    so the same symbol always charts the same way.
    """

    def __init__(self, catalog: StaticStockCatalog | None = None, extra: Iterable[StockSnapshot] = ()) -> None:
        self._catalog = catalog or StaticStockCatalog()
        self._extra = {stock.symbol: stock for stock in extra}

    def fetch_snapshot(self, symbol: str) -> StockSnapshot:
        symbol = normalize_symbol(symbol)
        snapshot = self._extra.get(symbol) or self._catalog.get(symbol)
        if snapshot is None:
            raise SymbolNotFound(symbol)
        return snapshot

    def fetch_history(
        self, symbol: str, history_range: HistoryRange = HistoryRange.ONE_WEEK, *, today: date | None = None
    ) -> list[PricePoint]:
        snapshot = self.fetch_snapshot(symbol)
        end = today or date.today()
        days = history_range.lookback.days
        rng = random.Random(zlib.crc32(snapshot.symbol.encode()))

        closes = [snapshot.price]
        for _ in range(days):
            closes.append(max(closes[-1] / (1 + rng.gauss(0, DAILY_VOLATILITY)), 0.01))
        closes.reverse()

        points = [
            PricePoint(date=end - timedelta(days=days - offset), close=round(close, 2))
            for offset, close in enumerate(closes)
        ]
        return [point for point in points if point.date.weekday() < 5]

    def search(self, query: str) -> list[SearchResult]:
        text = query.strip().upper()
        if not text:
            return []
        stocks = [*self._extra.values(), *self._catalog.candidates()]
        results = [
            SearchResult(
                symbol=stock.symbol,
                name=stock.industry or stock.symbol,
                type="Equity",
                region="United States",
                currency="USD",
            )
            for stock in stocks
            if text in stock.symbol or text in (stock.industry or "").upper()
        ]
        logger.debug("Static search %r returned %d matches", query, len(results))
        return results
