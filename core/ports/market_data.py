from __future__ import annotations

from typing import Protocol

from core.domain.market_data import HistoryRange, PricePoint, SearchResult
from core.domain.portfolio import StockSnapshot


class MarketDataPort(Protocol):
    """Market data interface for quotes, price history and symbol search."""

    def fetch_snapshot(self, symbol: str) -> StockSnapshot:
        """Fetch the latest snapshot. Raises SymbolNotFound, RateLimited or MarketDataUnavailable."""

    def fetch_history(self, symbol: str, history_range: HistoryRange) -> list[PricePoint]:
        """Fetch closing prices for the range, oldest first."""

    def search(self, query: str) -> list[SearchResult]:
        """Look up symbols matching a free-text query."""
