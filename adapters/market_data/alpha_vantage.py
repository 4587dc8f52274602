"""Alpha Vantage REST client for quotes, fundamentals, price history and symbol search."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx
import pandas as pd

from core.domain.errors import MarketDataUnavailable, RateLimited, SymbolNotFound
from core.domain.market_data import HistoryRange, PricePoint, SearchResult, normalize_symbol
from core.domain.portfolio import StockSnapshot
from core.settings import DEFAULT_ALPHA_VANTAGE_URL

logger = logging.getLogger(__name__)

USER_AGENT = "portfolio-dashboard/1.0"
INTRADAY_INTERVAL = "30min"

# Alpha Vantage reports SEC-style sector labels; map them onto the canonical names.
_SECTOR_ALIASES: dict[str, str] = {
    "TECHNOLOGY": "Technology",
    "LIFE SCIENCES": "Healthcare",
    "HEALTHCARE": "Healthcare",
    "FINANCE": "Financial Services",
    "FINANCIAL SERVICES": "Financial Services",
    "TRADE & SERVICES": "Consumer Cyclical",
    "CONSUMER CYCLICAL": "Consumer Cyclical",
    "MANUFACTURING": "Industrials",
    "INDUSTRIALS": "Industrials",
    "CONSUMER DEFENSIVE": "Consumer Defensive",
    "ENERGY & TRANSPORTATION": "Energy",
    "ENERGY": "Energy",
    "BASIC MATERIALS": "Basic Materials",
    "REAL ESTATE & CONSTRUCTION": "Real Estate",
    "REAL ESTATE": "Real Estate",
    "UTILITIES": "Utilities",
    "COMMUNICATION SERVICES": "Communication Services",
}

_MISSING = {"", "none", "-", "n/a", "nan"}


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    text = str(value).strip().rstrip("%").replace(",", "")
    if text.lower() in _MISSING:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _to_int(value: Any) -> int | None:
    number = _to_float(value)
    return int(number) if number is not None else None


def normalize_sector(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _MISSING:
        return None
    return _SECTOR_ALIASES.get(text.upper(), text.title())


class AlphaVantageMarketData:
    """Market data provider backed by the Alpha Vantage query API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_ALPHA_VANTAGE_URL,
        timeout_seconds: float = 10,
    ) -> None:
        if not api_key:
            raise RuntimeError(f"{self.__class__.__name__}: API key required")
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout_seconds

    def _query(self, function: str, **params: str) -> dict[str, Any]:
        query = {"function": function, **params, "apikey": self._api_key}
        logger.debug("Alpha Vantage %s %s", function, params)
        try:
            response = httpx.get(
                self._base_url, params=query, headers={"User-Agent": USER_AGENT}, timeout=self._timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Alpha Vantage request failed: %s", function)
            raise MarketDataUnavailable(f"Failed to reach Alpha Vantage: {exc}") from exc

        try:
            payload = response.json() or {}
        except ValueError as exc:
            logger.exception("Alpha Vantage returned a non-JSON body: %s", function)
            raise MarketDataUnavailable(f"Unreadable Alpha Vantage response for {function}") from exc
        if not isinstance(payload, dict):
            logger.error("Alpha Vantage returned %s for %s", type(payload).__name__, function)
            raise MarketDataUnavailable(f"Unexpected Alpha Vantage response for {function}")
        if "Note" in payload or "Information" in payload:
            logger.warning("Alpha Vantage throttled %s: %s", function, payload.get("Note") or payload.get("Information"))
            raise RateLimited()
        return payload

    def fetch_snapshot(self, symbol: str) -> StockSnapshot:
        symbol = normalize_symbol(symbol)
        payload = self._query("GLOBAL_QUOTE", symbol=symbol)
        quote = payload.get("Global Quote") or {}
        if not quote or "Error Message" in payload:
            raise SymbolNotFound(symbol)

        overview = self._fetch_overview(symbol)
        return StockSnapshot(
            symbol=symbol,
            price=_to_float(quote.get("05. price")) or 0.0,
            change=_to_float(quote.get("09. change")) or 0.0,
            change_percent=_to_float(quote.get("10. change percent")) or 0.0,
            volume=_to_int(quote.get("06. volume")) or 0,
            high_52_week=_to_float(overview.get("52WeekHigh")) or _to_float(quote.get("03. high")) or 0.0,
            low_52_week=_to_float(overview.get("52WeekLow")) or _to_float(quote.get("04. low")) or 0.0,
            sector=normalize_sector(overview.get("Sector")) or "Unknown",
            industry=(str(overview["Industry"]).title() if overview.get("Industry") else "Unknown"),
            pe_ratio=_to_float(overview.get("PERatio")),
            dividend_yield=self._dividend_percent(overview.get("DividendYield")),
            market_cap=_to_float(overview.get("MarketCapitalization")),
            beta=_to_float(overview.get("Beta")),
        )

    def _fetch_overview(self, symbol: str) -> dict[str, Any]:
        # Fundamentals are optional: ETFs and throttled calls just leave them blank.
        try:
            return self._query("OVERVIEW", symbol=symbol)
        except (RateLimited, MarketDataUnavailable) as exc:
            logger.warning("No overview for %s: %s", symbol, exc)
            return {}

    @staticmethod
    def _dividend_percent(value: Any) -> float | None:
        fraction = _to_float(value)
        return round(fraction * 100, 4) if fraction is not None else None

    def fetch_history(
        self, symbol: str, history_range: HistoryRange = HistoryRange.ONE_WEEK, *, today: date | None = None
    ) -> list[PricePoint]:
        symbol = normalize_symbol(symbol)
        if history_range.is_intraday:
            payload = self._query(
                "TIME_SERIES_INTRADAY", symbol=symbol, interval=INTRADAY_INTERVAL, outputsize="full"
            )
        else:
            outputsize = "compact" if history_range is HistoryRange.THREE_MONTHS else "full"
            payload = self._query("TIME_SERIES_DAILY", symbol=symbol, outputsize=outputsize)

        series_key = next((key for key in payload if "Time Series" in key), None)
        if series_key is None or not payload[series_key]:
            raise SymbolNotFound(symbol)

        df = pd.DataFrame.from_dict(payload[series_key], orient="index")
        if "4. close" not in df.columns:
            raise SymbolNotFound(symbol)
        df.index = pd.to_datetime(df.index, errors="coerce")
        df = df[df.index.notna()].copy()
        df["close"] = pd.to_numeric(df["4. close"], errors="coerce").fillna(0.0)

        end = today or date.today()
        start = history_range.start_date(end)
        df["day"] = df.index.date
        df = df[(df["day"] >= start) & (df["day"] <= end)].sort_index()
        if df.empty:
            return []

        # Intraday bars collapse to the last close of each day.
        daily = df.groupby("day", sort=True)["close"].last()
        return [PricePoint(date=day, close=float(close)) for day, close in daily.items()]

    def search(self, query: str) -> list[SearchResult]:
        text = query.strip()
        if not text:
            return []
        payload = self._query("SYMBOL_SEARCH", keywords=text)
        results: list[SearchResult] = []
        for match in payload.get("bestMatches", []) or []:
            results.append(
                SearchResult(
                    symbol=match.get("1. symbol", ""),
                    name=match.get("2. name", ""),
                    type=match.get("3. type"),
                    region=match.get("4. region"),
                    currency=match.get("8. currency"),
                )
            )
        logger.info("Alpha Vantage search %r returned %d matches", text, len(results))
        return results
