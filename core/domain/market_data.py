from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from core.domain.errors import InvalidSymbol

_SYMBOL_PATTERN = re.compile(r"^[A-Z]+$")


def normalize_symbol(symbol: str) -> str:
    """Upper-case a ticker and reject anything that is not plain letters."""
    candidate = (symbol or "").strip().upper()
    if not _SYMBOL_PATTERN.match(candidate):
        raise InvalidSymbol(symbol)
    return candidate


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


class HistoryRange(str, Enum):
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"
    ALL = "ALL"

    @property
    def lookback(self) -> timedelta:
        return _LOOKBACK[self]

    @property
    def is_intraday(self) -> bool:
        return self in {HistoryRange.ONE_WEEK, HistoryRange.ONE_MONTH}

    def start_date(self, end: date) -> date:
        return end - self.lookback


_LOOKBACK: dict[HistoryRange, timedelta] = {
    HistoryRange.ONE_WEEK: timedelta(days=7),
    HistoryRange.ONE_MONTH: timedelta(days=30),
    HistoryRange.THREE_MONTHS: timedelta(days=90),
    HistoryRange.SIX_MONTHS: timedelta(days=180),
    HistoryRange.ONE_YEAR: timedelta(days=365),
    HistoryRange.FIVE_YEARS: timedelta(days=5 * 365),
    HistoryRange.ALL: timedelta(days=30 * 365),
}


class PricePoint(BaseModel):
    """Closing price for one trading day."""

    date: date
    close: float

    model_config = ConfigDict(frozen=True)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date_field(cls, value: Any) -> date | None:
        return _parse_date(value)


class SearchResult(BaseModel):
    """Symbol lookup match."""

    symbol: str
    name: str
    type: str | None = None
    region: str | None = None
    currency: str | None = None

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return value.upper()


__all__ = ["HistoryRange", "PricePoint", "SearchResult", "normalize_symbol"]
