"""Domain models."""

from core.domain.errors import (
    AlreadyTaken,
    InvalidSymbol,
    MarketDataError,
    MarketDataUnavailable,
    RateLimited,
    SymbolNotFound,
)
from core.domain.market_data import HistoryRange, PricePoint, SearchResult, normalize_symbol
from core.domain.portfolio import (
    Holding,
    PortfolioAnalysis,
    RiskLevel,
    StockAnalytics,
    StockRecommendation,
    StockSnapshot,
    Trend,
)
from core.domain.user import UserAccount

__all__ = [
    "AlreadyTaken",
    "HistoryRange",
    "Holding",
    "InvalidSymbol",
    "MarketDataError",
    "MarketDataUnavailable",
    "PortfolioAnalysis",
    "PricePoint",
    "RateLimited",
    "RiskLevel",
    "SearchResult",
    "StockAnalytics",
    "StockRecommendation",
    "StockSnapshot",
    "SymbolNotFound",
    "Trend",
    "UserAccount",
    "normalize_symbol",
]
