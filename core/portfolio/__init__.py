"""Portfolio store, analyzer and recommendation analytics."""

from core.portfolio.analytics import AnalyticsGenerator, RandomizedFundamentals
from core.portfolio.analyzer import PortfolioAnalyzer
from core.portfolio.sectors import CANONICAL_SECTORS, UNKNOWN_SECTOR
from core.portfolio.store import PortfolioStore

__all__ = [
    "CANONICAL_SECTORS",
    "UNKNOWN_SECTOR",
    "AnalyticsGenerator",
    "PortfolioAnalyzer",
    "PortfolioStore",
    "RandomizedFundamentals",
]
