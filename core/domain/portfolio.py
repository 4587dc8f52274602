from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StockSnapshot(BaseModel):
    """Point-in-time market and fundamental data for a symbol."""

    symbol: str
    price: float = 0.0
    change: float = 0.0
    change_percent: float = Field(default=0.0, validation_alias=AliasChoices("change_percent", "changePercent"))
    volume: int = 0
    high_52_week: float = Field(default=0.0, validation_alias=AliasChoices("high_52_week", "high52Week"))
    low_52_week: float = Field(default=0.0, validation_alias=AliasChoices("low_52_week", "low52Week"))
    sector: str | None = None
    industry: str | None = None
    pe_ratio: float | None = Field(default=None, validation_alias=AliasChoices("pe_ratio", "peRatio"))
    dividend_yield: float | None = Field(
        default=None, validation_alias=AliasChoices("dividend_yield", "dividendYield")
    )
    market_cap: float | None = Field(default=None, validation_alias=AliasChoices("market_cap", "marketCap"))
    beta: float | None = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=False)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return value.strip().upper()


class Holding(BaseModel):
    """A position in one stock: share count, cost basis and the last known snapshot."""

    symbol: str
    shares: Decimal = Field(ge=0)
    average_price: Decimal = Field(ge=0, validation_alias=AliasChoices("average_price", "averagePrice"))
    stats: StockSnapshot

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=False)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def market_value(self) -> float:
        return float(self.shares) * self.stats.price

    @property
    def cost_basis(self) -> float:
        return float(self.shares) * float(self.average_price)


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class TechnicalSignals(BaseModel):
    trend: Trend
    strength: float = Field(ge=0, le=100)
    description: str


class Fundamentals(BaseModel):
    value_metric: float = Field(ge=0, le=100)
    description: str


class RiskMetrics(BaseModel):
    risk_level: RiskLevel
    description: str


class StockAnalytics(BaseModel):
    technical_signals: TechnicalSignals
    fundamentals: Fundamentals
    risk_metrics: RiskMetrics


class StockRecommendation(BaseModel):
    symbol: str
    reason: str
    stats: StockSnapshot
    analytics: StockAnalytics


class PortfolioAnalysis(BaseModel):
    """Derived view of a holdings list. Recomputed on demand, never mutated."""

    sector_allocation: dict[str, float] = Field(default_factory=dict)
    top_sectors: list[str] = Field(default_factory=list)
    underrepresented_sectors: list[str] = Field(default_factory=list)
    recommendations: list[StockRecommendation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def total_allocation(self) -> float:
        return sum(self.sector_allocation.values())


__all__ = [
    "Fundamentals",
    "Holding",
    "PortfolioAnalysis",
    "RiskLevel",
    "RiskMetrics",
    "StockAnalytics",
    "StockRecommendation",
    "StockSnapshot",
    "TechnicalSignals",
    "Trend",
]
