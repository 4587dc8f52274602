"""Per-stock analytics shown alongside recommendations.

The deterministic formulas are the contract. ``RandomizedFundamentals`` is a
placeholder for stocks whose P/E or beta the data source did not provide; it is
only used when injected, and takes a ``random.Random`` so callers can seed it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from core.domain.portfolio import (
    Fundamentals,
    RiskLevel,
    RiskMetrics,
    StockAnalytics,
    StockSnapshot,
    TechnicalSignals,
    Trend,
)

logger = logging.getLogger(__name__)

FAIR_PE_RATIO = 25.0
NEUTRAL_EARNINGS_YIELD = 0.5
BASE_STRENGTH = 60.0


def trend_strength(change_percent: float) -> float:
    return min(abs(change_percent * 10) + BASE_STRENGTH, 100.0)


def value_metric(pe_ratio: float | None) -> float:
    ratio = FAIR_PE_RATIO / pe_ratio if pe_ratio is not None and pe_ratio > 0 else NEUTRAL_EARNINGS_YIELD
    return min(ratio * 100, 100.0)


def risk_level(beta: float) -> RiskLevel:
    if beta < 1:
        return RiskLevel.LOW
    if beta < 1.5:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def _valuation_label(metric: float) -> str:
    if metric >= 70:
        return "an attractive valuation"
    if metric >= 40:
        return "a fair valuation"
    return "a premium valuation"


def _fundamentals(pe_ratio: float | None, metric: float) -> Fundamentals:
    if pe_ratio is None:
        description = "P/E ratio unavailable; valuation treated as neutral"
    else:
        description = f"P/E ratio of {pe_ratio:.1f} indicates {_valuation_label(metric)}"
    return Fundamentals(value_metric=round(metric, 2), description=description)


def _risk(beta: float | None) -> RiskMetrics:
    if beta is None:
        return RiskMetrics(risk_level=RiskLevel.MODERATE, description="Beta unavailable; risk assumed moderate")
    level = risk_level(beta)
    return RiskMetrics(
        risk_level=level,
        description=f"Beta of {beta:.2f} suggests {level.value} volatility relative to the market",
    )


@dataclass
class RandomizedFundamentals:
    """Stand-in numbers for stocks without fundamentals. Not real data."""

    rng: random.Random

    def pe_ratio(self) -> float:
        return self.rng.uniform(10, 40)

    def beta(self) -> float:
        return self.rng.uniform(0, 2)

    def trend(self) -> Trend:
        roll = self.rng.random()
        if roll < 0.7:
            return Trend.BULLISH
        if roll < 0.9:
            return Trend.NEUTRAL
        return Trend.BEARISH

    def strength(self) -> float:
        return self.rng.uniform(60, 100)

    def value_metric(self) -> float:
        return self.rng.uniform(50, 100)


class AnalyticsGenerator:
    def __init__(self, fallback: RandomizedFundamentals | None = None) -> None:
        self._fallback = fallback

    def generate(self, stock: StockSnapshot) -> StockAnalytics:
        if self._fallback is not None and (stock.pe_ratio is None or stock.beta is None):
            return self._generate_placeholder(stock, self._fallback)

        trend = Trend.BULLISH if stock.change >= 0 else Trend.BEARISH
        direction = "Upward" if trend is Trend.BULLISH else "Downward"
        technical = TechnicalSignals(
            trend=trend,
            strength=round(trend_strength(stock.change_percent), 2),
            description=f"{direction} momentum with a {stock.change_percent:+.2f}% daily move",
        )
        return StockAnalytics(
            technical_signals=technical,
            fundamentals=_fundamentals(stock.pe_ratio, value_metric(stock.pe_ratio)),
            risk_metrics=_risk(stock.beta),
        )

    @staticmethod
    def _generate_placeholder(stock: StockSnapshot, fallback: RandomizedFundamentals) -> StockAnalytics:
        logger.debug("Using placeholder analytics for %s", stock.symbol)
        pe_ratio = stock.pe_ratio if stock.pe_ratio is not None else fallback.pe_ratio()
        beta = stock.beta if stock.beta is not None else fallback.beta()
        trend = fallback.trend()
        technical = TechnicalSignals(
            trend=trend,
            strength=round(fallback.strength(), 2),
            description=f"Technical indicators suggest {trend.value} momentum",
        )
        return StockAnalytics(
            technical_signals=technical,
            fundamentals=_fundamentals(pe_ratio, fallback.value_metric()),
            risk_metrics=_risk(beta),
        )
