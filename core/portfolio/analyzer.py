from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from core.domain.portfolio import Holding, PortfolioAnalysis, StockRecommendation, StockSnapshot
from core.portfolio.analytics import AnalyticsGenerator
from core.portfolio.sectors import CANONICAL_SECTORS, UNKNOWN_SECTOR
from core.ports.catalog import StockCatalog

logger = logging.getLogger(__name__)

UNDERREPRESENTED_THRESHOLD = 5.0
RECOMMENDATION_LIMIT = 2
TOP_SECTOR_COUNT = 3

SECTOR_REASON = "Adds exposure to the underrepresented {sector} sector"
BACKFILL_REASON = "Strong fundamentals with attractive dividend yield or growth potential"


def sector_allocation(holdings: Sequence[Holding]) -> dict[str, float]:
    """Percentage of total market value per sector, keyed in first-seen order.

    A portfolio worth nothing in total allocates 0.0 to every sector it holds.
    """
    total_value = sum(holding.market_value for holding in holdings)
    allocation: dict[str, float] = {}
    for holding in holdings:
        sector = holding.stats.sector or UNKNOWN_SECTOR
        share = holding.market_value / total_value * 100 if total_value else 0.0
        allocation[sector] = allocation.get(sector, 0.0) + share
    return allocation


def top_sectors(allocation: dict[str, float], count: int = TOP_SECTOR_COUNT) -> list[str]:
    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(allocation.items(), key=lambda item: item[1], reverse=True)
    return [sector for sector, _ in ranked[:count]]


def underrepresented_sectors(
    allocation: dict[str, float], threshold: float = UNDERREPRESENTED_THRESHOLD
) -> list[str]:
    return [sector for sector in CANONICAL_SECTORS if allocation.get(sector, 0.0) < threshold]


class PortfolioAnalyzer:
    """Sector allocation, diversification gaps and stock suggestions for a holdings list."""

    def __init__(
        self,
        catalog: StockCatalog,
        analytics: AnalyticsGenerator | None = None,
        *,
        threshold: float = UNDERREPRESENTED_THRESHOLD,
        limit: int = RECOMMENDATION_LIMIT,
        backfill: bool = True,
    ) -> None:
        self._catalog = catalog
        self._analytics = analytics or AnalyticsGenerator()
        self._threshold = threshold
        self._limit = limit
        self._backfill = backfill

    def analyze(self, holdings: Sequence[Holding]) -> PortfolioAnalysis:
        allocation = sector_allocation(holdings)
        underrepresented = underrepresented_sectors(allocation, self._threshold)
        recommendations = self._recommend(holdings, underrepresented)
        logger.debug(
            "Analyzed %d holdings: %d sectors, %d recommendations",
            len(holdings),
            len(allocation),
            len(recommendations),
        )
        return PortfolioAnalysis(
            sector_allocation=allocation,
            top_sectors=top_sectors(allocation),
            underrepresented_sectors=underrepresented,
            recommendations=recommendations,
        )

    def _recommend(self, holdings: Sequence[Holding], underrepresented: list[str]) -> list[StockRecommendation]:
        excluded = {holding.symbol for holding in holdings}
        recommendations: list[StockRecommendation] = []

        for sector in underrepresented[: self._limit]:
            candidate = self._first_unheld(self._catalog.candidates(sector), excluded)
            if candidate is None:
                continue
            recommendations.append(self._build(candidate, SECTOR_REASON.format(sector=sector)))
            excluded.add(candidate.symbol)

        if self._backfill:
            # One pass over the catalog; live catalogs fetch each symbol at most once.
            pool = iter(self._catalog.candidates())
            while len(recommendations) < self._limit:
                candidate = self._first_unheld(pool, excluded)
                if candidate is None:
                    break
                recommendations.append(self._build(candidate, BACKFILL_REASON))
                excluded.add(candidate.symbol)

        return recommendations[: self._limit]

    @staticmethod
    def _first_unheld(candidates: Iterable[StockSnapshot], excluded: set[str]) -> StockSnapshot | None:
        return next((stock for stock in candidates if stock.symbol not in excluded), None)

    def _build(self, stock: StockSnapshot, reason: str) -> StockRecommendation:
        return StockRecommendation(
            symbol=stock.symbol,
            reason=reason,
            stats=stock,
            analytics=self._analytics.generate(stock),
        )

