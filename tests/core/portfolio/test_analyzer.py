from __future__ import annotations

import random

import pytest

from adapters.market_data.catalog import StaticStockCatalog
from core.domain.portfolio import Holding, StockSnapshot
from core.portfolio import CANONICAL_SECTORS, AnalyticsGenerator, PortfolioAnalyzer, RandomizedFundamentals
from core.portfolio.analyzer import (
    BACKFILL_REASON,
    sector_allocation,
    top_sectors,
    underrepresented_sectors,
)


def _holding(symbol: str, shares: str, price: float, sector: str | None) -> Holding:
    return Holding(
        symbol=symbol,
        shares=shares,
        average_price="100",
        stats=StockSnapshot(symbol=symbol, price=price, sector=sector),
    )


def _analyzer(**kwargs) -> PortfolioAnalyzer:
    return PortfolioAnalyzer(StaticStockCatalog(), **kwargs)


def test_single_technology_holding() -> None:
    holdings = [_holding("AAPL", "10", 175.43, "Technology")]

    analysis = _analyzer().analyze(holdings)

    assert analysis.sector_allocation == {"Technology": pytest.approx(100.0)}
    assert analysis.top_sectors == ["Technology"]
    assert analysis.underrepresented_sectors == [s for s in CANONICAL_SECTORS if s != "Technology"]
    assert [rec.symbol for rec in analysis.recommendations] == ["JNJ", "V"]
    assert analysis.recommendations[0].reason == "Adds exposure to the underrepresented Healthcare sector"


def test_empty_portfolio() -> None:
    analysis = _analyzer().analyze([])

    assert analysis.sector_allocation == {}
    assert analysis.top_sectors == []
    assert analysis.underrepresented_sectors == list(CANONICAL_SECTORS)
    assert [rec.symbol for rec in analysis.recommendations] == ["NVDA", "JNJ"]


def test_allocation_sums_to_100_and_missing_sector_is_unknown() -> None:
    holdings = [
        _holding("AAPL", "10", 100.0, "Technology"),
        _holding("XYZ", "5", 100.0, None),
        _holding("MSFT", "5", 100.0, "Technology"),
    ]

    allocation = sector_allocation(holdings)

    assert list(allocation) == ["Technology", "Unknown"]
    assert allocation["Technology"] == pytest.approx(75.0)
    assert allocation["Unknown"] == pytest.approx(25.0)
    assert sum(allocation.values()) == pytest.approx(100.0)


def test_zero_priced_holding_contributes_zero() -> None:
    holdings = [_holding("AAPL", "10", 100.0, "Technology"), _holding("DEAD", "10", 0.0, "Energy")]

    allocation = sector_allocation(holdings)

    assert allocation["Energy"] == 0.0
    assert allocation["Technology"] == pytest.approx(100.0)


def test_zero_total_value_clamps_to_zero() -> None:
    allocation = sector_allocation([_holding("DEAD", "10", 0.0, "Energy")])
    assert allocation == {"Energy": 0.0}


def test_top_sectors_keeps_first_seen_order_on_ties() -> None:
    allocation = {"Energy": 25.0, "Technology": 50.0, "Utilities": 25.0, "Healthcare": 0.0}
    assert top_sectors(allocation) == ["Technology", "Energy", "Utilities"]


def test_sector_at_threshold_is_not_underrepresented() -> None:
    allocation = {sector: 5.0 for sector in CANONICAL_SECTORS}
    allocation["Energy"] = 4.99

    assert underrepresented_sectors(allocation) == ["Energy"]


def test_recommendations_skip_held_symbols() -> None:
    holdings = [_holding("NVDA", "1", 100.0, "Technology"), _holding("JNJ", "1", 1.0, "Healthcare")]

    analysis = _analyzer(threshold=100.0).analyze(holdings)

    symbols = [rec.symbol for rec in analysis.recommendations]
    assert symbols == ["AMD", "UNH"]
    assert not set(symbols) & {"NVDA", "JNJ"}


def test_backfill_when_sectors_have_no_candidates() -> None:
    catalog = StaticStockCatalog(
        [
            StockSnapshot(symbol="AAA", price=10, sector="Technology"),
            StockSnapshot(symbol="BBB", price=10, sector="Technology"),
        ]
    )
    holdings = [_holding("AAA", "1", 10.0, "Technology")]

    analysis = PortfolioAnalyzer(catalog).analyze(holdings)

    assert [rec.symbol for rec in analysis.recommendations] == ["BBB"]
    assert analysis.recommendations[0].reason == BACKFILL_REASON


def test_backfill_disabled_returns_fewer() -> None:
    catalog = StaticStockCatalog([StockSnapshot(symbol="BBB", price=10, sector="Technology")])

    analysis = PortfolioAnalyzer(catalog, backfill=False).analyze([])

    assert [rec.symbol for rec in analysis.recommendations] == ["BBB"]


def test_limit_caps_recommendations() -> None:
    analysis = _analyzer(limit=5).analyze([])

    assert [rec.symbol for rec in analysis.recommendations] == ["NVDA", "JNJ", "V", "AMZN", "CAT"]


def test_analyze_is_idempotent() -> None:
    holdings = [_holding("AAPL", "10", 175.43, "Technology"), _holding("XOM", "3", 104.56, "Energy")]
    analyzer = _analyzer()

    assert analyzer.analyze(holdings) == analyzer.analyze(holdings)


def test_seeded_fallback_is_reproducible() -> None:
    catalog = StaticStockCatalog([StockSnapshot(symbol="NEW", price=10, sector="Technology")])

    def run():
        generator = AnalyticsGenerator(RandomizedFundamentals(random.Random(7)))
        return PortfolioAnalyzer(catalog, generator).analyze([])

    assert run() == run()


def test_backfill_walks_catalog_once() -> None:
    class CountingCatalog:
        def __init__(self) -> None:
            self.fetched: list[str] = []

        def candidates(self, sector: str | None = None):
            for symbol in ("AAA", "BBB", "CCC"):
                if sector is not None:
                    continue
                self.fetched.append(symbol)
                yield StockSnapshot(symbol=symbol, price=10, sector="Technology")

    catalog = CountingCatalog()
    holdings = [_holding("AAA", "1", 10.0, "Technology")]

    analysis = PortfolioAnalyzer(catalog, limit=2).analyze(holdings)

    assert [rec.symbol for rec in analysis.recommendations] == ["BBB", "CCC"]
    assert catalog.fetched == ["AAA", "BBB", "CCC"]
