from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.domain.portfolio import Holding, PortfolioAnalysis, StockSnapshot


def test_snapshot_accepts_camel_case_payload() -> None:
    snapshot = StockSnapshot.model_validate(
        {
            "symbol": "aapl",
            "price": 175.43,
            "changePercent": 1.2,
            "high52Week": 199.62,
            "low52Week": 124.17,
            "peRatio": 28.5,
            "dividendYield": 0.5,
            "marketCap": 2.7e12,
        }
    )

    assert snapshot.symbol == "AAPL"
    assert snapshot.change_percent == 1.2
    assert snapshot.high_52_week == 199.62
    assert snapshot.pe_ratio == 28.5
    assert snapshot.beta is None


def test_holding_values() -> None:
    holding = Holding(
        symbol="aapl",
        shares="10",
        averagePrice="150",
        stats=StockSnapshot(symbol="AAPL", price=175.43),
    )

    assert holding.symbol == "AAPL"
    assert holding.average_price == Decimal("150")
    assert holding.market_value == pytest.approx(1754.3)
    assert holding.cost_basis == pytest.approx(1500.0)


def test_holding_rejects_negative_shares() -> None:
    with pytest.raises(ValidationError):
        Holding(symbol="AAPL", shares="-1", average_price="1", stats=StockSnapshot(symbol="AAPL"))


def test_analysis_total_allocation() -> None:
    analysis = PortfolioAnalysis(sector_allocation={"Technology": 60.0, "Energy": 40.0})
    assert analysis.total_allocation == pytest.approx(100.0)
    assert analysis.recommendations == []
