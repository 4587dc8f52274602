from __future__ import annotations

from adapters.market_data.catalog import REFERENCE_STOCKS, MarketDataCatalog, StaticStockCatalog
from core.domain.errors import SymbolNotFound
from core.domain.portfolio import StockSnapshot
from core.portfolio import CANONICAL_SECTORS


class DummyMarketData:
    def __init__(self, missing: set[str] | None = None) -> None:
        self.missing = missing or set()
        self.requested: list[str] = []

    def fetch_snapshot(self, symbol: str) -> StockSnapshot:
        self.requested.append(symbol)
        if symbol in self.missing:
            raise SymbolNotFound(symbol)
        return StockSnapshot(symbol=symbol, price=10.0)


def test_reference_catalog_covers_every_sector() -> None:
    catalog = StaticStockCatalog()

    for sector in CANONICAL_SECTORS:
        assert len(catalog.candidates(sector)) == 2
    assert len(catalog.candidates()) == len(REFERENCE_STOCKS)
    assert [stock.symbol for stock in catalog.candidates()][:6] == ["NVDA", "AMD", "JNJ", "UNH", "V", "JPM"]


def test_get_is_case_insensitive() -> None:
    catalog = StaticStockCatalog()

    assert catalog.get("jpm").sector == "Financial Services"
    assert catalog.get("ZZZZ") is None


def test_market_data_catalog_skips_failures_and_fills_sector() -> None:
    market_data = DummyMarketData(missing={"NVDA"})
    catalog = MarketDataCatalog(market_data, {"Technology": ["nvda", "amd"]})

    candidates = list(catalog.candidates("Technology"))

    assert [stock.symbol for stock in candidates] == ["AMD"]
    assert candidates[0].sector == "Technology"


def test_market_data_catalog_fetches_lazily() -> None:
    market_data = DummyMarketData()
    catalog = MarketDataCatalog.from_reference(market_data)

    first = next(iter(catalog.candidates()))

    assert first.symbol == "NVDA"
    assert market_data.requested == ["NVDA"]


def test_market_data_catalog_replaces_unknown_sector() -> None:
    class UnknownSectorMarketData(DummyMarketData):
        def fetch_snapshot(self, symbol: str) -> StockSnapshot:
            return StockSnapshot(symbol=symbol, price=10.0, sector="Unknown")

    catalog = MarketDataCatalog(UnknownSectorMarketData(), {"Healthcare": ["JNJ"]})

    assert [stock.sector for stock in catalog.candidates("Healthcare")] == ["Healthcare"]
