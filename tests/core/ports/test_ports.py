from __future__ import annotations

from adapters.market_data.catalog import StaticStockCatalog
from adapters.storage.memory_store import InMemoryStateStore
from core.ports import HoldingsRepository, MarketDataPort, StockCatalog, UserRepository


def test_ports_expose_expected_methods() -> None:
    assert {"fetch_snapshot", "fetch_history", "search"} <= set(MarketDataPort.__dict__)
    assert {"load", "save"} <= set(HoldingsRepository.__dict__)
    assert {"get_user", "find_by_email", "add_user"} <= set(UserRepository.__dict__)
    assert {"candidates"} <= set(StockCatalog.__dict__)


def test_adapters_provide_port_methods() -> None:
    store = InMemoryStateStore()
    for name in ("load", "save", "get_user", "find_by_email", "add_user"):
        assert callable(getattr(store, name))
    assert callable(StaticStockCatalog().candidates)
