from __future__ import annotations

from adapters.storage.memory_store import InMemoryStateStore
from core.domain.portfolio import Holding, StockSnapshot
from core.domain.user import UserAccount


def test_save_copies_holdings() -> None:
    store = InMemoryStateStore()
    holdings = [Holding(symbol="AAPL", shares="1", average_price="1", stats=StockSnapshot(symbol="AAPL"))]

    store.save("randy", holdings)
    holdings.clear()

    assert [item.symbol for item in store.load("randy")] == ["AAPL"]
    assert store.load("nobody") == []


def test_users_by_name_and_email() -> None:
    store = InMemoryStateStore()
    store.add_user(UserAccount(username="randy", email="randy@example.com", password_hash="hash"))

    assert store.get_user("randy").email == "randy@example.com"
    assert store.find_by_email("randy@example.com").username == "randy"
    assert store.find_by_email("x@example.com") is None
