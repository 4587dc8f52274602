"""Port interfaces for adapters."""

from core.ports.catalog import StockCatalog
from core.ports.market_data import MarketDataPort
from core.ports.state_store import HoldingsRepository, UserRepository

__all__ = ["HoldingsRepository", "MarketDataPort", "StockCatalog", "UserRepository"]
