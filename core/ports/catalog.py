from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from core.domain.portfolio import StockSnapshot


class StockCatalog(Protocol):
    """Reference universe the analyzer draws recommendations from."""

    def candidates(self, sector: str | None = None) -> Iterable[StockSnapshot]:
        """Yield catalog stocks in catalog order, optionally limited to one sector."""
