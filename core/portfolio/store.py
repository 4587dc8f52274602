from __future__ import annotations

import logging

from core.domain.portfolio import Holding
from core.ports.state_store import HoldingsRepository

logger = logging.getLogger(__name__)


class PortfolioStore:
    """Ordered holdings for one owner, written through to a repository on every change.

    Adds are not de-duplicated: buying the same symbol twice yields two lots.
    """

    def __init__(self, owner: str, repository: HoldingsRepository) -> None:
        self._owner = owner
        self._repository = repository
        self._holdings: list[Holding] = list(repository.load(owner))

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def holdings(self) -> tuple[Holding, ...]:
        return tuple(self._holdings)

    def __len__(self) -> int:
        return len(self._holdings)

    def symbols(self) -> set[str]:
        return {holding.symbol for holding in self._holdings}

    def add(self, holding: Holding) -> None:
        self._holdings.append(holding)
        self._repository.save(self._owner, self._holdings)
        logger.info("Added %s shares of %s for %s", holding.shares, holding.symbol, self._owner)

    def remove(self, symbol: str) -> int:
        """Drop every lot whose symbol matches exactly. Returns the number removed."""
        remaining = [holding for holding in self._holdings if holding.symbol != symbol]
        removed = len(self._holdings) - len(remaining)
        if removed:
            self._holdings = remaining
            self._repository.save(self._owner, self._holdings)
            logger.info("Removed %d lot(s) of %s for %s", removed, symbol, self._owner)
        return removed
