from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from core.domain.portfolio import Holding
from core.domain.user import UserAccount


class HoldingsRepository(Protocol):
    """Persistence interface for a user's holdings, keyed by username."""

    def load(self, key: str) -> list[Holding]:
        """Load the saved holdings in insertion order."""

    def save(self, key: str, holdings: Sequence[Holding]) -> None:
        """Replace the saved holdings for the key."""


class UserRepository(Protocol):
    """Persistence interface for registered accounts."""

    def get_user(self, username: str) -> UserAccount | None:
        """Return the account registered under the username."""

    def find_by_email(self, email: str) -> UserAccount | None:
        """Return the account registered with the email."""

    def add_user(self, account: UserAccount) -> None:
        """Persist a new account."""
