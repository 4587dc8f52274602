from __future__ import annotations

from collections.abc import Sequence

from core.domain.portfolio import Holding
from core.domain.user import UserAccount


class InMemoryStateStore:
    """Process-local holdings and accounts, lost on restart."""

    def __init__(self) -> None:
        self._holdings: dict[str, list[Holding]] = {}
        self._users: dict[str, UserAccount] = {}

    def load(self, key: str) -> list[Holding]:
        return list(self._holdings.get(key, []))

    def save(self, key: str, holdings: Sequence[Holding]) -> None:
        self._holdings[key] = list(holdings)

    def get_user(self, username: str) -> UserAccount | None:
        return self._users.get(username)

    def find_by_email(self, email: str) -> UserAccount | None:
        return next((user for user in self._users.values() if user.email == email), None)

    def add_user(self, account: UserAccount) -> None:
        self._users[account.username] = account

    def close(self) -> None:
        return None
