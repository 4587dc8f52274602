from __future__ import annotations

import logging

from passlib.context import CryptContext

from core.domain.errors import AlreadyTaken
from core.domain.user import UserAccount
from core.ports.state_store import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Signup and password login over a user repository."""

    def __init__(self, users: UserRepository, *, pwd_context: CryptContext | None = None) -> None:
        self._users = users
        self._pwd_context = pwd_context or CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify(self, username: str, password: str) -> bool:
        account = self._users.get_user(username)
        if account is None:
            return False
        return self._pwd_context.verify(password, account.password_hash)

    def login(self, username: str, password: str) -> bool:
        ok = self.verify(username, password)
        if ok:
            logger.info("User %s logged in", username)
        else:
            logger.warning("Failed login for %s", username)
        return ok

    def signup(self, username: str, email: str, password: str) -> bool:
        if self._users.get_user(username) is not None:
            raise AlreadyTaken("Username already taken")
        if self._users.find_by_email(email) is not None:
            raise AlreadyTaken("Email already registered")

        self._users.add_user(
            UserAccount(username=username, email=email, password_hash=self.hash_password(password))
        )
        logger.info("Registered user %s", username)
        return True
