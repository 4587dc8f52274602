from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class UserAccount(BaseModel):
    """Registered user. Only the password hash is ever stored."""

    username: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
