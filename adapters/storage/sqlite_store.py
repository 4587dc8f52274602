from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from adapters.storage.models import Base, HoldingRecord, UserRecord
from core.domain.portfolio import Holding, StockSnapshot
from core.domain.user import UserAccount

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory(database_url: str) -> None:
    prefix = "sqlite:///"
    if not database_url.startswith(prefix) or database_url.endswith(":memory:"):
        return
    Path(database_url[len(prefix) :]).parent.mkdir(parents=True, exist_ok=True)


class SqliteStateStore:
    """Holdings and user accounts persisted through SQLAlchemy."""

    def __init__(self, database_url: str, *, create_tables: bool = True) -> None:
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        _ensure_sqlite_directory(database_url)
        self._engine: Engine = create_engine(database_url, connect_args=connect_args, future=True)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self._engine)

    def load(self, key: str) -> list[Holding]:
        with self._session_factory() as session:
            records = session.execute(
                select(HoldingRecord).where(HoldingRecord.owner == key).order_by(HoldingRecord.position)
            ).scalars()
            return [self._record_to_holding(record) for record in records]

    def save(self, key: str, holdings: Sequence[Holding]) -> None:
        with self._session_factory() as session:
            self._replace_holdings(session, key, holdings)
            session.commit()
        logger.info("Stored %d holdings for %s", len(holdings), key)

    def get_user(self, username: str) -> UserAccount | None:
        with self._session_factory() as session:
            record = session.get(UserRecord, username)
            return self._record_to_user(record) if record is not None else None

    def find_by_email(self, email: str) -> UserAccount | None:
        with self._session_factory() as session:
            record = session.execute(select(UserRecord).where(UserRecord.email == email)).scalar_one_or_none()
            return self._record_to_user(record) if record is not None else None

    def add_user(self, account: UserAccount) -> None:
        with self._session_factory() as session:
            session.add(
                UserRecord(
                    username=account.username,
                    email=account.email,
                    password_hash=account.password_hash,
                    created_at=account.created_at,
                )
            )
            session.commit()
        logger.info("Stored user %s", account.username)

    def close(self) -> None:
        self._engine.dispose()

    def _replace_holdings(self, session: Session, key: str, holdings: Sequence[Holding]) -> None:
        session.execute(delete(HoldingRecord).where(HoldingRecord.owner == key))
        for position, holding in enumerate(holdings):
            session.add(self._holding_to_record(key, position, holding))

    @staticmethod
    def _holding_to_record(key: str, position: int, holding: Holding) -> HoldingRecord:
        return HoldingRecord(
            owner=key,
            position=position,
            symbol=holding.symbol,
            shares=holding.shares,
            average_price=holding.average_price,
            stats=holding.stats.model_dump(mode="json"),
        )

    @staticmethod
    def _record_to_holding(record: HoldingRecord) -> Holding:
        return Holding(
            symbol=record.symbol,
            shares=Decimal(record.shares),
            average_price=Decimal(record.average_price),
            stats=StockSnapshot.model_validate(record.stats),
        )

    @staticmethod
    def _record_to_user(record: UserRecord) -> UserAccount:
        return UserAccount(
            username=record.username,
            email=record.email,
            password_hash=record.password_hash,
            created_at=record.created_at,
        )
