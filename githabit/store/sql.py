"""
Durable handle store backed by SQLAlchemy.

Values live in a ``settings`` key/value table. Each write is a single
transaction merging the row, so a crash never leaves a partial value.
"""

import asyncio
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base, DatabaseManager
from .base import HandleStore


class Setting(Base):
    """One persisted preference."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")


class SqlHandleStore(HandleStore):
    """
    Handle store on any SQLAlchemy database (SQLite by default).

    Blocking database calls run in a worker thread so reads and writes are
    suspension points for the event loop.
    """

    def __init__(self, db: DatabaseManager, **kwargs):
        super().__init__(**kwargs)
        self.db = db
        self.db.create_all_tables()

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlHandleStore":
        return cls(DatabaseManager(database_url), **kwargs)

    def _load_sync(self) -> Optional[str]:
        with self.db.session() as session:
            setting = session.get(Setting, self.key)
            return setting.value if setting is not None else None

    def _save_sync(self, value: str) -> None:
        with self.db.session() as session:
            session.merge(Setting(key=self.key, value=value))

    async def _load(self) -> Optional[str]:
        return await asyncio.to_thread(self._load_sync)

    async def _save(self, value: str) -> None:
        await asyncio.to_thread(self._save_sync, value)

    def close(self) -> None:
        self.db.dispose()
