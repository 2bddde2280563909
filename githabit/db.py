"""
Database management layer for the durable handle store.

Provides a DatabaseManager for:
- Engine creation (StaticPool for in-memory SQLite)
- Session management with context managers
- Auto-commit/rollback behavior

Usage:
    from githabit.db import DatabaseManager

    db = DatabaseManager("sqlite:///githabit.db")
    db.create_all_tables()
    with db.session() as session:
        session.merge(setting)
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class DatabaseManager:
    """
    Engine and session factory for one database URL.

    Sessions may be opened from worker threads (the async store offloads
    blocking calls with ``asyncio.to_thread``), so SQLite connections are
    not pinned to their creating thread.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        is_sqlite = database_url.startswith("sqlite")
        in_memory = is_sqlite and (":memory:" in database_url or database_url == "sqlite://")

        engine_kwargs: dict = {"echo": echo, "future": True}
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        if in_memory:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    def create_all_tables(self) -> None:
        """Create all tables defined by models."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with auto-commit/rollback.

        Usage:
            with db.session() as session:
                value = session.get(Setting, key)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """
        Perform database health check.

        Returns:
            dict with 'healthy' (bool) and 'error' (str or None)
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"healthy": True, "error": None}
        except Exception as e:
            return {"healthy": False, "error": str(e)}

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Base", "DatabaseManager"]
