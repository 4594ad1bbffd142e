"""DB utilities for async SQLAlchemy sessions/engine.

Uses `DATABASE_URL` (settings) or falls back to `sqlite+aiosqlite:///:memory:` for tests.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(url: str | None = None, echo: bool = False) -> AsyncEngine:
    """Crée un moteur SQLAlchemy asynchrone à partir de l'URL de base de données."""
    db_url = url or "sqlite+aiosqlite:///:memory:"
    kwargs: dict[str, object] = {"echo": echo}
    if db_url.startswith("sqlite") and ":memory:" in db_url:
        # une seule connexion partagée, sinon chaque session voit une base vide
        kwargs["poolclass"] = StaticPool
    engine = create_async_engine(db_url, **kwargs)
    if db_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Crée une factory de sessions SQLAlchemy asynchrones."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Contexte de session avec gestion automatique des transactions.

    Commit en sortie normale, rollback sur exception (ré-levée), fermeture dans tous les cas.
    Chaque opération métier est une unité de travail indépendante.
    """
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def create_all(engine: AsyncEngine) -> None:
    """Crée toutes les tables si elles n'existent pas (idempotent)."""
    from curate.infra.repo.models import Base  # noqa: PLC0415

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
