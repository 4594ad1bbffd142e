"""
Configuration de l'environnement Alembic pour les migrations de base de données.

Supporte les modes offline (SQL littéral) et online. En mode online, le moteur est
asynchrone (même URL que l'application, ex. `sqlite+aiosqlite://`) et les migrations
s'exécutent via `run_sync` sur la connexion.
"""

from __future__ import annotations

import asyncio
import os
import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context  # type: ignore[attr-defined]

# Allow importing project modules when running via Alembic CLI
_this = Path(__file__).resolve()
for p in (_this.parent.parent, Path.cwd()):
    s = str(p)
    if s not in sys.path:
        sys.path.append(s)

from curate.infra.repo.models import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
DEFAULT_URL = "sqlite+aiosqlite:///./curate.db"


def _database_url() -> str:
    return os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url") or DEFAULT_URL


def run_migrations_offline() -> None:
    """Exécute les migrations sans connexion, en émettant le SQL avec des bindings littéraux."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Exécute les migrations avec un moteur asynchrone (NullPool)."""
    connectable = create_async_engine(_database_url(), poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(_do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
