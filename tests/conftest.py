"""Configuration de test pour pytest : chemins, base SQLite en mémoire et client HTTP.

Chaque test dispose d'une base neuve (`sqlite+aiosqlite:///:memory:`, schéma créé depuis les
modèles). Le client HTTP appelle l'application en ASGI direct, avec la factory de sessions et
le client de recherche du conteneur remplacés.
"""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio

# Ensure project root is on sys.path so that
# imports like `from curate...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from curate.core.container import container  # noqa: E402
from curate.domain.entities import User  # noqa: E402
from curate.infra.repo.db import create_all, get_engine, get_session_factory  # noqa: E402
from curate.infra.search.exa_client import ExaSearchClient  # noqa: E402
from tests.fakes import create_user, exa_result, fake_search_client  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Moteur SQLite en mémoire avec schéma créé."""
    eng = get_engine(TEST_DATABASE_URL)
    await create_all(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


@pytest_asyncio.fixture
async def alice(session_factory) -> User:
    return await create_user(session_factory, "Alice Martin", "alice@curate.io")


@pytest_asyncio.fixture
async def bob(session_factory) -> User:
    return await create_user(session_factory, "Bob Durand", "bob@curate.io")


@pytest.fixture
def search_results() -> list[dict[str, Any]]:
    return [exa_result(i) for i in range(3)]


@pytest.fixture
def search_client(search_results) -> ExaSearchClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": search_results})

    return fake_search_client(handler)


@pytest_asyncio.fixture
async def client(session_factory, search_client, monkeypatch) -> AsyncIterator[httpx.AsyncClient]:
    """Client HTTP asynchrone sur l'application, branché sur la base de test."""
    from curate.app.main import app  # noqa: PLC0415

    monkeypatch.setattr(container, "session_factory", session_factory)
    monkeypatch.setattr(container, "search_client", search_client)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://curate.local") as c:
        yield c
