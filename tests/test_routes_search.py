# ============================================================
# Tests : tests/test_routes_search.py
# Objet  : Recherche externe + ingestion en tâche de fond.
# ============================================================

from __future__ import annotations

import httpx
import pytest

from curate.core.container import container
from curate.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_OK,
    HTTP_SEE_OTHER,
    HTTP_UNPROCESSABLE_ENTITY,
)
from curate.domain.dedup import content_fingerprint
from curate.infra.repo.content_repo import ContentRepo
from curate.infra.repo.db import session_scope
from tests.fakes import auth_headers, fake_search_client


@pytest.mark.asyncio
async def test_search_returns_results_and_stores_them(
    client, session_factory, alice, search_results
) -> None:
    """Les résultats sont renvoyés tels quels puis stockés (privés) en tâche de fond."""
    r = await client.post("/search", json={"query": "python"}, headers=auth_headers(alice))

    assert r.status_code == HTTP_OK
    results = r.json()["results"]
    assert [x["url"] for x in results] == [x["url"] for x in search_results]

    listed = (await client.get("/contents", headers=auth_headers(alice))).json()["contents"]
    assert len(listed) == len(search_results)
    assert {c["visibility"] for c in listed} == {"private"}

    raw = search_results[0]
    async with session_scope(session_factory) as session:
        stored = await ContentRepo(session).get_by_hash(
            content_fingerprint(raw["url"], raw["title"], raw["text"])
        )
    assert stored is not None
    assert stored.user_id == alice.id


@pytest.mark.asyncio
async def test_repeated_search_does_not_duplicate(client, alice, bob, search_results) -> None:
    await client.post("/search", json={"query": "python"}, headers=auth_headers(alice))
    await client.post("/search", json={"query": "python"}, headers=auth_headers(bob))

    listed = (await client.get("/contents", headers=auth_headers(alice))).json()["contents"]
    assert len(listed) == len(search_results)
    assert (await client.get("/contents", headers=auth_headers(bob))).json()["contents"] == []


@pytest.mark.asyncio
async def test_upstream_failure_is_bad_gateway(client, alice, monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "down"})

    monkeypatch.setattr(container, "search_client", fake_search_client(handler))

    r = await client.post("/search", json={"query": "python"}, headers=auth_headers(alice))

    assert r.status_code == HTTP_BAD_GATEWAY
    assert r.json()["code"] == "BAD_GATEWAY"
    listed = (await client.get("/contents", headers=auth_headers(alice))).json()["contents"]
    assert listed == []


@pytest.mark.asyncio
async def test_malformed_results_are_bad_gateway(client, alice, monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [{"title": 42, "url": "u"}, None]})

    monkeypatch.setattr(container, "search_client", fake_search_client(handler))

    r = await client.post("/search", json={"query": "python"}, headers=auth_headers(alice))

    assert r.status_code == HTTP_BAD_GATEWAY
    assert r.json()["code"] == "BAD_GATEWAY"
    listed = (await client.get("/contents", headers=auth_headers(alice))).json()["contents"]
    assert listed == []


@pytest.mark.asyncio
async def test_search_requires_login(client) -> None:
    r = await client.post("/search", json={"query": "python"})
    assert r.status_code == HTTP_SEE_OTHER


@pytest.mark.asyncio
async def test_search_validates_payload(client, alice) -> None:
    r = await client.post(
        "/search", json={"query": "python", "max_results": 100}, headers=auth_headers(alice)
    )
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY
    assert r.json()["details"]["errors"]
