"""Tests du registre de réactions : bascule, exclusivité et cohérence des compteurs.

Après chaque opération, les compteurs dénormalisés du contenu doivent égaler le nombre de
lignes du registre pour chaque type.
"""

from __future__ import annotations

import asyncio

import pytest

from curate.app.metrics import REACTION_TOGGLES
from curate.domain.errors import NotFound, ValidationError
from curate.infra.repo.db import create_all, get_engine, get_session_factory
from curate.services.reactions import ReactionLedger
from tests.fakes import create_content, create_user, ledger_count


async def _assert_counters_match_ledger(session_factory, ledger, content_id: str) -> None:
    likes = await ledger_count(session_factory, content_id, "like")
    dislikes = await ledger_count(session_factory, content_id, "dislike")
    assert await ledger.get_likes(content_id) == likes
    assert await ledger.get_dislikes(content_id) == dislikes


@pytest.mark.asyncio
async def test_like_is_added_then_removed(session_factory, alice) -> None:
    """Réagir deux fois avec le même type retire la réaction."""
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id)

    first = await ledger.set_reaction(alice.id, content_id, "like")
    assert first == {"action": "added", "type": "like"}
    assert await ledger.get_likes(content_id) == 1
    assert await ledger.get_user_reaction(alice.id, content_id) == "like"

    second = await ledger.set_reaction(alice.id, content_id, "like")
    assert second == {"action": "removed", "type": "like"}
    assert await ledger.get_likes(content_id) == 0
    assert await ledger.get_user_reaction(alice.id, content_id) is None
    await _assert_counters_match_ledger(session_factory, ledger, content_id)


@pytest.mark.asyncio
async def test_like_and_dislike_are_exclusive(session_factory, alice) -> None:
    """Poser un dislike retire le like existant (et décrémente son compteur)."""
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id)

    await ledger.set_reaction(alice.id, content_id, "like")
    result = await ledger.set_reaction(alice.id, content_id, "dislike")

    assert result == {"action": "added", "type": "dislike"}
    assert await ledger.get_likes(content_id) == 0
    assert await ledger.get_dislikes(content_id) == 1
    assert await ledger.get_user_reaction(alice.id, content_id) == "dislike"
    await _assert_counters_match_ledger(session_factory, ledger, content_id)


@pytest.mark.asyncio
async def test_counters_aggregate_users(session_factory, alice, bob) -> None:
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id, visibility="public")

    await ledger.set_reaction(alice.id, content_id, "like")
    await ledger.set_reaction(bob.id, content_id, "like")
    await ledger.set_reaction(bob.id, content_id, "dislike")

    assert await ledger.get_likes(content_id) == 1
    assert await ledger.get_dislikes(content_id) == 1
    await _assert_counters_match_ledger(session_factory, ledger, content_id)


@pytest.mark.asyncio
async def test_unknown_reaction_type_is_rejected(session_factory, alice) -> None:
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id)
    with pytest.raises(ValidationError):
        await ledger.set_reaction(alice.id, content_id, "love")


@pytest.mark.asyncio
async def test_reaction_requires_readable_content(session_factory, alice, bob) -> None:
    """Le contenu privé d'un autre utilisateur est traité comme absent."""
    ledger = ReactionLedger(session_factory)
    private_id = await create_content(session_factory, alice.id, visibility="private")

    with pytest.raises(NotFound):
        await ledger.set_reaction(bob.id, private_id, "like")
    with pytest.raises(NotFound):
        await ledger.set_reaction(bob.id, "missing", "like")
    assert await ledger.get_likes(private_id) == 0


@pytest.mark.asyncio
async def test_reaction_reads_degrade(session_factory, alice) -> None:
    """Lecture anonyme ou contenu absent: pas de réaction, compteurs à zéro."""
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id, visibility="public")
    await ledger.set_reaction(alice.id, content_id, "like")

    assert await ledger.get_user_reaction(None, content_id) is None
    assert await ledger.get_likes("missing") == 0
    assert await ledger.get_dislikes("missing") == 0


@pytest.mark.asyncio
async def test_reaction_metric_is_incremented(session_factory, alice) -> None:
    ledger = ReactionLedger(session_factory)
    content_id = await create_content(session_factory, alice.id)
    before = REACTION_TOGGLES.labels(type="dislike", action="added")._value.get()
    await ledger.set_reaction(alice.id, content_id, "dislike")
    after = REACTION_TOGGLES.labels(type="dislike", action="added")._value.get()
    assert after - before == 1


@pytest.mark.asyncio
async def test_concurrent_toggles_keep_counters_consistent(tmp_path) -> None:
    """Des bascules concurrentes de plusieurs utilisateurs sur un même contenu.

    Base fichier (et non mémoire) : chaque session a sa propre connexion, comme en production.
    """
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'reactions.db'}")
    await create_all(engine)
    factory = get_session_factory(engine)
    try:
        owner = await create_user(factory, "Owner Name", "owner@curate.io")
        users = [
            await create_user(factory, f"Reader {i:02d}", f"reader{i}@curate.io")
            for i in range(8)
        ]
        content_id = await create_content(factory, owner.id, visibility="public")
        ledger = ReactionLedger(factory)

        async def like_dislike_like(user_id: str) -> None:
            for kind in ("like", "dislike", "like"):
                await ledger.set_reaction(user_id, content_id, kind)

        outcomes = await asyncio.gather(
            *(like_dislike_like(u.id) for u in users), return_exceptions=True
        )

        assert [o for o in outcomes if isinstance(o, BaseException)] == []
        assert await ledger_count(factory, content_id, "like") == len(users)
        assert await ledger_count(factory, content_id, "dislike") == 0
        await _assert_counters_match_ledger(factory, ledger, content_id)
    finally:
        await engine.dispose()
