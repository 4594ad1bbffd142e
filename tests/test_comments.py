"""Tests du journal de commentaires : auteur = appelant, longueur minimale, ordre et noms affichés."""

from __future__ import annotations

import pytest
from sqlalchemy import update

from curate.domain.entities import ANONYMOUS_DISPLAY_NAME
from curate.domain.errors import NotFound, Unauthorized, ValidationError
from curate.infra.repo.db import session_scope
from curate.infra.repo.models import CommentORM, ProfileORM
from curate.services.comments import CommentLog
from tests.fakes import create_content, utc


@pytest.mark.asyncio
async def test_post_comment_returns_display_name(session_factory, alice) -> None:
    log = CommentLog(session_factory)
    content_id = await create_content(session_factory, alice.id)

    comment = await log.post_comment(content_id, alice.id, alice.id, "  Great article  ")

    assert comment.comment == "Great article"
    assert comment.user_id == alice.id
    assert comment.username == "alice"
    assert comment.display_name == "Alice Martin"


@pytest.mark.asyncio
async def test_cannot_comment_as_someone_else(session_factory, alice, bob) -> None:
    """L'auteur déclaré doit être l'appelant authentifié."""
    log = CommentLog(session_factory)
    content_id = await create_content(session_factory, alice.id, visibility="public")
    with pytest.raises(Unauthorized):
        await log.post_comment(content_id, alice.id, bob.id, "spoofed")
    assert await log.list_comments(content_id) == []


@pytest.mark.parametrize("text", ["", "a", "  a  ", "   "])
@pytest.mark.asyncio
async def test_comment_minimum_length(session_factory, alice, text: str) -> None:
    log = CommentLog(session_factory)
    content_id = await create_content(session_factory, alice.id)
    with pytest.raises(ValidationError):
        await log.post_comment(content_id, alice.id, alice.id, text)


@pytest.mark.asyncio
async def test_comment_requires_readable_content(session_factory, alice, bob) -> None:
    log = CommentLog(session_factory)
    private_id = await create_content(session_factory, alice.id)
    with pytest.raises(NotFound):
        await log.post_comment(private_id, bob.id, bob.id, "hello")
    with pytest.raises(NotFound):
        await log.post_comment("missing", bob.id, bob.id, "hello")


@pytest.mark.asyncio
async def test_list_comments_newest_first(session_factory, alice, bob) -> None:
    log = CommentLog(session_factory)
    content_id = await create_content(session_factory, alice.id, visibility="public")
    first = await log.post_comment(content_id, alice.id, alice.id, "first")
    second = await log.post_comment(content_id, bob.id, bob.id, "second")
    async with session_scope(session_factory) as session:
        await session.execute(
            update(CommentORM).where(CommentORM.id == first.id).values(created_at=utc(2026, 1, 1))
        )
        await session.execute(
            update(CommentORM).where(CommentORM.id == second.id).values(created_at=utc(2026, 1, 2))
        )

    comments = await log.list_comments(content_id)

    assert [c.comment for c in comments] == ["second", "first"]
    assert [c.display_name for c in comments] == ["Bob Durand", "Alice Martin"]


@pytest.mark.asyncio
async def test_display_name_falls_back_to_username_then_anonymous(
    session_factory, alice, bob
) -> None:
    log = CommentLog(session_factory)
    content_id = await create_content(session_factory, alice.id, visibility="public")
    await log.post_comment(content_id, alice.id, alice.id, "from alice")
    await log.post_comment(content_id, bob.id, bob.id, "from bob")
    async with session_scope(session_factory) as session:
        await session.execute(
            update(ProfileORM).where(ProfileORM.id == alice.id).values(full_name=None)
        )
        await session.execute(
            update(ProfileORM)
            .where(ProfileORM.id == bob.id)
            .values(full_name=None, username=None)
        )

    names = {c.user_id: c.display_name for c in await log.list_comments(content_id)}

    assert names[alice.id] == "alice"
    assert names[bob.id] == ANONYMOUS_DISPLAY_NAME


@pytest.mark.asyncio
async def test_list_comments_unknown_content_is_empty(session_factory) -> None:
    assert await CommentLog(session_factory).list_comments("missing") == []
