"""Journal des commentaires : ajout contrôlé et lecture avec noms affichés."""

from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from curate.domain.entities import Comment, resolve_display_name
from curate.domain.errors import PersistenceError, Unauthorized, ValidationError
from curate.domain.visibility import ensure_readable
from curate.infra.repo.comment_repo import CommentRepo
from curate.infra.repo.content_repo import ContentRepo
from curate.infra.repo.db import session_scope
from curate.infra.repo.user_repo import UserRepo

COMMENT_MIN_LENGTH = 2


class CommentLog:
    """Service d'ajout et de lecture des commentaires d'un contenu."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory
        self._log = structlog.get_logger(__name__).bind(component="comment_log")

    async def post_comment(
        self, content_id: str, author_id: str, caller_id: str, text: str
    ) -> Comment:
        """Ajoute un commentaire au nom de l'appelant.

        L'auteur déclaré doit être l'appelant authentifié (pas d'usurpation) et le texte
        doit contenir au moins deux caractères significatifs.
        """
        if author_id != caller_id:
            raise Unauthorized("Cannot comment on behalf of another user")
        cleaned = (text or "").strip()
        if len(cleaned) < COMMENT_MIN_LENGTH:
            raise ValidationError(
                f"Comment must be at least {COMMENT_MIN_LENGTH} characters long"
            )
        try:
            async with session_scope(self._factory) as session:
                ensure_readable(await ContentRepo(session).get(content_id), caller_id)
                comment = await CommentRepo(session).add(content_id, caller_id, cleaned)
                profile = await UserRepo(session).lookup_profile(caller_id) or {}
                comment.username = profile.get("username")
                comment.full_name = profile.get("full_name")
                comment.display_name = resolve_display_name(comment.full_name, comment.username)
        except SQLAlchemyError as err:
            self._log.error("comment_post_failed", content_id=content_id, error=str(err))
            raise PersistenceError("Failed to post comment") from err
        self._log.info("comment_posted", content_id=content_id, comment_id=comment.id)
        return comment

    async def list_comments(self, content_id: str) -> list[Comment]:
        """Commentaires du plus récent au plus ancien; liste vide en cas d'échec de lecture."""
        try:
            async with session_scope(self._factory) as session:
                return await CommentRepo(session).list_for_content(content_id)
        except SQLAlchemyError:
            self._log.exception("comment_list_failed", content_id=content_id)
            return []
