"""Lectures et mutations des contenus, filtrées par le contrôle "propriétaire ou public".

- Lectures : l'appelant voit ses contenus et les contenus publics (anonyme : publics seulement).
- Mutations unitaires : réservées au propriétaire, vérifiées avant toute écriture.
- Mutations en masse : filtrées par propriétaire dans la requête; les ids non détenus sont
  ignorés silencieusement et le nombre de lignes affectées est retourné.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from curate.domain.entities import VISIBILITIES, ContentItem, ContentSummary
from curate.domain.errors import PersistenceError, ValidationError
from curate.domain.visibility import ensure_readable, ensure_writable
from curate.infra.repo.comment_repo import CommentRepo
from curate.infra.repo.content_repo import ContentRepo
from curate.infra.repo.db import session_scope
from curate.infra.repo.reaction_repo import ReactionRepo


class ContentService:
    """Service de consultation et de gestion des contenus stockés."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        preview_chars: int = 300,
    ) -> None:
        self._factory = session_factory
        self.preview_chars = preview_chars
        self._log = structlog.get_logger(__name__).bind(component="content_service")

    async def list_contents(
        self, caller_id: str, limit: int, offset: int, query: str | None = None
    ) -> list[ContentSummary]:
        """Contenus de l'appelant et contenus publics; recherche sur titre ou corps."""
        async with session_scope(self._factory) as session:
            return await ContentRepo(session).list_summaries(
                caller_id=caller_id,
                limit=limit,
                offset=offset,
                query=query,
                search_body=True,
                preview_chars=self.preview_chars,
            )

    async def list_public_contents(
        self, limit: int, offset: int, query: str | None = None
    ) -> list[ContentSummary]:
        """Fil public (contenus publics seulement); recherche sur le titre."""
        async with session_scope(self._factory) as session:
            return await ContentRepo(session).list_summaries(
                caller_id=None,
                limit=limit,
                offset=offset,
                query=query,
                search_body=False,
                preview_chars=self.preview_chars,
            )

    async def get_content(self, content_id: str, caller_id: str | None) -> ContentItem:
        """Contenu complet s'il est lisible par l'appelant (NotFound sinon); compte une vue."""
        async with session_scope(self._factory) as session:
            repo = ContentRepo(session)
            item = ensure_readable(await repo.get(content_id), caller_id)
            await repo.increment_views(content_id)
            item.views += 1
            return item

    async def toggle_visibility(self, content_id: str, caller_id: str) -> str:
        """Bascule public <-> privé sur un contenu détenu; retourne la nouvelle visibilité."""
        try:
            async with session_scope(self._factory) as session:
                repo = ContentRepo(session)
                item = ensure_writable(await repo.get(content_id, for_update=True), caller_id)
                new_visibility = "private" if item.visibility == "public" else "public"
                await repo.set_visibility(content_id, new_visibility)
        except SQLAlchemyError as err:
            self._log.error("visibility_toggle_failed", content_id=content_id, error=str(err))
            raise PersistenceError("Failed to update visibility") from err
        self._log.info("visibility_toggled", content_id=content_id, visibility=new_visibility)
        return new_visibility

    async def bulk_set_visibility(
        self, content_ids: Sequence[str], visibility: str, caller_id: str
    ) -> int:
        """Applique `visibility` aux contenus détenus parmi `content_ids`."""
        if visibility not in VISIBILITIES:
            raise ValidationError(f"Unknown visibility: {visibility}")
        if not content_ids:
            return 0
        try:
            async with session_scope(self._factory) as session:
                updated = await ContentRepo(session).bulk_set_visibility(
                    content_ids, caller_id, visibility
                )
        except SQLAlchemyError as err:
            self._log.error("bulk_visibility_failed", error=str(err))
            raise PersistenceError("Failed to update visibility") from err
        self._log.info(
            "bulk_visibility_set", requested=len(content_ids), updated=updated, visibility=visibility
        )
        return updated

    async def _delete_ids(self, session: AsyncSession, content_ids: Sequence[str]) -> int:
        await ReactionRepo(session).delete_for_contents(content_ids)
        await CommentRepo(session).delete_for_contents(content_ids)
        return await ContentRepo(session).delete_many(content_ids)

    async def delete_content(self, content_id: str, caller_id: str) -> None:
        """Supprime un contenu détenu, avec ses réactions et commentaires."""
        try:
            async with session_scope(self._factory) as session:
                ensure_writable(await ContentRepo(session).get(content_id, for_update=True), caller_id)
                await self._delete_ids(session, [content_id])
        except SQLAlchemyError as err:
            self._log.error("content_delete_failed", content_id=content_id, error=str(err))
            raise PersistenceError("Failed to delete content") from err
        self._log.info("content_deleted", content_id=content_id)

    async def bulk_delete(self, content_ids: Sequence[str], caller_id: str) -> int:
        """Supprime les contenus détenus parmi `content_ids`; retourne le nombre supprimé."""
        if not content_ids:
            return 0
        try:
            async with session_scope(self._factory) as session:
                owned = await ContentRepo(session).owned_ids(content_ids, caller_id)
                deleted = await self._delete_ids(session, owned)
        except SQLAlchemyError as err:
            self._log.error("bulk_delete_failed", error=str(err))
            raise PersistenceError("Failed to delete contents") from err
        self._log.info("contents_deleted", requested=len(content_ids), deleted=deleted)
        return deleted
