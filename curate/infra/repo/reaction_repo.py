# ============================================================
# Module : curate/infra/repo/reaction_repo.py
# Objet  : Accès SQL au registre des réactions (like/dislike).
# ============================================================

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ReactionORM


class ReactionRepo:
    """Lignes du registre : une par (utilisateur, contenu, type)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_type(self, user_id: str, content_id: str) -> str | None:
        """Type de réaction détenu par l'utilisateur sur ce contenu, ou None."""
        stmt = (
            select(ReactionORM.type)
            .where(ReactionORM.user_id == user_id, ReactionORM.content_id == content_id)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalars().first()

    async def remove(self, user_id: str, content_id: str, kind: str) -> bool:
        """Supprime la réaction si elle existe. Retourne True si une ligne a été supprimée."""
        stmt = (
            delete(ReactionORM)
            .where(
                ReactionORM.user_id == user_id,
                ReactionORM.content_id == content_id,
                ReactionORM.type == kind,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def add(self, user_id: str, content_id: str, kind: str) -> None:
        """Insère une réaction. Lève IntegrityError si elle existe déjà (clé composite)."""
        self._session.add(ReactionORM(user_id=user_id, content_id=content_id, type=kind))
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise

    async def delete_for_contents(self, content_ids: Sequence[str]) -> None:
        if not content_ids:
            return
        stmt = (
            delete(ReactionORM)
            .where(ReactionORM.content_id.in_(list(content_ids)))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
