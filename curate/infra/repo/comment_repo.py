# ============================================================
# Module : curate/infra/repo/comment_repo.py
# Objet  : Accès SQL aux commentaires + jointure profils (lecture seule).
# ============================================================

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.entities import Comment, resolve_display_name
from .models import CommentORM, ProfileORM


class CommentRepo:
    """Journal append-only des commentaires d'un contenu."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, content_id: str, user_id: str, text: str) -> Comment:
        """Ajoute un commentaire et le retourne (sans nom d'affichage résolu)."""
        row = CommentORM(content_id=content_id, user_id=user_id, comment=text)
        self._session.add(row)
        await self._session.flush()
        return Comment(
            id=row.id,
            content_id=row.content_id,
            user_id=row.user_id,
            comment=row.comment,
            created_at=row.created_at,
        )

    async def list_for_content(self, content_id: str) -> list[Comment]:
        """Commentaires du plus récent au plus ancien, joints aux profils des auteurs."""
        stmt = (
            select(
                CommentORM.id,
                CommentORM.content_id,
                CommentORM.user_id,
                CommentORM.comment,
                CommentORM.created_at,
                ProfileORM.username,
                ProfileORM.full_name,
            )
            .outerjoin(ProfileORM, CommentORM.user_id == ProfileORM.id)
            .where(CommentORM.content_id == content_id)
            .order_by(CommentORM.created_at.desc(), CommentORM.id.desc())
        )
        rows = (await self._session.execute(stmt)).all()
        return [
            Comment(
                id=r.id,
                content_id=r.content_id,
                user_id=r.user_id,
                comment=r.comment,
                created_at=r.created_at,
                username=r.username,
                full_name=r.full_name,
                display_name=resolve_display_name(r.full_name, r.username),
            )
            for r in rows
        ]

    async def delete_for_contents(self, content_ids: Sequence[str]) -> None:
        if not content_ids:
            return
        stmt = (
            delete(CommentORM)
            .where(CommentORM.content_id.in_(list(content_ids)))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
