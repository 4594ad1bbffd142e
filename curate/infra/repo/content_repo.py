# ============================================================
# Module : curate/infra/repo/content_repo.py
# Objet  : Accès SQL (CRUD + compteurs) pour les contenus.
# ============================================================

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.entities import ContentItem, ContentSummary
from .models import ContentORM

_COUNTER_COLUMNS = {"like": "likes_count", "dislike": "dislikes_count"}

_SUMMARY_COLUMNS = (
    "id",
    "source_type",
    "content_hash",
    "user_id",
    "visibility",
    "show_on_profile",
    "url",
    "title",
    "author",
    "ai_summary",
    "ai_questions",
    "thumbnail",
    "favicon",
    "published_at",
    "created_at",
    "updated_at",
    "views",
    "likes_count",
    "dislikes_count",
)


def _to_item(row: ContentORM) -> ContentItem:
    return ContentItem(
        id=row.id,
        source_type=row.source_type,
        content_hash=row.content_hash,
        user_id=row.user_id,
        visibility=row.visibility,
        show_on_profile=bool(row.show_on_profile),
        url=row.url,
        title=row.title,
        author=row.author,
        body=row.body,
        ai_summary=row.ai_summary,
        ai_questions=row.ai_questions,
        thumbnail=row.thumbnail,
        favicon=row.favicon,
        published_at=row.published_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        views=row.views or 0,
        likes_count=row.likes_count or 0,
        dislikes_count=row.dislikes_count or 0,
        raw_data=row.raw_data,
    )


class ContentRepo:
    """Accès aux contenus pour une session (unité de travail) donnée."""

    def __init__(self, session: AsyncSession) -> None:
        """Construit le repo avec une session (SQLAlchemy asyncio)."""
        self._session = session

    @staticmethod
    def readable_by(caller_id: str | None):  # type: ignore[no-untyped-def]
        """Prédicat SQL "public ou propriétaire" (équivalent de `can_read`)."""
        if caller_id is None:
            return ContentORM.visibility == "public"
        return or_(ContentORM.visibility == "public", ContentORM.user_id == caller_id)

    async def get(self, content_id: str, *, for_update: bool = False) -> ContentItem | None:
        """Retourne un contenu par id.

        Avec `for_update`, la ligne est verrouillée jusqu'à la fin de la transaction
        (`SELECT ... FOR UPDATE`, ignoré par SQLite qui sérialise les écritures).
        """
        stmt = select(ContentORM).where(ContentORM.id == content_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = (await self._session.execute(stmt)).scalars().first()
        return _to_item(row) if row else None

    async def get_by_hash(self, content_hash: str) -> ContentItem | None:
        """Retourne le contenu portant cette empreinte, s'il existe."""
        stmt = select(ContentORM).where(ContentORM.content_hash == content_hash).limit(1)
        row = (await self._session.execute(stmt)).scalars().first()
        return _to_item(row) if row else None

    async def create(self, **fields: Any) -> ContentItem:
        """Insère un contenu. Lève IntegrityError sur doublon de `content_hash`."""
        row = ContentORM(**fields)
        self._session.add(row)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise
        return _to_item(row)

    async def list_summaries(
        self,
        *,
        caller_id: str | None,
        limit: int,
        offset: int,
        query: str | None = None,
        search_body: bool = True,
        preview_chars: int = 300,
    ) -> list[ContentSummary]:
        """Liste les contenus lisibles par l'appelant, du plus récent au plus ancien.

        Le corps est tronqué côté SQL à `preview_chars` caractères; `raw_data` et
        `embedding` ne sont pas chargés.
        """
        columns = [getattr(ContentORM, name) for name in _SUMMARY_COLUMNS]
        columns.append(func.substr(ContentORM.body, 1, preview_chars).label("body"))
        stmt = select(*columns).where(self.readable_by(caller_id))
        if query:
            match = ContentORM.title.icontains(query, autoescape=True)
            if search_body:
                match = or_(match, ContentORM.body.icontains(query, autoescape=True))
            stmt = stmt.where(match)
        stmt = stmt.order_by(ContentORM.created_at.desc()).limit(limit).offset(offset)
        rows = (await self._session.execute(stmt)).all()
        return [ContentSummary(**dict(r._mapping)) for r in rows]

    async def increment_views(self, content_id: str) -> None:
        """Incrémente le compteur de vues sans toucher `updated_at`."""
        stmt = (
            update(ContentORM)
            .where(ContentORM.id == content_id)
            .values(views=ContentORM.views + 1, updated_at=ContentORM.updated_at)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def adjust_counter(self, content_id: str, kind: str, delta: int) -> None:
        """Applique `delta` au compteur dénormalisé de `kind` (mise à jour relative en SQL)."""
        column = getattr(ContentORM, _COUNTER_COLUMNS[kind])
        stmt = (
            update(ContentORM)
            .where(ContentORM.id == content_id)
            .values({_COUNTER_COLUMNS[kind]: column + delta})
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def get_counter(self, content_id: str, kind: str) -> int | None:
        """Valeur du compteur de `kind`, ou None si le contenu est absent."""
        column = getattr(ContentORM, _COUNTER_COLUMNS[kind])
        stmt = select(column).where(ContentORM.id == content_id).limit(1)
        row = (await self._session.execute(stmt)).first()
        if row is None:
            return None
        return row[0] or 0

    async def set_visibility(self, content_id: str, visibility: str) -> None:
        stmt = (
            update(ContentORM)
            .where(ContentORM.id == content_id)
            .values(visibility=visibility)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def bulk_set_visibility(
        self, content_ids: Sequence[str], owner_id: str, visibility: str
    ) -> int:
        """Met à jour la visibilité des seuls contenus de `owner_id` parmi `content_ids`."""
        stmt = (
            update(ContentORM)
            .where(ContentORM.id.in_(list(content_ids)), ContentORM.user_id == owner_id)
            .values(visibility=visibility)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def owned_ids(self, content_ids: Sequence[str], owner_id: str) -> list[str]:
        """Filtre `content_ids` aux contenus appartenant à `owner_id`."""
        stmt = select(ContentORM.id).where(
            ContentORM.id.in_(list(content_ids)), ContentORM.user_id == owner_id
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete_many(self, content_ids: Sequence[str]) -> int:
        """Supprime les contenus donnés et retourne le nombre de lignes supprimées."""
        if not content_ids:
            return 0
        stmt = (
            delete(ContentORM)
            .where(ContentORM.id.in_(list(content_ids)))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

