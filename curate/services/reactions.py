"""Registre des réactions like/dislike et compteurs dénormalisés.

Règles
------
- Bascule : réagir deux fois avec le même type retire la réaction.
- Exclusivité : poser un "like" retire le "dislike" éventuel (et inversement).
- Le compteur n'est modifié que si une ligne du registre a réellement été insérée ou
  supprimée, dans la même transaction que la ligne : compteurs et registre ne divergent pas.
- La ligne du contenu est lue `FOR UPDATE` en début de transaction pour sérialiser les
  bascules concurrentes sur un même contenu.
"""

from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from curate.app.metrics import REACTION_TOGGLES
from curate.domain.entities import REACTION_TYPES, opposite_reaction
from curate.domain.errors import PersistenceError, ValidationError
from curate.domain.visibility import ensure_readable
from curate.infra.repo.content_repo import ContentRepo
from curate.infra.repo.db import session_scope
from curate.infra.repo.reaction_repo import ReactionRepo


class ReactionLedger:
    """Service de bascule des réactions et d'accès aux compteurs."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory
        self._log = structlog.get_logger(__name__).bind(component="reaction_ledger")

    async def set_reaction(self, user_id: str, content_id: str, kind: str) -> dict[str, str]:
        """Bascule la réaction `kind` de l'utilisateur sur le contenu.

        Returns:
            dict: {"action": "added" | "removed", "type": kind}

        Raises:
            ValidationError: type inconnu.
            NotFound: contenu absent ou invisible pour l'utilisateur.
            PersistenceError: échec du stockage (transaction annulée).
        """
        if kind not in REACTION_TYPES:
            raise ValidationError(f"Unknown reaction type: {kind}")
        try:
            async with session_scope(self._factory) as session:
                contents = ContentRepo(session)
                reactions = ReactionRepo(session)
                ensure_readable(await contents.get(content_id, for_update=True), user_id)

                if await reactions.remove(user_id, content_id, kind):
                    await contents.adjust_counter(content_id, kind, -1)
                    action = "removed"
                else:
                    other = opposite_reaction(kind)
                    if await reactions.remove(user_id, content_id, other):
                        await contents.adjust_counter(content_id, other, -1)
                    await reactions.add(user_id, content_id, kind)
                    await contents.adjust_counter(content_id, kind, 1)
                    action = "added"
        except SQLAlchemyError as err:
            self._log.error(
                "reaction_update_failed", content_id=content_id, type=kind, error=str(err)
            )
            raise PersistenceError("Failed to update reaction") from err
        REACTION_TOGGLES.labels(type=kind, action=action).inc()
        self._log.info("reaction_toggled", content_id=content_id, type=kind, action=action)
        return {"action": action, "type": kind}

    async def get_user_reaction(self, user_id: str | None, content_id: str) -> str | None:
        """Réaction courante de l'utilisateur, None pour un appelant anonyme ou en cas d'échec."""
        if user_id is None:
            return None
        try:
            async with session_scope(self._factory) as session:
                return await ReactionRepo(session).get_type(user_id, content_id)
        except SQLAlchemyError:
            self._log.exception("reaction_read_failed", content_id=content_id)
            return None

    async def _get_counter(self, content_id: str, kind: str) -> int:
        try:
            async with session_scope(self._factory) as session:
                value = await ContentRepo(session).get_counter(content_id, kind)
        except SQLAlchemyError:
            self._log.exception("counter_read_failed", content_id=content_id, type=kind)
            return 0
        return value or 0

    async def get_likes(self, content_id: str) -> int:
        """Compteur de likes (0 si le contenu est absent)."""
        return await self._get_counter(content_id, "like")

    async def get_dislikes(self, content_id: str) -> int:
        """Compteur de dislikes (0 si le contenu est absent)."""
        return await self._get_counter(content_id, "dislike")
