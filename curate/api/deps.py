"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Résoudre l'utilisateur courant à partir du jeton `Authorization: Bearer <jwt>`.
- Construire les services métier à partir de la factory de sessions du conteneur
  (substituable dans les tests).
"""

from fastapi import Depends, Header

from curate.core.container import container
from curate.domain.auth import decode_token
from curate.domain.entities import User
from curate.domain.errors import LoginRequired
from curate.infra.repo.db import session_scope
from curate.infra.repo.user_repo import UserRepo
from curate.services.comments import CommentLog
from curate.services.contents import ContentService
from curate.services.ingestor import DedupIngestor
from curate.services.reactions import ReactionLedger


async def get_current_user(authorization: str | None = Header(None)) -> User | None:
    """Retourne l'utilisateur authentifié, ou None (jeton absent, invalide ou compte supprimé)."""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    data = decode_token(token, container.settings.JWT_SECRET, container.settings.JWT_ALG)
    if not data:
        return None
    async with session_scope(container.session_factory) as session:
        row = await UserRepo(session).get(data.sub)
        if row is None:
            return None
        return User(id=row.id, email=row.email, name=row.name)


async def require_user(user: User | None = Depends(get_current_user)) -> User:
    """Comme `get_current_user`, mais redirige les appelants anonymes vers la connexion."""
    if user is None:
        raise LoginRequired()
    return user


def get_content_service() -> ContentService:
    return ContentService(
        container.session_factory, preview_chars=container.settings.FEED_BODY_PREVIEW_CHARS
    )


def get_reaction_ledger() -> ReactionLedger:
    return ReactionLedger(container.session_factory)


def get_comment_log() -> CommentLog:
    return CommentLog(container.session_factory)


def get_ingestor() -> DedupIngestor:
    return DedupIngestor(container.session_factory)


def get_search_client():
    return container.search_client
