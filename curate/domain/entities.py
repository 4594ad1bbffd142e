"""
Entités du domaine métier.

Ce module définit les objets manipulés par les services : utilisateur authentifié, contenus
stockés (version complète et résumé de liste), commentaires et types énumérés.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

ReactionType = Literal["like", "dislike"]
Visibility = Literal["public", "private"]
ReactionAction = Literal["added", "removed"]

REACTION_TYPES: tuple[str, ...] = ("like", "dislike")
VISIBILITIES: tuple[str, ...] = ("public", "private")
DEFAULT_VISIBILITY: Visibility = "private"
SEARCH_SOURCE_TYPE = "exa_search"
ANONYMOUS_DISPLAY_NAME = "Anonymous User"


class User(BaseModel):
    """Identité de l'appelant fournie par le fournisseur d'authentification."""

    id: str
    email: str
    name: str


def opposite_reaction(kind: str) -> str:
    """Retourne le type de réaction exclusif de `kind`."""
    return "dislike" if kind == "like" else "like"


@dataclass
class ContentItem:
    """
    Contenu stocké (objet domaine).

    Attributs
    - user_id: propriétaire (None pour un contenu sans propriétaire).
    - content_hash: empreinte de déduplication (None si non calculée).
    - likes_count / dislikes_count: compteurs dénormalisés du registre de réactions.
    - raw_data: résultat de recherche brut, présent pour les contenus ingérés non traités.
    """

    id: str
    source_type: str
    content_hash: str | None = None
    user_id: str | None = None
    visibility: str = DEFAULT_VISIBILITY
    show_on_profile: bool = True
    url: str | None = None
    title: str | None = None
    author: str | None = None
    body: str | None = None
    ai_summary: str | None = None
    ai_questions: dict[str, Any] | None = None
    thumbnail: str | None = None
    favicon: str | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    views: int = 0
    likes_count: int = 0
    dislikes_count: int = 0
    raw_data: dict[str, Any] | None = None


@dataclass
class ContentSummary:
    """Projection de liste : corps tronqué, sans `raw_data` ni `embedding`."""

    id: str
    source_type: str
    content_hash: str | None
    user_id: str | None
    visibility: str
    show_on_profile: bool
    url: str | None
    title: str | None
    author: str | None
    body: str | None
    ai_summary: str | None
    ai_questions: dict[str, Any] | None
    thumbnail: str | None
    favicon: str | None
    published_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None
    views: int = 0
    likes_count: int = 0
    dislikes_count: int = 0


@dataclass
class Comment:
    """Commentaire d'un contenu, annoté du nom d'affichage de son auteur."""

    id: int
    content_id: str
    user_id: str
    comment: str
    created_at: datetime | None = None
    username: str | None = None
    full_name: str | None = None
    display_name: str = field(default=ANONYMOUS_DISPLAY_NAME)


def resolve_display_name(full_name: str | None, username: str | None) -> str:
    """Nom affiché : nom complet, sinon pseudo, sinon "Anonymous User"."""
    return full_name or username or ANONYMOUS_DISPLAY_NAME
