# Schémas Pydantic exposés par l'API (requêtes et réponses).

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from curate.domain.auth import normalize_name


class SignupPayload(BaseModel):
    """Payload pour l'inscription d'un nouvel utilisateur."""

    name: str = Field(min_length=4)
    email: EmailStr
    password: str = Field(min_length=8)


class LoginPayload(BaseModel):
    """Payload pour la connexion d'un utilisateur."""

    email: EmailStr
    password: str = Field(min_length=8)


class UpdateNamePayload(BaseModel):
    """Changement du nom affiché (nettoyé : trim et espaces multiples réduits)."""

    name: str

    @field_validator("name")
    @classmethod
    def _clean(cls, value: str) -> str:
        return normalize_name(value)


class UserResponse(BaseModel):
    id: str
    email: str
    name: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SearchRequest(BaseModel):
    """Requête de recherche externe.

    Champs:
    - query: texte recherché
    - type: mode de recherche Exa (fast/neural)
    - max_results: nombre de résultats demandés (1..25)
    """

    query: str = Field(min_length=1)
    type: Literal["fast", "neural"] = "fast"
    max_results: int = Field(default=4, ge=1, le=25)


class SearchResultOut(BaseModel):
    id: str
    title: str
    url: str | None = None
    content: str | None = None
    score: float | None = None
    published_date: str | float | None = None
    image: str | None = None
    favicon: str | None = None


class SearchResponse(BaseModel):
    results: list[SearchResultOut]


class ContentSummaryOut(BaseModel):
    """Contenu en liste : corps tronqué, sans données brutes."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    source_type: str
    content_hash: str | None = None
    user_id: str | None = None
    visibility: str
    show_on_profile: bool = True
    url: str | None = None
    title: str | None = None
    author: str | None = None
    body: str | None = None
    ai_summary: str | None = None
    ai_questions: Any = None
    thumbnail: str | None = None
    favicon: str | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    views: int = 0
    likes_count: int = 0
    dislikes_count: int = 0


class ContentOut(ContentSummaryOut):
    """Contenu complet (avec `raw_data`)."""

    raw_data: dict[str, Any] | None = None


class ContentListResponse(BaseModel):
    contents: list[ContentSummaryOut]


class ContentResponse(BaseModel):
    content: ContentOut


class ReactionPayload(BaseModel):
    type: Literal["like", "dislike"]


class ReactionResult(BaseModel):
    action: Literal["added", "removed"]
    type: Literal["like", "dislike"]


class UserReactionResponse(BaseModel):
    type: Literal["like", "dislike"] | None = None


class CountResponse(BaseModel):
    count: int


class VisibilityResponse(BaseModel):
    visibility: Literal["public", "private"]


class BulkVisibilityPayload(BaseModel):
    ids: list[str]
    visibility: Literal["public", "private"]


class BulkIdsPayload(BaseModel):
    ids: list[str]


class BulkResult(BaseModel):
    success: bool = True
    affected: int


class CommentPayload(BaseModel):
    """Nouveau commentaire; `user_id` doit être l'utilisateur authentifié."""

    user_id: str
    comment: str


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content_id: str
    user_id: str
    comment: str
    created_at: datetime | None = None
    username: str | None = None
    full_name: str | None = None
    display_name: str


class CommentListResponse(BaseModel):
    comments: list[CommentOut]
