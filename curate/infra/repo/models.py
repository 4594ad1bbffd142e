"""SQLAlchemy models for the persistence layer (users, profiles, contents, reactions, comments)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase


def _now() -> datetime:
    return datetime.now(UTC)


def _uuid_hex() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class UserORM(Base):
    """Compte utilisateur (identité d'authentification)."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_uuid_hex)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)


class ProfileORM(Base):
    """Profil public d'un utilisateur (nom affiché des commentaires)."""

    __tablename__ = "profiles"

    id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(100), nullable=True)
    username = Column(String(100), nullable=True, unique=True)
    avatar_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)


class ContentORM(Base):
    """Modèle ORM des contenus stockés.

    `content_hash` est unique lorsqu'il est renseigné (clé de déduplication);
    `likes_count`/`dislikes_count` sont les compteurs dénormalisés de `reactions`.
    """

    __tablename__ = "contents"

    id = Column(String(32), primary_key=True, default=_uuid_hex)
    source_type = Column(String(64), nullable=False)
    content_hash = Column(String(64), nullable=True, unique=True)
    user_id = Column(String(32), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True)
    visibility = Column(String(16), nullable=False, default="private")
    show_on_profile = Column(Boolean, nullable=False, default=True)
    url = Column(Text, nullable=True)
    title = Column(Text, nullable=True)
    author = Column(Text, nullable=True)
    body = Column(Text, nullable=True)
    ai_summary = Column(Text, nullable=True)
    ai_questions = Column(JSON, nullable=True)
    thumbnail = Column(Text, nullable=True)
    favicon = Column(Text, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
    views = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)
    dislikes_count = Column(Integer, nullable=False, default=0)
    embedding = Column(LargeBinary, nullable=True)
    raw_data = Column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint("visibility IN ('public', 'private')", name="ck_contents_visibility"),
        CheckConstraint("likes_count >= 0", name="ck_contents_likes_non_negative"),
        CheckConstraint("dislikes_count >= 0", name="ck_contents_dislikes_non_negative"),
        Index("ix_contents_created_at", "created_at"),
    )


class ReactionORM(Base):
    """Registre des réactions : une ligne par (utilisateur, contenu, type)."""

    __tablename__ = "reactions"

    user_id = Column(String(32), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    content_id = Column(String(32), ForeignKey("contents.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (
        PrimaryKeyConstraint("user_id", "content_id", "type", name="reactions_pkey"),
        CheckConstraint("type IN ('like', 'dislike')", name="ck_reactions_type"),
    )


class CommentORM(Base):
    """Commentaires (append-only) d'un contenu."""

    __tablename__ = "content_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_id = Column(String(32), ForeignKey("contents.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(32), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    __table_args__ = (Index("ix_content_comments_content_id", "content_id"),)
