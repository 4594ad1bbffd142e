# mypy: ignore-errors
"""
Migration Alembic initiale : utilisateurs, profils, contenus, réactions et commentaires.

`contents.content_hash` est unique (clé de déduplication de l'ingestion) et la table
`reactions` a pour clé primaire `(user_id, content_id, type)`.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée les tables et leurs contraintes."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "profiles",
        sa.Column(
            "id",
            sa.String(length=32),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("full_name", sa.String(length=100), nullable=True),
        sa.Column("username", sa.String(length=100), nullable=True, unique=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "contents",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("source_type", sa.String(length=64), nullable=False),
        sa.Column("content_hash", sa.String(length=64), nullable=True, unique=True),
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("visibility", sa.String(length=16), nullable=False, server_default="private"),
        sa.Column("show_on_profile", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("ai_questions", sa.JSON(), nullable=True),
        sa.Column("thumbnail", sa.Text(), nullable=True),
        sa.Column("favicon", sa.Text(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dislikes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("embedding", sa.LargeBinary(), nullable=True),
        sa.Column("raw_data", sa.JSON(), nullable=True),
        sa.CheckConstraint("visibility IN ('public', 'private')", name="ck_contents_visibility"),
        sa.CheckConstraint("likes_count >= 0", name="ck_contents_likes_non_negative"),
        sa.CheckConstraint("dislikes_count >= 0", name="ck_contents_dislikes_non_negative"),
    )
    op.create_index("ix_contents_created_at", "contents", ["created_at"])
    op.create_table(
        "reactions",
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "content_id",
            sa.String(length=32),
            sa.ForeignKey("contents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "content_id", "type", name="reactions_pkey"),
        sa.CheckConstraint("type IN ('like', 'dislike')", name="ck_reactions_type"),
    )
    op.create_table(
        "content_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "content_id",
            sa.String(length=32),
            sa.ForeignKey("contents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(length=32),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_content_comments_content_id", "content_comments", ["content_id"])


def downgrade() -> None:
    """Supprime les tables dans l'ordre inverse des dépendances."""
    op.drop_index("ix_content_comments_content_id", table_name="content_comments")
    op.drop_table("content_comments")
    op.drop_table("reactions")
    op.drop_index("ix_contents_created_at", table_name="contents")
    op.drop_table("contents")
    op.drop_table("profiles")
    op.drop_table("users")
