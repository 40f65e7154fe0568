"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-10-07

"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("handle", sa.String(length=30), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("length(handle) >= 3 AND length(handle) <= 30", name="handle_length"),
    )
    op.create_index("ix_profiles_handle", "profiles", ["handle"], unique=True)
    op.create_index("ix_profiles_created_at", "profiles", ["created_at"], unique=False)

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_by", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("length(content) > 0 AND length(content) <= 280", name="content_length"),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"], unique=False)
    op.create_index("ix_posts_created_at", "posts", ["created_at"], unique=False)
    op.create_index("ix_posts_is_deleted", "posts", ["is_deleted"], unique=False)

    op.create_table(
        "follows",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("follower_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("following_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("follower_id", "following_id", name="unique_follow"),
        sa.CheckConstraint("follower_id != following_id", name="no_self_follow"),
    )
    op.create_index("ix_follows_follower_id", "follows", ["follower_id"], unique=False)
    op.create_index("ix_follows_following_id", "follows", ["following_id"], unique=False)

    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "post_id", name="unique_like"),
    )
    op.create_index("ix_likes_post_id", "likes", ["post_id"], unique=False)
    op.create_index("ix_likes_user_id", "likes", ["user_id"], unique=False)

    op.create_table(
        "hashtags",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_hashtags_tag", "hashtags", ["tag"], unique=True)

    op.create_table(
        "post_hashtags",
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("hashtag_id", sa.Uuid(), sa.ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "mentions",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_mentions_post_id", "mentions", ["post_id"], unique=False)
    op.create_index("ix_mentions_user_id", "mentions", ["user_id"], unique=False)

    op.create_table(
        "link_previews",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("url", sa.Text(), nullable=False, unique=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "post_links",
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("link_preview_id", sa.Uuid(), sa.ForeignKey("link_previews.id", ondelete="CASCADE"), primary_key=True),
    )

    if is_postgres:
        # Format checks that need regular expressions
        op.create_check_constraint("handle_format", "profiles", "handle ~ '^[a-zA-Z0-9_]+$'")
        op.create_check_constraint("tag_format", "hashtags", "tag ~ '^[a-zA-Z0-9_]+$'")


def downgrade() -> None:
    op.drop_table("post_links")
    op.drop_table("link_previews")

    op.drop_index("ix_mentions_user_id", table_name="mentions")
    op.drop_index("ix_mentions_post_id", table_name="mentions")
    op.drop_table("mentions")

    op.drop_table("post_hashtags")

    op.drop_index("ix_hashtags_tag", table_name="hashtags")
    op.drop_table("hashtags")

    op.drop_index("ix_likes_user_id", table_name="likes")
    op.drop_index("ix_likes_post_id", table_name="likes")
    op.drop_table("likes")

    op.drop_index("ix_follows_following_id", table_name="follows")
    op.drop_index("ix_follows_follower_id", table_name="follows")
    op.drop_table("follows")

    op.drop_index("ix_posts_is_deleted", table_name="posts")
    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_index("ix_posts_user_id", table_name="posts")
    op.drop_table("posts")

    op.drop_index("ix_profiles_created_at", table_name="profiles")
    op.drop_index("ix_profiles_handle", table_name="profiles")
    op.drop_table("profiles")
