"""create initial portal schema

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("provider_id", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_provider_id"), "users", ["provider_id"], unique=False)

    op.create_table(
        "password_resets",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_password_resets_email"), "password_resets", ["email"], unique=False)
    op.create_index(op.f("ix_password_resets_token"), "password_resets", ["token"], unique=True)
    op.create_index(op.f("ix_password_resets_user_id"), "password_resets", ["user_id"], unique=False)
    op.create_index(op.f("ix_password_resets_expires_at"), "password_resets", ["expires_at"], unique=False)

    op.create_table(
        "blogs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(length=100), nullable=False),
        sa.Column("author_id", sa.String(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blogs_slug"), "blogs", ["slug"], unique=True)
    op.create_index(op.f("ix_blogs_author_id"), "blogs", ["author_id"], unique=False)
    op.create_index(op.f("ix_blogs_published"), "blogs", ["published"], unique=False)
    op.create_index(op.f("ix_blogs_created_at"), "blogs", ["created_at"], unique=False)

    op.create_table(
        "portfolios",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("author", sa.String(length=100), nullable=False),
        sa.Column("author_id", sa.String(), nullable=False),
        sa.Column("technologies", sa.JSON(), nullable=True),
        sa.Column("project_url", sa.String(), nullable=True),
        sa.Column("github_url", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_portfolios_slug"), "portfolios", ["slug"], unique=True)
    op.create_index(op.f("ix_portfolios_author_id"), "portfolios", ["author_id"], unique=False)
    op.create_index(op.f("ix_portfolios_featured"), "portfolios", ["featured"], unique=False)
    op.create_index(op.f("ix_portfolios_published"), "portfolios", ["published"], unique=False)
    op.create_index(op.f("ix_portfolios_created_at"), "portfolios", ["created_at"], unique=False)

    op.create_table(
        "content_analyses",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("content_id", sa.String(), nullable=False),
        sa.Column("content_type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("author", sa.String(), nullable=False),
        sa.Column("author_id", sa.String(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("key_topics", sa.JSON(), nullable=True),
        sa.Column("sentiment_label", sa.String(), nullable=False),
        sa.Column("sentiment_score", sa.Float(), nullable=False),
        sa.Column("sentiment_confidence", sa.Float(), nullable=False),
        sa.Column("complexity_level", sa.String(), nullable=False),
        sa.Column("complexity_score", sa.Float(), nullable=False),
        sa.Column("readability_score", sa.Float(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=True),
        sa.Column("extracted_concepts", sa.JSON(), nullable=True),
        sa.Column("word_count", sa.Integer(), nullable=False),
        sa.Column("sentence_count", sa.Integer(), nullable=False),
        sa.Column("reading_time_minutes", sa.Integer(), nullable=False),
        sa.Column("language_metrics", sa.JSON(), nullable=True),
        sa.Column("ai_insights", sa.JSON(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("model_version", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("content_id", "content_type", name="uq_content_analyses_content"),
    )
    op.create_index(op.f("ix_content_analyses_content_id"), "content_analyses", ["content_id"], unique=False)
    op.create_index(op.f("ix_content_analyses_author_id"), "content_analyses", ["author_id"], unique=False)
    op.create_index(op.f("ix_content_analyses_sentiment_label"), "content_analyses", ["sentiment_label"], unique=False)
    op.create_index(op.f("ix_content_analyses_complexity_level"), "content_analyses", ["complexity_level"], unique=False)
    op.create_index(op.f("ix_content_analyses_processed_at"), "content_analyses", ["processed_at"], unique=False)

    op.create_table(
        "user_interests",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("user_name", sa.String(), nullable=False),
        sa.Column("user_email", sa.String(), nullable=False),
        sa.Column("interests", sa.JSON(), nullable=True),
        sa.Column("reading_behavior", sa.JSON(), nullable=True),
        sa.Column("content_preferences", sa.JSON(), nullable=True),
        sa.Column("sentiment_profile", sa.JSON(), nullable=True),
        sa.Column("recommendations", sa.JSON(), nullable=True),
        sa.Column("analytics", sa.JSON(), nullable=True),
        sa.Column("ai_insights", sa.JSON(), nullable=True),
        sa.Column("last_analyzed", sa.DateTime(timezone=True), nullable=True),
        sa.Column("model_version", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_interests_user_id"), "user_interests", ["user_id"], unique=True)
    op.create_index(op.f("ix_user_interests_last_analyzed"), "user_interests", ["last_analyzed"], unique=False)

    op.create_table(
        "community_analytics",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("period", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("content_stats", sa.JSON(), nullable=True),
        sa.Column("topic_trends", sa.JSON(), nullable=True),
        sa.Column("sentiment_analysis", sa.JSON(), nullable=True),
        sa.Column("complexity_distribution", sa.JSON(), nullable=True),
        sa.Column("author_insights", sa.JSON(), nullable=True),
        sa.Column("community_engagement", sa.JSON(), nullable=True),
        sa.Column("insights", sa.JSON(), nullable=True),
        sa.Column("predictions", sa.JSON(), nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("model_version", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_community_analytics_period_generated",
        "community_analytics",
        ["period", "generated_at"],
        unique=False,
    )
    op.create_index(op.f("ix_community_analytics_generated_at"), "community_analytics", ["generated_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_community_analytics_generated_at"), table_name="community_analytics")
    op.drop_index("ix_community_analytics_period_generated", table_name="community_analytics")
    op.drop_table("community_analytics")

    op.drop_index(op.f("ix_user_interests_last_analyzed"), table_name="user_interests")
    op.drop_index(op.f("ix_user_interests_user_id"), table_name="user_interests")
    op.drop_table("user_interests")

    op.drop_index(op.f("ix_content_analyses_processed_at"), table_name="content_analyses")
    op.drop_index(op.f("ix_content_analyses_complexity_level"), table_name="content_analyses")
    op.drop_index(op.f("ix_content_analyses_sentiment_label"), table_name="content_analyses")
    op.drop_index(op.f("ix_content_analyses_author_id"), table_name="content_analyses")
    op.drop_index(op.f("ix_content_analyses_content_id"), table_name="content_analyses")
    op.drop_table("content_analyses")

    op.drop_index(op.f("ix_portfolios_created_at"), table_name="portfolios")
    op.drop_index(op.f("ix_portfolios_published"), table_name="portfolios")
    op.drop_index(op.f("ix_portfolios_featured"), table_name="portfolios")
    op.drop_index(op.f("ix_portfolios_author_id"), table_name="portfolios")
    op.drop_index(op.f("ix_portfolios_slug"), table_name="portfolios")
    op.drop_table("portfolios")

    op.drop_index(op.f("ix_blogs_created_at"), table_name="blogs")
    op.drop_index(op.f("ix_blogs_published"), table_name="blogs")
    op.drop_index(op.f("ix_blogs_author_id"), table_name="blogs")
    op.drop_index(op.f("ix_blogs_slug"), table_name="blogs")
    op.drop_table("blogs")

    op.drop_index(op.f("ix_password_resets_expires_at"), table_name="password_resets")
    op.drop_index(op.f("ix_password_resets_user_id"), table_name="password_resets")
    op.drop_index(op.f("ix_password_resets_token"), table_name="password_resets")
    op.drop_index(op.f("ix_password_resets_email"), table_name="password_resets")
    op.drop_table("password_resets")

    op.drop_index(op.f("ix_users_provider_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
