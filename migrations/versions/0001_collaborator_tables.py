"""collaborator tables read by the state aggregator

Revision ID: 0001
Revises:
Create Date: 2026-03-02 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _owner_columns() -> list:
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=True),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def _owner_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_id", table, ["id"])
    op.create_index(f"ix_{table}_user_id", table, ["user_id"])
    op.create_index(f"ix_{table}_workspace_id", table, ["workspace_id"])


TABLES = (
    "brand_propositions", "personas", "storytelling", "brand_profiles",
    "brand_strategies", "offers", "brand_charters", "instagram_highlights",
    "linkedin_profiles", "pinterest_profiles", "calendar_posts", "saved_ideas",
    "editorial_lines", "user_rhythms", "engagement_weekly", "website_homepages",
)


def upgrade() -> None:
    # --- branding ---
    op.create_table(
        "brand_propositions",
        *_owner_columns(),
        sa.Column("what_you_do", sa.Text(), nullable=True),
        sa.Column("process", sa.Text(), nullable=True),
        sa.Column("values", sa.Text(), nullable=True),
        sa.Column("for_whom", sa.Text(), nullable=True),
        sa.Column("version_final", sa.Text(), nullable=True),
        sa.Column("version_pitch", sa.Text(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "personas",
        *_owner_columns(),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("frustrations", sa.Text(), nullable=True),
        sa.Column("transformation", sa.Text(), nullable=True),
        sa.Column("objections", sa.Text(), nullable=True),
        sa.Column("dream_outcome", sa.Text(), nullable=True),
        sa.Column("actions", sa.Text(), nullable=True),
        sa.Column("current_step", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "storytelling",
        *_owner_columns(),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("polished_text", sa.Text(), nullable=True),
        sa.Column("imported_text", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "brand_profiles",
        *_owner_columns(),
        sa.Column("voice_description", sa.Text(), nullable=True),
        sa.Column("combat_cause", sa.Text(), nullable=True),
        sa.Column("combat_fights", sa.Text(), nullable=True),
        sa.Column("tone_register", sa.String(64), nullable=True),
        sa.Column("tone_level", sa.String(64), nullable=True),
        sa.Column("tone_style", sa.String(64), nullable=True),
        sa.Column("tone_humor", sa.String(64), nullable=True),
        sa.Column("tone_engagement", sa.String(64), nullable=True),
        sa.Column("key_expressions", sa.Text(), nullable=True),
        sa.Column("things_to_avoid", sa.Text(), nullable=True),
        sa.Column("target_verbatims", sa.Text(), nullable=True),
        sa.Column("channels", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "brand_strategies",
        *_owner_columns(),
        sa.Column("hidden_facets", sa.Text(), nullable=True),
        sa.Column("facet_1", sa.Text(), nullable=True),
        sa.Column("pillar_major", sa.Text(), nullable=True),
        sa.Column("creative_concept", sa.Text(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "offers",
        *_owner_columns(),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("promise", sa.Text(), nullable=True),
        sa.Column("price_text", sa.String(128), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "brand_charters",
        *_owner_columns(),
        sa.Column("logo_url", sa.String(512), nullable=True),
        sa.Column("color_primary", sa.String(16), nullable=True),
        sa.Column("color_secondary", sa.String(16), nullable=True),
        sa.Column("color_accent", sa.String(16), nullable=True),
        sa.Column("font_title", sa.String(64), nullable=True),
        sa.Column("font_body", sa.String(64), nullable=True),
        sa.Column("mood_keywords", sa.Text(), nullable=True),
        sa.Column("photo_style", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- channels ---
    op.create_table(
        "instagram_highlights",
        *_owner_columns(),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("is_selected", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "linkedin_profiles",
        *_owner_columns(),
        sa.Column("title_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("summary_final", sa.String(2600), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "pinterest_profiles",
        *_owner_columns(),
        sa.Column("pro_account_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- content ---
    op.create_table(
        "calendar_posts",
        *_owner_columns(),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("channel", sa.String(32), nullable=False, server_default="instagram"),
        sa.Column("status", sa.String(32), nullable=False, server_default="planned"),
        sa.Column("title", sa.String(256), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_calendar_posts_day", "calendar_posts", ["day"])

    op.create_table(
        "saved_ideas",
        *_owner_columns(),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "editorial_lines",
        *_owner_columns(),
        sa.Column("posts_frequency", sa.String(16), nullable=True),
        sa.Column("estimated_weekly_minutes", sa.Integer(), nullable=True),
        sa.Column("time_budget_minutes", sa.Integer(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_rhythms",
        *_owner_columns(),
        sa.Column("posts_per_week", sa.Integer(), nullable=True),
        sa.Column(
            "time_available_weekly", sa.Integer(), nullable=True,
            comment="Minutes per week the user can spend on the project",
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- engagement counters ---
    op.create_table(
        "engagement_weekly",
        *_owner_columns(),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("objective", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("total_done", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_engagement_weekly_week_start", "engagement_weekly", ["week_start"])

    # --- site ---
    op.create_table(
        "website_homepages",
        *_owner_columns(),
        sa.Column("hook_title", sa.Text(), nullable=True),
        sa.Column("hook_subtitle", sa.Text(), nullable=True),
        sa.Column("problem_block", sa.Text(), nullable=True),
        sa.Column("presentation_block", sa.Text(), nullable=True),
        sa.Column("offer_block", sa.Text(), nullable=True),
        sa.Column("benefits_block", sa.Text(), nullable=True),
        sa.Column("cta_primary", sa.String(256), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    for table in TABLES:
        _owner_indexes(table)


def downgrade() -> None:
    for table in reversed(TABLES):
        op.drop_table(table)
