"""add weekly_missions

Revision ID: 0002
Revises: 0001
Create Date: 2026-03-02 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "weekly_missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=True),
        sa.Column("week_start", sa.Date(), nullable=False, comment="Monday of the week"),
        sa.Column("mission_key", sa.String(64), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", sa.String(16), nullable=False),
        sa.Column("module", sa.String(32), nullable=False),
        sa.Column("route_hint", sa.String(128), nullable=True),
        sa.Column("estimated_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column(
            "position", sa.Integer(), nullable=False, server_default="0",
            comment="Rank in the generated list",
        ),
        sa.Column("is_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # One row per key per week: concurrent first visits insert-or-ignore against this
        sa.UniqueConstraint("user_id", "week_start", "mission_key", name="uq_weekly_mission_key"),
    )
    op.create_index("ix_weekly_missions_id", "weekly_missions", ["id"])
    op.create_index("ix_weekly_missions_user_id", "weekly_missions", ["user_id"])
    op.create_index("ix_weekly_missions_week_start", "weekly_missions", ["week_start"])


def downgrade() -> None:
    op.drop_index("ix_weekly_missions_week_start", table_name="weekly_missions")
    op.drop_index("ix_weekly_missions_user_id", table_name="weekly_missions")
    op.drop_index("ix_weekly_missions_id", table_name="weekly_missions")
    op.drop_table("weekly_missions")
