"""add engagement checklist logs and streaks

Revision ID: 0003
Revises: 0002
Create Date: 2026-03-02 00:00:02.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "engagement_checklist_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=True),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("items_checked", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("items_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_maintained", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "log_date", name="uq_checklist_log_user_date"),
    )
    op.create_index("ix_engagement_checklist_logs_id", "engagement_checklist_logs", ["id"])
    op.create_index("ix_engagement_checklist_logs_user_id", "engagement_checklist_logs", ["user_id"])
    op.create_index("ix_engagement_checklist_logs_log_date", "engagement_checklist_logs", ["log_date"])

    op.create_table(
        "engagement_streaks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=True),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_check_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_engagement_streaks_id", "engagement_streaks", ["id"])
    op.create_index("ix_engagement_streaks_user_id", "engagement_streaks", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_engagement_streaks_user_id", table_name="engagement_streaks")
    op.drop_index("ix_engagement_streaks_id", table_name="engagement_streaks")
    op.drop_table("engagement_streaks")
    op.drop_index("ix_engagement_checklist_logs_log_date", table_name="engagement_checklist_logs")
    op.drop_index("ix_engagement_checklist_logs_user_id", table_name="engagement_checklist_logs")
    op.drop_index("ix_engagement_checklist_logs_id", table_name="engagement_checklist_logs")
    op.drop_table("engagement_checklist_logs")
