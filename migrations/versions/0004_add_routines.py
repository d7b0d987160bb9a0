"""add routine tasks and completions

Revision ID: 0004
Revises: 0003
Create Date: 2026-03-09 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0004"
down_revision: Union[str, None] = "0003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "routine_tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("workspace_id", sa.String(64), nullable=True),
        sa.Column("label", sa.String(256), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("period", sa.String(8), nullable=False, server_default="week"),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_routine_tasks_id", "routine_tasks", ["id"])
    op.create_index("ix_routine_tasks_user_id", "routine_tasks", ["user_id"])

    op.create_table(
        "routine_completions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["task_id"], ["routine_tasks.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("task_id", "period_start", name="uq_routine_completion_period"),
    )
    op.create_index("ix_routine_completions_id", "routine_completions", ["id"])
    op.create_index("ix_routine_completions_user_id", "routine_completions", ["user_id"])
    op.create_index("ix_routine_completions_task_id", "routine_completions", ["task_id"])
    op.create_index("ix_routine_completions_period_start", "routine_completions", ["period_start"])


def downgrade() -> None:
    op.drop_table("routine_completions")
    op.drop_table("routine_tasks")
