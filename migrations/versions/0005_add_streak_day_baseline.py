"""add per-day baseline to engagement streaks

Revision ID: 0005
Revises: 0004
Create Date: 2026-03-16 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0005"
down_revision: Union[str, None] = "0004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "engagement_streaks",
        sa.Column("prior_streak", sa.Integer(), nullable=False, server_default="0"),
    )
    op.add_column(
        "engagement_streaks",
        sa.Column("prior_best", sa.Integer(), nullable=False, server_default="0"),
    )
    op.add_column(
        "engagement_streaks",
        sa.Column("prior_check_date", sa.Date(), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("engagement_streaks", "prior_check_date")
    op.drop_column("engagement_streaks", "prior_best")
    op.drop_column("engagement_streaks", "prior_streak")
