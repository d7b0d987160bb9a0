"""
Engagement records.

EngagementWeekly      - weekly interaction counters (collaborator-owned, read only)
EngagementChecklistLog - one row per (user_id, log_date): the daily checklist
EngagementStreak      - one row per user: derived streak state, plus the
                        state before the day's first toggle (prior_*)

items_checked: JSON-encoded list of checklist item ids stored as Text.
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class EngagementWeekly(Base):
    __tablename__ = "engagement_weekly"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    week_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    objective: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    total_done: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class EngagementChecklistLog(Base):
    __tablename__ = "engagement_checklist_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "log_date", name="uq_checklist_log_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    log_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    items_checked: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    items_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_maintained: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class EngagementStreak(Base):
    __tablename__ = "engagement_streaks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_check_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # Streak as it stood before the first toggle on last_check_date
    prior_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prior_best: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prior_check_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
