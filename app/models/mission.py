"""
WeeklyMission - the persisted snapshot of a week's generated missions.

One row per (user_id, week_start, mission_key); the unique constraint is
what makes concurrent first visits to a week safe (insert-or-ignore).
Only is_done / completed_at change after insertion.

priority values: "urgent" | "important" | "bonus"
module values:   "branding" | "profile" | "content" | "engagement" | "site"
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Boolean, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class WeeklyMission(Base):
    __tablename__ = "weekly_missions"
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", "mission_key", name="uq_weekly_mission_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    week_start: Mapped[date] = mapped_column(
        Date, nullable=False, index=True, comment="Monday of the week",
    )
    mission_key: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False)
    module: Mapped[str] = mapped_column(String(32), nullable=False)
    route_hint: Mapped[str | None] = mapped_column(String(128), nullable=True)
    estimated_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Rank in the generated list",
    )
    is_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
