from datetime import datetime, date
from sqlalchemy import Integer, String, DateTime, Date, ForeignKey, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base


class RoutinePeriod(str, enum.Enum):
    week = "week"
    month = "month"


class RoutineTask(Base):
    """A recurring chore, done once per week or once per month."""

    __tablename__ = "routine_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    label: Mapped[str] = mapped_column(String(256), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    period: Mapped[str] = mapped_column(String(8), nullable=False, default=RoutinePeriod.week.value)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class RoutineCompletion(Base):
    """
    Marks a task done within one period bucket.
    period_start: Monday for weekly tasks, first of month for monthly tasks.
    """

    __tablename__ = "routine_completions"
    __table_args__ = (
        UniqueConstraint("task_id", "period_start", name="uq_routine_completion_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("routine_tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
