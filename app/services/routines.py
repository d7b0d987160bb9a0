"""
Routine tracker: recurring weekly / monthly tasks and their completions.

A completion marks one task done within one period bucket (Monday for weekly
tasks, the 1st for monthly tasks). Toggling removes it again. The streak is
never stored; it is derived from the completion history of weekly tasks via
cadence.weekly_streak.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import RoutineStoreError, RoutineTaskNotFoundError
from app.models.routine import RoutineCompletion, RoutinePeriod, RoutineTask
from app.services import calendar
from app.services.cadence import weekly_streak
from app.services.context import PlannerContext
from app.services.state_aggregator import percent

logger = logging.getLogger(__name__)


@dataclass
class RoutineSummary:
    weekly_completed: int
    weekly_total: int
    weekly_percent: int
    monthly_completed: int
    monthly_total: int
    monthly_percent: int
    streak: int


def period_start(period: str, day: date) -> date:
    if period == RoutinePeriod.month.value:
        return calendar.month_start(day)
    return calendar.week_start(day)


def _get_task(db: Session, ctx: PlannerContext, task_id: int) -> RoutineTask:
    task = (
        db.query(RoutineTask)
        .filter(RoutineTask.id == task_id, RoutineTask.user_id == ctx.user_id)
        .first()
    )
    if task is None:
        raise RoutineTaskNotFoundError(task_id)
    return task


def list_tasks(db: Session, ctx: PlannerContext) -> list[RoutineTask]:
    return (
        db.query(RoutineTask)
        .filter(RoutineTask.user_id == ctx.user_id)
        .order_by(RoutineTask.order_index, RoutineTask.id)
        .all()
    )


def create_task(
    db: Session,
    ctx: PlannerContext,
    label: str,
    period: str = RoutinePeriod.week.value,
    duration_minutes: int = 15,
) -> RoutineTask:
    max_order = (
        db.query(func.max(RoutineTask.order_index))
        .filter(RoutineTask.user_id == ctx.user_id)
        .scalar()
        or 0
    )
    task = RoutineTask(
        user_id=ctx.user_id,
        workspace_id=ctx.workspace_id,
        label=label,
        period=period,
        duration_minutes=duration_minutes,
        order_index=max_order + 1,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, ctx: PlannerContext, task_id: int) -> None:
    task = _get_task(db, ctx, task_id)
    db.query(RoutineCompletion).filter(RoutineCompletion.task_id == task.id).delete(
        synchronize_session=False
    )
    db.delete(task)
    db.commit()
    logger.info("Deleted routine task %s for user=%s", task_id, ctx.user_id)


def completed_task_ids(db: Session, ctx: PlannerContext, start: date) -> set[int]:
    return {
        row.task_id
        for row in db.query(RoutineCompletion.task_id)
        .filter(
            RoutineCompletion.user_id == ctx.user_id,
            RoutineCompletion.period_start == start,
        )
        .all()
    }


def toggle_completion(
    db: Session,
    ctx: PlannerContext,
    task_id: int,
    day: Optional[date] = None,
) -> tuple[RoutineTask, bool, date]:
    """
    Flip the task's completion for the period containing `day`.
    Returns (task, is_done_now, period_start).
    """
    task = _get_task(db, ctx, task_id)
    start = period_start(task.period, day or calendar.today())

    try:
        existing = (
            db.query(RoutineCompletion)
            .filter(RoutineCompletion.task_id == task.id, RoutineCompletion.period_start == start)
            .first()
        )
        if existing is not None:
            db.delete(existing)
            done = False
        else:
            db.add(RoutineCompletion(user_id=ctx.user_id, task_id=task.id, period_start=start))
            done = True
        db.commit()
    except SQLAlchemyError as exc:
        # Lost a first-insert race on uq_routine_completion_period
        db.rollback()
        raise RoutineStoreError(
            f"Could not toggle routine task {task_id} for {start}.", operation="toggle_completion"
        ) from exc
    return task, done, start


def routine_summary(
    db: Session,
    ctx: PlannerContext,
    day: Optional[date] = None,
) -> RoutineSummary:
    target = day or calendar.today()
    monday = calendar.week_start(target)
    first_of_month = calendar.month_start(target)

    tasks = list_tasks(db, ctx)
    weekly = [t for t in tasks if t.period == RoutinePeriod.week.value]
    monthly = [t for t in tasks if t.period == RoutinePeriod.month.value]

    done_this_week = completed_task_ids(db, ctx, monday)
    done_this_month = completed_task_ids(db, ctx, first_of_month)
    weekly_completed = sum(1 for t in weekly if t.id in done_this_week)
    monthly_completed = sum(1 for t in monthly if t.id in done_this_month)

    weekly_ids = [t.id for t in weekly]
    weekly_starts = (
        [
            row.period_start
            for row in db.query(RoutineCompletion.period_start)
            .filter(
                RoutineCompletion.user_id == ctx.user_id,
                RoutineCompletion.task_id.in_(weekly_ids),
            )
            .all()
        ]
        if weekly_ids
        else []
    )

    return RoutineSummary(
        weekly_completed=weekly_completed,
        weekly_total=len(weekly),
        weekly_percent=percent(weekly_completed, len(weekly)),
        monthly_completed=monthly_completed,
        monthly_total=len(monthly),
        monthly_percent=percent(monthly_completed, len(monthly)),
        streak=weekly_streak(weekly_starts, monday),
    )
