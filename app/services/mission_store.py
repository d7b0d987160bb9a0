"""
Weekly mission store - the persistence boundary of the planner.

Snapshot semantics
------------------
The first visit to a week aggregates → scores → generates and stores the
result. Every later visit returns those rows unchanged, even if the user's
state has moved on since. Past weeks are never generated and their rows are
read-only.

Idempotency
-----------
(user_id, week_start, mission_key) is unique in `weekly_missions`. Rows are
written with INSERT … ON CONFLICT DO NOTHING, so two sessions racing on the
first visit of a week converge on one row per key; the loser's redundant
generation is simply discarded.

Failure semantics
-----------------
Storage errors surface as MissionStoreError (HTTP 503, retryable). Retrying
is safe because inserts are keyed.

Public API
----------
ensure_week_missions(db, ctx, week_start, today)        -> list[WeeklyMission]
get_week_missions(db, ctx, week_start)                  -> list[WeeklyMission]
complete_mission(db, ctx, mission_id, today)            -> WeeklyMission
set_mission_done(db, ctx, mission_id, done, today)      -> WeeklyMission
list_history(db, ctx, before_week_start, limit)         -> list[WeekHistory]
persist_missions(db, ctx, week_start, definitions)      -> int
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    InvalidWeekStartError,
    MissionNotFoundError,
    MissionStoreError,
    MissionWeekClosedError,
)
from app.models.mission import WeeklyMission
from app.services import calendar
from app.services.context import PlannerContext
from app.services.mission_generator import MissionDefinition, generate
from app.services.progress_scorer import score
from app.services.state_aggregator import fetch_state

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class WeekHistory:
    week_start: date
    total: int
    done: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_UNIQUE_KEY = ["user_id", "week_start", "mission_key"]


def _week_query(db: Session, ctx: PlannerContext, week_start: date):
    return (
        db.query(WeeklyMission)
        .filter(
            WeeklyMission.user_id == ctx.user_id,
            WeeklyMission.week_start == week_start,
        )
        .order_by(WeeklyMission.position, WeeklyMission.id)
    )


def _load_week(db: Session, ctx: PlannerContext, week_start: date) -> list[WeeklyMission]:
    try:
        return _week_query(db, ctx, week_start).all()
    except SQLAlchemyError as exc:
        db.rollback()
        raise MissionStoreError(
            f"Could not read missions for week {week_start}.", operation="read_week"
        ) from exc


def _check_week_start(week_start: date) -> None:
    if not calendar.is_week_start(week_start):
        raise InvalidWeekStartError(week_start)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def persist_missions(
    db: Session,
    ctx: PlannerContext,
    week_start: date,
    definitions: list[MissionDefinition],
) -> int:
    """
    Insert one row per definition, ignoring keys that already exist for the
    week. Commits. Returns the number of rows actually inserted.
    """
    if not definitions:
        return 0

    rows = [
        {
            "user_id": ctx.user_id,
            "workspace_id": ctx.workspace_id,
            "week_start": week_start,
            "mission_key": d.key,
            "title": d.title,
            "description": d.description,
            "priority": d.priority,
            "module": d.module,
            "route_hint": d.route_hint,
            "estimated_minutes": d.estimated_minutes,
            "position": position,
            "is_done": False,
        }
        for position, d in enumerate(definitions)
    ]

    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise RuntimeError(f"insert-or-ignore is not implemented for dialect {dialect!r}")

    stmt = insert(WeeklyMission).values(rows).on_conflict_do_nothing(index_elements=_UNIQUE_KEY)
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise MissionStoreError(
            f"Could not store missions for week {week_start}.", operation="persist_week"
        ) from exc

    inserted = max(result.rowcount or 0, 0)
    if inserted < len(rows):
        logger.info(
            "Week %s for user=%s: %d of %d missions already present",
            week_start, ctx.user_id, len(rows) - inserted, len(rows),
        )
    return inserted


def set_mission_done(
    db: Session,
    ctx: PlannerContext,
    mission_id: int,
    done: bool,
    today: Optional[date] = None,
) -> WeeklyMission:
    """
    Set is_done on a mission of the current (or a future) week.
    Re-applying the same value is a no-op and keeps the original completed_at.
    """
    try:
        mission: Optional[WeeklyMission] = (
            db.query(WeeklyMission)
            .filter(WeeklyMission.id == mission_id, WeeklyMission.user_id == ctx.user_id)
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise MissionStoreError(
            f"Could not read mission {mission_id}.", operation="read_mission"
        ) from exc
    if mission is None:
        raise MissionNotFoundError(mission_id)

    current = calendar.week_start(today or calendar.today())
    if mission.week_start < current:
        raise MissionWeekClosedError(mission_id, mission.week_start)

    if mission.is_done != done:
        mission.is_done = done
        mission.completed_at = datetime.now(tz=timezone.utc) if done else None
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise MissionStoreError(
                f"Could not update mission {mission_id}.", operation="set_done"
            ) from exc
        db.refresh(mission)
    return mission


def complete_mission(
    db: Session,
    ctx: PlannerContext,
    mission_id: int,
    today: Optional[date] = None,
) -> WeeklyMission:
    """Mark a mission done. The product exposes no way to undo it."""
    return set_mission_done(db, ctx, mission_id, True, today)


# ---------------------------------------------------------------------------
# Public - main entry point
# ---------------------------------------------------------------------------

def ensure_week_missions(
    db: Session,
    ctx: PlannerContext,
    week_start: date,
    today: Optional[date] = None,
) -> list[WeeklyMission]:
    """
    Return the mission snapshot for `week_start`, generating it on the first
    visit of the current or a future week.
    """
    _check_week_start(week_start)
    current_day = today or calendar.today()
    current_week = calendar.week_start(current_day)

    existing = _load_week(db, ctx, week_start)
    if existing or week_start < current_week:
        return existing

    as_of = current_day if week_start == current_week else week_start
    signal = fetch_state(db, ctx, as_of)
    definitions = generate(signal, score(signal))
    inserted = persist_missions(db, ctx, week_start, definitions)
    logger.info(
        "Generated week %s for user=%s: %d missions (%d new)",
        week_start, ctx.user_id, len(definitions), inserted,
    )
    return _load_week(db, ctx, week_start)


# ---------------------------------------------------------------------------
# Public - read helpers
# ---------------------------------------------------------------------------

def get_week_missions(
    db: Session,
    ctx: PlannerContext,
    week_start: date,
) -> list[WeeklyMission]:
    """Read-only listing; never generates."""
    _check_week_start(week_start)
    return _load_week(db, ctx, week_start)


def list_history(
    db: Session,
    ctx: PlannerContext,
    before_week_start: date,
    limit: Optional[int] = None,
) -> list[WeekHistory]:
    """(week_start, total, done) per week strictly before the anchor, newest first."""
    window = limit if limit is not None else settings.HISTORY_LIMIT
    done_count = func.sum(case((WeeklyMission.is_done.is_(True), 1), else_=0))
    try:
        rows = (
            db.query(
                WeeklyMission.week_start,
                func.count(WeeklyMission.id).label("total"),
                done_count.label("done"),
            )
            .filter(
                WeeklyMission.user_id == ctx.user_id,
                WeeklyMission.week_start < before_week_start,
            )
            .group_by(WeeklyMission.week_start)
            .order_by(WeeklyMission.week_start.desc())
            .limit(window)
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise MissionStoreError("Could not read mission history.", operation="history") from exc

    return [
        WeekHistory(week_start=r.week_start, total=int(r.total), done=int(r.done or 0))
        for r in rows
    ]
