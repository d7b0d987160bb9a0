"""
Cadence tracker - daily engagement checklist and streak state machine.

Transition (next_streak)
------------------------
  maintained = |checked items of the checklist| >= ceil(items_total × CADENCE_THRESHOLD)

  no StreakState yet    → current = best = (1 if maintained else 0)
  maintained, prev == yesterday → current += 1
  maintained, prev == today     → current = max(current, 1)
  maintained, older prev        → current = 1
  not maintained                → current = 0
  then: best = max(best, current); last_check_date = today

toggle_item only writes today's log. Each toggle applies the transition to
the streak as it stood before the day's first toggle (kept in the prior_*
columns), so the day ends counted at most once whatever order the items
were flipped in.

The pure pieces (is_maintained, next_streak, weekly_streak) take no session
and no clock; the DB wrapper only loads, applies and stores.

Public API
----------
is_maintained(checked, total, ratio)                 -> bool
next_streak(previous, today, maintained)            -> StreakState
weekly_streak(period_starts, current_week_start)    -> int
checklist_items(mode)                               -> tuple[ChecklistItem, ...]
count_checked(checked, items)                       -> int
toggle_item(db, ctx, item_id, mode, day)            -> CadenceResult
get_log(db, ctx, day)                               -> EngagementChecklistLog | None
get_streak(db, ctx)                                 -> StreakState
week_overview(db, ctx, day)                         -> list[bool]
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    CadenceStoreError,
    ChecklistDayClosedError,
    UnknownChecklistItemError,
)
from app.models.engagement import EngagementChecklistLog, EngagementStreak
from app.services import calendar
from app.services.context import PlannerContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Checklists
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChecklistItem:
    id: str
    label: str
    tip: str


CRUISE_ITEMS: tuple[ChecklistItem, ...] = (
    ChecklistItem("reply_comments", "Reply to all of today's comments",
                  "Replies within the hour boost your reach"),
    ChecklistItem("reply_dm", "Reply to all my DMs",
                  "DMs are the strongest signal for the algorithm"),
    ChecklistItem("comment_others", "Comment on 5-10 accounts from my strategic list",
                  "Four words or more, not just emojis"),
    ChecklistItem("story_interactive", "Post 1 interactive story (poll, question, quiz)",
                  "Interactive stickers lift story views by 15-25%"),
    ChecklistItem("dm_outreach", "Send 2-3 DMs to people who interacted",
                  "\"I saw you answered my poll, thank you!\""),
)

LAUNCH_ITEMS: tuple[ChecklistItem, ...] = (
    ChecklistItem("reply_dm_urgent", "Reply to ALL DMs (within the hour if possible)",
                  "40-60% of launch sales happen in DMs"),
    ChecklistItem("reply_comments", "Reply to all comments",
                  "Every comment extends the post's reach"),
    ChecklistItem("publish_stories", "Publish today's story sequence",
                  "Stories are the top converting format"),
    ChecklistItem("dm_prospects", "Send 5-10 personal DMs to interested people",
                  "People who vote \"yes\" on your polls are warm"),
    ChecklistItem("story_interactive", "1 interactive story (poll or question)",
                  "\"Want me to send you the details by DM?\""),
    ChecklistItem("check_stats", "Check today's post stats (10 min)",
                  "Note reach and saves, compare with yesterday"),
)

CHECKLISTS: dict[str, tuple[ChecklistItem, ...]] = {
    "cruise": CRUISE_ITEMS,
    "launch": LAUNCH_ITEMS,
}


def checklist_items(mode: str) -> tuple[ChecklistItem, ...]:
    try:
        return CHECKLISTS[mode]
    except KeyError:
        raise ValueError(f"unknown checklist mode {mode!r}") from None


# ---------------------------------------------------------------------------
# Pure state machine
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreakState:
    current_streak: int
    best_streak: int
    last_check_date: Optional[date]


def required_items(items_total: int, ratio: Optional[float] = None) -> int:
    threshold = Decimal(str(settings.CADENCE_THRESHOLD if ratio is None else ratio))
    return math.ceil(Decimal(items_total) * threshold)


def is_maintained(checked: int, items_total: int, ratio: Optional[float] = None) -> bool:
    """An empty checklist never maintains a streak."""
    if items_total <= 0:
        return False
    return checked >= required_items(items_total, ratio)


def next_streak(
    previous: Optional[StreakState],
    today: date,
    maintained: bool,
) -> StreakState:
    if previous is None or previous.last_check_date is None:
        start = 1 if maintained else 0
        best = max(start, previous.best_streak) if previous is not None else start
        return StreakState(current_streak=start, best_streak=best, last_check_date=today)

    prev = previous.last_check_date
    if not maintained:
        current = 0
    elif prev == today - timedelta(days=1):
        current = previous.current_streak + 1
    elif prev == today:
        current = max(previous.current_streak, 1)
    else:
        current = 1

    return StreakState(
        current_streak=current,
        best_streak=max(previous.best_streak, current),
        last_check_date=today,
    )


def weekly_streak(period_starts: Iterable[date], current_week_start: date) -> int:
    """
    Consecutive weeks with at least one completion, walking backward.
    A current week with nothing done yet does not break the streak:
    counting then starts from the previous week.
    """
    weeks = {calendar.week_start(d) for d in period_starts}
    check = calendar.week_start(current_week_start)
    if check not in weeks:
        check -= timedelta(days=7)

    streak = 0
    while check in weeks:
        streak += 1
        check -= timedelta(days=7)
    return streak


# ---------------------------------------------------------------------------
# DB wrapper
# ---------------------------------------------------------------------------

@dataclass
class CadenceResult:
    log: EngagementChecklistLog
    streak: StreakState


def _checked(log: EngagementChecklistLog) -> list[str]:
    try:
        items = json.loads(log.items_checked or "[]")
    except (ValueError, TypeError):
        return []
    return [str(i) for i in items] if isinstance(items, list) else []


def checked_items(log: Optional[EngagementChecklistLog]) -> list[str]:
    return _checked(log) if log is not None else []


def count_checked(checked: Iterable[str], items: Iterable[ChecklistItem]) -> int:
    """Checked ids that belong to `items`; ids left over from the other mode do not count."""
    ids = set(checked)
    return sum(1 for i in items if i.id in ids)


def _state_of(row: Optional[EngagementStreak]) -> Optional[StreakState]:
    if row is None:
        return None
    return StreakState(
        current_streak=row.current_streak or 0,
        best_streak=row.best_streak or 0,
        last_check_date=row.last_check_date,
    )


def _baseline(row: Optional[EngagementStreak], today: date) -> Optional[StreakState]:
    """
    Streak state before today's first toggle. Every toggle of the day is
    evaluated against it, so the day counts once however often it flips.
    """
    if row is None:
        return None
    if row.last_check_date == today:
        return StreakState(
            current_streak=row.prior_streak or 0,
            best_streak=row.prior_best or 0,
            last_check_date=row.prior_check_date,
        )
    return _state_of(row)


def get_log(
    db: Session, ctx: PlannerContext, day: Optional[date] = None
) -> Optional[EngagementChecklistLog]:
    target = day or calendar.today()
    try:
        return (
            db.query(EngagementChecklistLog)
            .filter(
                EngagementChecklistLog.user_id == ctx.user_id,
                EngagementChecklistLog.log_date == target,
            )
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise CadenceStoreError(
            f"Could not read checklist for {target}.", operation="read_log"
        ) from exc


def _streak_row(db: Session, ctx: PlannerContext) -> Optional[EngagementStreak]:
    try:
        return (
            db.query(EngagementStreak)
            .filter(EngagementStreak.user_id == ctx.user_id)
            .first()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise CadenceStoreError("Could not read streak.", operation="read_streak") from exc


def get_streak(db: Session, ctx: PlannerContext) -> StreakState:
    row = _streak_row(db, ctx)
    return _state_of(row) or StreakState(current_streak=0, best_streak=0, last_check_date=None)


def toggle_item(
    db: Session,
    ctx: PlannerContext,
    item_id: str,
    mode: str = "cruise",
    day: Optional[date] = None,
) -> CadenceResult:
    """
    Check or uncheck one item on today's log, then re-evaluate the streak
    from the day's baseline. Past days are closed. Commits once.
    """
    items = checklist_items(mode)
    if item_id not in {i.id for i in items}:
        raise UnknownChecklistItemError(item_id, mode)
    today = calendar.today()
    if day is not None and day != today:
        raise ChecklistDayClosedError(day, today)

    log = get_log(db, ctx, today)
    if log is None:
        log = EngagementChecklistLog(
            user_id=ctx.user_id,
            workspace_id=ctx.workspace_id,
            log_date=today,
            items_checked="[]",
        )
        db.add(log)

    checked = _checked(log)
    if item_id in checked:
        checked.remove(item_id)
    else:
        checked.append(item_id)

    count = count_checked(checked, items)
    log.items_checked = json.dumps(checked)
    log.items_total = len(items)
    log.streak_maintained = is_maintained(count, len(items))

    row = _streak_row(db, ctx)
    baseline = _baseline(row, today)
    state = next_streak(baseline, today, log.streak_maintained)
    if row is None:
        row = EngagementStreak(user_id=ctx.user_id, workspace_id=ctx.workspace_id)
        db.add(row)
    row.prior_streak = baseline.current_streak if baseline else 0
    row.prior_best = baseline.best_streak if baseline else 0
    row.prior_check_date = baseline.last_check_date if baseline else None
    row.current_streak = state.current_streak
    row.best_streak = state.best_streak
    row.last_check_date = state.last_check_date

    try:
        db.commit()
    except SQLAlchemyError as exc:
        # Lost a first-insert race on the log or streak row
        db.rollback()
        raise CadenceStoreError(
            f"Could not store checklist for {today}.", operation="toggle_item"
        ) from exc

    db.refresh(log)
    logger.debug(
        "user=%s %s: %d/%d checked, streak=%d",
        ctx.user_id, today, count, len(items), state.current_streak,
    )
    return CadenceResult(log=log, streak=state)


def week_overview(
    db: Session, ctx: PlannerContext, day: Optional[date] = None
) -> list[bool]:
    """Monday..Sunday flags: True where that day's log maintained the streak."""
    monday = calendar.week_start(day or calendar.today())
    sunday = monday + timedelta(days=6)
    try:
        rows = (
            db.query(EngagementChecklistLog.log_date)
            .filter(
                EngagementChecklistLog.user_id == ctx.user_id,
                EngagementChecklistLog.log_date >= monday,
                EngagementChecklistLog.log_date <= sunday,
                EngagementChecklistLog.streak_maintained.is_(True),
            )
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise CadenceStoreError(
            f"Could not read checklists for week {monday}.", operation="read_week"
        ) from exc
    maintained = {row.log_date for row in rows}
    return [d in maintained for d in calendar.week_days(monday)]
