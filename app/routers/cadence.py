"""
Cadence router (daily engagement checklist).

GET  /cadence/checklist
POST /cadence/toggle
GET  /cadence/streak
GET  /cadence/week
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.deps import get_context
from app.schemas.common import ErrorResponse
from app.schemas.cadence import (
    ChecklistItemOut,
    ChecklistMode,
    ChecklistResponse,
    StreakResponse,
    ToggleItemRequest,
    ToggleItemResponse,
    WeekOverviewResponse,
)
from app.services import calendar
from app.services.cadence import (
    StreakState,
    checked_items,
    checklist_items,
    count_checked,
    get_log,
    get_streak,
    is_maintained,
    required_items,
    toggle_item,
    week_overview,
)
from app.services.context import PlannerContext

router = APIRouter(prefix="/cadence", tags=["cadence"])


def _streak_to_response(state: StreakState) -> StreakResponse:
    return StreakResponse(
        current_streak=state.current_streak,
        best_streak=state.best_streak,
        last_check_date=str(state.last_check_date) if state.last_check_date else None,
    )


@router.get(
    "/checklist",
    response_model=ChecklistResponse,
    summary="Today's checklist with checked state",
)
def get_checklist(
    mode: ChecklistMode = Query(default=ChecklistMode.cruise, description='"cruise" or "launch".'),
    day: Optional[date] = Query(default=None, description="Defaults to today.", examples=["2026-03-04"]),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    target = day or calendar.today()
    items = checklist_items(mode.value)
    checked = set(checked_items(get_log(db, ctx, target)))
    count = count_checked(checked, items)
    return ChecklistResponse(
        day=str(target),
        mode=mode.value,
        items=[
            ChecklistItemOut(id=i.id, label=i.label, tip=i.tip, checked=i.id in checked)
            for i in items
        ],
        items_checked=count,
        items_required=required_items(len(items)),
        streak_maintained=is_maintained(count, len(items)),
    )


@router.post(
    "/toggle",
    response_model=ToggleItemResponse,
    summary="Check or uncheck one item and update the streak",
    responses={
        200: {"description": "Item toggled; streak advanced."},
        422: {
            "model": ErrorResponse,
            "description": "Item does not belong to the chosen checklist, or `day` is not today.",
        },
        503: {"model": ErrorResponse, "description": "Cadence store unavailable; safe to retry."},
    },
)
def toggle(
    payload: ToggleItemRequest,
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Flip `item_id` on today's log. The log is maintained when at least
    60% of the chosen checklist is checked (rounded up). Against the streak
    as it stood before today's first toggle:

    - maintained, last check yesterday → +1
    - maintained, older last check → 1
    - not maintained → 0

    Re-toggling during the day never counts the day twice. Past days are
    closed (422 `CHECKLIST_DAY_CLOSED`).
    """
    result = toggle_item(db, ctx, payload.item_id, payload.mode, payload.day)
    log = result.log
    return ToggleItemResponse(
        day=str(log.log_date),
        items_checked=checked_items(log),
        items_total=log.items_total,
        streak_maintained=log.streak_maintained,
        streak=_streak_to_response(result.streak),
    )


@router.get("/streak", response_model=StreakResponse, summary="Current and best streak")
def streak(
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return _streak_to_response(get_streak(db, ctx))


@router.get(
    "/week",
    response_model=WeekOverviewResponse,
    summary="Which days of the week kept the streak",
)
def week(
    day: Optional[date] = Query(default=None, description="Any day of the week. Defaults to today."),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    target = day or calendar.today()
    return WeekOverviewResponse(
        week_start=str(calendar.week_start(target)),
        days=week_overview(db, ctx, target),
    )
