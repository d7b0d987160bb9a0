"""
Weekly missions router.

GET  /missions/week
POST /missions/{mission_id}/complete
GET  /missions/history
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.models.mission import WeeklyMission
from app.routers.deps import get_context
from app.schemas.common import ErrorResponse
from app.schemas.mission import (
    MissionHistoryResponse,
    MissionResponse,
    WeekHistoryItem,
    WeekMissionsResponse,
)
from app.services import calendar
from app.services.context import PlannerContext
from app.services.mission_store import complete_mission, ensure_week_missions, list_history

router = APIRouter(prefix="/missions", tags=["missions"])


def _mission_to_response(m: WeeklyMission) -> MissionResponse:
    return MissionResponse(
        id=m.id,
        mission_key=m.mission_key,
        title=m.title,
        description=m.description,
        priority=m.priority,
        module=m.module,
        route_hint=m.route_hint,
        estimated_minutes=m.estimated_minutes,
        is_done=m.is_done,
        completed_at=m.completed_at.isoformat() if m.completed_at else None,
        week_start=str(m.week_start),
    )


@router.get(
    "/week",
    response_model=WeekMissionsResponse,
    summary="Missions for a week (generated on first visit)",
    responses={
        200: {"description": "The week's mission snapshot, in display order."},
        422: {"model": ErrorResponse, "description": "`week_start` is not a Monday."},
        503: {"model": ErrorResponse, "description": "Mission store unavailable; safe to retry."},
    },
)
def get_week(
    week_start: Optional[date] = Query(
        default=None,
        description="Monday of the week (ISO date). Defaults to the current week.",
        examples=["2026-03-02"],
    ),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    The first visit to the current (or a future) week scores the caller's
    state and stores up to five missions. Later visits return the same rows.
    Past weeks are never generated; an unvisited past week is empty.
    """
    target = week_start or calendar.week_start(calendar.today())
    missions = ensure_week_missions(db, ctx, target)
    return WeekMissionsResponse(
        week_start=str(target),
        total=len(missions),
        done=sum(1 for m in missions if m.is_done),
        items=[_mission_to_response(m) for m in missions],
    )


@router.post(
    "/{mission_id}/complete",
    response_model=MissionResponse,
    summary="Mark a mission done",
    responses={
        200: {"description": "Mission is done. Completing twice is a no-op."},
        404: {"model": ErrorResponse, "description": "No such mission for this user."},
        409: {"model": ErrorResponse, "description": "The mission belongs to a past week."},
    },
)
def complete(
    mission_id: int = Path(..., ge=1),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return _mission_to_response(complete_mission(db, ctx, mission_id))


@router.get(
    "/history",
    response_model=MissionHistoryResponse,
    summary="Done/total per past week (newest first)",
)
def history(
    before: Optional[date] = Query(
        default=None,
        description="Only weeks strictly before this date. Defaults to the current week.",
        examples=["2026-03-02"],
    ),
    limit: Optional[int] = Query(
        default=None, ge=1, le=52, description="Number of weeks. Defaults to HISTORY_LIMIT.",
    ),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    anchor = before or calendar.week_start(calendar.today())
    weeks = list_history(db, ctx, anchor, limit)
    return MissionHistoryResponse(
        before=str(anchor),
        items=[
            WeekHistoryItem(week_start=str(w.week_start), total=w.total, done=w.done)
            for w in weeks
        ],
    )
