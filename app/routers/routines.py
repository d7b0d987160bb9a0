"""
Routine tracker router.

GET    /routines
POST   /routines
GET    /routines/summary
POST   /routines/{task_id}/toggle
DELETE /routines/{task_id}
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.deps import get_context
from app.schemas.common import ErrorResponse
from app.schemas.routine import (
    CreateRoutineRequest,
    RoutineSummaryResponse,
    RoutineTaskResponse,
    RoutineToggleResponse,
)
from app.services.context import PlannerContext
from app.services.routines import (
    create_task,
    delete_task,
    list_tasks,
    routine_summary,
    toggle_completion,
)

router = APIRouter(prefix="/routines", tags=["routines"])


@router.get("", response_model=list[RoutineTaskResponse], summary="List routine tasks")
def list_routines(
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    return [RoutineTaskResponse.model_validate(t) for t in list_tasks(db, ctx)]


@router.post(
    "",
    response_model=RoutineTaskResponse,
    status_code=201,
    summary="Create a routine task",
)
def create_routine(
    payload: CreateRoutineRequest,
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    task = create_task(
        db, ctx,
        label=payload.label,
        period=payload.period,
        duration_minutes=payload.duration_minutes,
    )
    return RoutineTaskResponse.model_validate(task)


@router.get(
    "/summary",
    response_model=RoutineSummaryResponse,
    summary="Weekly/monthly completion and weekly streak",
)
def summary(
    day: Optional[date] = Query(default=None, description="Defaults to today.", examples=["2026-03-04"]),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    result = routine_summary(db, ctx, day)
    return RoutineSummaryResponse(**vars(result))


@router.post(
    "/{task_id}/toggle",
    response_model=RoutineToggleResponse,
    summary="Toggle a task for its current period",
    responses={
        404: {"model": ErrorResponse, "description": "No such routine task for this user."},
        503: {"model": ErrorResponse, "description": "Routine store unavailable; safe to retry."},
    },
)
def toggle_routine(
    task_id: int = Path(..., ge=1),
    day: Optional[date] = Query(default=None, description="Defaults to today."),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    task, done, start = toggle_completion(db, ctx, task_id, day)
    return RoutineToggleResponse(task_id=task.id, period_start=str(start), is_done=done)


@router.delete(
    "/{task_id}",
    status_code=204,
    summary="Delete a task and its completions",
    responses={404: {"model": ErrorResponse, "description": "No such routine task for this user."}},
)
def delete_routine(
    task_id: int = Path(..., ge=1),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    delete_task(db, ctx, task_id)
    return Response(status_code=204)
