"""
Progress router.

GET /progress
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.deps import get_context
from app.schemas.progress import ModuleScores, ProgressResponse
from app.services import calendar
from app.services.context import PlannerContext
from app.services.progress_scorer import score
from app.services.state_aggregator import fetch_state

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get(
    "",
    response_model=ProgressResponse,
    summary="Per-module completion and global score",
    responses={200: {"description": "Scores computed from the caller's current state."}},
)
def get_progress(
    day: Optional[date] = Query(
        default=None,
        description="Reference day (ISO date). Defaults to today in the planner time zone.",
        examples=["2026-03-04"],
    ),
    ctx: PlannerContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    """
    Read the caller's collaborator records, then score each module 0..100.

    | Module | Score |
    |---|---|
    | `branding`   | mean of the seven branding sections |
    | `profile`    | share of profile checks passed |
    | `content`    | posts this week against the weekly target |
    | `engagement` | engagement actions this week against the objective |
    | `site`       | homepage fields filled |

    Sources that could not be read count as empty and are listed in `unreadable`.
    """
    target = day or calendar.today()
    signal = fetch_state(db, ctx, target)
    result = score(signal)
    return ProgressResponse(
        reference_date=str(target),
        modules=ModuleScores(**result.modules),
        global_score=result.global_score,
        branding_sections=signal.branding.sections,
        unreadable=signal.unreadable,
    )
