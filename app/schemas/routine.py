"""
Routine tracker schemas.

GET    /routines               → list[RoutineTaskResponse]
POST   /routines               → CreateRoutineRequest → RoutineTaskResponse
DELETE /routines/{id}          → 204
POST   /routines/{id}/toggle   → RoutineToggleResponse
GET    /routines/summary       → RoutineSummaryResponse
"""
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.routine import RoutinePeriod


class CreateRoutineRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    label: Annotated[str, Field(min_length=1, max_length=256, examples=["Batch-write captions"])]
    period: RoutinePeriod = RoutinePeriod.week
    duration_minutes: int = Field(default=15, ge=1, le=600)

    @field_validator("label", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("label must not be empty after stripping whitespace")
        return stripped


class RoutineTaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    period: str
    duration_minutes: int
    order_index: int


class RoutineToggleResponse(BaseModel):
    task_id: int
    period_start: str
    is_done: bool


class RoutineSummaryResponse(BaseModel):
    weekly_completed: int
    weekly_total: int
    weekly_percent: int
    monthly_completed: int
    monthly_total: int
    monthly_percent: int
    streak: int = Field(description="Consecutive weeks with at least one weekly task done.")
