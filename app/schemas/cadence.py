"""
Cadence (daily engagement checklist) schemas.

GET  /cadence/checklist  → ChecklistResponse
POST /cadence/toggle     → ToggleItemRequest → ToggleItemResponse
GET  /cadence/streak     → StreakResponse
GET  /cadence/week       → WeekOverviewResponse
"""
import enum
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChecklistMode(str, enum.Enum):
    cruise = "cruise"
    launch = "launch"


class ChecklistItemOut(BaseModel):
    id: str
    label: str
    tip: str
    checked: bool


class StreakResponse(BaseModel):
    current_streak: int = Field(ge=0)
    best_streak: int = Field(ge=0)
    last_check_date: Optional[str] = None


class ChecklistResponse(BaseModel):
    day: str
    mode: str
    items: list[ChecklistItemOut]
    items_checked: int
    items_required: int = Field(description="Checked items needed to keep the streak.")
    streak_maintained: bool


class ToggleItemRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    item_id: Annotated[str, Field(min_length=1, max_length=64, examples=["reply_dm"])]
    mode: ChecklistMode = ChecklistMode.cruise
    day: Optional[date] = Field(
        default=None,
        description="Must be today in the planner time zone when given. Defaults to today.",
    )


class ToggleItemResponse(BaseModel):
    day: str
    items_checked: list[str]
    items_total: int
    streak_maintained: bool
    streak: StreakResponse


class WeekOverviewResponse(BaseModel):
    week_start: str
    days: list[bool] = Field(description="Monday..Sunday; True when the streak was kept.")
