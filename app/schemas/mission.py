"""
Weekly mission schemas.

GET  /missions/week             → WeekMissionsResponse
POST /missions/{id}/complete    → MissionResponse
GET  /missions/history          → MissionHistoryResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    mission_key: str = Field(description="Stable rule identifier, unique within a week.")
    title: str
    description: Optional[str] = None
    priority: str = Field(description='"urgent" | "important" | "bonus"')
    module: str = Field(description='"branding" | "profile" | "content" | "engagement" | "site"')
    route_hint: Optional[str] = Field(default=None, description="Where the UI should send the user.")
    estimated_minutes: int
    is_done: bool
    completed_at: Optional[str] = None
    week_start: str = Field(description="Monday of the mission's week (ISO date).")


class WeekMissionsResponse(BaseModel):
    week_start: str
    total: int
    done: int
    items: list[MissionResponse]


class WeekHistoryItem(BaseModel):
    week_start: str
    total: int = Field(ge=0)
    done: int = Field(ge=0)


class MissionHistoryResponse(BaseModel):
    before: str = Field(description="Anchor week; only strictly earlier weeks are listed.")
    items: list[WeekHistoryItem] = Field(description="Newest week first.")
