"""
Calendar helpers shared by the planner services.

"Today" is always computed in the configured PLANNER_TIMEZONE, never in the
host's local zone, so week rollover happens at the same instant for every
worker.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.config import settings


def today(tz_name: Optional[str] = None) -> date:
    return datetime.now(tz=ZoneInfo(tz_name or settings.PLANNER_TIMEZONE)).date()


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def is_week_start(day: date) -> bool:
    return day.weekday() == 0


def week_days(monday: date) -> list[date]:
    return [monday + timedelta(days=i) for i in range(7)]
