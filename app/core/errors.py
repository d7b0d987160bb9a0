"""
Custom exception hierarchy for the Progress Planner.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class PlannerException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MissionNotFoundError(PlannerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "MISSION_NOT_FOUND"

    def __init__(self, mission_id: int):
        super().__init__(
            message=f"Mission {mission_id} does not exist.",
            details={"mission_id": mission_id},
        )


class MissionWeekClosedError(PlannerException):
    http_status = status.HTTP_409_CONFLICT
    code = "MISSION_WEEK_CLOSED"

    def __init__(self, mission_id: int, week_start: date):
        super().__init__(
            message=f"Week {week_start} is over; mission {mission_id} is read-only.",
            details={"mission_id": mission_id, "week_start": str(week_start)},
        )


class InvalidWeekStartError(PlannerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_WEEK_START"

    def __init__(self, week_start: date):
        super().__init__(
            message=f"{week_start} is not a Monday.",
            details={"week_start": str(week_start)},
        )


class UnknownChecklistItemError(PlannerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNKNOWN_CHECKLIST_ITEM"

    def __init__(self, item_id: str, mode: str):
        super().__init__(
            message=f"Item '{item_id}' is not part of the {mode} checklist.",
            details={"item_id": item_id, "mode": mode},
        )


class ChecklistDayClosedError(PlannerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "CHECKLIST_DAY_CLOSED"

    def __init__(self, day: date, today: date):
        super().__init__(
            message=f"Only today's checklist ({today}) can be changed, not {day}.",
            details={"day": str(day), "today": str(today)},
        )


class RoutineTaskNotFoundError(PlannerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ROUTINE_TASK_NOT_FOUND"

    def __init__(self, task_id: int):
        super().__init__(
            message=f"Routine task {task_id} does not exist.",
            details={"task_id": task_id},
        )


class RetryableStoreError(PlannerException):
    """Storage failure; the operation is keyed and safe to retry."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_UNAVAILABLE"

    def __init__(self, message: str, operation: str):
        super().__init__(
            message=message,
            details={"operation": operation, "retryable": True},
        )


class MissionStoreError(RetryableStoreError):
    code = "MISSION_STORE_UNAVAILABLE"


class CadenceStoreError(RetryableStoreError):
    code = "CADENCE_STORE_UNAVAILABLE"


class RoutineStoreError(RetryableStoreError):
    code = "ROUTINE_STORE_UNAVAILABLE"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def planner_exception_handler(request: Request, exc: PlannerException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
