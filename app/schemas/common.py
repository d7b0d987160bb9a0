"""
Error envelope documented on every router's error responses.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    code: str = Field(examples=["MISSION_NOT_FOUND"])
    message: str
    details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Machine-readable context; `retryable: true` on 503 store errors.",
    )
