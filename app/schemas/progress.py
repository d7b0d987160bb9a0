"""
Progress schemas.

GET /progress → ProgressResponse
"""
from pydantic import BaseModel, Field


class ModuleScores(BaseModel):
    branding: int = Field(ge=0, le=100)
    profile: int = Field(ge=0, le=100)
    content: int = Field(ge=0, le=100)
    engagement: int = Field(ge=0, le=100)
    site: int = Field(ge=0, le=100)


class ProgressResponse(BaseModel):
    """Per-module completion plus the weighted global score."""

    reference_date: str = Field(description="Day the signals were read for (ISO date).")
    modules: ModuleScores
    global_score: int = Field(
        ge=0, le=100, description="Weighted mean of the module scores.", examples=[42],
    )
    branding_sections: dict[str, int] = Field(
        description="Breakdown of the branding score by section.",
    )
    unreadable: list[str] = Field(
        default_factory=list,
        description=(
            "Collaborator tables that could not be read. They were scored as "
            "empty; a non-empty list means the scores may be understated."
        ),
    )
