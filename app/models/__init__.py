from .branding import (
    BrandProposition,
    Persona,
    Storytelling,
    BrandProfile,
    BrandStrategy,
    Offer,
    BrandCharter,
)
from .channels import InstagramHighlight, LinkedinProfile, PinterestProfile
from .content import CalendarPost, SavedIdea, EditorialLine, UserRhythm
from .engagement import EngagementWeekly, EngagementChecklistLog, EngagementStreak
from .website import WebsiteHomepage
from .mission import WeeklyMission
from .routine import RoutineTask, RoutineCompletion, RoutinePeriod

__all__ = [
    "BrandProposition",
    "Persona",
    "Storytelling",
    "BrandProfile",
    "BrandStrategy",
    "Offer",
    "BrandCharter",
    "InstagramHighlight",
    "LinkedinProfile",
    "PinterestProfile",
    "CalendarPost",
    "SavedIdea",
    "EditorialLine",
    "UserRhythm",
    "EngagementWeekly",
    "EngagementChecklistLog",
    "EngagementStreak",
    "WebsiteHomepage",
    "WeeklyMission",
    "RoutineTask",
    "RoutineCompletion",
    "RoutinePeriod",
]
