"""
State aggregator - one typed completion signal per module.

Reads the collaborator tables for one owner and folds them into a
ModuleSignal. This is the only place that decides what "filled" means;
the scorer and the mission generator never look at raw records.

Failure policy
--------------
A read that raises SQLAlchemyError is logged, its table name is recorded in
`ModuleSignal.unreadable`, and the record is treated as absent. The caller
never sees the error: "not started" and "could not be read" score the same.

Public API
----------
fetch_state(db, ctx, day)          -> ModuleSignal
branding_completion(records)       -> BrandingSignal   (pure)
percent(part, whole)               -> int              (half-up, clamped)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.branding import (
    BrandCharter,
    BrandProfile,
    BrandProposition,
    BrandStrategy,
    Offer,
    Persona,
    Storytelling,
)
from app.models.channels import InstagramHighlight, LinkedinProfile, PinterestProfile
from app.models.content import CalendarPost, EditorialLine, SavedIdea, UserRhythm
from app.models.engagement import EngagementWeekly
from app.models.website import WebsiteHomepage
from app.services import calendar
from app.services.context import PlannerContext, owned_by

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Signal types (plain dataclasses - no ORM, no Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class BrandingSignal:
    # Section completion, 0..100 each
    storytelling: int = 0
    persona: int = 0
    proposition: int = 0
    tone: int = 0
    strategy: int = 0
    offers: int = 0
    charter: int = 0
    # Leaf flags used by mission rules
    proposition_completed: bool = False
    persona_started: bool = False
    persona_completed: bool = False
    persona_step: int = 1
    storytelling_completed: bool = False
    strategy_completed: bool = False
    has_brand_profile: bool = False
    tone_register_set: bool = False
    combat_cause_set: bool = False

    @property
    def sections(self) -> dict[str, int]:
        return {
            "storytelling": self.storytelling,
            "persona": self.persona,
            "proposition": self.proposition,
            "tone": self.tone,
            "strategy": self.strategy,
            "offers": self.offers,
            "charter": self.charter,
        }

    @property
    def total(self) -> int:
        values = self.sections.values()
        return percent(sum(values), 100 * len(values))


@dataclass
class ProfileSignal:
    has_bio: bool = False
    highlights_count: int = 0
    has_linkedin: bool = False
    linkedin_title_done: bool = False
    linkedin_summary_done: bool = False
    has_pinterest: bool = False
    pinterest_pro_account_done: bool = False


@dataclass
class ContentSignal:
    posts_this_week: int = 0
    posts_target: int = 2
    ideas_count: int = 0
    has_editorial_line: bool = False
    editorial_estimated_minutes: Optional[int] = None
    editorial_budget_minutes: Optional[int] = None


@dataclass
class EngagementSignal:
    done: int = 0
    target: int = 10


@dataclass
class SiteSignal:
    has_homepage: bool = False
    homepage_completed: bool = False
    fields_filled: int = 0
    fields_total: int = 7


@dataclass
class ModuleSignal:
    branding: BrandingSignal = field(default_factory=BrandingSignal)
    profile: ProfileSignal = field(default_factory=ProfileSignal)
    content: ContentSignal = field(default_factory=ContentSignal)
    engagement: EngagementSignal = field(default_factory=EngagementSignal)
    site: SiteSignal = field(default_factory=SiteSignal)
    weekly_time_minutes: Optional[int] = None
    # Tables whose read failed and were folded to "absent"
    unreadable: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Tiny utilities
# ---------------------------------------------------------------------------

HOMEPAGE_FIELDS = (
    "hook_title",
    "hook_subtitle",
    "problem_block",
    "presentation_block",
    "offer_block",
    "benefits_block",
    "cta_primary",
)

POSTS_FREQUENCY_TARGETS = {
    "1x/week": 1,
    "2x/week": 2,
    "3x/week": 3,
    "4-5x/week": 5,
}

_CHARTER_DEFAULT_COLORS = {
    "color_primary": "#E91E8C",
    "color_secondary": "#1A1A2E",
    "color_accent": "#FFE561",
}
_CHARTER_DEFAULT_FONT = "Inter"
_BIO_MIN_LENGTH = 10


def percent(part: float, whole: float) -> int:
    """part/whole as an integer percentage, rounded half-up, clamped to [0, 100]."""
    if whole <= 0:
        return 0
    raw = Decimal(str(part)) * 100 / Decimal(str(whole))
    value = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, value))


def filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def _jload(text: Optional[str]) -> list:
    if not text:
        return []
    try:
        result = json.loads(text)
        return result if isinstance(result, list) else []
    except (ValueError, TypeError):
        return []


def _field(record: Any, name: str) -> Any:
    return getattr(record, name, None) if record is not None else None


# ---------------------------------------------------------------------------
# Branding - pure
# ---------------------------------------------------------------------------

@dataclass
class BrandingRecords:
    """Raw branding rows for one owner; any of them may be missing."""
    stories: list = field(default_factory=list)
    persona: Any = None
    proposition: Any = None
    brand_profile: Any = None
    strategy: Any = None
    offers: list = field(default_factory=list)
    charter: Any = None


def _persona_score(per: Any) -> int:
    steps = [
        _field(per, "frustrations"),
        _field(per, "transformation"),
        _field(per, "objections"),
        _field(per, "dream_outcome"),
        _field(per, "actions"),
    ]
    done = sum(1 for s in steps if filled(s))
    if done > 0:
        return percent(done, len(steps))
    # A free-text description alone counts as half a persona
    if filled(_field(per, "description")):
        return 50
    return 0


def _proposition_score(prop: Any) -> int:
    checks = [
        _field(prop, "what_you_do"),
        _field(prop, "process") or _field(prop, "values"),
        _field(prop, "for_whom"),
        _field(prop, "version_final") or _field(prop, "version_pitch"),
    ]
    return percent(sum(1 for c in checks if filled(c)), len(checks))


def _tone_score(bp: Any) -> int:
    if bp is None:
        return 0
    chips = [bp.tone_register, bp.tone_level, bp.tone_style, bp.tone_humor, bp.tone_engagement]
    groups = [
        filled(bp.voice_description),
        filled(bp.combat_cause) or filled(bp.combat_fights),
        any(filled(c) for c in chips),
        filled(bp.key_expressions),
        filled(bp.things_to_avoid),
        filled(bp.target_verbatims),
        filled(bp.channels),
    ]
    return percent(sum(groups), len(groups))


def _strategy_score(st: Any) -> int:
    checks = [
        _field(st, "facet_1") or _field(st, "hidden_facets"),
        _field(st, "pillar_major"),
        _field(st, "creative_concept"),
    ]
    return percent(sum(1 for c in checks if filled(c)), len(checks))


def _offers_score(offers: list) -> int:
    complete = [
        o for o in offers
        if filled(o.name) and (filled(o.promise) or filled(o.price_text))
    ]
    if complete:
        return 100
    return 50 if offers else 0


def _charter_score(ch: Any) -> int:
    """Weighted checklist: logo 20, colours 25, fonts 20, mood 20, photo style 15."""
    if ch is None:
        return 0
    score = 0
    if filled(ch.logo_url):
        score += 20
    changed_colors = sum(
        1 for attr, default in _CHARTER_DEFAULT_COLORS.items()
        if filled(getattr(ch, attr)) and getattr(ch, attr) != default
    )
    if changed_colors == len(_CHARTER_DEFAULT_COLORS):
        score += 25
    if (
        filled(ch.font_title) and ch.font_title != _CHARTER_DEFAULT_FONT
        and filled(ch.font_body) and ch.font_body != _CHARTER_DEFAULT_FONT
    ):
        score += 20
    if len(_jload(ch.mood_keywords)) >= 3:
        score += 20
    if filled(ch.photo_style):
        score += 15
    return score


def branding_completion(records: BrandingRecords) -> BrandingSignal:
    """Fold raw branding rows into section scores and rule flags."""
    per = records.persona
    bp = records.brand_profile
    primary = next((s for s in records.stories if s.is_primary), None)

    return BrandingSignal(
        storytelling=100 if records.stories else 0,
        persona=_persona_score(per),
        proposition=_proposition_score(records.proposition),
        tone=_tone_score(bp),
        strategy=_strategy_score(records.strategy),
        offers=_offers_score(records.offers),
        charter=_charter_score(records.charter),
        proposition_completed=bool(_field(records.proposition, "completed")),
        persona_started=per is not None,
        persona_completed=bool(_field(per, "completed")),
        persona_step=_field(per, "current_step") or 1,
        storytelling_completed=bool(primary is not None and primary.completed),
        strategy_completed=bool(_field(records.strategy, "completed")),
        has_brand_profile=bp is not None,
        tone_register_set=filled(_field(bp, "tone_register")),
        combat_cause_set=filled(_field(bp, "combat_cause")),
    )


# ---------------------------------------------------------------------------
# Guarded reads
# ---------------------------------------------------------------------------

class _SafeReader:
    """
    Runs owner-scoped queries and absorbs storage errors.
    Every failure rolls the session back so later reads still work.
    """

    def __init__(self, db: Session, ctx: PlannerContext):
        self.db = db
        self.ctx = ctx
        self.unreadable: list[str] = []

    def _failed(self, model: Any, exc: SQLAlchemyError) -> None:
        table = model.__tablename__
        logger.warning(
            "Read of %s failed for user=%s workspace=%s; treating as absent: %s",
            table, self.ctx.user_id, self.ctx.workspace_id, exc,
        )
        if table not in self.unreadable:
            self.unreadable.append(table)
        self.db.rollback()

    def first(self, model: Any, *criteria: Any, newest: bool = False) -> Any:
        try:
            q = self.db.query(model).filter(owned_by(model, self.ctx), *criteria)
            if newest:
                q = q.order_by(model.created_at.desc(), model.id.desc())
            return q.first()
        except SQLAlchemyError as exc:
            self._failed(model, exc)
            return None

    def all(self, model: Any, *criteria: Any) -> list:
        try:
            return (
                self.db.query(model)
                .filter(owned_by(model, self.ctx), *criteria)
                .order_by(model.id)
                .all()
            )
        except SQLAlchemyError as exc:
            self._failed(model, exc)
            return []

    def count(self, model: Any, *criteria: Any) -> int:
        try:
            return (
                self.db.query(func.count(model.id))
                .filter(owned_by(model, self.ctx), *criteria)
                .scalar()
                or 0
            )
        except SQLAlchemyError as exc:
            self._failed(model, exc)
            return 0


# ---------------------------------------------------------------------------
# Per-module folding
# ---------------------------------------------------------------------------

def _posts_target(edito: Any, rhythm: Any) -> int:
    freq = _field(edito, "posts_frequency")
    if freq in POSTS_FREQUENCY_TARGETS:
        return POSTS_FREQUENCY_TARGETS[freq]
    per_week = _field(rhythm, "posts_per_week")
    if per_week:
        return int(per_week)
    return settings.POSTS_DEFAULT_TARGET


def _profile_signal(reader: _SafeReader, bp: Any) -> ProfileSignal:
    voice = _field(bp, "voice_description")
    linkedin = reader.first(LinkedinProfile, newest=True)
    pinterest = reader.first(PinterestProfile, newest=True)
    return ProfileSignal(
        has_bio=bool(voice and len(voice.strip()) > _BIO_MIN_LENGTH),
        highlights_count=reader.count(
            InstagramHighlight, InstagramHighlight.is_selected.is_(True)
        ),
        has_linkedin=linkedin is not None,
        linkedin_title_done=bool(_field(linkedin, "title_done")),
        linkedin_summary_done=filled(_field(linkedin, "summary_final")),
        has_pinterest=pinterest is not None,
        pinterest_pro_account_done=bool(_field(pinterest, "pro_account_done")),
    )


def _content_signal(
    reader: _SafeReader, monday: date, edito: Any, rhythm: Any
) -> ContentSignal:
    sunday = monday + timedelta(days=6)
    return ContentSignal(
        posts_this_week=reader.count(
            CalendarPost, CalendarPost.day >= monday, CalendarPost.day <= sunday
        ),
        posts_target=_posts_target(edito, rhythm),
        ideas_count=reader.count(SavedIdea),
        has_editorial_line=edito is not None,
        editorial_estimated_minutes=_field(edito, "estimated_weekly_minutes"),
        editorial_budget_minutes=_field(edito, "time_budget_minutes"),
    )


def _engagement_signal(reader: _SafeReader, monday: date) -> EngagementSignal:
    weekly = reader.first(EngagementWeekly, EngagementWeekly.week_start == monday)
    if weekly is None:
        return EngagementSignal(done=0, target=settings.ENGAGEMENT_DEFAULT_TARGET)
    return EngagementSignal(
        done=weekly.total_done or 0,
        target=weekly.objective or settings.ENGAGEMENT_DEFAULT_TARGET,
    )


def _site_signal(reader: _SafeReader) -> SiteSignal:
    home = reader.first(WebsiteHomepage, newest=True)
    return SiteSignal(
        has_homepage=home is not None,
        homepage_completed=bool(_field(home, "completed")),
        fields_filled=sum(1 for f in HOMEPAGE_FIELDS if filled(_field(home, f))),
        fields_total=len(HOMEPAGE_FIELDS),
    )


# ---------------------------------------------------------------------------
# Public - main entry point
# ---------------------------------------------------------------------------

def fetch_state(
    db: Session,
    ctx: PlannerContext,
    day: Optional[date] = None,
) -> ModuleSignal:
    """
    Build the ModuleSignal for `ctx` as of `day` (defaults to today in the
    planner time zone). Week-bound counters use the Monday of that day.
    Never raises on storage errors; see module docstring.
    """
    target = day or calendar.today()
    monday = calendar.week_start(target)
    reader = _SafeReader(db, ctx)

    brand_profile = reader.first(BrandProfile, newest=True)
    records = BrandingRecords(
        stories=reader.all(Storytelling),
        persona=reader.first(Persona, newest=True),
        proposition=reader.first(BrandProposition, newest=True),
        brand_profile=brand_profile,
        strategy=reader.first(BrandStrategy, newest=True),
        offers=reader.all(Offer),
        charter=reader.first(BrandCharter, newest=True),
    )
    edito = reader.first(EditorialLine, newest=True)
    rhythm = reader.first(UserRhythm, newest=True)

    signal = ModuleSignal(
        branding=branding_completion(records),
        profile=_profile_signal(reader, brand_profile),
        content=_content_signal(reader, monday, edito, rhythm),
        engagement=_engagement_signal(reader, monday),
        site=_site_signal(reader),
        weekly_time_minutes=_field(rhythm, "time_available_weekly"),
    )
    signal.unreadable = list(reader.unreadable)
    return signal
