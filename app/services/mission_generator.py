"""
Mission generator - (ModuleSignal, ProgressScore) → ordered mission list.

Rules
-----
RULES is an ordered table of MissionRule entries. Each rule names:
  key       stable mission identifier (becomes weekly_missions.mission_key)
  gap       the module-level gap it addresses; two rules sharing a gap
            never both survive
  module    one of MODULE_ORDER
  priority  urgent  - blocks meaningful use of a dependent module
            important - materially improves a module's score
            bonus   - polish, non-blocking
  condition callable(signal, score) -> bool

A rule never fires for a module that already scores 100.

Selection
---------
  1. Evaluate every rule.
  2. Sort by priority tier, then MODULE_ORDER, then table order.
  3. Drop later rules whose gap is already covered.
  4. Keep at most MAX_BONUS bonus missions.
  5. Truncate to mission_limit(weekly_time_minutes) (never above MAX_MISSIONS).

No clock, no randomness: the same input always yields the same keys in the
same order.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional

from app.services.progress_scorer import MODULE_ORDER, ProgressScore
from app.services.state_aggregator import ModuleSignal


class Priority(str, enum.Enum):
    urgent = "urgent"
    important = "important"
    bonus = "bonus"


PRIORITY_RANK = {Priority.urgent: 0, Priority.important: 1, Priority.bonus: 2}
MODULE_RANK = {m: i for i, m in enumerate(MODULE_ORDER)}

MAX_MISSIONS = 5
MAX_BONUS = 2


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MissionDefinition:
    key: str
    title: str
    description: str
    priority: str
    module: str
    route_hint: str
    estimated_minutes: int


Condition = Callable[[ModuleSignal, ProgressScore], bool]


@dataclass(frozen=True)
class MissionRule:
    key: str
    gap: str
    module: str
    priority: Priority
    condition: Condition
    title: str
    description: str
    route_hint: str
    estimated_minutes: int

    def applies(self, signal: ModuleSignal, score: ProgressScore) -> bool:
        if score[self.module] >= 100:
            return False
        return bool(self.condition(signal, score))

    def render(self, signal: ModuleSignal) -> MissionDefinition:
        values = _template_values(signal)
        return MissionDefinition(
            key=self.key,
            title=self.title.format_map(values),
            description=self.description.format_map(values),
            priority=self.priority.value,
            module=self.module,
            route_hint=self.route_hint,
            estimated_minutes=self.estimated_minutes,
        )


def _template_values(signal: ModuleSignal) -> dict:
    c = signal.content
    return {
        "persona_step": signal.branding.persona_step,
        "posts_this_week": c.posts_this_week,
        "posts_target": c.posts_target,
        "engagement_done": signal.engagement.done,
        "engagement_target": signal.engagement.target,
        "estimated_hours": round((c.editorial_estimated_minutes or 0) / 60),
        "budget_hours": round((c.editorial_budget_minutes or 0) / 60),
        "fields_filled": signal.site.fields_filled,
        "fields_total": signal.site.fields_total,
    }


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

def _rhythm_over_budget(s: ModuleSignal, _: ProgressScore) -> bool:
    estimated = s.content.editorial_estimated_minutes
    budget = s.content.editorial_budget_minutes
    return bool(estimated and budget and estimated > budget)


def _engagement_behind(s: ModuleSignal, _: ProgressScore) -> bool:
    e = s.engagement
    return e.target > 0 and e.done < e.target * 0.5


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

RULES: tuple[MissionRule, ...] = (
    # ── urgent ──
    MissionRule(
        key="complete_proposition",
        gap="branding.proposition",
        module="branding",
        priority=Priority.urgent,
        condition=lambda s, _: not s.branding.proposition_completed,
        title="Define your value proposition",
        description=(
            "Everything else rests on it: your bio, your site, your pitches. "
            "Without it, generated content can't be personalised."
        ),
        route_hint="/branding/proposition",
        estimated_minutes=15,
    ),
    MissionRule(
        key="start_persona",
        gap="branding.persona",
        module="branding",
        priority=Priority.urgent,
        condition=lambda s, _: not s.branding.persona_started,
        title="Start your persona",
        description=(
            "Who is your ideal client? Without that, your content talks to nobody. "
            "The content workshop and the website both depend on it."
        ),
        route_hint="/branding/persona",
        estimated_minutes=20,
    ),
    MissionRule(
        key="complete_persona",
        gap="branding.persona",
        module="branding",
        priority=Priority.urgent,
        condition=lambda s, _: s.branding.persona_started and not s.branding.persona_completed,
        title="Finish your persona (step {persona_step}/5)",
        description="You started but some steps are missing. Finish it to unlock personalised content.",
        route_hint="/branding/persona",
        estimated_minutes=15,
    ),
    MissionRule(
        key="complete_storytelling",
        gap="branding.storytelling",
        module="branding",
        priority=Priority.urgent,
        condition=lambda s, _: not s.branding.storytelling_completed,
        title="Write your story",
        description=(
            "Your story is your best connection tool. It feeds your homepage, "
            "your LinkedIn summary and your bio."
        ),
        route_hint="/branding/storytelling",
        estimated_minutes=25,
    ),
    MissionRule(
        key="plan_posts",
        gap="content.schedule",
        module="content",
        priority=Priority.urgent,
        condition=lambda _, sc: sc["content"] == 0,
        title="Schedule at least {posts_target} posts this week",
        description="Nothing is scheduled this week. Open the calendar and place your content. One beats zero.",
        route_hint="/calendar",
        estimated_minutes=15,
    ),
    # ── important ──
    MissionRule(
        key="optimize_bio",
        gap="profile.bio",
        module="profile",
        priority=Priority.important,
        condition=lambda s, _: s.branding.proposition_completed and not s.profile.has_bio,
        title="Rewrite your profile bio",
        description="Your value proposition is ready but your bio doesn't show it yet. It's your shop window.",
        route_hint="/profile/bio",
        estimated_minutes=15,
    ),
    MissionRule(
        key="create_highlights",
        gap="profile.highlights",
        module="profile",
        priority=Priority.important,
        condition=lambda s, _: s.profile.highlights_count == 0,
        title="Create your story highlights",
        description="It's the first thing a visitor looks at. Structure your highlights like a mini website.",
        route_hint="/profile/highlights",
        estimated_minutes=20,
    ),
    MissionRule(
        key="optimize_linkedin_title",
        gap="profile.linkedin_title",
        module="profile",
        priority=Priority.important,
        condition=lambda s, _: s.profile.has_linkedin and not s.profile.linkedin_title_done,
        title="Sharpen your LinkedIn headline",
        description="It's what people see first. A good headline means more profile visits.",
        route_hint="/linkedin/profile",
        estimated_minutes=10,
    ),
    MissionRule(
        key="setup_pinterest",
        gap="profile.pinterest",
        module="profile",
        priority=Priority.important,
        condition=lambda s, _: s.profile.has_pinterest and not s.profile.pinterest_pro_account_done,
        title="Set up your Pinterest account",
        description="Switch to a business account, tidy your profile and start attracting lasting traffic.",
        route_hint="/pinterest/account",
        estimated_minutes=15,
    ),
    MissionRule(
        key="catch_up_posts",
        gap="content.schedule",
        module="content",
        priority=Priority.important,
        condition=lambda s, _: 0 < s.content.posts_this_week < s.content.posts_target,
        title="Schedule the rest of this week's posts",
        description="You're at {posts_this_week}/{posts_target} posts this week. Fill the remaining slots.",
        route_hint="/calendar",
        estimated_minutes=15,
    ),
    MissionRule(
        key="create_editorial_line",
        gap="content.editorial_line",
        module="content",
        priority=Priority.important,
        condition=lambda s, _: not s.content.has_editorial_line,
        title="Define your editorial line",
        description="Pick your rhythm, formats and pillars so content creation has a structure.",
        route_hint="/content/editorial-line",
        estimated_minutes=15,
    ),
    MissionRule(
        key="adjust_rhythm",
        gap="content.editorial_line",
        module="content",
        priority=Priority.important,
        condition=_rhythm_over_budget,
        title="Your rhythm exceeds your available time",
        description=(
            "You estimated ~{estimated_hours}h/week but only have ~{budget_hours}h. "
            "Adjust your editorial line to a sustainable pace."
        ),
        route_hint="/content/editorial-line",
        estimated_minutes=10,
    ),
    MissionRule(
        key="generate_ideas",
        gap="content.ideas",
        module="content",
        priority=Priority.important,
        condition=lambda s, _: s.content.ideas_count == 0,
        title="Generate ideas in the workshop",
        description="Your idea box is empty. The workshop suggests personalised topics in two clicks.",
        route_hint="/workshop",
        estimated_minutes=10,
    ),
    MissionRule(
        key="boost_engagement",
        gap="engagement.interactions",
        module="engagement",
        priority=Priority.important,
        condition=_engagement_behind,
        title="Restart your engagement",
        description=(
            "You're at {engagement_done}/{engagement_target} interactions. Comment, reply to "
            "stories, send DMs: that's what grows your community."
        ),
        route_hint="/engagement/routine",
        estimated_minutes=15,
    ),
    MissionRule(
        key="start_homepage",
        gap="site.homepage",
        module="site",
        priority=Priority.important,
        condition=lambda s, _: not s.site.homepage_completed,
        title="Write your homepage",
        description="The homepage is the heart of your site. Draft it block by block.",
        route_hint="/site/home",
        estimated_minutes=30,
    ),
    # ── bonus ──
    MissionRule(
        key="complete_strategy",
        gap="branding.strategy",
        module="branding",
        priority=Priority.bonus,
        condition=lambda s, _: not s.branding.strategy_completed,
        title="Lay out your content strategy",
        description="Define your pillars, facets and creative concept so you never run out of ideas.",
        route_hint="/branding/strategy",
        estimated_minutes=20,
    ),
    MissionRule(
        key="define_tone",
        gap="branding.tone",
        module="branding",
        priority=Priority.bonus,
        condition=lambda s, _: s.branding.has_brand_profile and not s.branding.tone_register_set,
        title="Refine your tone and style",
        description="How you speak is what makes you unique. Define your register so generated text sounds like you.",
        route_hint="/branding/tone",
        estimated_minutes=15,
    ),
    MissionRule(
        key="define_combats",
        gap="branding.combats",
        module="branding",
        priority=Priority.bonus,
        condition=lambda s, _: s.branding.has_brand_profile and not s.branding.combat_cause_set,
        title="Name what you stand for",
        description="What you defend and what you refuse. It polarises and attracts the right people.",
        route_hint="/branding/tone",
        estimated_minutes=10,
    ),
    MissionRule(
        key="write_linkedin_summary",
        gap="profile.linkedin_summary",
        module="profile",
        priority=Priority.bonus,
        condition=lambda s, _: s.profile.has_linkedin and not s.profile.linkedin_summary_done,
        title="Write your LinkedIn summary",
        description="Your storytelling space on LinkedIn. Tell who you are in 2600 characters.",
        route_hint="/linkedin/summary",
        estimated_minutes=20,
    ),
    MissionRule(
        key="polish_homepage",
        gap="site.homepage",
        module="site",
        priority=Priority.bonus,
        condition=lambda s, _: s.site.has_homepage and s.site.fields_filled < s.site.fields_total,
        title="Polish your homepage ({fields_filled}/{fields_total} blocks)",
        description="A few blocks are still empty. Fill them so every visitor reaches your call to action.",
        route_hint="/site/home",
        estimated_minutes=20,
    ),
)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def mission_limit(weekly_time_minutes: Optional[int]) -> int:
    """How many missions fit the user's declared weekly time."""
    if not weekly_time_minutes or weekly_time_minutes < 120:
        return 3
    if weekly_time_minutes <= 240:
        return 4
    return MAX_MISSIONS


def triggered_rules(signal: ModuleSignal, score: ProgressScore) -> list[MissionRule]:
    """Rules whose condition holds, in selection order (before dedup and caps)."""
    hits = [
        (index, rule) for index, rule in enumerate(RULES)
        if rule.applies(signal, score)
    ]
    hits.sort(key=lambda item: (
        PRIORITY_RANK[item[1].priority],
        MODULE_RANK[item[1].module],
        item[0],
    ))
    return [rule for _, rule in hits]


def generate(
    signal: ModuleSignal,
    score: ProgressScore,
    limit: Optional[int] = None,
) -> list[MissionDefinition]:
    """Ordered, deduplicated, bounded list of missions for this state."""
    for module in MODULE_ORDER:
        if not 0 <= score[module] <= 100:
            raise ValueError(f"{module} score {score[module]} outside 0..100")

    cap = mission_limit(signal.weekly_time_minutes) if limit is None else limit
    cap = max(0, min(cap, MAX_MISSIONS))

    selected: list[MissionRule] = []
    covered: set[str] = set()
    bonus_count = 0
    for rule in triggered_rules(signal, score):
        if len(selected) >= cap:
            break
        if rule.gap in covered:
            continue
        if rule.priority is Priority.bonus:
            if bonus_count >= MAX_BONUS:
                continue
            bonus_count += 1
        covered.add(rule.gap)
        selected.append(rule)

    return [rule.render(signal) for rule in selected]
