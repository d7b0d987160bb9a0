"""
Tests for the mission generator (pure, no DB).
"""
import pytest

from app.services.mission_generator import (
    MAX_BONUS,
    RULES,
    generate,
    mission_limit,
    triggered_rules,
)
from app.services.progress_scorer import MODULE_ORDER, ProgressScore, score
from app.services.state_aggregator import (
    BrandingSignal,
    ContentSignal,
    EngagementSignal,
    ModuleSignal,
    ProfileSignal,
    SiteSignal,
)


def _keys(missions) -> list[str]:
    return [m.key for m in missions]


def _branding_done_flags(**overrides) -> BrandingSignal:
    flags = dict(
        proposition_completed=True,
        persona_started=True,
        persona_completed=True,
        storytelling_completed=True,
        strategy_completed=True,
        has_brand_profile=True,
        tone_register_set=True,
        combat_cause_set=True,
    )
    flags.update(overrides)
    return BrandingSignal(**flags)


def _settled_content() -> ContentSignal:
    return ContentSignal(posts_this_week=2, posts_target=2, ideas_count=4, has_editorial_line=True)


class TestRuleTable:
    def test_keys_are_unique(self):
        keys = [r.key for r in RULES]
        assert len(keys) == len(set(keys))

    def test_every_rule_names_a_known_module(self):
        assert all(r.module in MODULE_ORDER for r in RULES)


class TestMissionLimit:
    @pytest.mark.parametrize("minutes,expected", [
        (None, 3), (0, 3), (119, 3), (120, 4), (240, 4), (241, 5), (900, 5),
    ])
    def test_limit_by_weekly_time(self, minutes, expected):
        assert mission_limit(minutes) == expected


class TestGenerate:
    def test_fresh_user_gets_urgent_foundations(self):
        signal = ModuleSignal()
        missions = generate(signal, score(signal))
        assert _keys(missions) == ["complete_proposition", "start_persona", "complete_storytelling"]
        assert all(m.priority == "urgent" for m in missions)

    def test_more_time_means_more_missions(self):
        signal = ModuleSignal(weekly_time_minutes=300)
        missions = generate(signal, score(signal))
        assert _keys(missions) == [
            "complete_proposition",
            "start_persona",
            "complete_storytelling",
            "plan_posts",
            "create_highlights",
        ]

    def test_deterministic(self):
        signal = ModuleSignal(weekly_time_minutes=200)
        assert generate(signal, score(signal)) == generate(signal, score(signal))

    def test_everything_done_yields_nothing(self):
        signal = ModuleSignal(
            branding=BrandingSignal(
                storytelling=100, persona=100, proposition=100, tone=100,
                strategy=100, offers=100, charter=100,
            ),
            profile=ProfileSignal(has_bio=True, highlights_count=2),
            content=_settled_content(),
            engagement=EngagementSignal(done=10, target=10),
            site=SiteSignal(has_homepage=True, homepage_completed=True, fields_filled=7),
            weekly_time_minutes=600,
        )
        assert generate(signal, score(signal)) == []

    def test_module_at_hundred_contributes_nothing(self):
        signal = ModuleSignal(weekly_time_minutes=600)
        full_branding = ProgressScore.from_modules(
            {"branding": 100, "profile": 0, "content": 0, "engagement": 0, "site": 0}
        )
        missions = generate(signal, full_branding)
        assert "branding" not in {m.module for m in missions}

    def test_urgent_content_precedes_bonus_site(self):
        signal = ModuleSignal(
            branding=_branding_done_flags(),
            profile=ProfileSignal(has_bio=True, highlights_count=1),
            content=ContentSignal(posts_this_week=0, ideas_count=3, has_editorial_line=True),
            engagement=EngagementSignal(done=10, target=10),
            site=SiteSignal(has_homepage=True, homepage_completed=True, fields_filled=3),
            weekly_time_minutes=300,
        )
        scores = ProgressScore.from_modules(
            {"branding": 100, "profile": 40, "content": 0, "engagement": 0, "site": 20}
        )
        keys = _keys(generate(signal, scores))
        assert keys == ["plan_posts", "polish_homepage"]
        assert keys.index("plan_posts") < keys.index("polish_homepage")

    def test_one_mission_per_gap(self):
        signal = ModuleSignal(
            branding=_branding_done_flags(),
            profile=ProfileSignal(has_bio=True, highlights_count=1),
            content=ContentSignal(
                posts_this_week=1, posts_target=2, ideas_count=1,
                has_editorial_line=False,
                editorial_estimated_minutes=600, editorial_budget_minutes=120,
            ),
            engagement=EngagementSignal(done=10, target=10),
            site=SiteSignal(has_homepage=True, fields_filled=2),
            weekly_time_minutes=600,
        )
        sc = score(signal)
        triggered = [r.key for r in triggered_rules(signal, sc)]
        assert "adjust_rhythm" in triggered and "polish_homepage" in triggered

        keys = _keys(generate(signal, sc))
        assert "create_editorial_line" in keys and "adjust_rhythm" not in keys
        assert "start_homepage" in keys and "polish_homepage" not in keys

    def test_bonus_cap(self):
        signal = ModuleSignal(
            branding=_branding_done_flags(
                strategy_completed=False, tone_register_set=False, combat_cause_set=False,
            ),
            profile=ProfileSignal(has_bio=True, highlights_count=1),
            content=_settled_content(),
            engagement=EngagementSignal(done=10, target=10),
            site=SiteSignal(has_homepage=True, homepage_completed=True, fields_filled=7),
            weekly_time_minutes=600,
        )
        missions = generate(signal, score(signal))
        assert _keys(missions) == ["complete_strategy", "define_tone"]
        assert sum(1 for m in missions if m.priority == "bonus") == MAX_BONUS

    def test_explicit_limit(self):
        signal = ModuleSignal(weekly_time_minutes=600)
        assert len(generate(signal, score(signal), limit=1)) == 1
        assert generate(signal, score(signal), limit=0) == []

    def test_titles_are_rendered(self):
        signal = ModuleSignal(
            branding=_branding_done_flags(persona_completed=False, persona_step=3),
        )
        missions = generate(signal, score(signal))
        persona = next(m for m in missions if m.key == "complete_persona")
        assert persona.title == "Finish your persona (step 3/5)"
        assert persona.route_hint == "/branding/persona"

    def test_out_of_range_score_rejected(self):
        bad = ProgressScore(
            modules={"branding": 140, "profile": 0, "content": 0, "engagement": 0, "site": 0},
            global_score=28,
        )
        with pytest.raises(ValueError):
            generate(ModuleSignal(), bad)
