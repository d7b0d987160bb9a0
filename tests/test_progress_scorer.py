"""
Tests for the progress scorer (pure, no DB).
"""
import pytest

from app.services.progress_scorer import (
    MODULE_ORDER,
    ProgressScore,
    module_scores,
    score,
    weighted_global,
)
from app.services.state_aggregator import (
    BrandingSignal,
    ContentSignal,
    EngagementSignal,
    ModuleSignal,
    ProfileSignal,
    SiteSignal,
)


def _full_signal() -> ModuleSignal:
    return ModuleSignal(
        branding=BrandingSignal(
            storytelling=100, persona=100, proposition=100, tone=100,
            strategy=100, offers=100, charter=100,
        ),
        profile=ProfileSignal(has_bio=True, highlights_count=3),
        content=ContentSignal(posts_this_week=2, posts_target=2),
        engagement=EngagementSignal(done=10, target=10),
        site=SiteSignal(has_homepage=True, fields_filled=7, fields_total=7),
    )


class TestModuleScores:
    def test_empty_signal_scores_zero(self):
        result = score(ModuleSignal())
        assert result.as_dict() == {m: 0 for m in (*MODULE_ORDER, "global")}

    def test_full_signal_scores_hundred(self):
        result = score(_full_signal())
        assert all(result[m] == 100 for m in MODULE_ORDER)
        assert result.global_score == 100

    def test_branding_is_mean_of_sections(self):
        signal = ModuleSignal(branding=BrandingSignal(storytelling=100, persona=50))
        # (100 + 50) / 7 = 21.43
        assert module_scores(signal)["branding"] == 21

    def test_profile_checks_optional_channels(self):
        p = ProfileSignal(has_bio=True, highlights_count=0)
        assert module_scores(ModuleSignal(profile=p))["profile"] == 50
        p = ProfileSignal(has_bio=True, highlights_count=1, has_linkedin=True)
        assert module_scores(ModuleSignal(profile=p))["profile"] == 67
        p = ProfileSignal(
            has_bio=True, highlights_count=1,
            has_linkedin=True, linkedin_title_done=True,
            has_pinterest=True, pinterest_pro_account_done=False,
        )
        assert module_scores(ModuleSignal(profile=p))["profile"] == 75

    def test_content_caps_at_target(self):
        c = ContentSignal(posts_this_week=5, posts_target=2)
        assert module_scores(ModuleSignal(content=c))["content"] == 100
        c = ContentSignal(posts_this_week=1, posts_target=3)
        assert module_scores(ModuleSignal(content=c))["content"] == 33

    def test_zero_target_scores_zero(self):
        signal = ModuleSignal(
            content=ContentSignal(posts_this_week=4, posts_target=0),
            engagement=EngagementSignal(done=9, target=0),
        )
        scores = module_scores(signal)
        assert scores["content"] == 0
        assert scores["engagement"] == 0

    def test_modules_are_independent(self):
        base = score(ModuleSignal())
        moved = score(ModuleSignal(engagement=EngagementSignal(done=5, target=10)))
        assert moved["engagement"] == 50
        for m in MODULE_ORDER:
            if m != "engagement":
                assert moved[m] == base[m]


class TestGlobal:
    def test_equal_weights_mean(self):
        modules = {"branding": 100, "profile": 40, "content": 0, "engagement": 0, "site": 20}
        assert ProgressScore.from_modules(modules).global_score == 32

    def test_half_up_rounding(self):
        modules = {"branding": 1, "profile": 1, "content": 0, "engagement": 0, "site": 0}
        # 2 / 5 = 0.4
        assert ProgressScore.from_modules(modules).global_score == 0
        weights = {"branding": 1, "profile": 1, "content": 0, "engagement": 0, "site": 0}
        modules = {"branding": 2, "profile": 3, "content": 0, "engagement": 0, "site": 0}
        # 5 / 2 = 2.5
        assert weighted_global(modules, weights) == 3

    def test_custom_weights(self):
        weights = {"branding": 3, "profile": 1, "content": 0, "engagement": 0, "site": 0}
        result = score(_full_signal(), weights=weights)
        assert result.global_score == 100

    def test_weights_must_cover_every_module(self):
        with pytest.raises(ValueError):
            score(ModuleSignal(), weights={"branding": 1})

    def test_weights_must_have_positive_sum(self):
        with pytest.raises(ValueError):
            score(ModuleSignal(), weights={m: 0 for m in MODULE_ORDER})


class TestValidation:
    def test_section_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            score(ModuleSignal(branding=BrandingSignal(tone=120)))

    def test_negative_counter_rejected(self):
        with pytest.raises(ValueError):
            score(ModuleSignal(content=ContentSignal(posts_this_week=-1)))

    def test_site_fields_overflow_rejected(self):
        with pytest.raises(ValueError):
            score(ModuleSignal(site=SiteSignal(fields_filled=8, fields_total=7)))

    def test_from_modules_rejects_unknown_module(self):
        with pytest.raises(ValueError):
            ProgressScore.from_modules({"website": 10})
