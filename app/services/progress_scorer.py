"""
Progress scorer - ModuleSignal → ProgressScore.

Pure and total over well-formed signals. Each module is scored from its own
sub-signal only, so changing one module never moves another module's score.
The global score is the weighted mean of the module scores using
MODULE_WEIGHTS (equal weights unless the caller passes its own table).

Malformed input (negative counters, section percentages outside 0..100,
unusable weights) raises ValueError: that is a programmer error, not data.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Mapping, Optional

from app.services.state_aggregator import ModuleSignal, percent


# Upstream first: a module may depend on the ones listed before it.
MODULE_ORDER: tuple[str, ...] = ("branding", "profile", "content", "engagement", "site")

MODULE_WEIGHTS: Mapping[str, float] = MappingProxyType({m: 1.0 for m in MODULE_ORDER})


@dataclass(frozen=True)
class ProgressScore:
    modules: Mapping[str, int]
    global_score: int

    def __getitem__(self, module: str) -> int:
        return self.modules[module]

    def as_dict(self) -> dict[str, int]:
        payload = dict(self.modules)
        payload["global"] = self.global_score
        return payload

    @classmethod
    def from_modules(
        cls,
        modules: Mapping[str, int],
        weights: Optional[Mapping[str, float]] = None,
    ) -> "ProgressScore":
        """Build a score from already-computed module percentages."""
        for module, value in modules.items():
            if module not in MODULE_ORDER:
                raise ValueError(f"unknown module {module!r}")
            if not 0 <= value <= 100:
                raise ValueError(f"{module} score {value} outside 0..100")
        full = {m: int(modules.get(m, 0)) for m in MODULE_ORDER}
        return cls(
            modules=MappingProxyType(full),
            global_score=weighted_global(full, weights or MODULE_WEIGHTS),
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_signal(signal: ModuleSignal) -> None:
    for name, value in signal.branding.sections.items():
        if not 0 <= value <= 100:
            raise ValueError(f"branding.{name} = {value} outside 0..100")
    counters = {
        "profile.highlights_count": signal.profile.highlights_count,
        "content.posts_this_week": signal.content.posts_this_week,
        "content.posts_target": signal.content.posts_target,
        "content.ideas_count": signal.content.ideas_count,
        "engagement.done": signal.engagement.done,
        "engagement.target": signal.engagement.target,
        "site.fields_filled": signal.site.fields_filled,
        "site.fields_total": signal.site.fields_total,
    }
    for name, value in counters.items():
        if value < 0:
            raise ValueError(f"{name} = {value} is negative")
    if signal.site.fields_filled > signal.site.fields_total:
        raise ValueError("site.fields_filled exceeds site.fields_total")


def _check_weights(weights: Mapping[str, float]) -> None:
    missing = [m for m in MODULE_ORDER if m not in weights]
    if missing:
        raise ValueError(f"weights missing for {missing}")
    if any(weights[m] < 0 for m in MODULE_ORDER):
        raise ValueError("weights must be non-negative")
    if sum(weights[m] for m in MODULE_ORDER) <= 0:
        raise ValueError("weights must have a positive sum")


# ---------------------------------------------------------------------------
# Module scores
# ---------------------------------------------------------------------------

def _profile_score(signal: ModuleSignal) -> int:
    p = signal.profile
    checks = [p.has_bio, p.highlights_count > 0]
    if p.has_linkedin:
        checks.append(p.linkedin_title_done)
    if p.has_pinterest:
        checks.append(p.pinterest_pro_account_done)
    return percent(sum(checks), len(checks))


def _ratio_score(done: int, target: int) -> int:
    if target <= 0:
        return 0
    return percent(min(done, target), target)


def module_scores(signal: ModuleSignal) -> dict[str, int]:
    return {
        "branding": signal.branding.total,
        "profile": _profile_score(signal),
        "content": _ratio_score(signal.content.posts_this_week, signal.content.posts_target),
        "engagement": _ratio_score(signal.engagement.done, signal.engagement.target),
        "site": percent(signal.site.fields_filled, signal.site.fields_total),
    }


def weighted_global(modules: Mapping[str, int], weights: Mapping[str, float]) -> int:
    _check_weights(weights)
    total_weight = sum(Decimal(str(weights[m])) for m in MODULE_ORDER)
    weighted = sum(Decimal(str(weights[m])) * modules[m] for m in MODULE_ORDER)
    value = int((weighted / total_weight).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, value))


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def score(
    signal: ModuleSignal,
    weights: Optional[Mapping[str, float]] = None,
) -> ProgressScore:
    """Per-module percentages plus the weighted global score."""
    _check_signal(signal)
    return ProgressScore.from_modules(module_scores(signal), weights)
