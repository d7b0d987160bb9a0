"""
Tests for the weekly mission store: snapshot, idempotency, completion and
history. All calls pass an explicit `today` so week boundaries are fixed.
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    InvalidWeekStartError,
    MissionNotFoundError,
    MissionStoreError,
    MissionWeekClosedError,
)
from app.models.branding import BrandProposition
from app.models.mission import WeeklyMission
from app.services.context import PlannerContext
from app.services.mission_generator import generate
from app.services.mission_store import (
    complete_mission,
    ensure_week_missions,
    get_week_missions,
    list_history,
    persist_missions,
    set_mission_done,
)
from app.services.progress_scorer import score
from app.services.state_aggregator import ModuleSignal

TODAY = date(2026, 3, 4)
MONDAY = date(2026, 3, 2)


def _definitions():
    signal = ModuleSignal()
    return generate(signal, score(signal))


def _row_count(db, ctx, week_start) -> int:
    return (
        db.query(WeeklyMission)
        .filter(WeeklyMission.user_id == ctx.user_id, WeeklyMission.week_start == week_start)
        .count()
    )


class TestEnsureWeek:
    def test_first_visit_generates_and_stores(self, db, ctx):
        missions = ensure_week_missions(db, ctx, MONDAY, today=TODAY)
        assert [m.mission_key for m in missions] == [
            "complete_proposition", "start_persona", "complete_storytelling",
        ]
        assert [m.position for m in missions] == [0, 1, 2]
        assert all(m.week_start == MONDAY and not m.is_done for m in missions)

    def test_second_visit_returns_snapshot(self, db, ctx):
        first = ensure_week_missions(db, ctx, MONDAY, today=TODAY)

        # State moves on; the week's missions must not
        db.add(BrandProposition(user_id=ctx.user_id, completed=True))
        db.commit()

        second = ensure_week_missions(db, ctx, MONDAY, today=TODAY)
        assert [m.id for m in second] == [m.id for m in first]
        assert "complete_proposition" in [m.mission_key for m in second]

    def test_future_week_is_generated(self, db, ctx):
        next_week = MONDAY + timedelta(days=7)
        assert len(ensure_week_missions(db, ctx, next_week, today=TODAY)) == 3

    def test_past_week_is_never_generated(self, db, ctx):
        past = MONDAY - timedelta(days=7)
        assert ensure_week_missions(db, ctx, past, today=TODAY) == []
        assert _row_count(db, ctx, past) == 0

    def test_week_start_must_be_monday(self, db, ctx):
        with pytest.raises(InvalidWeekStartError):
            ensure_week_missions(db, ctx, TODAY, today=TODAY)
        with pytest.raises(InvalidWeekStartError):
            get_week_missions(db, ctx, TODAY)

    def test_users_do_not_share_weeks(self, db, ctx):
        ensure_week_missions(db, ctx, MONDAY, today=TODAY)
        other = PlannerContext(user_id=f"{ctx.user_id}-other")
        assert get_week_missions(db, other, MONDAY) == []


class TestIdempotency:
    def test_concurrent_first_visits_converge(self, db, ctx):
        definitions = _definitions()
        assert persist_missions(db, ctx, MONDAY, definitions) == len(definitions)
        # The losing session of a race inserts the same keys again
        assert persist_missions(db, ctx, MONDAY, definitions) == 0
        assert _row_count(db, ctx, MONDAY) == len(definitions)

    def test_ensure_after_race_returns_one_row_per_key(self, db, ctx):
        persist_missions(db, ctx, MONDAY, _definitions())
        missions = ensure_week_missions(db, ctx, MONDAY, today=TODAY)
        keys = [m.mission_key for m in missions]
        assert len(keys) == len(set(keys)) == 3

    def test_empty_definitions_write_nothing(self, db, ctx):
        assert persist_missions(db, ctx, MONDAY, []) == 0

    def test_store_failure_is_retryable(self, db, ctx, monkeypatch):
        def broken_execute(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "execute", broken_execute)
        with pytest.raises(MissionStoreError) as excinfo:
            persist_missions(db, ctx, MONDAY, _definitions())
        assert excinfo.value.http_status == 503
        assert excinfo.value.details["retryable"] is True


class TestCompletion:
    def test_complete_sets_done_and_timestamp(self, db, ctx):
        mission = ensure_week_missions(db, ctx, MONDAY, today=TODAY)[0]
        done = complete_mission(db, ctx, mission.id, today=TODAY)
        assert done.is_done
        assert done.completed_at is not None

    def test_complete_twice_is_a_no_op(self, db, ctx):
        mission = ensure_week_missions(db, ctx, MONDAY, today=TODAY)[0]
        first = complete_mission(db, ctx, mission.id, today=TODAY).completed_at
        again = complete_mission(db, ctx, mission.id, today=TODAY)
        assert again.is_done
        assert again.completed_at == first

    def test_store_level_undo(self, db, ctx):
        mission = ensure_week_missions(db, ctx, MONDAY, today=TODAY)[0]
        complete_mission(db, ctx, mission.id, today=TODAY)
        undone = set_mission_done(db, ctx, mission.id, False, today=TODAY)
        assert not undone.is_done
        assert undone.completed_at is None

    def test_past_week_is_read_only(self, db, ctx):
        mission = ensure_week_missions(db, ctx, MONDAY, today=TODAY)[0]
        with pytest.raises(MissionWeekClosedError):
            complete_mission(db, ctx, mission.id, today=MONDAY + timedelta(days=7))

    def test_unknown_mission(self, db, ctx):
        with pytest.raises(MissionNotFoundError):
            complete_mission(db, ctx, 987_654_321, today=TODAY)

    def test_other_users_mission_is_not_found(self, db, ctx):
        mission = ensure_week_missions(db, ctx, MONDAY, today=TODAY)[0]
        other = PlannerContext(user_id=f"{ctx.user_id}-other")
        with pytest.raises(MissionNotFoundError):
            complete_mission(db, other, mission.id, today=TODAY)


class TestHistory:
    def _seed_weeks(self, db, ctx, weeks: int) -> list[date]:
        starts = [MONDAY - timedelta(days=7 * i) for i in range(1, weeks + 1)]
        for start in starts:
            persist_missions(db, ctx, start, _definitions())
        return starts

    def test_newest_first_and_strictly_before(self, db, ctx):
        starts = self._seed_weeks(db, ctx, 3)
        persist_missions(db, ctx, MONDAY, _definitions())

        history = list_history(db, ctx, MONDAY)
        assert [h.week_start for h in history] == starts
        assert all(h.total == 3 and h.done == 0 for h in history)

    def test_done_counts(self, db, ctx):
        start = self._seed_weeks(db, ctx, 1)[0]
        rows = get_week_missions(db, ctx, start)
        for row in rows[:2]:
            row.is_done = True
        db.commit()

        history = list_history(db, ctx, MONDAY)
        assert (history[0].total, history[0].done) == (3, 2)

    def test_limit_bounds_the_result(self, db, ctx):
        starts = self._seed_weeks(db, ctx, 4)
        history = list_history(db, ctx, MONDAY, limit=2)
        assert [h.week_start for h in history] == starts[:2]

    def test_default_limit_from_settings(self, db, ctx, monkeypatch):
        from app.core.config import settings

        self._seed_weeks(db, ctx, 3)
        monkeypatch.setattr(settings, "HISTORY_LIMIT", 1)
        assert len(list_history(db, ctx, MONDAY)) == 1
