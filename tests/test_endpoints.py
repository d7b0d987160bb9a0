"""
Integration tests for API endpoints using the SQLite test DB.
"""
from datetime import date, timedelta

from app.models.content import CalendarPost, UserRhythm
from app.models.mission import WeeklyMission
from app.services import calendar


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestProgress:
    def test_fresh_user_scores_zero(self, client, headers):
        r = client.get("/progress", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["global_score"] == 0
        assert set(body["modules"]) == {"branding", "profile", "content", "engagement", "site"}
        assert body["unreadable"] == []
        assert len(body["branding_sections"]) == 7

    def test_content_score_reflects_posts(self, client, headers, db, user):
        day = date(2026, 3, 4)
        db.add(CalendarPost(user_id=user, day=day))
        db.commit()
        r = client.get("/progress", params={"day": str(day)}, headers=headers)
        body = r.json()
        assert body["reference_date"] == "2026-03-04"
        assert body["modules"]["content"] == 50
        assert body["global_score"] == 10

    def test_workspace_header_scopes_reads(self, client, db, user):
        day = date(2026, 3, 4)
        db.add(CalendarPost(user_id="teammate", workspace_id=f"ws-{user}", day=day))
        db.commit()
        solo = client.get("/progress", params={"day": str(day)}, headers={"X-User-Id": user})
        shared = client.get(
            "/progress",
            params={"day": str(day)},
            headers={"X-User-Id": user, "X-Workspace-Id": f"ws-{user}"},
        )
        assert solo.json()["modules"]["content"] == 0
        assert shared.json()["modules"]["content"] == 50


class TestMissions:
    def test_current_week_is_generated_once(self, client, headers):
        r1 = client.get("/missions/week", headers=headers)
        assert r1.status_code == 200
        body = r1.json()
        assert body["week_start"] == str(calendar.week_start(calendar.today()))
        assert body["total"] == 3
        assert body["done"] == 0
        assert body["items"][0]["priority"] == "urgent"

        r2 = client.get("/missions/week", headers=headers)
        assert [m["id"] for m in r2.json()["items"]] == [m["id"] for m in body["items"]]

    def test_limit_follows_weekly_time(self, client, headers, db, user):
        db.add(UserRhythm(user_id=user, time_available_weekly=300))
        db.commit()
        r = client.get("/missions/week", headers=headers)
        assert r.json()["total"] == 5

    def test_complete_mission(self, client, headers):
        items = client.get("/missions/week", headers=headers).json()["items"]
        r = client.post(f"/missions/{items[0]['id']}/complete", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["is_done"] is True
        assert body["completed_at"] is not None

        week = client.get("/missions/week", headers=headers).json()
        assert week["done"] == 1

    def test_past_week_is_empty(self, client, headers):
        past = calendar.week_start(calendar.today()) - timedelta(days=7)
        r = client.get("/missions/week", params={"week_start": str(past)}, headers=headers)
        assert r.status_code == 200
        assert r.json()["items"] == []

    def test_history(self, client, headers, db, user):
        current = calendar.week_start(calendar.today())
        for weeks_back, done in ((1, True), (2, False)):
            db.add(WeeklyMission(
                user_id=user, week_start=current - timedelta(days=7 * weeks_back),
                mission_key="plan_posts", title="Schedule posts",
                priority="urgent", module="content", is_done=done,
            ))
        db.commit()
        client.get("/missions/week", headers=headers)

        r = client.get("/missions/history", headers=headers)
        assert r.status_code == 200
        items = r.json()["items"]
        assert [i["week_start"] for i in items] == [
            str(current - timedelta(days=7)), str(current - timedelta(days=14)),
        ]
        assert [(i["total"], i["done"]) for i in items] == [(1, 1), (1, 0)]

        r = client.get("/missions/history", params={"limit": 1}, headers=headers)
        assert len(r.json()["items"]) == 1


class TestCadence:
    def test_checklist_and_toggle(self, client, headers, set_today):
        day = str(set_today(date(2026, 3, 4)))
        r = client.get("/cadence/checklist", params={"day": day}, headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["mode"] == "cruise"
        assert len(body["items"]) == 5
        assert body["items_required"] == 3
        assert not any(i["checked"] for i in body["items"])

        for item_id in ("reply_comments", "reply_dm", "comment_others"):
            r = client.post(
                "/cadence/toggle", json={"item_id": item_id, "day": day}, headers=headers
            )
            assert r.status_code == 200
        body = r.json()
        assert body["streak_maintained"] is True
        assert body["items_total"] == 5
        assert body["streak"] == {"current_streak": 1, "best_streak": 1, "last_check_date": day}

        checklist = client.get("/cadence/checklist", params={"day": day}, headers=headers).json()
        assert checklist["items_checked"] == 3
        assert checklist["streak_maintained"] is True

    def test_streak_builds_across_days(self, client, headers, set_today):
        for offset in range(2):
            set_today(date(2026, 3, 2) + timedelta(days=offset))
            for item_id in ("reply_comments", "reply_dm", "comment_others"):
                client.post("/cadence/toggle", json={"item_id": item_id}, headers=headers)
        r = client.get("/cadence/streak", headers=headers)
        assert r.json() == {"current_streak": 2, "best_streak": 2, "last_check_date": "2026-03-03"}

    def test_past_day_toggle_rejected(self, client, headers, set_today):
        set_today(date(2026, 3, 3))
        for item_id in ("reply_comments", "reply_dm", "comment_others"):
            client.post("/cadence/toggle", json={"item_id": item_id}, headers=headers)

        r = client.post(
            "/cadence/toggle", json={"item_id": "reply_dm", "day": "2026-01-01"}, headers=headers
        )
        assert r.status_code == 422
        assert r.json()["code"] == "CHECKLIST_DAY_CLOSED"
        r = client.get("/cadence/streak", headers=headers)
        assert r.json() == {"current_streak": 1, "best_streak": 1, "last_check_date": "2026-03-03"}

    def test_mode_switch_agrees_with_checklist(self, client, headers, set_today):
        day = str(set_today(date(2026, 3, 4)))
        for item_id in ("reply_dm", "comment_others", "dm_outreach"):
            client.post("/cadence/toggle", json={"item_id": item_id}, headers=headers)
        r = client.post(
            "/cadence/toggle", json={"item_id": "check_stats", "mode": "launch"}, headers=headers
        )
        toggled = r.json()
        checklist = client.get(
            "/cadence/checklist", params={"mode": "launch", "day": day}, headers=headers
        ).json()
        assert checklist["items_checked"] == 1
        assert toggled["streak_maintained"] is checklist["streak_maintained"] is False
        assert toggled["streak"]["current_streak"] == 0

    def test_streak_endpoint_cold_start(self, client, headers):
        r = client.get("/cadence/streak", headers=headers)
        assert r.json() == {"current_streak": 0, "best_streak": 0, "last_check_date": None}

    def test_launch_checklist(self, client, headers):
        r = client.get("/cadence/checklist", params={"mode": "launch"}, headers=headers)
        body = r.json()
        assert len(body["items"]) == 6
        assert body["items_required"] == 4

    def test_week_dots(self, client, headers, set_today):
        set_today(date(2026, 3, 3))
        for item_id in ("reply_comments", "reply_dm", "comment_others"):
            client.post("/cadence/toggle", json={"item_id": item_id}, headers=headers)
        r = client.get("/cadence/week", params={"day": "2026-03-06"}, headers=headers)
        body = r.json()
        assert body["week_start"] == "2026-03-02"
        assert body["days"] == [False, True, False, False, False, False, False]


class TestRoutines:
    def test_crud_and_summary(self, client, headers):
        r = client.post(
            "/routines", json={"label": "  Weekly review  ", "duration_minutes": 20}, headers=headers
        )
        assert r.status_code == 201
        task = r.json()
        assert task["label"] == "Weekly review"
        assert task["period"] == "week"

        client.post("/routines", json={"label": "Invoices", "period": "month"}, headers=headers)
        assert len(client.get("/routines", headers=headers).json()) == 2

        r = client.post(f"/routines/{task['id']}/toggle", params={"day": "2026-03-04"}, headers=headers)
        assert r.json() == {"task_id": task["id"], "period_start": "2026-03-02", "is_done": True}

        summary = client.get("/routines/summary", params={"day": "2026-03-04"}, headers=headers).json()
        assert summary["weekly_completed"] == 1
        assert summary["weekly_total"] == 1
        assert summary["monthly_total"] == 1
        assert summary["streak"] == 1

        r = client.delete(f"/routines/{task['id']}", headers=headers)
        assert r.status_code == 204
        assert len(client.get("/routines", headers=headers).json()) == 1

    def test_routines_are_per_user(self, client, headers, user):
        client.post("/routines", json={"label": "Mine"}, headers=headers)
        other = client.get("/routines", headers={"X-User-Id": f"{user}-other"})
        assert other.status_code == 200
        assert other.json() == []
