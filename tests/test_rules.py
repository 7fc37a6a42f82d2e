"""
Integration tests for rules: daily adherence toggle and the 24-hour
violation cooldown.
"""
from datetime import datetime, timedelta, timezone

from foundations.models.completion import EntityKind
from foundations.services import ledger

T0 = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _create(client, headers, text="No phone after 10pm") -> dict:
    r = client.post(
        "/rules",
        json={"text": text, "category": "Digital Wellness"},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


class TestRuleCrud:
    def test_create_rule(self, client, headers):
        body = _create(client, headers)
        assert body["text"] == "No phone after 10pm"
        assert body["category"] == "Digital Wellness"
        assert body["failures"] == 0
        assert body["streak"] == 0
        assert body["cooldown_hours"] is None
        assert body["last_violation_time"] is None

    def test_default_category(self, client, headers):
        r = client.post("/rules", json={"text": "No sugar"}, headers=headers)
        assert r.status_code == 201
        assert r.json()["category"] == "Personal"

    def test_empty_text_rejected(self, client, headers):
        r = client.post("/rules", json={"text": "  "}, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_list_and_delete(self, client, headers):
        rule = _create(client, headers)
        assert [r["id"] for r in client.get("/rules", headers=headers).json()] == [rule["id"]]
        assert client.delete(f"/rules/{rule['id']}", headers=headers).status_code == 204
        assert client.get("/rules", headers=headers).json() == []

    def test_other_user_forbidden(self, client, headers, other_headers):
        rule = _create(client, headers)
        r = client.post(f"/rules/{rule['id']}/break", headers=other_headers)
        assert r.status_code == 403


class TestRuleToggle:
    def test_kept_days_build_streak(self, client, headers, clock):
        rule = _create(client, headers)
        for offset in range(3):
            clock.set(T0 + timedelta(days=offset))
            body = client.post(f"/rules/{rule['id']}/toggle", headers=headers).json()
        assert body["streak"] == 3
        assert body["completed_today"] is True

    def test_toggle_twice_reverts(self, client, headers):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        body = client.post(f"/rules/{rule['id']}/toggle", headers=headers).json()
        assert body["completed_today"] is False
        assert body["streak"] == 0


class TestRuleViolation:
    def test_first_violation_accepted(self, client, headers):
        rule = _create(client, headers)
        r = client.post(f"/rules/{rule['id']}/break", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["failures"] == 1
        assert body["streak"] == 0
        assert body["violated_today"] is True
        assert body["completed_today"] is False
        assert body["cooldown_hours"] == 24
        assert body["last_violation_time"] is not None

    def test_violation_within_cooldown_rejected(self, client, headers, clock):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)

        clock.set(T0 + timedelta(hours=1))
        r = client.post(f"/rules/{rule['id']}/break", headers=headers)
        assert r.status_code == 429
        body = r.json()
        assert body["code"] == "COOLDOWN_ACTIVE"
        assert body["details"]["remaining_hours"] == 23
        assert "Try again in 23 hours" in body["message"]

        # Rejected attempt leaves the rule untouched.
        assert client.get(f"/rules/{rule['id']}", headers=headers).json()["failures"] == 1

    def test_violation_after_cooldown_accepted(self, client, headers, clock):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)
        clock.set(T0 + timedelta(hours=25))
        r = client.post(f"/rules/{rule['id']}/break", headers=headers)
        assert r.status_code == 200
        assert r.json()["failures"] == 2

    def test_violation_resets_streak_keeps_longest(self, client, headers, clock):
        rule = _create(client, headers)
        for offset in range(3):
            clock.set(T0 + timedelta(days=offset))
            client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        body = client.post(f"/rules/{rule['id']}/break", headers=headers).json()
        assert body["streak"] == 0
        assert body["longest_streak"] == 3
        assert body["completed_today"] is False

    def test_streak_restarts_day_after_violation(self, client, headers, clock):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)
        clock.set(T0 + timedelta(days=1))
        body = client.post(f"/rules/{rule['id']}/toggle", headers=headers).json()
        assert body["streak"] == 1
        assert body["violated_today"] is False


class TestRuleBrokenToday:
    def test_break_on_unmarked_day_records_not_kept(self, client, headers, clock):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        clock.set(T0 + timedelta(days=1))
        body = client.post(f"/rules/{rule['id']}/break", headers=headers).json()
        assert body["completed_today"] is False
        assert body["longest_streak"] == 1

    def test_toggle_after_break_same_day_rejected(self, client, headers):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)
        r = client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        assert r.status_code == 409
        assert r.json()["code"] == "RULE_BROKEN_TODAY"

        body = client.get(f"/rules/{rule['id']}", headers=headers).json()
        assert body["completed_today"] is False
        assert body["violated_today"] is True

    def test_rejected_toggle_leaves_ledger_untouched(self, client, headers, db):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)
        client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        record = ledger.get_completion(db, EntityKind.RULE, rule["id"], T0.date())
        assert record is not None
        assert record.completed is False

    def test_toggle_allowed_next_day(self, client, headers, clock):
        rule = _create(client, headers)
        client.post(f"/rules/{rule['id']}/break", headers=headers)
        clock.set(T0 + timedelta(days=1))
        r = client.post(f"/rules/{rule['id']}/toggle", headers=headers)
        assert r.status_code == 200
        assert r.json()["streak"] == 1
