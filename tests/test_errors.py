"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from datetime import date, datetime, timezone

from foundations.core.errors import (
    CooldownActiveError,
    EntityValidationError,
    ForbiddenError,
    InvalidDayError,
    NotFoundError,
    RuleBrokenTodayError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_not_found_error(self):
        err = NotFoundError("habit", 42)
        assert err.http_status == 404
        assert err.code == "NOT_FOUND"
        assert "42" in err.message
        assert err.to_dict()["details"] == {"kind": "habit", "id": 42}

    def test_forbidden_is_a_not_found(self):
        err = ForbiddenError("rule", 7)
        assert isinstance(err, NotFoundError)
        assert err.http_status == 403
        assert err.code == "FORBIDDEN"
        assert "does not belong" in err.message

    def test_cooldown_active_error(self):
        retry_at = datetime(2026, 3, 11, 8, 0, tzinfo=timezone.utc)
        err = CooldownActiveError(remaining_hours=5, retry_at=retry_at)
        assert err.http_status == 429
        assert err.code == "COOLDOWN_ACTIVE"
        assert err.message == (
            "You can only break this rule once every 24 hours. Try again in 5 hours."
        )
        d = err.to_dict()
        assert d["details"]["remaining_hours"] == 5
        assert d["details"]["retry_at"] == "2026-03-11T08:00:00+00:00"

    def test_cooldown_singular_hour(self):
        err = CooldownActiveError(remaining_hours=1, retry_at=datetime(2026, 3, 11, tzinfo=timezone.utc))
        assert err.message.endswith("Try again in 1 hour.")

    def test_invalid_day_future(self):
        err = InvalidDayError(day_number=15, max_day=11, duration=40)
        assert err.http_status == 422
        assert err.code == "INVALID_DAY"
        assert "not started" in err.message

    def test_invalid_day_out_of_range(self):
        err = InvalidDayError(day_number=41, max_day=40, duration=40)
        assert "outside" in err.message
        assert err.details["duration"] == 40

    def test_invalid_day_before_start(self):
        err = InvalidDayError(day_number=1, max_day=1, duration=40, starts_on=date(2026, 3, 13))
        assert err.message == "The challenge starts on 2026-03-13."
        assert err.details["starts_on"] == "2026-03-13"

    def test_rule_broken_today_error(self):
        err = RuleBrokenTodayError(rule_id=3, day=date(2026, 3, 10))
        assert err.http_status == 409
        assert err.code == "RULE_BROKEN_TODAY"
        assert err.to_dict()["details"] == {"id": 3, "day": "2026-03-10"}

    def test_entity_validation_error(self):
        err = EntityValidationError("title", "title must not be empty")
        assert err.http_status == 422
        assert err.code == "VALIDATION_ERROR"
        assert err.details["errors"][0]["field"] == "title"


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestErrorEnvelope:
    def test_validation_error_has_field_list(self, client, headers):
        r = client.post("/challenges", json={"title": "x", "duration": "many"}, headers=headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert any("duration" in f for f in fields)

    def test_not_found_envelope(self, client, headers):
        r = client.get("/rules/987654", headers=headers)
        assert r.status_code == 404
        body = r.json()
        assert set(body) == {"code", "message", "details"}
        assert body["details"]["kind"] == "rule"

    def test_invalid_user_header(self, client):
        r = client.get("/rules", headers={"X-User-Id": "0"})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["db"] == "ok"
