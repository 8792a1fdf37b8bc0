"""
Tests — Security briefing client (advisory, best-effort)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import requests

from ai.briefing import (
    EMPTY_TEXT,
    NOT_CONFIGURED_TEXT,
    UNAVAILABLE_TEXT,
    BriefingClient,
    build_briefing_prompt,
)
from core.primitives.access import (
    AccessRecord,
    AccessStatus,
    DashboardStats,
    PersonRole,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
STATS = DashboardStats(
    total_entries_today=12, active_on_site_count=4, alert_count=2,
    avg_visit_duration=timedelta(minutes=65),
)


class _FakeResponse:
    def __init__(self, body=None, *, status_error=None, json_error=None):
        self._body = body
        self._status_error = status_error
        self._json_error = json_error

    def raise_for_status(self):
        if self._status_error is not None:
            raise self._status_error

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._body


class _StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session, url="http://briefing.local/api/generate"):
    return BriefingClient(url, model="test-model", timeout_seconds=3, session=session)


def _recent():
    return [
        AccessRecord(
            record_id="1", subject_id="1", location_id="1",
            entry_time=NOW, status=AccessStatus.DENIED,
            subject_name="Brandon", subject_role=PersonRole.DELIVERY,
            location_name="Loading Dock",
        )
    ]


class TestPrompt:
    def test_contains_figures_and_recent(self):
        prompt = build_briefing_prompt(STATS, _recent())
        assert "Total Entries Today: 12" in prompt
        assert "Active Staff On-site: 4" in prompt
        assert "Security Alerts: 2" in prompt
        assert "Avg Visit Duration: 1h 5m" in prompt
        assert "Brandon (Delivery): Denied at Loading Dock" in prompt

    def test_no_recent_records(self):
        assert "- none" in build_briefing_prompt(DashboardStats.zeroed(), [])


class TestGenerate:
    def test_success(self):
        session = _StubSession(_FakeResponse({"response": "  All quiet.  "}))
        assert _client(session).generate(STATS, _recent()) == "All quiet."

        call = session.calls[0]
        assert call["url"] == "http://briefing.local/api/generate"
        assert call["timeout"] == 3
        assert call["json"]["model"] == "test-model"
        assert call["json"]["stream"] is False
        assert "Security Alerts: 2" in call["json"]["prompt"]

    def test_not_configured_never_calls_out(self):
        session = _StubSession(_FakeResponse({"response": "x"}))
        client = _client(session, url="  ")
        assert not client.is_configured
        assert client.generate(STATS, []) == NOT_CONFIGURED_TEXT
        assert session.calls == []

    def test_connection_error(self):
        session = _StubSession(error=requests.ConnectionError("refused"))
        assert _client(session).generate(STATS, []) == UNAVAILABLE_TEXT

    def test_http_error(self):
        response = _FakeResponse(status_error=requests.HTTPError("503 Server Error"))
        assert _client(_StubSession(response)).generate(STATS, []) == UNAVAILABLE_TEXT

    def test_malformed_json(self):
        response = _FakeResponse(json_error=ValueError("Expecting value"))
        assert _client(_StubSession(response)).generate(STATS, []) == UNAVAILABLE_TEXT

    @pytest.mark.parametrize("body", [{}, {"response": ""}, {"response": "   "}, ["x"], {"response": 7}])
    def test_empty_reply(self, body):
        assert _client(_StubSession(_FakeResponse(body))).generate(STATS, []) == EMPTY_TEXT
