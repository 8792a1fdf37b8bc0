"""
Premise AI — Security Briefing (Advisory Only)
==============================================
Short narrative summary of the dashboard for the duty officer.

The text generation endpoint is best-effort. Missing configuration,
transport errors, HTTP errors and malformed replies all degrade to a
fixed placeholder string; generate() never raises and never blocks the
dashboard beyond its timeout.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import requests

from core.primitives.access import AccessRecord, DashboardStats
from core.time.access_window import format_duration

logger = logging.getLogger("premise.ai")

NOT_CONFIGURED_TEXT = "Briefing service not configured. Unable to generate briefing."
UNAVAILABLE_TEXT = "System offline. Unable to generate AI briefing."
EMPTY_TEXT = "No insights available."

DEFAULT_MODEL = "llama3:latest"
DEFAULT_TIMEOUT_SECONDS = 20.0
RECENT_RECORDS_IN_PROMPT = 5


def build_briefing_prompt(stats: DashboardStats, recent: Sequence[AccessRecord]) -> str:
    lines = [
        f"- {r.subject_name or 'Unknown'} ({r.subject_role.value}): "
        f"{r.status.value} at {r.location_name or 'Unknown Location'}"
        for r in list(recent)[:RECENT_RECORDS_IN_PROMPT]
    ]
    return (
        "Act as a senior security analyst for an auxiliary police unit.\n"
        "Analyze the following current premise data and provide a concise, "
        "professional security briefing (max 100 words).\n\n"
        "Current Stats:\n"
        f"- Total Entries Today: {stats.total_entries_today}\n"
        f"- Active Staff On-site: {stats.active_on_site_count}\n"
        f"- Security Alerts: {stats.alert_count}\n"
        f"- Avg Visit Duration: {format_duration(stats.avg_visit_duration)}\n\n"
        "Recent Access Logs:\n"
        + ("\n".join(lines) if lines else "- none")
        + "\n\nHighlight any anomalies or confirm normal operation status."
    )


class BriefingClient:
    """
    Client for an Ollama-style /api/generate endpoint.

    Args:
        api_url: Full generate URL; empty or None means not configured.
        model:   Model name sent with each request.
        timeout_seconds: Per-request timeout.
        session: Optional requests.Session (injected in tests).
    """

    def __init__(
        self,
        api_url: Optional[str],
        *,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_url = (api_url or "").strip()
        self._model = model
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self._api_url)

    def generate(self, stats: DashboardStats, recent: Sequence[AccessRecord]) -> str:
        if not self.is_configured:
            return NOT_CONFIGURED_TEXT

        payload = {
            "model": self._model,
            "prompt": build_briefing_prompt(stats, recent),
            "stream": False,
        }
        try:
            r = self._session.post(self._api_url, json=payload, timeout=self._timeout)
            r.raise_for_status()
            body = r.json()
        except requests.RequestException as e:
            logger.warning(f"Briefing request failed: {e}")
            return UNAVAILABLE_TEXT
        except ValueError as e:
            logger.warning(f"Briefing reply was not JSON: {e}")
            return UNAVAILABLE_TEXT

        text = body.get("response", "") if isinstance(body, dict) else ""
        if not isinstance(text, str) or not text.strip():
            return EMPTY_TEXT
        return text.strip()
