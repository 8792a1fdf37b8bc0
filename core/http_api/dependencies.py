"""
Premise HTTP API - Dependencies
===============================
Injected collaborators for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ai.briefing import BriefingClient
from core.access_store.contracts import PersonStore, RecordStore, SessionStore
from core.time.access_window import DEFAULT_WINDOW_HOURS
from core.time.clock import Clock, SystemClock


@dataclass(frozen=True)
class HttpApiDependencies:
    store: RecordStore
    people: PersonStore
    sessions: SessionStore
    clock: Clock = field(default_factory=SystemClock)
    briefing: Optional[BriefingClient] = None
    window_hours: float = DEFAULT_WINDOW_HOURS
    dashboard_recent_limit: int = 5
