"""
Premise AI Module — Advisory Only
=================================
AI components are advisory only. AI CANNOT commit state autonomously:
the briefing client reads dashboard figures and returns text.
"""

from ai.briefing import (
    EMPTY_TEXT,
    NOT_CONFIGURED_TEXT,
    UNAVAILABLE_TEXT,
    BriefingClient,
    build_briefing_prompt,
)

__all__ = [
    "BriefingClient",
    "build_briefing_prompt",
    "NOT_CONFIGURED_TEXT",
    "UNAVAILABLE_TEXT",
    "EMPTY_TEXT",
]
