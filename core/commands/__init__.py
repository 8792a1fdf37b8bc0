"""
Premise Command Layer — Outcomes
==================================
Every operator action produces exactly one Outcome.
REJECTED outcomes are first-class results, never silently dropped.
"""

from core.commands.outcomes import (
    OperationOutcome,
    OutcomeStatus,
)
from core.commands.rejection import (
    RESYNC_CODES,
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "OperationOutcome",
    "OutcomeStatus",
    "ReasonCode",
    "RejectionReason",
    "RESYNC_CODES",
]
