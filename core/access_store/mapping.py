"""
Premise Access Store - Row Mapping
==================================
Translation between the store's native rows and core.primitives.

Unknown enumeration values coming back from the store are tolerated:
they are logged and mapped to a conservative default instead of
failing the whole read.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.access_store.models import (
    StoredAccessLog,
    StoredLocation,
    StoredPreRegistration,
    StoredSession,
    StoredUser,
)
from core.primitives.access import (
    AccessRecord,
    AccessState,
    AccessStatus,
    Location,
    Person,
    PersonRole,
    PreRegistration,
    Session,
)

logger = logging.getLogger("premise.store")

_STATUS_BY_VALUE = {status.value: status for status in AccessStatus}
_ROLE_BY_VALUE = {role.value: role for role in PersonRole}
_STATE_BY_VALUE = {state.value: state for state in AccessState}

# Legacy spelling written by older gate terminals.
_STATUS_ALIASES = {"Checked In": AccessStatus.GRANTED}


def parse_status(value: Optional[str]) -> AccessStatus:
    if value in _STATUS_BY_VALUE:
        return _STATUS_BY_VALUE[value]
    if value in _STATUS_ALIASES:
        return _STATUS_ALIASES[value]
    logger.warning(f"Unknown access_status {value!r}; treating as Pending.")
    return AccessStatus.PENDING


def stored_status_values(statuses: Iterable[AccessStatus]) -> List[str]:
    """Every stored spelling that reads back as one of these statuses."""
    wanted = set(statuses)
    values = [s.value for s in AccessStatus if s in wanted]
    values += [alias for alias, s in _STATUS_ALIASES.items() if s in wanted]
    return values


def parse_role(value: Optional[str]) -> PersonRole:
    if value in _ROLE_BY_VALUE:
        return _ROLE_BY_VALUE[value]
    logger.warning(f"Unknown user_type {value!r}; treating as Visitor.")
    return PersonRole.VISITOR


def parse_access_state(value: Optional[str]) -> AccessState:
    if value in _STATE_BY_VALUE:
        return _STATE_BY_VALUE[value]
    logger.warning(f"Unknown user_status {value!r}; treating as Active.")
    return AccessState.ACTIVE


# ══════════════════════════════════════════════════════════════
# ROW → CANONICAL
# ══════════════════════════════════════════════════════════════

def access_record_from_row(row: StoredAccessLog) -> AccessRecord:
    """Map an access_logs row joined with its users/locations rows."""
    user = row.user
    location = row.location
    return AccessRecord(
        record_id=str(row.id_logs),
        subject_id=str(row.user_id),
        location_id=str(row.location_id),
        location_name=location.location_name if location else "Unknown Location",
        entry_time=row.entry_timestamp,
        exit_time=row.exit_timestamp,
        status=parse_status(row.access_status),
        purpose=row.purpose or "",
        vehicle_plate=row.vehicle_plate or "",
        subject_name=user.user_name if user else "Unknown User",
        subject_role=parse_role(user.user_type) if user else PersonRole.VISITOR,
        subject_company=(user.user_company or "") if user else "",
        subject_avatar_url=(user.user_avatar or "") if user else "",
        subject_access_state=(
            parse_access_state(user.user_status) if user else AccessState.ACTIVE
        ),
    )


def person_from_row(row: StoredUser) -> Person:
    return Person(
        person_id=str(row.user_id),
        display_name=row.user_name,
        role=parse_role(row.user_type),
        company=row.user_company or "",
        phone=row.user_phone or "",
        email=row.user_email or "",
        avatar_url=row.user_avatar or "",
        access_state=parse_access_state(row.user_status),
        blacklist_reason=row.blacklist_reason or None,
        created_at=row.created_at,
    )


def location_from_row(row: StoredLocation) -> Location:
    return Location(
        location_id=str(row.location_id),
        name=row.location_name,
        zone_code=row.location_zone_code or "",
    )


def session_from_row(row: StoredSession) -> Session:
    return Session(
        session_id=str(row.session_id),
        host_id=str(row.host_id),
        event_name=row.event_name,
        venue=row.venue,
        session_date=row.session_date,
        participants=row.participants or "",
        qr_payload=row.qr_code or "",
        created_at=row.created_at,
    )


def pre_registration_from_row(row: StoredPreRegistration) -> PreRegistration:
    return PreRegistration(
        registration_id=str(row.reg_id),
        session_id=str(row.session_id),
        name=row.user_name,
        email=row.user_email or "",
        phone=row.user_phone or "",
        registered_at=row.registered_at,
    )
