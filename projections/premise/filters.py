"""
Premise Projections — Operator Filters
======================================
Free-text fields match case-insensitively by substring; enumerated
fields match exactly. All criteria that are set must hold (AND).
An empty filter keeps everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from core.primitives.access import (
    AccessRecord,
    AccessStatus,
    Person,
    PersonRole,
)


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle.casefold() in (haystack or "").casefold()


@dataclass(frozen=True)
class RecordFilter:
    """
    Live-monitoring filter.

    search:   name or location (substring)
    location: location name (substring)
    role:     subject role (exact)
    status:   record status (exact)
    on_site:  only Granted records that are still open
    """

    search: str = ""
    location: str = ""
    role: Optional[PersonRole] = None
    status: Optional[AccessStatus] = None
    on_site: bool = False

    def matches(self, record: AccessRecord) -> bool:
        if self.search and not (
            _contains(record.subject_name, self.search)
            or _contains(record.location_name, self.search)
        ):
            return False
        if self.location and not _contains(record.location_name, self.location):
            return False
        if self.role is not None and record.subject_role != self.role:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.on_site and not (
            record.status == AccessStatus.GRANTED and record.exit_time is None
        ):
            return False
        return True

    def apply(self, records: Iterable[AccessRecord]) -> List[AccessRecord]:
        return [r for r in records if self.matches(r)]


@dataclass(frozen=True)
class PersonFilter:
    """Registry filter: search over name and company, role, blacklist flag."""

    search: str = ""
    role: Optional[PersonRole] = None
    blacklisted: Optional[bool] = None

    def matches(self, person: Person) -> bool:
        if self.search and not (
            _contains(person.display_name, self.search)
            or _contains(person.company, self.search)
        ):
            return False
        if self.role is not None and person.role != self.role:
            return False
        if self.blacklisted is not None and person.is_blacklisted != self.blacklisted:
            return False
        return True

    def apply(self, people: Iterable[Person]) -> List[Person]:
        return [p for p in people if self.matches(p)]
