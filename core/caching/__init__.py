"""
Premise Core Caching — Local Access Record Cache
=================================================
The in-memory copy of access records a view renders from.

Doctrine: Cache is disposable — always rebuildable from the store.
A full refresh replaces the snapshot wholesale; optimistic patches
only bridge the gap until the next refresh lands.
Time is injected — no datetime.now() calls.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.primitives.access import AccessRecord


# ══════════════════════════════════════════════════════════════
# CACHE STATISTICS
# ══════════════════════════════════════════════════════════════

@dataclass
class CacheStats:
    """Cache activity statistics."""

    hits: int = 0
    misses: int = 0
    refreshes: int = 0
    patches: int = 0
    patch_misses: int = 0
    total_entries: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "refreshes": self.refreshes,
            "patches": self.patches,
            "patch_misses": self.patch_misses,
            "total_entries": self.total_entries,
            "hit_rate": round(self.hit_rate, 4),
        }


# ══════════════════════════════════════════════════════════════
# RECORD CACHE (wholesale replace + optimistic patch)
# ══════════════════════════════════════════════════════════════

class RecordCache:
    """
    Ordered snapshot of AccessRecords keyed by record_id.

    Features:
    - replace_all: last full refresh wins, whatever was patched before
    - patch: apply a local mutation to one cached record
    - add: put a freshly created record at the head of the snapshot
    - Performance statistics

    A lock guards the snapshot swap so readers on the render side
    never observe a half-built list.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._order: List[str] = []
        self._records: Dict[str, AccessRecord] = {}
        self._refreshed_at: Optional[datetime] = None
        self._stats = CacheStats()

    def replace_all(self, records: Iterable[AccessRecord], now: datetime) -> None:
        """Swap in a freshly fetched record set (store order preserved)."""
        fresh = list(records)
        order = [r.record_id for r in fresh]
        by_id = {r.record_id: r for r in fresh}
        with self._lock:
            self._order = order
            self._records = by_id
            self._refreshed_at = now
            self._stats.refreshes += 1
            self._stats.total_entries = len(by_id)

    def patch(
        self,
        record_id: str,
        mutate: Callable[[AccessRecord], AccessRecord],
    ) -> Optional[AccessRecord]:
        """
        Apply a local mutation to one cached record.

        Returns the patched record, or None when the record is not
        cached (nothing to patch; the next refresh brings it in).
        """
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                self._stats.patch_misses += 1
                return None
            patched = mutate(current)
            if patched.record_id != record_id:
                patched = replace(patched, record_id=record_id)
            self._records[record_id] = patched
            self._stats.patches += 1
            return patched

    def add(self, record: AccessRecord) -> None:
        with self._lock:
            if record.record_id not in self._records:
                self._order.insert(0, record.record_id)
            self._records[record.record_id] = record
            self._stats.total_entries = len(self._records)

    def get(self, record_id: str) -> Optional[AccessRecord]:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                self._stats.misses += 1
            else:
                self._stats.hits += 1
            return record

    def snapshot(self) -> List[AccessRecord]:
        """Current records in store order (newest entry first)."""
        with self._lock:
            return [self._records[rid] for rid in self._order]

    def clear(self) -> None:
        with self._lock:
            self._order = []
            self._records = {}
            self._refreshed_at = None
            self._stats.total_entries = 0

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self._refreshed_at

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def size(self) -> int:
        return len(self._records)
