"""
Premise Exports — CSV
=====================
Tabular export of a filtered record set. Stateless: the caller passes
the records it already shows, nothing is re-fetched.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, List

from core.primitives.access import AccessRecord

EXPORT_COLUMNS = ["Name", "Role", "Company", "Purpose", "Location", "Entry Time", "Status"]

ENTRY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def export_filename(now: datetime, extension: str) -> str:
    return f"visitor_logs_{now.date().isoformat()}.{extension}"


def export_row(record: AccessRecord) -> List[str]:
    return [
        record.subject_name,
        record.subject_role.value,
        record.subject_company,
        record.purpose,
        record.location_name,
        record.entry_time.strftime(ENTRY_TIME_FORMAT),
        record.status.value,
    ]


def render_csv(records: Iterable[AccessRecord]) -> str:
    """CSV text with a header row; every field is quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        writer.writerow(export_row(record))
    return buf.getvalue()
