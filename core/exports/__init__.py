"""
Premise Core Exports — Public API
=================================
CSV and PDF downloads of the record set an operator is looking at.
"""

from core.exports.csv_export import (
    EXPORT_COLUMNS,
    export_filename,
    export_row,
    render_csv,
)
from core.exports.pdf_export import render_pdf

__all__ = [
    "EXPORT_COLUMNS",
    "export_filename",
    "export_row",
    "render_csv",
    "render_pdf",
]
