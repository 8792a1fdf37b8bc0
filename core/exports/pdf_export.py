"""
Premise Exports - PDF
=====================
Generates a minimal PDF 1.4 table of access records.

Implementation: pure Python stdlib, no external dependencies.
Helvetica text (built-in PDF font), A4 landscape, auto-pagination with
the column header repeated on every page.

Doctrine:
- Same records + same generated_at -> same PDF bytes.
- All content is escaped for PDF string encoding.
"""

from __future__ import annotations

import io
import re
from datetime import datetime
from typing import Any, Iterable, List, Optional

from core.exports.csv_export import EXPORT_COLUMNS, export_row
from core.primitives.access import AccessRecord


# ---------------------------------------------------------------------------
# PDF string encoding
# ---------------------------------------------------------------------------

def _pdf_str(value: Any) -> str:
    """Encode a value as a PDF literal string (parentheses form)."""
    text = str(value) if value is not None else ""
    text = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    # Built-in fonts use a single-byte encoding
    safe = "".join(c if 32 <= ord(c) < 127 else "?" for c in text)
    return f"({safe})"


_REF = re.compile(r"(\d+) 0 R")


# ---------------------------------------------------------------------------
# Minimal PDF writer
# ---------------------------------------------------------------------------

class _PdfWriter:
    """
    Writes a minimal, valid PDF 1.4 file.

    Page size: A4 landscape (842 x 595 pts)
    Font: Helvetica (built-in, no embedding required)
    Content model: title, text lines and table rows, auto-pagination.
    """

    PAGE_W = 842
    PAGE_H = 595
    MARGIN_LEFT = 40
    MARGIN_RIGHT = 40
    MARGIN_TOP = 550
    MARGIN_BOTTOM = 40
    LINE_HEIGHT_NORMAL = 15
    LINE_HEIGHT_HEADING = 22
    FONT_SIZE_NORMAL = 9
    FONT_SIZE_TITLE = 15

    def __init__(self):
        self._objects: list[bytes] = []
        self._pages: list[int] = []
        self._current_stream_lines: list[str] = []
        self._y: float = self.MARGIN_TOP
        self._repeat_header: Optional[tuple[list[str], list[float]]] = None

    @property
    def content_width(self) -> float:
        return self.PAGE_W - self.MARGIN_LEFT - self.MARGIN_RIGHT

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def _add_object(self, content: str) -> int:
        """Add a PDF object and return its 1-based object ID."""
        self._objects.append(content.encode("latin-1"))
        return len(self._objects)

    def _push_text(self, text: str, x: float, *, bold: bool = False, size: Optional[int] = None) -> None:
        font = "/F2" if bold else "/F1"
        sz = size or self.FONT_SIZE_NORMAL
        self._current_stream_lines.append(
            f"BT {font} {sz} Tf {x:.2f} {self._y:.2f} Td {_pdf_str(text)} Tj ET"
        )

    def _push_hline(self, y: float) -> None:
        x1 = self.MARGIN_LEFT
        x2 = self.PAGE_W - self.MARGIN_RIGHT
        self._current_stream_lines.append(f"{x1} {y:.2f} m {x2} {y:.2f} l S")

    # -- page management -----------------------------------------------------

    def _finish_page(self) -> None:
        """Flush the content stream and register a page object."""
        stream_text = "\n".join(self._current_stream_lines)
        stream_id = self._add_object(
            f"<< /Length {len(stream_text.encode('latin-1'))} >>\nstream\n"
            + stream_text
            + "\nendstream"
        )
        page_id = self._add_object(
            f"<< /Type /Page /Parent 2 0 R "
            f"/MediaBox [0 0 {self.PAGE_W} {self.PAGE_H}] "
            f"/Contents {stream_id} 0 R "
            f"/Resources << /Font << "
            f"/F1 << /Type /Font /Subtype /Type1 /BaseFont /Helvetica >> "
            f"/F2 << /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold >> "
            f">> >> >>"
        )
        self._pages.append(page_id)
        self._current_stream_lines = []
        self._y = self.MARGIN_TOP

    def _ensure_space(self, needed: float) -> None:
        if self._y - needed < self.MARGIN_BOTTOM:
            self._finish_page()
            if self._repeat_header is not None:
                self._write_header(*self._repeat_header)

    # -- content helpers -----------------------------------------------------

    def add_title(self, text: str) -> None:
        self._push_text(text, self.MARGIN_LEFT, bold=True, size=self.FONT_SIZE_TITLE)
        self._y -= self.LINE_HEIGHT_HEADING

    def add_text(self, text: str) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL)
        self._push_text(text, self.MARGIN_LEFT)
        self._y -= self.LINE_HEIGHT_NORMAL

    def add_vspace(self, pts: float = 8) -> None:
        self._y -= pts

    def _write_header(self, columns: list[str], col_widths: list[float]) -> None:
        x = self.MARGIN_LEFT
        for col_text, width in zip(columns, col_widths):
            self._push_text(col_text, x, bold=True)
            x += width
        self._y -= self.LINE_HEIGHT_NORMAL - 4
        self._push_hline(self._y)
        self._y -= self.LINE_HEIGHT_NORMAL - 4

    def add_table_header(self, columns: list[str], col_widths: list[float]) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL * 2)
        self._write_header(columns, col_widths)
        self._repeat_header = (columns, col_widths)

    def add_table_row(self, cells: list[Any], col_widths: list[float]) -> None:
        self._ensure_space(self.LINE_HEIGHT_NORMAL)
        x = self.MARGIN_LEFT
        for cell_value, width in zip(cells, col_widths):
            text = "" if cell_value is None else str(cell_value)
            # ~5pt per character at 9pt Helvetica
            max_chars = max(4, int(width / 5))
            if len(text) > max_chars:
                text = text[: max_chars - 3] + "..."
            self._push_text(text, x)
            x += width
        self._y -= self.LINE_HEIGHT_NORMAL

    # -- finalise ------------------------------------------------------------

    def build(self) -> bytes:
        """Flush remaining content and return the complete PDF bytes."""
        if self._current_stream_lines or not self._pages:
            self._finish_page()
        return self._serialise()

    def _serialise(self) -> bytes:
        """
        Object layout:
          1: Catalog
          2: Pages
          3..N: content streams + page objects, references shifted by 2
        """
        kids = " ".join(f"{pid + 2} 0 R" for pid in self._pages)
        catalog_str = "<< /Type /Catalog /Pages 2 0 R >>"
        pages_str = f"<< /Type /Pages /Kids [{kids}] /Count {len(self._pages)} >>"

        def _shift_ref(m):
            return f"{int(m.group(1)) + 2} 0 R"

        bodies = [catalog_str.encode("latin-1"), pages_str.encode("latin-1")]
        page_ids = set(self._pages)
        for obj_id, obj_bytes in enumerate(self._objects, start=1):
            obj_str = obj_bytes.decode("latin-1")
            if obj_id in page_ids:
                # Parent stays object 2; only /Contents needs shifting
                head, _, tail = obj_str.partition("/Contents ")
                obj_str = head + "/Contents " + _REF.sub(_shift_ref, tail, count=1)
            bodies.append(obj_str.encode("latin-1"))

        out = io.BytesIO()
        out.write(b"%PDF-1.4\n")
        out.write(b"%\xe2\xe3\xcf\xd3\n")
        offsets: list[int] = []
        for obj_id, body in enumerate(bodies, start=1):
            offsets.append(out.tell())
            out.write(f"{obj_id} 0 obj\n".encode("latin-1"))
            out.write(body)
            out.write(b"\nendobj\n")

        xref_offset = out.tell()
        out.write(f"xref\n0 {len(bodies) + 1}\n".encode("latin-1"))
        out.write(b"0000000000 65535 f \n")
        for offset in offsets:
            out.write(f"{offset:010d} 00000 n \n".encode("latin-1"))
        out.write(
            f"trailer\n<< /Size {len(bodies) + 1} /Root 1 0 R >>\n"
            f"startxref\n{xref_offset}\n%%EOF\n".encode("latin-1")
        )
        return out.getvalue()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

# Relative column widths for EXPORT_COLUMNS
_COLUMN_WEIGHTS = [3, 1.4, 2, 2.2, 2, 2.4, 1.4]


def render_pdf(
    records: Iterable[AccessRecord],
    *,
    generated_at: datetime,
    title: str = "Visitor Access Logs",
) -> bytes:
    """Render records as a PDF table (Name, Role, Company, ... Status)."""
    rows: List[List[str]] = [export_row(r) for r in records]
    writer = _PdfWriter()
    writer.add_title(title)
    writer.add_text(
        f"Generated {generated_at.strftime('%Y-%m-%d %H:%M UTC')}  |  {len(rows)} records"
    )
    writer.add_vspace()

    total_weight = sum(_COLUMN_WEIGHTS)
    col_widths = [writer.content_width * w / total_weight for w in _COLUMN_WEIGHTS]
    writer.add_table_header(list(EXPORT_COLUMNS), col_widths)
    for row in rows:
        writer.add_table_row(row, col_widths)
    return writer.build()
