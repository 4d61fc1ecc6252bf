"""
Notes exports: CSV for all noted days and a monthly PDF summary.

Uses fpdf2 for the PDF table.
"""

import csv
import io
import logging
from collections.abc import Iterable, Mapping, Sequence

from fpdf import FPDF

from app.core.constants import MONTH_NAMES
from app.core.types import DayInfo

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("Date", "Weekday", "Shift", "Starred", "Notes")
PDF_COLUMNS = ("Date", "Day", "Shift", "Notes")

# Colors (RGB)
COLORS = {
    "header_bg": (22, 160, 133),
    "header_text": (255, 255, 255),
    "alt_row": (240, 240, 240),
}

# Column widths in mm (portrait A4, 182 mm usable)
PDF_WIDTHS = (22, 18, 22, 120)

# Height of one text line in a table row, in mm
LINE_HEIGHT = 8


class EmptyExportError(Exception):
    """Raised when there is nothing to export for the requested period."""


def _noted_days(days: Iterable[DayInfo], notes: Mapping[str, str]) -> list[tuple[DayInfo, str]]:
    result = []
    for day in days:
        note = notes.get(day["date_key"], "")
        if note.strip():
            result.append((day, note))
    return result


def generate_notes_csv(
    days: Iterable[DayInfo],
    notes: Mapping[str, str],
    starred: Mapping[str, bool],
) -> str:
    """
    CSV with one row per day that has a note.

    Columns: Date, Weekday, Shift, Starred, Notes. The csv module quotes
    fields with commas, quotes or newlines.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow(CSV_COLUMNS)

    for day, note in _noted_days(days, notes):
        writer.writerow(
            [
                day["date_key"],
                day["weekday_name"],
                day["shift_category"].value,
                "Yes" if starred.get(day["date_key"]) else "No",
                note,
            ]
        )

    return buffer.getvalue()


def month_title(month: str) -> str:
    """'2025-07' -> 'July 2025'."""
    year, month_number = month.split("-")
    return f"{MONTH_NAMES[int(month_number) - 1]} {year}"


def _pdf_text(value: str) -> str:
    # Core PDF fonts only cover latin-1
    return value.encode("latin-1", "replace").decode("latin-1")


def note_row_height(pdf: FPDF, text: str) -> float:
    """Height of a table row whose Notes cell wraps `text` in the current font."""
    lines = pdf.multi_cell(PDF_WIDTHS[3], LINE_HEIGHT, text, dry_run=True, output="LINES")
    return LINE_HEIGHT * max(1, len(lines))


class NotesPDF(FPDF):
    """Portrait A4 document with a page footer."""

    def __init__(self, title: str):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.title = title
        self.set_auto_page_break(auto=True, margin=15)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")


def generate_notes_pdf(
    month: str,
    days: Sequence[DayInfo],
    notes: Mapping[str, str],
) -> bytes:
    """
    Monthly notes summary as PDF.

    Args:
        month: Month key, e.g. "2025-07"
        days: Days of that month
        notes: All notes by date key

    Returns:
        PDF document bytes

    Raises:
        EmptyExportError: If no day of the month has a note
    """
    rows = _noted_days(days, notes)
    title = f"Notes Summary for {month_title(month)}"
    if not rows:
        raise EmptyExportError(f"No notes found for {month_title(month)} to generate a summary.")

    pdf = NotesPDF(title=title)
    pdf.alias_nb_pages()
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 12, _pdf_text(title), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # Header row
    pdf.set_font("Helvetica", "B", 10)
    pdf.set_fill_color(*COLORS["header_bg"])
    pdf.set_text_color(*COLORS["header_text"])
    for label, width in zip(PDF_COLUMNS, PDF_WIDTHS):
        pdf.cell(width, 8, label, border=1, fill=True)
    pdf.ln()

    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "", 10)
    for index, (day, note) in enumerate(rows):
        if index % 2:
            pdf.set_fill_color(*COLORS["alt_row"])
        else:
            pdf.set_fill_color(255, 255, 255)

        text = _pdf_text(note)
        height = note_row_height(pdf, text)
        pdf.cell(PDF_WIDTHS[0], height, f"{day['date'].day:02d}", border=1, fill=True)
        pdf.cell(PDF_WIDTHS[1], height, day["weekday_name"], border=1, fill=True)
        pdf.cell(PDF_WIDTHS[2], height, day["shift_category"].value, border=1, fill=True)
        pdf.multi_cell(PDF_WIDTHS[3], LINE_HEIGHT, text, border=1, fill=True, new_x="LMARGIN", new_y="NEXT")

    logger.info("Generated notes PDF for %s with %d rows", month, len(rows))
    return bytes(pdf.output())
