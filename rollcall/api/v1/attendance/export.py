"""Spreadsheet and PDF renderings of a subject's attendance."""

import io
from datetime import date
from typing import Iterable, Optional, Sequence, Tuple

from openpyxl import Workbook
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from rollcall.core.stats import DateSummary

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"

SHEET_TITLE = "Attendance"
SHEET_HEADERS = ("Date", "Roll No", "Student Name", "Status")
PDF_HEADERS = ("Date", "Present Count", "Absent Count")

# (date, roll number, student name, status)
SheetRow = Tuple[date, Optional[str], str, str]


def build_attendance_xlsx(rows: Iterable[SheetRow]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(list(SHEET_HEADERS))
    for att_date, roll_number, name, status in rows:
        ws.append([att_date.isoformat(), roll_number or "", name, status])
    ws.column_dimensions["A"].width = 12
    ws.column_dimensions["B"].width = 12
    ws.column_dimensions["C"].width = 30
    ws.column_dimensions["D"].width = 10
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


def build_summary_pdf(subject_name: str, summaries: Sequence[DateSummary]) -> bytes:
    """One-table PDF: per-date present and absent counts, continuing onto new pages as needed."""
    bio = io.BytesIO()
    pdf = canvas.Canvas(bio, pagesize=A4)
    width, height = A4
    columns = (50, 200, 350)
    top = height - 50
    line = 20

    def header(y: float) -> float:
        pdf.setFont("Helvetica-Bold", 12)
        for x, text in zip(columns, PDF_HEADERS):
            pdf.drawString(x, y, text)
        pdf.setFont("Helvetica", 11)
        return y - line

    pdf.setTitle(f"Attendance - {subject_name}")
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawString(columns[0], top, f"Attendance Report: {subject_name}")
    y = header(top - 2 * line)
    for s in summaries:
        if y < 50:
            pdf.showPage()
            y = header(top)
        pdf.drawString(columns[0], y, s.date.isoformat())
        pdf.drawString(columns[1], y, str(s.total_present))
        pdf.drawString(columns[2], y, str(s.total_absent))
        y -= line
    pdf.showPage()
    pdf.save()
    return bio.getvalue()
