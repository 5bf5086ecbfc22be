import datetime
from pathlib import Path
from typing import Any, List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

import config
from core.utils import format_currency, format_date
from models.report import AttendanceReport, ClassesReport, MembershipReport, RevenueReport, Series

Rows = List[Tuple[str, str]]
Sections = List[Tuple[str, Series]]


def create_report_pdf(save_path: Path, title: str, summary: Rows, sections: Sections) -> None:
    """
    Writes a report as a simple tabular PDF.

    Args:
        save_path (Path): Where the PDF is written. Parent folders are created.
        title (str): Heading, e.g. 'Revenue Report'.
        summary (list): (label, value) pairs printed under the heading.
        sections (list): (section title, series) pairs, one table each.
    """
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(save_path), pagesize=A4)
    w, h = A4
    y = h - 50

    # --- HEADER ---
    c.setFont("Helvetica-Bold", 18)
    c.setFillColorRGB(0.1, 0.46, 0.82)
    c.drawString(60, y, f"{config.APP_NAME} - {title}")

    y -= 18
    c.setFont("Helvetica-Oblique", 9)
    c.setFillColorRGB(0.3, 0.3, 0.3)
    c.drawString(60, y, f"Generated {format_date(datetime.datetime.now(), include_time=True)}")

    # --- SUMMARY ---
    y -= 30
    c.setFont("Helvetica", 12)
    c.setFillColorRGB(0, 0, 0)
    for label, value in summary:
        c.drawString(60, y, f"{label}: {value}")
        y -= 18

    # --- SECTIONS ---
    for section_title, series in sections:
        y -= 14
        if y < 100:
            c.showPage()
            y = h - 50
        c.setFont("Helvetica-Bold", 13)
        c.drawString(60, y, section_title)
        y -= 18
        c.setFont("Helvetica", 10)

        if not series:
            c.drawString(70, y, "No data for this period")
            y -= 14
            continue

        for label, value in series:
            if y < 60:
                c.showPage()
                y = h - 50
                c.setFont("Helvetica", 10)
            c.drawString(70, y, str(label))
            c.drawRightString(w - 60, y, _number(value))
            y -= 14

    c.save()


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:,.2f}"


# --- PER-REPORT LAYOUTS ---

def report_layout(report: Any) -> Tuple[str, Rows, Sections]:
    """
    Picks the title, summary lines and tables for a report object.

    Raises:
        TypeError: If the object is not one of the known reports.
    """
    if isinstance(report, RevenueReport):
        return "Revenue Report", [
            ("Period", report.period.title()),
            ("Total Revenue", format_currency(report.total_revenue, config.CURRENCY)),
            ("Total Payments", str(report.total_payments)),
        ], [("Revenue", report.series)]

    if isinstance(report, MembershipReport):
        return "Membership Report", [
            ("Active Members", str(report.total_active)),
            ("Inactive Members", str(report.total_inactive)),
        ], [
            ("Members per Plan", report.distribution_series),
            ("Revenue per Plan", report.revenue_series),
            ("New Members", report.growth_series),
        ]

    if isinstance(report, AttendanceReport):
        return "Attendance Report", [
            ("Period", report.period.title()),
            ("Total Check-ins", str(report.total_checkins)),
        ], [
            ("Check-ins", report.series),
            ("Busiest Hours", report.hours_series),
            ("Busiest Days", report.days_series),
        ]

    if isinstance(report, ClassesReport):
        return "Classes Report", [
            ("Total Sessions", str(report.total_sessions)),
            ("Total Attendance", str(report.total_attendance)),
        ], [
            ("Attendance per Class", report.class_series),
            ("Attendance per Instructor", report.instructor_series),
        ]

    raise TypeError(f"Unsupported report: {type(report).__name__}")


def export_report(save_path: Path, report: Any) -> str:
    """
    Exports any report to PDF.

    Returns:
        str: The written file path.
    """
    title, summary, sections = report_layout(report)
    create_report_pdf(Path(save_path), title, summary, sections)
    return str(save_path)
