import pytest

from models.report import AttendanceReport, ClassesReport, MembershipReport, RevenueReport
from services import pdf_service


@pytest.mark.parametrize("report, title", [
    (RevenueReport(total_revenue=1500, data=[{"date": "2025-03", "totalRevenue": 1500}]), "Revenue Report"),
    (MembershipReport(total_active=3), "Membership Report"),
    (AttendanceReport(busiest_days=[{"day": "Monday", "count": 40}]), "Attendance Report"),
    (ClassesReport(), "Classes Report"),
])
def test_export_writes_a_pdf(tmp_path, report, title):
    path = tmp_path / "out" / "report.pdf"
    written = pdf_service.export_report(path, report)

    assert written == str(path)
    assert path.read_bytes().startswith(b"%PDF")
    assert pdf_service.report_layout(report)[0] == title


def test_revenue_summary_is_formatted():
    _, summary, sections = pdf_service.report_layout(RevenueReport(period="weekly", total_revenue=1234.5, total_payments=2))
    assert ("Period", "Weekly") in summary
    assert ("Total Revenue", "Rs. 1,234.50") in summary
    assert sections == [("Revenue", [])]


def test_long_reports_span_pages(tmp_path):
    rows = [{"date": f"day {i}", "count": i} for i in range(120)]
    path = tmp_path / "long.pdf"
    pdf_service.export_report(path, AttendanceReport(data=rows))
    assert path.read_bytes().count(b"/Type /Page") > 2


def test_unknown_report_is_rejected(tmp_path):
    with pytest.raises(TypeError):
        pdf_service.export_report(tmp_path / "x.pdf", {"totalRevenue": 1})
    assert not (tmp_path / "x.pdf").exists()
