"""Aggregate reports for the reports screen."""
import datetime
from typing import Optional

from core.api_client import ApiClient
from models.report import AttendanceReport, ClassesReport, MembershipReport, RevenueReport


def _range(period: Optional[str], start: Optional[datetime.date], end: Optional[datetime.date]):
    return {
        "period": period,
        "startDate": start.isoformat() if start else None,
        "endDate": end.isoformat() if end else None,
    }


def revenue_report(client: ApiClient, period: str = "monthly",
                   start: Optional[datetime.date] = None, end: Optional[datetime.date] = None) -> RevenueReport:
    return RevenueReport.from_api(client.get("/api/reports/revenue", params=_range(period, start, end)) or {})


def membership_report(client: ApiClient) -> MembershipReport:
    return MembershipReport.from_api(client.get("/api/reports/membership") or {})


def attendance_report(client: ApiClient, period: str = "daily",
                      start: Optional[datetime.date] = None, end: Optional[datetime.date] = None) -> AttendanceReport:
    return AttendanceReport.from_api(client.get("/api/reports/attendance", params=_range(period, start, end)) or {})


def classes_report(client: ApiClient, start: Optional[datetime.date] = None,
                   end: Optional[datetime.date] = None) -> ClassesReport:
    return ClassesReport.from_api(client.get("/api/reports/classes", params=_range(None, start, end)) or {})
