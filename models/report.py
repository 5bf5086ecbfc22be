"""
Aggregate report payloads.
Each report exposes its chart series as lists of (label, value) tuples so the
chart widgets and the PDF exporter can consume them the same way.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from core.utils import hour_label

Series = List[Tuple[str, float]]

PERIODS = ("daily", "weekly", "monthly")


def _num(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class RevenueReport:
    period: str = "monthly"
    start_date: str = ""
    end_date: str = ""
    total_revenue: float = 0.0
    total_payments: int = 0
    data: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RevenueReport":
        return cls(
            period=data.get("period") or "monthly",
            start_date=data.get("startDate") or "",
            end_date=data.get("endDate") or "",
            total_revenue=_num(data.get("totalRevenue")),
            total_payments=int(_num(data.get("totalPayments"))),
            data=list(data.get("data") or []),
        )

    @property
    def series(self) -> Series:
        return [(str(row.get("date", "")), _num(row.get("totalRevenue"))) for row in self.data]


@dataclass
class MembershipReport:
    total_active: int = 0
    total_inactive: int = 0
    distribution: List[Dict[str, Any]] = field(default_factory=list)
    growth: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MembershipReport":
        return cls(
            total_active=int(_num(data.get("totalActiveMembers"))),
            total_inactive=int(_num(data.get("totalInactiveMembers"))),
            distribution=list(data.get("distribution") or []),
            growth=list(data.get("growth") or []),
        )

    @property
    def distribution_series(self) -> Series:
        return [(row.get("name") or "No Membership", _num(row.get("count"))) for row in self.distribution]

    @property
    def revenue_series(self) -> Series:
        return [(row.get("name") or "No Membership", _num(row.get("revenue"))) for row in self.distribution]

    @property
    def growth_series(self) -> Series:
        return [(str(row.get("date", "")), _num(row.get("newMembers"))) for row in self.growth]


@dataclass
class AttendanceReport:
    period: str = "daily"
    total_checkins: int = 0
    data: List[Dict[str, Any]] = field(default_factory=list)
    busiest_hours: List[Dict[str, Any]] = field(default_factory=list)
    busiest_days: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AttendanceReport":
        return cls(
            period=data.get("period") or "daily",
            total_checkins=int(_num(data.get("totalCheckins"))),
            data=list(data.get("data") or []),
            busiest_hours=list(data.get("busiestHours") or []),
            busiest_days=list(data.get("busiestDays") or []),
        )

    @property
    def series(self) -> Series:
        return [(str(row.get("date", "")), _num(row.get("count"))) for row in self.data]

    @property
    def hours_series(self) -> Series:
        return [(hour_label(int(row.get("hour", 0))), _num(row.get("count"))) for row in self.busiest_hours]

    @property
    def days_series(self) -> Series:
        return [(str(row.get("day", "")), _num(row.get("count"))) for row in self.busiest_days]


@dataclass
class ClassesReport:
    total_sessions: int = 0
    total_attendance: int = 0
    class_performance: List[Dict[str, Any]] = field(default_factory=list)
    instructor_performance: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ClassesReport":
        return cls(
            total_sessions=int(_num(data.get("totalSessions"))),
            total_attendance=int(_num(data.get("totalAttendance"))),
            class_performance=list(data.get("classPerformance") or []),
            instructor_performance=list(data.get("instructorPerformance") or []),
        )

    @property
    def class_series(self) -> Series:
        return [(row.get("className") or "Unknown Class", _num(row.get("totalAttendance")))
                for row in self.class_performance]

    @property
    def instructor_series(self) -> Series:
        return [(row.get("instructorName") or "Unknown Instructor", _num(row.get("totalAttendance")))
                for row in self.instructor_performance]
