import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.gym_class import ClassSession
from models.member import Member


@dataclass
class DashboardStats:
    active_members: int = 0
    total_revenue: float = 0
    active_classes: int = 0
    check_ins_today: int = 0
    upcoming_sessions: int = 0
    membership_growth: float = 0  # percent, month over month
    fees_due_count: int = 0
    monthly_expenses: float = 0

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "DashboardStats":
        data = data or {}
        return cls(
            active_members=data.get("activeMembers") or 0,
            total_revenue=data.get("totalRevenue") or 0,
            active_classes=data.get("activeClasses") or 0,
            check_ins_today=data.get("checkInsToday") or 0,
            upcoming_sessions=data.get("upcomingSessions") or 0,
            membership_growth=data.get("membershipGrowth") or 0,
            fees_due_count=data.get("feesDueCount") or 0,
            monthly_expenses=data.get("monthlyExpenses") or 0,
        )

    @property
    def growth_label(self) -> str:
        sign = "+" if self.membership_growth > 0 else ""
        return f"{sign}{self.membership_growth:g}%"


@dataclass
class RecentMember:
    id: Optional[str]
    name: str
    joined: Optional[datetime.datetime] = None
    plan: str = "No Plan"

    @classmethod
    def from_member(cls, member: Member) -> "RecentMember":
        return cls(id=member.id, name=member.full_name, joined=member.created_at,
                   plan=member.membership_type or "No Plan")


@dataclass
class Dashboard:
    """Everything the home screen shows, fetched in one go."""
    stats: DashboardStats
    recent_members: List[RecentMember] = field(default_factory=list)
    todays_sessions: List[ClassSession] = field(default_factory=list)
