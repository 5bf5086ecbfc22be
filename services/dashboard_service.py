"""Home screen figures: headline stats, newest members and today's sessions."""
import datetime
from typing import List

from core.api_client import ApiClient
from models.dashboard import Dashboard, DashboardStats, RecentMember
from services import member_service, session_service


def get_stats(client: ApiClient) -> DashboardStats:
    return DashboardStats.from_api(client.get("/api/dashboard/stats"))


def recent_members(client: ApiClient, limit: int = 5) -> List[RecentMember]:
    return [RecentMember.from_member(m) for m in member_service.recent_members(client)[:limit]]


def load_dashboard(client: ApiClient, today: datetime.date) -> Dashboard:
    """
    Fetches everything the dashboard shows.

    Raises:
        ApiError: If any of the three calls fails; the screen then shows one error.
    """
    return Dashboard(
        stats=get_stats(client),
        recent_members=recent_members(client),
        todays_sessions=session_service.sessions_on(client, today),
    )
