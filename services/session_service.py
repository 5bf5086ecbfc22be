"""
Scheduled class sessions and their enrollments.
Sessions live under /api/classes/sessions on the backend.
"""
import datetime
from typing import Any, Dict, List, Optional

from core.api_client import ApiClient, Page, normalize_page
from models.gym_class import ClassSession

BASE = "/api/classes/sessions"


def list_sessions(client: ApiClient, page: int = 0, limit: int = 0,
                  filters: Optional[Dict[str, Any]] = None) -> Page:
    result = normalize_page(client.get(f"{BASE}/all"), keys=("sessions", "data"))
    return Page(items=[ClassSession.from_api(s) for s in result.items], total=result.total)


def sessions_on(client: ApiClient, day: datetime.date) -> List[ClassSession]:
    payload = client.get(f"{BASE}/date/{day.isoformat()}")
    return [ClassSession.from_api(s) for s in normalize_page(payload, keys=("sessions", "data")).items]


def get_session(client: ApiClient, session_id: str) -> ClassSession:
    return ClassSession.from_api(client.get(f"{BASE}/{session_id}"))


def create_session(client: ApiClient, data: Dict[str, Any]) -> ClassSession:
    return ClassSession.from_api(client.post(BASE, data))


def update_session(client: ApiClient, session_id: str, data: Dict[str, Any]) -> ClassSession:
    return ClassSession.from_api(client.put(f"{BASE}/{session_id}", data))


def delete_session(client: ApiClient, session_id: str) -> None:
    client.delete(f"{BASE}/{session_id}")


# --- ENROLLMENT ---

def enroll(client: ApiClient, session_id: str, member_id: str) -> ClassSession:
    """
    Adds a member to the session.

    Returns:
        ClassSession: The session as stored after the change.
    """
    client.post(f"{BASE}/{session_id}/enroll", {"member": member_id})
    return get_session(client, session_id)


def unenroll(client: ApiClient, session_id: str, member_id: str) -> ClassSession:
    client.delete(f"{BASE}/{session_id}/enroll/{member_id}")
    return get_session(client, session_id)


def mark_attendance(client: ApiClient, session_id: str, member_id: str, attended: bool) -> ClassSession:
    client.put(f"{BASE}/{session_id}/attendance/{member_id}", {"attended": attended})
    return get_session(client, session_id)
