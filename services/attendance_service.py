"""Attendance records: list/get/create/update/delete plus check-out."""
from typing import Any, Dict, List, Optional

from core.api_client import ApiClient, Page, normalize_page
from core.exceptions import NotFoundError
from models.attendance import Attendance
from models.gym_class import ClassSession

# --- ATTENDANCE RECORDS ---

def list_attendance(client: ApiClient, page: int = 0, limit: int = 10,
                    filters: Optional[Dict[str, Any]] = None) -> Page:
    """
    Fetches one page of attendance records, newest first.

    Args:
        client (ApiClient): Authenticated client.
        page (int): Zero-based page index (the API counts from 1).
        limit (int): Rows per page.
        filters (dict, optional): 'status' ('checkedIn'/'checkedOut') and 'date' (YYYY-MM-DD).

    Returns:
        Page: Items are Attendance objects.
    """
    filters = filters or {}
    params = {"page": page + 1, "limit": limit, "status": filters.get("status"), "date": filters.get("date")}
    result = normalize_page(client.get("/api/attendance", params=params), keys=("attendance", "data"))
    return Page(items=[Attendance.from_api(r) for r in result.items], total=result.total)


def get_attendance(client: ApiClient, record_id: str) -> Attendance:
    return Attendance.from_api(client.get(f"/api/attendance/{record_id}"))


def create_attendance(client: ApiClient, data: Dict[str, Any]) -> Attendance:
    return Attendance.from_api(client.post("/api/attendance", data))


def update_attendance(client: ApiClient, record_id: str, data: Dict[str, Any]) -> Attendance:
    return Attendance.from_api(client.put(f"/api/attendance/{record_id}", data))


def delete_attendance(client: ApiClient, record_id: str) -> None:
    client.delete(f"/api/attendance/{record_id}")


def checkout(client: ApiClient, record_id: str) -> Any:
    """Stamps the check-out time on the server side."""
    return client.put(f"/api/attendance/checkout/{record_id}")


# --- FORM LOOKUPS ---

def active_sessions(client: ApiClient) -> List[ClassSession]:
    """
    Class sessions selectable for class attendance.
    Backends without the endpoint simply offer none.
    """
    try:
        payload = client.get("/api/classes/sessions/active")
    except NotFoundError:
        return []
    return [ClassSession.from_api(s) for s in normalize_page(payload, keys=("sessions", "data")).items]
