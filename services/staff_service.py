"""
Staff members and their sub-resources.
Certifications and schedule shifts have their own endpoints and reply with
the changed item, which the detail screen patches into its list in place.
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from core.api_client import ApiClient, Page, normalize_page
from models.staff import Certification, Shift, Staff

# --- STAFF ---

def list_staff(client: ApiClient, page: int = 0, limit: int = 0,
               filters: Optional[Dict[str, Any]] = None) -> Page:
    result = normalize_page(client.get("/api/staff"), keys=("staff", "data"))
    return Page(items=[Staff.from_api(s) for s in result.items], total=result.total)


def search_staff(client: ApiClient, term: str) -> List[Staff]:
    payload = client.get(f"/api/staff/search/{quote(term.strip(), safe='')}")
    return [Staff.from_api(s) for s in normalize_page(payload, keys=("staff", "data")).items]


def get_staff(client: ApiClient, staff_id: str) -> Staff:
    return Staff.from_api(client.get(f"/api/staff/{staff_id}"))


def create_staff(client: ApiClient, data: Dict[str, Any]) -> Staff:
    return Staff.from_api(client.post("/api/staff", data))


def update_staff(client: ApiClient, staff_id: str, data: Dict[str, Any]) -> Staff:
    return Staff.from_api(client.put(f"/api/staff/{staff_id}", data))


def delete_staff(client: ApiClient, staff_id: str) -> None:
    client.delete(f"/api/staff/{staff_id}")


# --- CERTIFICATIONS ---

def add_certification(client: ApiClient, staff_id: str, data: Dict[str, Any]) -> Certification:
    return Certification.from_api(client.post(f"/api/staff/{staff_id}/certifications", data))


def update_certification(client: ApiClient, staff_id: str, cert_id: str, data: Dict[str, Any]) -> Certification:
    return Certification.from_api(client.put(f"/api/staff/{staff_id}/certifications/{cert_id}", data))


def delete_certification(client: ApiClient, staff_id: str, cert_id: str) -> None:
    client.delete(f"/api/staff/{staff_id}/certifications/{cert_id}")


# --- SCHEDULE ---

def add_shift(client: ApiClient, staff_id: str, data: Dict[str, Any]) -> Shift:
    return Shift.from_api(client.post(f"/api/staff/{staff_id}/schedule", data))


def update_shift(client: ApiClient, staff_id: str, shift_id: str, data: Dict[str, Any]) -> Shift:
    return Shift.from_api(client.put(f"/api/staff/{staff_id}/schedule/{shift_id}", data))


def delete_shift(client: ApiClient, staff_id: str, shift_id: str) -> None:
    client.delete(f"/api/staff/{staff_id}/schedule/{shift_id}")


# --- IN-PLACE LIST UPDATES ---

def replace_item(items: List[Any], updated: Any) -> List[Any]:
    """Returns a copy of items with the entry sharing updated.id swapped out."""
    return [updated if i.id == updated.id else i for i in items]


def remove_item(items: List[Any], item_id: str) -> List[Any]:
    return [i for i in items if i.id != item_id]
