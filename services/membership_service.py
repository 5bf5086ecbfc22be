"""Membership plans: list/get/create/update/delete plus the active plans offered on the member form."""
from typing import Any, Dict, List, Optional

from core.api_client import ApiClient, Page, normalize_page
from models.membership import Membership


def list_memberships(client: ApiClient, page: int = 0, limit: int = 0,
                     filters: Optional[Dict[str, Any]] = None) -> Page:
    """All plans; the list screen filters and pages them locally."""
    result = normalize_page(client.get("/api/memberships"), keys=("memberships", "data"))
    return Page(items=[Membership.from_api(m) for m in result.items], total=result.total)


def active_memberships(client: ApiClient) -> List[Membership]:
    payload = client.get("/api/memberships/status/active")
    return [Membership.from_api(m) for m in normalize_page(payload, keys=("memberships", "data")).items]


def get_membership(client: ApiClient, membership_id: str) -> Membership:
    return Membership.from_api(client.get(f"/api/memberships/{membership_id}"))


def create_membership(client: ApiClient, data: Dict[str, Any]) -> Membership:
    return Membership.from_api(client.post("/api/memberships", data))


def update_membership(client: ApiClient, membership_id: str, data: Dict[str, Any]) -> Membership:
    return Membership.from_api(client.put(f"/api/memberships/{membership_id}", data))


def delete_membership(client: ApiClient, membership_id: str) -> None:
    client.delete(f"/api/memberships/{membership_id}")
