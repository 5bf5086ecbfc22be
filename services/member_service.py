"""
Members: the member list and its filters, the member form (including the
custom fee flow) and the member picker used by the attendance and payment forms.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.api_client import ApiClient, Page, normalize_page
from core.exceptions import ApiError
from models.member import Member
from models.membership import Membership
from services import membership_service

logger = logging.getLogger(__name__)

DEFAULT_PICKER_LIMIT = 50


def _page(payload: Any) -> Page:
    result = normalize_page(payload, keys=("members", "data"))
    return Page(items=[Member.from_api(m) for m in result.items], total=result.total)


def list_members(client: ApiClient, page: int = 0, limit: int = 0,
                 filters: Optional[Dict[str, Any]] = None) -> Page:
    """
    Fetches members sorted by first name.
    A limit of 0 asks the backend for everyone; paging then happens locally.
    """
    params = {"sort": "firstName", "limit": limit or None, "skip": page * limit if limit else None}
    return _page(client.get("/api/members", params=params))


def fees_due(client: ApiClient, page: int = 0, limit: int = 0,
             filters: Optional[Dict[str, Any]] = None) -> Page:
    """Members whose fee is overdue or due soon, with daysRemaining and dueStatus set."""
    return _page(client.get("/api/members/fees-due"))


def members_by_status(client: ApiClient, status: str) -> List[Member]:
    return _page(client.get(f"/api/members/status/{status}")).items


def recent_members(client: ApiClient) -> List[Member]:
    return _page(client.get("/api/members/recent")).items


def find_members(client: ApiClient, term: str) -> List[Member]:
    """Backend search behind the member list's Search button."""
    return _page(client.get(f"/api/members/search/{term.strip()}")).items


def search_members(client: ApiClient, term: str, has_selection: bool = False) -> List[Member]:
    """
    Finds members for the picker.
    A blank term with nothing selected returns the first members alphabetically.
    """
    term = (term or "").strip()
    if not term and not has_selection:
        payload = client.get("/api/members", params={"limit": DEFAULT_PICKER_LIMIT, "sort": "firstName"})
    else:
        payload = client.get("/api/members/search", params={"term": term})
    return _page(payload).items


def get_member(client: ApiClient, member_id: str) -> Member:
    return Member.from_api(client.get(f"/api/members/{member_id}"))


@dataclass
class CreatedMember:
    """Outcome of creating a member. The custom plan part may fail on its own."""
    member: Member
    custom_plan: Optional[Membership] = None
    custom_plan_error: Optional[str] = None


def create_member(client: ApiClient, data: Dict[str, Any],
                  base_plan: Optional[Membership] = None) -> CreatedMember:
    """
    Creates the member. With a custom fee it then creates a one-off plan at that
    price (copying the chosen plan's terms) and assigns it to the new member.

    Raises:
        ApiError: Only if the member itself could not be created.
    """
    result = CreatedMember(Member.from_api(client.post("/api/members", data)))
    fee = data.get("customFee")
    if not fee:
        return result

    try:
        plan = membership_service.create_membership(client, Membership.custom_plan(float(fee), base_plan).to_payload())
        client.put(f"/api/members/{result.member.id}", {"membershipType": plan.id})
        result.custom_plan = plan
    except ApiError as e:
        logger.warning("Custom plan for member %s failed: %s", result.member.id, e.message)
        result.custom_plan_error = e.message
    return result


def update_member(client: ApiClient, member_id: str, data: Dict[str, Any]) -> Member:
    return Member.from_api(client.put(f"/api/members/{member_id}", data))


def delete_member(client: ApiClient, member_id: str) -> None:
    client.delete(f"/api/members/{member_id}")
