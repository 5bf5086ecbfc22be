"""Payments: list/get/create/update/delete, payments of one member and payments within a date range."""
import datetime
from typing import Any, Dict, List, Optional, Tuple

from core.api_client import ApiClient, Page, normalize_page
from models.payment import Payment

# Date filter presets offered on the payments list
DATE_PRESETS = ("all", "today", "this_week", "this_month", "this_year", "custom")


def list_payments(client: ApiClient, page: int = 0, limit: int = 0,
                  filters: Optional[Dict[str, Any]] = None) -> Page:
    """All payments, newest first as the backend sorts them."""
    result = normalize_page(client.get("/api/payments"), keys=("payments", "data"))
    return Page(items=[Payment.from_api(p) for p in result.items], total=result.total)


def payments_in_range(client: ApiClient, start: datetime.date, end: datetime.date) -> Page:
    """Payments made between start and end, both days included."""
    params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
    result = normalize_page(client.get("/api/payments/date-range", params=params), keys=("payments", "data"))
    return Page(items=[Payment.from_api(p) for p in result.items], total=result.total)


def member_payments(client: ApiClient, member_id: str) -> List[Payment]:
    payload = client.get(f"/api/payments/member/{member_id}")
    return [Payment.from_api(p) for p in normalize_page(payload, keys=("payments", "data")).items]


def get_payment(client: ApiClient, payment_id: str) -> Payment:
    return Payment.from_api(client.get(f"/api/payments/{payment_id}"))


def create_payment(client: ApiClient, data: Dict[str, Any]) -> Payment:
    return Payment.from_api(client.post("/api/payments", data))


def update_payment(client: ApiClient, payment_id: str, data: Dict[str, Any]) -> Payment:
    return Payment.from_api(client.put(f"/api/payments/{payment_id}", data))


def delete_payment(client: ApiClient, payment_id: str) -> None:
    client.delete(f"/api/payments/{payment_id}")


def preset_range(preset: str, today: datetime.date) -> Optional[Tuple[datetime.date, datetime.date]]:
    """
    Turns a date filter preset into the (start, end) days it covers.
    Weeks start on Monday.

    Returns:
        The range, or None for 'all' and 'custom' (the caller supplies custom dates).
    """
    if preset == "today":
        return today, today
    if preset == "this_week":
        start = today - datetime.timedelta(days=today.weekday())
        return start, start + datetime.timedelta(days=6)
    if preset == "this_month":
        next_month = (today.replace(day=28) + datetime.timedelta(days=4)).replace(day=1)
        return today.replace(day=1), next_month - datetime.timedelta(days=1)
    if preset == "this_year":
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    return None
