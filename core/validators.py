"""
Client-side form validation.
Every validator takes the payload about to be sent (camelCase keys, as the
backend expects) and returns {field: message}. An empty dict means valid.
Field names match the backend's so server errors merge into the same map.
"""
import re
from typing import Any, Callable, Dict

from core.exceptions import ValidationError
from core.utils import parse_datetime

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")

Errors = Dict[str, str]


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_attendance(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}

    if _blank(data.get("member")):
        errors["member"] = "Member is required"
    if _blank(data.get("checkInTime")):
        errors["checkInTime"] = "Check-in time is required"
    if _blank(data.get("attendanceType")):
        errors["attendanceType"] = "Attendance type is required"
    if data.get("attendanceType") == "class" and _blank(data.get("classSession")):
        errors["classSession"] = "Class session is required for class attendance"

    check_in, check_out = data.get("checkInTime"), data.get("checkOutTime")
    if not _blank(check_in) and not _blank(check_out):
        try:
            if parse_datetime(check_out) <= parse_datetime(check_in):
                errors["checkOutTime"] = "Check-out time must be after check-in time"
        except (TypeError, ValueError):
            errors["checkOutTime"] = "Invalid check-out time"

    return errors


def _positive(data: Dict[str, Any], key: str, label: str, errors: Errors) -> None:
    value = data.get(key)
    if _blank(value):
        errors[key] = f"{label} is required"
        return
    try:
        if float(value) <= 0:
            errors[key] = f"{label} must be greater than 0"
    except (TypeError, ValueError):
        errors[key] = f"{label} must be a number"


def validate_class(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("name")):
        errors["name"] = "Class name is required"
    if _blank(data.get("category")):
        errors["category"] = "Category is required"
    _positive(data, "duration", "Duration", errors)
    _positive(data, "capacity", "Capacity", errors)
    return errors


def validate_staff(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("firstName")):
        errors["firstName"] = "First name is required"
    if _blank(data.get("lastName")):
        errors["lastName"] = "Last name is required"

    email = data.get("email")
    if _blank(email):
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    if _blank(data.get("phone")):
        errors["phone"] = "Phone number is required"
    if _blank(data.get("position")):
        errors["position"] = "Position is required"
    return errors


def validate_gym(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required"

    email = data.get("contactEmail")
    if _blank(email):
        errors["contactEmail"] = "Email is required"
    elif not is_valid_email(email):
        errors["contactEmail"] = "Please enter a valid email"
    return errors


def validate_certification(data: Dict[str, Any]) -> Errors:
    if _blank(data.get("name")):
        return {"name": "Certification name is required"}
    return {}


def validate_shift(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("day")):
        errors["day"] = "Day is required"
    if _blank(data.get("startTime")):
        errors["startTime"] = "Start time is required"
    if _blank(data.get("endTime")):
        errors["endTime"] = "End time is required"
    return errors


def validate_member(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("firstName")):
        errors["firstName"] = "First name is required"
    if _blank(data.get("lastName")):
        errors["lastName"] = "Last name is required"

    email = data.get("email")
    if _blank(email):
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    if _blank(data.get("phone")):
        errors["phone"] = "Phone number is required"

    start, end = data.get("startDate"), data.get("endDate")
    if not _blank(start) and not _blank(end):
        try:
            if parse_datetime(end) < parse_datetime(start):
                errors["endDate"] = "End date must be after start date"
        except (TypeError, ValueError):
            errors["endDate"] = "Invalid end date"
    return errors


def validate_membership(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("name")):
        errors["name"] = "Name is required"
    if _blank(data.get("description")):
        errors["description"] = "Description is required"

    price = data.get("price")
    if _blank(price):
        errors["price"] = "Price is required"
    else:
        try:
            if float(price) < 0:
                errors["price"] = "Price cannot be negative"
        except (TypeError, ValueError):
            errors["price"] = "Price must be a number"

    duration = data.get("duration") or {}
    if not duration.get("value"):
        errors["durationValue"] = "Duration value is required"
    if _blank(duration.get("unit")):
        errors["durationUnit"] = "Duration unit is required"
    return errors


def validate_payment(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("member")):
        errors["member"] = "Member is required"

    amount = data.get("amount")
    if _blank(amount):
        errors["amount"] = "Amount is required"
    else:
        try:
            float(amount)
        except (TypeError, ValueError):
            errors["amount"] = "Amount must be a number"

    if _blank(data.get("paymentMethod")):
        errors["paymentMethod"] = "Payment method is required"
    if _blank(data.get("paymentDate")):
        errors["paymentDate"] = "Payment date is required"
    if data.get("paymentFor") == "membership" and _blank(data.get("membership")):
        errors["membership"] = "Membership is required when payment is for membership"
    if data.get("paymentFor") == "personal_training" and _blank(data.get("staff")):
        errors["staff"] = "Staff member is required for personal training payments"
    return errors


def validate_session(data: Dict[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(data.get("class")):
        errors["class"] = "Class is required"
    if _blank(data.get("instructor")):
        errors["instructor"] = "Instructor is required"
    if _blank(data.get("startTime")):
        errors["startTime"] = "Start time is required"
    if _blank(data.get("endTime")):
        errors["endTime"] = "End time is required"
    elif not _blank(data.get("startTime")):
        try:
            if parse_datetime(data["endTime"]) <= parse_datetime(data["startTime"]):
                errors["endTime"] = "End time must be after start time"
        except (TypeError, ValueError):
            errors["endTime"] = "Invalid end time"
    if _blank(data.get("room")):
        errors["room"] = "Room is required"
    _positive(data, "maxCapacity", "Capacity", errors)
    return errors


def ensure_valid(validator: Callable[[Dict[str, Any]], Errors], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Runs a validator and returns the data unchanged when it passes.

    Raises:
        ValidationError: Carrying the field errors when anything is wrong.
    """
    errors = validator(data)
    if errors:
        raise ValidationError(errors)
    return data
