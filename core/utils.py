import datetime
import re
from typing import Any, Optional, Union

DateLike = Union[datetime.datetime, datetime.date, str]


def parse_datetime(value: Optional[DateLike]) -> Optional[datetime.datetime]:
    """
    Converts a backend timestamp into a datetime.
    Accepts ISO 8601 strings (including the 'Z' suffix Mongo/Express emits),
    datetimes, and plain dates (taken as midnight).

    Returns:
        datetime or None if value is empty.

    Raises:
        ValueError: If the string is not a valid ISO timestamp.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


def to_iso(value: Optional[datetime.datetime]) -> Optional[str]:
    """Serializes a datetime for a JSON payload (None stays None)."""
    return value.isoformat() if value else None


def combine_date_time(date: datetime.date, time: datetime.time) -> datetime.datetime:
    """
    Builds a single timestamp from separately edited date and time parts.
    Seconds are dropped, matching what the time pickers can express.
    """
    return datetime.datetime(date.year, date.month, date.day, time.hour, time.minute)


def format_date(value: Optional[DateLike], include_time: bool = False) -> str:
    """
    Formats a date to a readable string.
    Example: 'Mar 5, 2025' or 'Mar 5, 2025, 6:30 PM' with include_time.
    """
    if not value:
        return "N/A"
    try:
        dt = parse_datetime(value)
    except (TypeError, ValueError):
        return "Invalid date"

    text = f"{dt.strftime('%b')} {dt.day}, {dt.year}"
    if include_time:
        hour = dt.hour % 12 or 12
        suffix = "AM" if dt.hour < 12 else "PM"
        text += f", {hour}:{dt.minute:02d} {suffix}"
    return text


def format_currency(value: Optional[Any], currency: str = "PKR") -> str:
    """
    Formats a money amount. Rupees are shown with the 'Rs.' prefix.
    Example: 1234.5 -> 'Rs. 1,234.50'
    """
    if value is None:
        return "N/A"
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return f"Rs. {value}"

    symbol = "Rs." if currency.upper() == "PKR" else currency.upper()
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {abs(amount):,.2f}"


def format_phone(phone: Optional[str]) -> str:
    """
    Formats a 10 digit phone number as (XXX) XXX-XXXX.
    Anything else is returned unchanged.
    """
    if not phone:
        return ""
    cleaned = re.sub(r"\D", "", phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone


def capitalize_words(text: Optional[str]) -> str:
    """Capitalizes the first letter of each word and lowercases the rest."""
    if not text:
        return ""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def humanize(value: Optional[str]) -> str:
    """Turns a backend enum value into a label. Example: 'martial_arts' -> 'Martial Arts'."""
    return capitalize_words((value or "").replace("_", " "))


def hour_label(hour: int) -> str:
    """
    Labels an hour of the day for charts.
    Example: 6 -> '6 AM', 12 -> '12 PM', 15 -> '3 PM'.
    """
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def duration_label(start: Optional[datetime.datetime], end: Optional[datetime.datetime]) -> str:
    """
    Calculates the time between check-in and check-out.
    Returns 'N/A' if either side is missing.
    """
    if not start or not end:
        return "N/A"
    minutes = int((end - start).total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60}m"


def ref_id(ref: Any) -> Optional[str]:
    """
    Returns the id of a reference field.
    The backend sends either the bare id or the populated object.
    """
    if isinstance(ref, dict):
        return ref.get("_id") or ref.get("id")
    return ref or None


def to_local(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Converts an aware timestamp to naive local time for the date/time pickers."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
