import calendar
import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.utils import format_currency, ref_id

DURATION_UNITS = ("days", "weeks", "months", "years")


def add_months(start: datetime.datetime, months: int) -> datetime.datetime:
    """Same day n months later, clamped to the month's last day (Jan 31 + 1 month -> Feb 28/29)."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


@dataclass
class Membership:
    """A membership plan members subscribe to."""
    id: Optional[str]
    name: str
    description: str = ""
    price: Optional[float] = None
    duration_value: Optional[int] = 1
    duration_unit: str = "months"
    features: List[str] = field(default_factory=list)
    classes_included: int = 0
    personal_training_included: int = 0
    discounts: float = 0
    is_active: bool = True

    @property
    def duration_label(self) -> str:
        """Example: (1, 'months') -> '1 month', (3, 'months') -> '3 months'."""
        if not self.duration_value:
            return "N/A"
        unit = self.duration_unit or "months"
        if self.duration_value == 1:
            unit = unit.rstrip("s")
        return f"{self.duration_value} {unit}"

    @property
    def label(self) -> str:
        return f"{self.name} ({format_currency(self.price)})"

    def end_date(self, start: datetime.datetime) -> datetime.datetime:
        """When a membership bought on start runs out."""
        value = self.duration_value or 0
        if self.duration_unit == "days":
            return start + datetime.timedelta(days=value)
        if self.duration_unit == "weeks":
            return start + datetime.timedelta(weeks=value)
        if self.duration_unit == "years":
            return add_months(start, 12 * value)
        return add_months(start, value)

    @classmethod
    def custom_plan(cls, fee: float, base: Optional["Membership"] = None) -> "Membership":
        """
        A one-off plan for a member with a special fee.
        It copies the base plan's terms when there is one, otherwise one month.
        """
        plan = cls(
            id=None,
            name=f"Custom Plan - {fee:.2f}",
            description=f"Custom membership plan with fee of {fee:.2f}",
            price=fee,
        )
        if base is not None:
            plan.duration_value = base.duration_value
            plan.duration_unit = base.duration_unit
            plan.features = list(base.features)
            plan.classes_included = base.classes_included
            plan.personal_training_included = base.personal_training_included
            plan.discounts = base.discounts
        return plan

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Membership":
        duration = data.get("duration")
        if not isinstance(duration, dict):
            duration = {"value": duration}
        return cls(
            id=ref_id(data),
            name=data.get("name", ""),
            description=data.get("description") or "",
            price=data.get("price"),
            duration_value=duration.get("value"),
            duration_unit=duration.get("unit") or "months",
            features=list(data.get("features") or []),
            classes_included=data.get("classesIncluded") or 0,
            personal_training_included=data.get("personalTrainingIncluded") or 0,
            discounts=data.get("discounts") or 0,
            is_active=data.get("isActive", True),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "duration": {"value": self.duration_value, "unit": self.duration_unit},
            "features": self.features,
            "classesIncluded": self.classes_included,
            "personalTrainingIncluded": self.personal_training_included,
            "discounts": self.discounts,
            "isActive": self.is_active,
        }
