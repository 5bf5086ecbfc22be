import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.utils import parse_datetime, ref_id, to_iso

POSITIONS = ("manager", "trainer", "receptionist", "maintenance", "nutritionist", "other")
PAYMENT_FREQUENCIES = ("hourly", "weekly", "biweekly", "monthly")
DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Address":
        data = data or {}
        return cls(
            street=data.get("street") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip_code=data.get("zipCode") or "",
            country=data.get("country") or "",
        )

    def to_payload(self) -> Dict[str, str]:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        }

    def __str__(self) -> str:
        parts = [self.street, self.city, self.state, self.zip_code, self.country]
        return ", ".join(p for p in parts if p)


@dataclass
class EmergencyContact:
    name: str = ""
    relationship: str = ""
    phone: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "EmergencyContact":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            relationship=data.get("relationship") or "",
            phone=data.get("phone") or "",
        )

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "relationship": self.relationship, "phone": self.phone}


@dataclass
class Salary:
    amount: Optional[float] = None
    payment_frequency: str = "monthly"

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Salary":
        data = data or {}
        return cls(amount=data.get("amount"), payment_frequency=data.get("paymentFrequency") or "monthly")

    def to_payload(self) -> Dict[str, Any]:
        return {"amount": self.amount, "paymentFrequency": self.payment_frequency}


@dataclass
class Certification:
    name: str
    issued_by: str = ""
    issue_date: Optional[datetime.datetime] = None
    expiry_date: Optional[datetime.datetime] = None
    description: str = ""
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Certification":
        return cls(
            id=ref_id(data),
            name=data.get("name", ""),
            issued_by=data.get("issuedBy") or "",
            issue_date=parse_datetime(data.get("issueDate")),
            expiry_date=parse_datetime(data.get("expiryDate")),
            description=data.get("description") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "issuedBy": self.issued_by,
            "issueDate": to_iso(self.issue_date),
            "expiryDate": to_iso(self.expiry_date),
            "description": self.description,
        }


@dataclass
class Shift:
    """One recurring weekly shift. Times are 'HH:MM' strings, as the backend stores them."""
    day: str
    start_time: str
    end_time: str
    location: str = ""
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Shift":
        return cls(
            id=ref_id(data),
            day=data.get("day", ""),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            location=data.get("location") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"day": self.day, "startTime": self.start_time, "endTime": self.end_time, "location": self.location}


def day_index(day: str) -> int:
    """Position of a weekday in Monday..Sunday order (unknown days sort last)."""
    names = [d.lower() for d in DAYS]
    day = (day or "").lower()
    return names.index(day) if day in names else len(names)


def sort_schedule(shifts: List[Shift]) -> List[Shift]:
    """Orders shifts Monday..Sunday, then by start time."""
    return sorted(shifts, key=lambda s: (day_index(s.day), s.start_time))


@dataclass
class Staff:
    """
    A staff member's profile. Certifications and schedule are edited through
    their own endpoints and are not part of the create/update payload.
    """
    id: Optional[str]
    first_name: str
    last_name: str
    email: str
    phone: str
    position: str
    specializations: List[str] = field(default_factory=list)
    hire_date: Optional[datetime.datetime] = None
    is_active: bool = True
    notes: str = ""
    address: Address = field(default_factory=Address)
    emergency_contact: EmergencyContact = field(default_factory=EmergencyContact)
    salary: Salary = field(default_factory=Salary)
    certifications: List[Certification] = field(default_factory=list)
    schedule: List[Shift] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Staff":
        return cls(
            id=ref_id(data),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            position=data.get("position", ""),
            specializations=list(data.get("specializations") or []),
            hire_date=parse_datetime(data.get("hireDate")),
            is_active=data.get("isActive", True),
            notes=data.get("notes") or "",
            address=Address.from_api(data.get("address")),
            emergency_contact=EmergencyContact.from_api(data.get("emergencyContact")),
            salary=Salary.from_api(data.get("salary")),
            certifications=[Certification.from_api(c) for c in data.get("certifications") or []],
            schedule=[Shift.from_api(s) for s in data.get("schedule") or []],
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "specializations": self.specializations,
            "hireDate": to_iso(self.hire_date),
            "isActive": self.is_active,
            "notes": self.notes,
            "address": self.address.to_payload(),
            "emergencyContact": self.emergency_contact.to_payload(),
            "salary": self.salary.to_payload(),
        }

    def add_specialization(self, value: str) -> bool:
        """Appends a trimmed, non-empty specialization. Returns False if nothing was added."""
        value = (value or "").strip()
        if not value:
            return False
        self.specializations.append(value)
        return True

    def remove_specialization(self, index: int) -> None:
        if 0 <= index < len(self.specializations):
            del self.specializations[index]
