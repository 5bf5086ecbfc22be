import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.utils import parse_datetime, ref_id, to_iso
from models.staff import Address, EmergencyContact

MEMBER_STATUSES = ("active", "inactive", "frozen", "expired")
GENDERS = ("male", "female", "other", "prefer not to say")

DUE_OVERDUE = "overdue"
DUE_SOON = "due-soon"


@dataclass
class MedicalInfo:
    conditions: str = ""
    allergies: str = ""
    medications: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "MedicalInfo":
        data = data or {}
        return cls(
            conditions=data.get("conditions") or "",
            allergies=data.get("allergies") or "",
            medications=data.get("medications") or "",
        )

    def to_payload(self) -> Dict[str, str]:
        return {"conditions": self.conditions, "allergies": self.allergies, "medications": self.medications}


@dataclass
class Member:
    """
    A gym member.
    The backend populates the membership plan as an object on reads and
    expects only its id on writes.
    """
    id: Optional[str]
    first_name: str
    last_name: str
    email: str = ""
    phone: str = ""
    status: str = "active"
    membership_type: Optional[str] = None  # plan name, for display
    membership_id: Optional[str] = None
    custom_fee: Optional[float] = None
    start_date: Optional[datetime.datetime] = None
    end_date: Optional[datetime.datetime] = None
    date_of_birth: Optional[datetime.datetime] = None
    gender: str = ""
    address: Address = field(default_factory=Address)
    emergency_contact: EmergencyContact = field(default_factory=EmergencyContact)
    medical: MedicalInfo = field(default_factory=MedicalInfo)
    notes: str = ""
    created_at: Optional[datetime.datetime] = None
    # Only present on the fees-due listing
    days_remaining: Optional[int] = None
    due_status: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def due_label(self) -> str:
        if self.due_status == DUE_OVERDUE:
            return "Overdue"
        if self.due_status == DUE_SOON:
            return "Due Soon"
        return ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Member":
        membership = data.get("membershipType")
        return cls(
            id=ref_id(data),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            status=data.get("membershipStatus") or data.get("status") or "active",
            membership_type=membership.get("name") if isinstance(membership, dict) else None,
            membership_id=ref_id(membership),
            custom_fee=data.get("customFee"),
            start_date=parse_datetime(data.get("startDate")),
            end_date=parse_datetime(data.get("endDate")),
            date_of_birth=parse_datetime(data.get("dateOfBirth")),
            gender=data.get("gender") or "",
            address=Address.from_api(data.get("address")),
            emergency_contact=EmergencyContact.from_api(data.get("emergencyContact")),
            medical=MedicalInfo.from_api(data.get("medicalInformation")),
            notes=data.get("notes") or "",
            created_at=parse_datetime(data.get("createdAt")),
            days_remaining=data.get("daysRemaining"),
            due_status=data.get("dueStatus"),
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "membershipStatus": self.status,
            "customFee": self.custom_fee,
            "startDate": to_iso(self.start_date),
            "endDate": to_iso(self.end_date),
            "dateOfBirth": to_iso(self.date_of_birth),
            "address": self.address.to_payload(),
            "emergencyContact": self.emergency_contact.to_payload(),
            "medicalInformation": self.medical.to_payload(),
            "notes": self.notes,
        }
        # Blank references and enum values are rejected by the backend, so they are left out
        if self.membership_id:
            payload["membershipType"] = self.membership_id
        if self.gender:
            payload["gender"] = self.gender
        return payload
