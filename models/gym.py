from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.utils import ref_id
from models.staff import Address


@dataclass
class Gym:
    """A tenant gym. Only a superadmin can list or change these."""
    id: Optional[str]
    name: str
    contact_email: str
    description: str = ""
    contact_phone: str = ""
    website: str = ""
    address: Address = field(default_factory=Address)
    is_active: bool = True

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Gym":
        return cls(
            id=ref_id(data),
            name=data.get("name", ""),
            description=data.get("description") or "",
            contact_email=data.get("contactEmail") or "",
            contact_phone=data.get("contactPhone") or "",
            website=data.get("website") or "",
            address=Address.from_api(data.get("address")),
            is_active=data.get("isActive", True),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "website": self.website,
            "address": self.address.to_payload(),
        }
