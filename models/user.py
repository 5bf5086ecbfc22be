from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from core.utils import ref_id


class Role(str, Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    TRAINER = "trainer"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Role":
        try:
            return cls(raw or "staff")
        except ValueError:
            return cls.STAFF


# Roles that see add/edit/delete/checkout controls on the resource lists
MODIFY_ROLES = (Role.ADMIN, Role.MANAGER)


@dataclass
class User:
    """The logged-in account, as returned by GET /api/auth."""
    id: str
    name: str
    email: str
    role: Role = Role.STAFF
    gym: Optional[str] = None
    gym_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        gym = data.get("gym")
        return cls(
            id=ref_id(data),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=Role.parse(data.get("role")),
            gym=ref_id(gym),
            gym_name=gym.get("name", "") if isinstance(gym, dict) else "",
        )

    @property
    def is_superadmin(self) -> bool:
        return self.role == Role.SUPERADMIN

    def has_role(self, roles: Iterable[Role]) -> bool:
        return self.role in tuple(roles)

    @property
    def can_modify(self) -> bool:
        return self.has_role(MODIFY_ROLES)
