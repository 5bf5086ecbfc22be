import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.utils import duration_label, parse_datetime, ref_id, to_iso
from models.member import Member

GYM = "gym"
CLASS = "class"
PERSONAL_TRAINING = "personal_training"

# Types the attendance form offers. Records of any other type still load and display.
FORM_TYPES = (GYM, CLASS)

STATUS_CHECKED_IN = "checkedIn"
STATUS_CHECKED_OUT = "checkedOut"


@dataclass
class Attendance:
    """
    One visit: a member checked in (and maybe out) for the gym floor or a class.
    """
    id: Optional[str]
    member: Optional[str]  # member id
    check_in_time: Optional[datetime.datetime]
    check_out_time: Optional[datetime.datetime] = None
    attendance_type: str = GYM
    class_session: Optional[str] = None  # session id, only for 'class'
    class_name: Optional[str] = None
    notes: str = ""
    member_info: Optional[Member] = None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    @property
    def member_name(self) -> str:
        return self.member_info.full_name if self.member_info else "Unknown Member"

    @property
    def duration_label(self) -> str:
        return duration_label(self.check_in_time, self.check_out_time)

    @property
    def type_label(self) -> str:
        if self.attendance_type == GYM:
            return "Gym"
        if self.attendance_type == CLASS:
            return f"Class: {self.class_name or 'Unknown'}"
        return self.attendance_type

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Attendance":
        member = data.get("member")
        session = data.get("classSession")
        class_name = None
        if isinstance(session, dict):
            gym_class = session.get("class")
            class_name = gym_class.get("name") if isinstance(gym_class, dict) else session.get("name")

        return cls(
            id=ref_id(data),
            member=ref_id(member),
            member_info=Member.from_api(member) if isinstance(member, dict) else None,
            check_in_time=parse_datetime(data.get("checkInTime")),
            check_out_time=parse_datetime(data.get("checkOutTime")),
            attendance_type=data.get("attendanceType") or GYM,
            class_session=ref_id(session),
            class_name=class_name,
            notes=data.get("notes") or "",
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "member": self.member,
            "checkInTime": to_iso(self.check_in_time),
            "checkOutTime": to_iso(self.check_out_time),
            "attendanceType": self.attendance_type,
            "notes": self.notes,
        }
        # Only class attendance carries a session reference
        if self.attendance_type == CLASS:
            payload["classSession"] = self.class_session
        return payload
