import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.utils import format_date, parse_datetime, ref_id, to_iso

CATEGORIES = ("yoga", "cardio", "strength", "hiit", "pilates", "dance", "martial_arts", "other")
DIFFICULTIES = ("beginner", "intermediate", "advanced", "all_levels")


@dataclass
class GymClass:
    """
    A class template (e.g. 'Morning Yoga') that sessions are scheduled from.
    """
    id: Optional[str]
    name: str
    category: str
    description: str = ""
    duration: Optional[int] = 60   # minutes
    capacity: Optional[int] = 20
    instructor: Optional[str] = None  # staff id
    instructor_name: str = ""
    difficulty: str = "beginner"
    equipment: List[str] = field(default_factory=list)
    image: str = ""
    is_active: bool = True

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "GymClass":
        instructor = data.get("instructor")
        name = ""
        if isinstance(instructor, dict):
            name = instructor.get("name") or f"{instructor.get('firstName', '')} {instructor.get('lastName', '')}".strip()

        return cls(
            id=ref_id(data),
            name=data.get("name", ""),
            category=data.get("category", ""),
            description=data.get("description") or "",
            duration=data.get("duration"),
            capacity=data.get("capacity"),
            instructor=ref_id(instructor),
            instructor_name=name,
            difficulty=data.get("difficulty") or "beginner",
            equipment=list(data.get("equipment") or []),
            image=data.get("image") or "",
            is_active=data.get("isActive", True),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "duration": self.duration,
            "capacity": self.capacity,
            "instructor": self.instructor or None,
            "difficulty": self.difficulty,
            "equipment": self.equipment,
            "image": self.image,
            "isActive": self.is_active,
        }


SESSION_STATUSES = ("scheduled", "in_progress", "completed", "cancelled")


@dataclass
class Enrollment:
    member: str
    member_name: str = ""
    enrolled_at: Optional[datetime.datetime] = None
    attended: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Enrollment":
        member = data.get("member")
        name = ""
        if isinstance(member, dict):
            name = f"{member.get('firstName', '')} {member.get('lastName', '')}".strip()
        return cls(
            member=ref_id(member),
            member_name=name or "Unknown Member",
            enrolled_at=parse_datetime(data.get("enrollmentDate")),
            attended=bool(data.get("attended")),
        )


@dataclass
class ClassSession:
    """
    A scheduled occurrence of a class.
    The attendance form only needs the id, the class name and the start time;
    the schedule screens use the rest.
    """
    id: Optional[str]
    class_name: str
    start_time: Optional[datetime.datetime] = None
    end_time: Optional[datetime.datetime] = None
    class_id: Optional[str] = None
    instructor: Optional[str] = None
    instructor_name: str = ""
    room: str = ""
    max_capacity: Optional[int] = None
    status: str = "scheduled"
    notes: str = ""
    enrollments: List[Enrollment] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.class_name} - {format_date(self.start_time, include_time=True)}"

    @property
    def enrolled_count(self) -> int:
        return len(self.enrollments)

    @property
    def is_full(self) -> bool:
        return bool(self.max_capacity) and self.enrolled_count >= self.max_capacity

    def is_enrolled(self, member_id: str) -> bool:
        return any(e.member == member_id for e in self.enrollments)

    def status_label(self, now: Optional[datetime.datetime] = None) -> str:
        """Cancelled, Completed (by status or because it has ended), Full or Upcoming."""
        if self.status == "cancelled":
            return "Cancelled"
        now = now or datetime.datetime.now(datetime.timezone.utc)
        ended = self.end_time is not None and self.end_time.tzinfo is not None and self.end_time < now
        if self.status == "completed" or ended:
            return "Completed"
        if self.is_full:
            return "Full"
        return "Upcoming"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ClassSession":
        gym_class = data.get("class")
        name = gym_class.get("name") if isinstance(gym_class, dict) else data.get("name")
        instructor = data.get("instructor")
        instructor_name = ""
        if isinstance(instructor, dict):
            instructor_name = f"{instructor.get('firstName', '')} {instructor.get('lastName', '')}".strip()
        return cls(
            id=ref_id(data),
            class_name=name or "Unknown Class",
            start_time=parse_datetime(data.get("startTime")),
            end_time=parse_datetime(data.get("endTime")),
            class_id=ref_id(gym_class),
            instructor=ref_id(instructor),
            instructor_name=instructor_name,
            room=data.get("room") or "",
            max_capacity=data.get("maxCapacity"),
            status=data.get("status") or "scheduled",
            notes=data.get("notes") or "",
            enrollments=[Enrollment.from_api(e) for e in data.get("enrolledMembers") or []],
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "class": self.class_id,
            "instructor": self.instructor,
            "startTime": to_iso(self.start_time),
            "endTime": to_iso(self.end_time),
            "room": self.room,
            "maxCapacity": self.max_capacity,
            "status": self.status,
            "notes": self.notes,
        }
