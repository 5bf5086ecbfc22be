"""Class templates and the trainer lookup for the class form."""
from typing import Any, Dict, List, Optional

from core.api_client import ApiClient, Page, normalize_page
from models.gym_class import GymClass
from models.staff import Staff


def list_classes(client: ApiClient, page: int = 0, limit: int = 0,
                 filters: Optional[Dict[str, Any]] = None) -> Page:
    """All classes; the list screen filters and pages them locally."""
    result = normalize_page(client.get("/api/classes"), keys=("classes", "data"))
    return Page(items=[GymClass.from_api(c) for c in result.items], total=result.total)


def get_class(client: ApiClient, class_id: str) -> GymClass:
    return GymClass.from_api(client.get(f"/api/classes/{class_id}"))


def create_class(client: ApiClient, data: Dict[str, Any]) -> GymClass:
    return GymClass.from_api(client.post("/api/classes", data))


def update_class(client: ApiClient, class_id: str, data: Dict[str, Any]) -> GymClass:
    return GymClass.from_api(client.put(f"/api/classes/{class_id}", data))


def delete_class(client: ApiClient, class_id: str) -> None:
    client.delete(f"/api/classes/{class_id}")


def list_instructors(client: ApiClient) -> List[Staff]:
    payload = client.get("/api/staff", params={"role": "trainer"})
    return [Staff.from_api(s) for s in normalize_page(payload, keys=("staff", "data")).items]


def categories_of(classes: List[GymClass]) -> List[str]:
    """Distinct categories present in the loaded classes, sorted."""
    return sorted({c.category for c in classes if c.category})
