"""Gym tenants. Every endpoint here requires a superadmin token."""
from typing import Any, Dict, Optional

from core.api_client import ApiClient, Page, normalize_page
from models.gym import Gym


def list_gyms(client: ApiClient, page: int = 0, limit: int = 0,
              filters: Optional[Dict[str, Any]] = None) -> Page:
    result = normalize_page(client.get("/api/gyms"), keys=("gyms", "data"))
    return Page(items=[Gym.from_api(g) for g in result.items], total=result.total)


def get_gym(client: ApiClient, gym_id: str) -> Gym:
    return Gym.from_api(client.get(f"/api/gyms/{gym_id}"))


def create_gym(client: ApiClient, data: Dict[str, Any]) -> Gym:
    return Gym.from_api(client.post("/api/gyms", data))


def update_gym(client: ApiClient, gym_id: str, data: Dict[str, Any]) -> Gym:
    return Gym.from_api(client.put(f"/api/gyms/{gym_id}", data))


def delete_gym(client: ApiClient, gym_id: str) -> None:
    client.delete(f"/api/gyms/{gym_id}")
