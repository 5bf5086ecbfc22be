from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    VIEW = "view"


@dataclass(frozen=True)
class Route:
    resource: str
    record_id: Optional[str] = None
    mode: Optional[FormMode] = None  # None for a list route
    query: Optional[str] = None  # preset view of a list, e.g. 'fees-due'

    @property
    def is_list(self) -> bool:
        return self.mode is None

    @property
    def parent(self) -> "Route":
        return Route(self.resource)

    def __str__(self) -> str:
        if self.mode == FormMode.CREATE:
            return f"{self.resource}/new"
        if self.mode == FormMode.EDIT:
            return f"{self.resource}/{self.record_id}/edit"
        if self.mode == FormMode.VIEW:
            return f"{self.resource}/{self.record_id}"
        if self.query:
            return f"{self.resource}?{self.query}"
        return self.resource


def parse_route(path: str) -> Route:
    """
    Resolves a page path into the resource and the form mode.

    Examples:
        'attendance'             -> list
        'members?fees-due'       -> list opened on a preset view
        'attendance/new'         -> CREATE
        'attendance/<id>/edit'   -> EDIT
        'attendance/<id>'        -> VIEW

    Raises:
        ValueError: If the path has no resource or an unknown shape.
    """
    path, _, query = (path or "").partition("?")
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValueError("Empty route")

    resource = parts[0]
    if len(parts) == 1:
        return Route(resource, query=query or None)
    if query:
        raise ValueError(f"Only list routes take a query: {path}?{query}")
    if len(parts) == 2:
        if parts[1] == "new":
            return Route(resource, None, FormMode.CREATE)
        return Route(resource, parts[1], FormMode.VIEW)
    if len(parts) == 3 and parts[2] == "edit":
        return Route(resource, parts[1], FormMode.EDIT)
    raise ValueError(f"Unknown route: {path}")
