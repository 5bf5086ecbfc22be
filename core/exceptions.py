from typing import Dict, Optional


class GymClientError(Exception):
    """Base exception for everything the client raises on purpose."""


class ApiError(GymClientError):
    """
    Raised when a backend call fails.

    Attributes:
        message (str): Best-effort human readable message (from the 'msg' envelope).
        status (int, optional): HTTP status code, None for transport failures.
        field_errors (dict): Server-side validation errors keyed by field name.
    """
    def __init__(self, message: str, status: Optional[int] = None,
                 field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.field_errors = field_errors or {}


class NotFoundError(ApiError):
    """Raised on 404 responses."""


class AuthError(ApiError):
    """Raised on 401/403 responses (missing, expired or invalid token)."""


class ValidationError(GymClientError):
    """Raised when a form fails client-side validation."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(errors.values()))
        self.errors = errors
