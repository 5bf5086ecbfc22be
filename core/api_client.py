"""HTTP client for the gym REST backend."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

import config
from core.exceptions import ApiError, AuthError, NotFoundError

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"


@dataclass
class Page:
    """One page of records plus the total the backend reported (or the page length)."""
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0


def normalize_page(payload: Any, keys: Sequence[str] = ("attendance", "data")) -> Page:
    """
    Converts any list response into a Page.
    The backend answers either with a bare array or with an envelope such as
    {"attendance": [...], "total": n} or {"data": [...], "count": n}.

    Args:
        payload: Decoded JSON body.
        keys: Envelope keys to look for, in order.

    Returns:
        Page: Never raises; unknown shapes give an empty page.
    """
    if isinstance(payload, list):
        return Page(items=payload, total=len(payload))

    if isinstance(payload, dict):
        for key in keys:
            items = payload.get(key)
            if isinstance(items, list):
                total = payload.get("total") or payload.get("count") or len(items)
                return Page(items=items, total=int(total))

    logger.error("Unexpected API response structure: %r", payload)
    return Page()


def _field_errors(body: Any) -> Dict[str, str]:
    """Collects express-validator style errors: [{"param"|"path": name, "msg": text}]."""
    errors: Dict[str, str] = {}
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        for err in body["errors"]:
            if not isinstance(err, dict):
                continue
            name = err.get("param") or err.get("path")
            if name:
                errors[name] = err.get("msg", "Invalid value")
    return errors


def error_from_response(response: httpx.Response) -> ApiError:
    """Builds the right ApiError subclass for a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    field_errors = _field_errors(body)
    message = None
    if isinstance(body, dict):
        message = body.get("msg") or body.get("message")
    if not message and field_errors:
        message = next(iter(field_errors.values()))
    if not message:
        message = f"Server error: {response.status_code}"

    status = response.status_code
    if status == 404:
        return NotFoundError(message, status, field_errors)
    if status in (401, 403):
        return AuthError(message, status, field_errors)
    return ApiError(message, status, field_errors)


class ApiClient:
    """
    Thin synchronous wrapper around httpx.Client.
    Every call runs inside a worker thread, never on the UI thread.
    """
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[float] = None, transport: Optional[httpx.BaseTransport] = None):
        """
        Args:
            base_url: Backend root, e.g. http://localhost:5000. Defaults to config.API_URL.
            token: Auth token attached to every request once set.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
            transport: Optional httpx transport (tests plug in a MockTransport).
        """
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.token = token
        self._client = httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=transport)

    def set_token(self, token: str) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers[AUTH_HEADER] = self.token
        return headers

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json: Optional[Any] = None) -> Any:
        """
        Sends one request and decodes the JSON body.

        Raises:
            NotFoundError: On 404.
            AuthError: On 401/403.
            ApiError: On any other non-2xx status or on a network failure.
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        logger.debug("%s %s params=%s", method, path, params)

        try:
            response = self._client.request(method, path, params=params, json=json, headers=self._headers())
        except httpx.TimeoutException:
            raise ApiError(f"Request timed out after {self.timeout} seconds")
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError("Network error")

        if response.is_error:
            err = error_from_response(response)
            logger.debug("%s %s -> %s %s", method, path, response.status_code, err.message)
            raise err

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Optional[Any] = None) -> Any:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: Optional[Any] = None) -> Any:
        return self.request("PUT", path, json=data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
