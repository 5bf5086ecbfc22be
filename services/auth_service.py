"""Login, session restore and logout against /api/auth."""
import logging
from typing import Optional

from core.api_client import ApiClient
from core.exceptions import ApiError, AuthError
from core.storage import LocalStore
from models.user import User

logger = logging.getLogger(__name__)


def login(client: ApiClient, store: LocalStore, email: str, password: str) -> User:
    """
    Exchanges credentials for a token, keeps it for later runs and loads the user.

    Args:
        client (ApiClient): Client the token is attached to.
        store (LocalStore): Durable storage the token is saved in.
        email (str): Account email.
        password (str): Plain text password (sent over the API, never stored).

    Returns:
        User: The logged-in user.

    Raises:
        AuthError: If the credentials are rejected.
        ApiError: On any other failure.
    """
    payload = client.post("/api/auth", {"email": email.strip(), "password": password})
    token = payload.get("token") if isinstance(payload, dict) else None
    if not token:
        raise ApiError("Login failed: no token returned")

    client.set_token(token)
    try:
        store.set_token(token)
    except OSError as e:
        logger.warning("Could not save login token: %s", e)
    return load_user(client, store)


def load_user(client: ApiClient, store: LocalStore) -> User:
    """
    Fetches the user behind the current token.
    A rejected token is forgotten. Other failures keep it for the next attempt.
    """
    try:
        return User.from_api(client.get("/api/auth"))
    except AuthError:
        logger.info("Stored token rejected, clearing it")
        logout(client, store)
        raise


def restore_session(client: ApiClient, store: LocalStore) -> Optional[User]:
    """
    Logs back in with the token saved by a previous run.

    Returns:
        User, or None when there is no saved token or it is no longer valid.
    """
    token = store.get_token()
    if not token:
        return None
    client.set_token(token)
    try:
        return load_user(client, store)
    except AuthError:
        return None


def logout(client: ApiClient, store: LocalStore) -> None:
    client.clear_token()
    try:
        store.set_token(None)
    except OSError as e:
        logger.warning("Could not clear saved token: %s", e)
