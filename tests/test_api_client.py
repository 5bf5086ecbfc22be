import httpx
import pytest

from core.api_client import AUTH_HEADER, ApiClient, Page, normalize_page
from core.exceptions import ApiError, AuthError, NotFoundError


# --- ENVELOPES ---

def test_normalize_bare_list():
    page = normalize_page([{"_id": "a"}, {"_id": "b"}])
    assert page == Page(items=[{"_id": "a"}, {"_id": "b"}], total=2)


def test_normalize_attendance_envelope_uses_total():
    page = normalize_page({"attendance": [{"_id": "a"}], "total": 42})
    assert page.items == [{"_id": "a"}]
    assert page.total == 42


def test_normalize_data_envelope_uses_count():
    page = normalize_page({"data": [{"_id": "a"}, {"_id": "b"}], "count": 7})
    assert page.total == 7


def test_normalize_envelope_without_total_counts_items():
    page = normalize_page({"members": [{}, {}, {}]}, keys=("members", "data"))
    assert page.total == 3


@pytest.mark.parametrize("payload", [None, "oops", {"unexpected": True}, 5])
def test_normalize_unknown_shape_gives_empty_page(payload):
    assert normalize_page(payload) == Page()


# --- REQUESTS ---

def test_token_travels_in_auth_header(client, backend):
    backend.on("GET", "/api/members", [])
    client.set_token("secret")
    client.get("/api/members")
    assert backend.last.headers[AUTH_HEADER] == "secret"


def test_no_auth_header_without_token(client, backend):
    backend.on("GET", "/api/members", [])
    client.get("/api/members")
    assert AUTH_HEADER not in backend.last.headers

    client.set_token("secret")
    client.clear_token()
    client.get("/api/members")
    assert AUTH_HEADER not in backend.last.headers


def test_blank_params_are_dropped(client, backend):
    backend.on("GET", "/api/attendance", [])
    client.get("/api/attendance", params={"page": 1, "status": None, "date": ""})
    assert dict(backend.last.url.params) == {"page": "1"}


def test_post_sends_json_and_decodes_reply(client, backend):
    backend.on("POST", "/api/classes", {"_id": "c1", "name": "Yoga"}, status=201)
    reply = client.post("/api/classes", {"name": "Yoga"})
    assert reply == {"_id": "c1", "name": "Yoga"}
    assert backend.body() == {"name": "Yoga"}


def test_empty_body_decodes_to_none(client, backend):
    backend.on("DELETE", "/api/classes/c1", None, status=204)
    assert client.delete("/api/classes/c1") is None


# --- ERRORS ---

def test_msg_envelope_becomes_message(client, backend):
    backend.on("PUT", "/api/staff/s1", {"msg": "Staff member not active"}, status=400)
    with pytest.raises(ApiError) as info:
        client.put("/api/staff/s1", {})
    assert info.value.message == "Staff member not active"
    assert info.value.status == 400


def test_message_key_is_used_when_msg_missing(client, backend):
    backend.on("GET", "/api/reports/revenue", {"message": "Bad period"}, status=422)
    with pytest.raises(ApiError, match="Bad period"):
        client.get("/api/reports/revenue")


def test_fallback_message_mentions_status(client, backend):
    backend.on("GET", "/api/settings", {}, status=500)
    with pytest.raises(ApiError) as info:
        client.get("/api/settings")
    assert info.value.message == "Server error: 500"


def test_field_errors_are_collected(client, backend):
    backend.on("POST", "/api/staff", {"errors": [
        {"param": "email", "msg": "Email already exists"},
        {"path": "phone", "msg": "Phone is required"},
    ]}, status=400)
    with pytest.raises(ApiError) as info:
        client.post("/api/staff", {})
    assert info.value.field_errors == {"email": "Email already exists", "phone": "Phone is required"}
    assert info.value.message == "Email already exists"


def test_404_raises_not_found(client):
    with pytest.raises(NotFoundError):
        client.get("/api/attendance/missing")


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_raise_auth_error(client, backend, status):
    backend.on("GET", "/api/auth", {"msg": "Token is not valid"}, status=status)
    with pytest.raises(AuthError) as info:
        client.get("/api/auth")
    assert isinstance(info.value, ApiError)
    assert info.value.message == "Token is not valid"


def test_transport_failure_is_network_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    with ApiClient("http://gym.test", transport=httpx.MockTransport(refuse)) as api:
        with pytest.raises(ApiError) as info:
            api.get("/api/members")
    assert info.value.message == "Network error"
    assert info.value.status is None
