import pytest

from core.routes import FormMode, Route, parse_route


@pytest.mark.parametrize("path, expected", [
    ("attendance", Route("attendance")),
    ("/classes/", Route("classes")),
    ("attendance/new", Route("attendance", None, FormMode.CREATE)),
    ("staff/abc123", Route("staff", "abc123", FormMode.VIEW)),
    ("staff/abc123/edit", Route("staff", "abc123", FormMode.EDIT)),
])
def test_parse_route(path, expected):
    assert parse_route(path) == expected


@pytest.mark.parametrize("path", ["", "/", None, "staff/abc/delete", "a/b/c/d"])
def test_bad_routes_raise(path):
    with pytest.raises(ValueError):
        parse_route(path)


def test_route_helpers():
    edit = parse_route("classes/c1/edit")
    assert not edit.is_list
    assert edit.parent == Route("classes")
    assert edit.parent.is_list


@pytest.mark.parametrize("path", ["attendance", "attendance/new", "staff/s1", "staff/s1/edit"])
def test_str_round_trips(path):
    assert str(parse_route(path)) == path


def test_list_route_with_preset_view():
    route = parse_route("members?fees-due")
    assert route == Route("members", query="fees-due")
    assert route.is_list
    assert str(route) == "members?fees-due"
    assert route.parent == Route("members")


def test_query_on_a_detail_route_is_rejected():
    with pytest.raises(ValueError):
        parse_route("members/m1?fees-due")
