import datetime
from dataclasses import dataclass
from typing import Optional

import pytest

from conftest import make_user, messages
from core.api_client import Page
from core.exceptions import ApiError
from core.listing import AttendanceListController, ListController, MemberListController, matches
from models.attendance import Attendance
from models.member import Member
from models.user import Role


@dataclass
class Row:
    id: str
    name: str
    email: str = ""
    phone: str = ""
    category: Optional[str] = None


class FakeLoader:
    def __init__(self, records):
        self.records = records
        self.calls = []
        self.error: Optional[ApiError] = None

    def __call__(self, page, rows, filters):
        self.calls.append((page, rows, filters))
        if self.error:
            raise self.error
        return Page(items=list(self.records), total=len(self.records))


ROWS = [
    Row("1", "John Doe", "john@gym.test", "5551111111", "yoga"),
    Row("2", "Jane Smith", "jane@GYM.test", "5552222222", "cardio"),
    Row("3", "Bob Stone", "bob@gym.test", "5553333333", "yoga"),
]


@pytest.fixture
def loader():
    return FakeLoader(ROWS)


@pytest.fixture
def deleted():
    return []


def controller(loader, alerts, user, deleted=None, **kwargs):
    deleter = (lambda record_id: deleted.append(record_id)) if deleted is not None else None
    c = ListController(loader, deleter, lambda r: (r.name, r.email, r.phone), alerts, user=user, **kwargs)
    c.load()
    return c


# --- SEARCH ---

@pytest.mark.parametrize("term, expected", [
    ("", ["1", "2", "3"]),
    ("   ", ["1", "2", "3"]),
    ("JOHN", ["1"]),
    ("gym.test", ["1", "2", "3"]),
    ("jane@gym", ["2"]),
    ("5553", ["3"]),
    ("nobody", []),
])
def test_search_matches_any_field_case_insensitively(loader, alerts, admin, term, expected):
    c = controller(loader, alerts, admin)
    c.set_search(term)
    assert [r.id for r in c.filtered_records] == expected


def test_matches_tolerates_missing_fields():
    assert matches("doe", (None, "John Doe"))
    assert not matches("doe", (None, None))


# --- FILTERS & PAGINATION ---

def test_filter_resets_page_and_applies_locally(loader, alerts, admin):
    c = controller(loader, alerts, admin)
    c.set_rows_per_page(5)
    c.page = 3
    c.set_filter("category", "yoga")
    assert c.page == 0
    assert [r.id for r in c.visible_records] == ["1", "3"]
    assert c.total == 2

    c.set_filter("category", "")
    assert c.total == 3


def test_changing_rows_per_page_resets_page(loader, alerts, admin):
    c = controller(loader, alerts, admin)
    c.set_page(2)
    c.set_rows_per_page(25)
    assert c.page == 0
    assert c.rows_per_page == 25


def test_client_side_pagination_slices(alerts, admin):
    loader = FakeLoader([Row(str(i), f"Member {i}") for i in range(12)])
    c = controller(loader, alerts, admin)
    assert len(c.visible_records) == 10
    c.set_page(1)
    assert [r.id for r in c.visible_records] == ["10", "11"]
    assert c.total == 12
    assert len(loader.calls) == 1


def test_server_pagination_passes_page_and_filters(alerts, admin):
    loader = FakeLoader(ROWS)
    c = controller(loader, alerts, admin, server_paginated=True)
    c.set_filter("status", "checkedIn")
    c.set_page(2)
    c.set_rows_per_page(25)
    assert loader.calls == [
        (0, 10, {}),
        (0, 10, {"status": "checkedIn"}),
        (2, 10, {"status": "checkedIn"}),
        (0, 25, {"status": "checkedIn"}),
    ]


def test_server_paginated_total_comes_from_envelope(alerts, admin):
    c = ListController(lambda page, rows, filters: Page(items=ROWS[:2], total=57), None,
                       lambda r: (r.name,), alerts, user=admin, server_paginated=True)
    c.load()
    assert c.total == 57
    assert len(c.visible_records) == 2


def test_search_total_counts_matches_when_backend_ignores_paging(alerts, admin):
    # Every record comes back regardless of page/limit
    everyone = [Row(str(i), f"Member {i}") for i in range(14)] + [Row("j", "John Doe")]
    c = ListController(lambda page, rows, filters: Page(items=everyone, total=len(everyone)), None,
                       lambda r: (r.name,), alerts, user=admin, server_paginated=True)
    c.load()
    assert c.total == 15

    c.set_search("john")
    assert [r.id for r in c.visible_records] == ["j"]
    assert c.total == 1


def test_search_total_on_a_short_unpaged_reply(alerts, admin):
    c = ListController(lambda page, rows, filters: Page(items=ROWS, total=3), None,
                       lambda r: (r.name,), alerts, user=admin, server_paginated=True)
    c.load()
    c.set_search("jane")
    assert c.total == 1


def test_load_failure_keeps_previous_records(loader, alerts, admin):
    c = controller(loader, alerts, admin)
    loader.error = ApiError("Server error: 500")
    c.load()
    assert [r.id for r in c.records] == ["1", "2", "3"]
    assert messages(alerts) == [("Server error: 500", "error")]
    assert c.loading is False


# --- SERVER SEARCH ---

def test_server_search_results_are_not_filtered_again(loader, alerts, admin):
    # The backend also matches on fields the local search ignores
    hits = [Row("9", "Sara Khan", "sara@gym.test"), Row("1", "John Doe", "john@gym.test")]
    searched = []

    def remote(term):
        searched.append(term)
        return hits

    c = controller(loader, alerts, admin, remote_search=remote)
    c.set_search("cardio")
    assert c.filtered_records == []

    c.search_on_server()
    assert searched == ["cardio"]
    assert [r.id for r in c.visible_records] == ["9", "1"]
    assert c.total == 2


def test_refining_the_term_filters_server_results_locally(loader, alerts, admin):
    hits = [Row("9", "Sara Khan"), Row("1", "John Doe")]
    c = controller(loader, alerts, admin, remote_search=lambda term: hits)
    c.set_search("cardio")
    c.search_on_server()

    c.set_search("cardio sara")
    assert c.filtered_records == []
    c.set_search("sara")
    assert [r.id for r in c.filtered_records] == ["9"]


def test_reload_drops_server_search_results(loader, alerts, admin):
    c = controller(loader, alerts, admin, remote_search=lambda term: [Row("9", "Sara Khan")])
    c.set_search("trainer")
    c.search_on_server()
    c.set_search("")
    c.search_on_server()
    assert [r.id for r in c.records] == ["1", "2", "3"]
    assert c.server_term is None


def test_blank_server_search_reloads(loader, alerts, admin):
    searched = []
    c = controller(loader, alerts, admin, remote_search=searched.append)
    c.set_search("   ")
    c.search_on_server()
    assert searched == []
    assert len(loader.calls) == 2


# --- ROLE GATING ---

@pytest.mark.parametrize("role, allowed", [
    (Role.ADMIN, True),
    (Role.MANAGER, True),
    (Role.STAFF, False),
    (Role.TRAINER, False),
    (Role.SUPERADMIN, False),
])
def test_only_admin_and_manager_modify(loader, alerts, role, allowed):
    assert controller(loader, alerts, make_user(role)).can_modify is allowed


def test_no_user_cannot_modify(loader, alerts):
    assert controller(loader, alerts, None).can_modify is False


def test_gyms_list_is_superadmin_only(loader, alerts):
    assert controller(loader, alerts, make_user(Role.SUPERADMIN), modify_roles=(Role.SUPERADMIN,)).can_modify
    assert not controller(loader, alerts, make_user(Role.ADMIN), modify_roles=(Role.SUPERADMIN,)).can_modify


def test_forbidden_delete_alerts_and_sends_nothing(loader, alerts, staff_user, deleted):
    c = controller(loader, alerts, staff_user, deleted)
    assert c.request_delete(ROWS[0]) is False
    assert c.pending_delete is None
    c.confirm_delete()
    assert deleted == []
    assert messages(alerts) == [("You are not authorized to perform this action", "warning")]


# --- DELETE CONFIRMATION ---

def test_request_delete_only_marks_pending(loader, alerts, admin, deleted):
    c = controller(loader, alerts, admin, deleted)
    pending = []
    c.pending_delete_changed.connect(pending.append)

    assert c.request_delete(ROWS[1])
    assert c.pending_delete is ROWS[1]
    assert pending == [ROWS[1]]
    assert deleted == []


def test_cancel_leaves_everything_untouched(loader, alerts, admin, deleted):
    c = controller(loader, alerts, admin, deleted)
    before = list(c.records)
    c.request_delete(ROWS[1])
    c.cancel_delete()

    assert c.pending_delete is None
    assert deleted == []
    assert c.records == before
    assert len(loader.calls) == 1
    assert alerts.alerts == ()


def test_confirm_deletes_then_reloads(loader, alerts, admin, deleted):
    c = controller(loader, alerts, admin, deleted, messages={"deleted": "Class deleted successfully"})
    c.request_delete(ROWS[1])
    c.confirm_delete()

    assert deleted == ["2"]
    assert c.pending_delete is None
    assert len(loader.calls) == 2
    assert messages(alerts) == [("Class deleted successfully", "success")]


def test_failed_delete_alerts_and_skips_reload(loader, alerts, admin):
    def deleter(record_id):
        raise ApiError("Cannot delete class with scheduled sessions")

    c = ListController(loader, deleter, lambda r: (r.name,), alerts, user=admin)
    c.load()
    c.request_delete(ROWS[0])
    c.confirm_delete()
    assert messages(alerts) == [("Cannot delete class with scheduled sessions", "error")]
    assert len(loader.calls) == 1


# --- ATTENDANCE ---

def attendance(record_id, checked_out=False):
    check_in = datetime.datetime(2025, 3, 5, 9, 0, tzinfo=datetime.timezone.utc)
    return Attendance(
        id=record_id, member="m1", check_in_time=check_in,
        check_out_time=check_in + datetime.timedelta(hours=1) if checked_out else None,
        member_info=Member("m1", "John", "Doe", "john@gym.test", "5551234567"),
    )


def attendance_controller(alerts, user, checked_out):
    loader = FakeLoader([attendance("a1"), attendance("a2", checked_out=True)])
    c = AttendanceListController(loader, lambda record_id: None, checked_out.append, alerts, user=user)
    c.load()
    return c, loader


def test_attendance_search_uses_member_fields(alerts, admin):
    c, _ = attendance_controller(alerts, admin, [])
    c.set_search("doe")
    assert len(c.filtered_records) == 2
    c.set_search("555123")
    assert len(c.filtered_records) == 2
    c.set_search("jane")
    assert c.filtered_records == []


def test_checkout_calls_backend_and_reloads(alerts, admin):
    checked_out = []
    c, loader = attendance_controller(alerts, admin, checked_out)
    assert c.checkout(c.records[0])
    assert checked_out == ["a1"]
    assert len(loader.calls) == 2
    assert messages(alerts) == [("Member checked out successfully", "success")]


def test_checkout_of_checked_out_record_is_refused(alerts, admin):
    checked_out = []
    c, _ = attendance_controller(alerts, admin, checked_out)
    assert c.checkout(c.records[1]) is False
    assert checked_out == []
    assert messages(alerts) == [("Member is already checked out", "warning")]


@pytest.mark.parametrize("index", [0, 1])
def test_checkout_is_role_gated_before_anything_else(alerts, staff_user, index):
    checked_out = []
    c, _ = attendance_controller(alerts, staff_user, checked_out)
    assert c.checkout(c.records[index]) is False
    assert checked_out == []
    assert messages(alerts) == [("You are not authorized to perform this action", "warning")]


def test_attendance_load_error_message(alerts, admin):
    loader = FakeLoader([])
    loader.error = ApiError("Server error: 500")
    c = AttendanceListController(loader, lambda i: None, lambda i: None, alerts, user=admin)
    c.load()
    assert messages(alerts) == [("Error loading attendance records", "error")]


# --- DATA SOURCE SWAPS ---

def test_use_loader_reloads_from_first_page(loader, alerts, admin):
    c = controller(loader, alerts, admin)
    c.set_rows_per_page(1)
    c.set_page(2)
    other = FakeLoader(ROWS[:1])

    c.use_loader(other)

    assert c.page == 0
    assert len(other.calls) == 1
    assert [r.id for r in c.records] == ["1"]


def member(id_, status, due=None):
    return Member(id=id_, first_name="M", last_name=id_, email=f"{id_}@gym.test", status=status, due_status=due)


@pytest.fixture
def member_lists():
    everyone = FakeLoader([member("a", "active"), member("b", "frozen"), member("c", "active")])
    due = FakeLoader([member("c", "active", "overdue")])
    return everyone, due


def member_controller(member_lists, alerts, admin):
    everyone, due = member_lists
    c = MemberListController(everyone, due, None, alerts, user=admin)
    c.load()
    return c


def test_fees_due_view_swaps_source(member_lists, alerts, admin):
    everyone, due = member_lists
    c = member_controller(member_lists, alerts, admin)

    c.show_fees_due(True)
    assert c.fees_due
    assert [m.id for m in c.visible_records] == ["c"]

    c.show_fees_due(False)
    assert not c.fees_due
    assert len(everyone.calls) == 2
    assert c.total == 3


def test_status_filter_is_local(member_lists, alerts, admin):
    everyone, _ = member_lists
    c = member_controller(member_lists, alerts, admin)

    c.set_status("active")
    assert [m.id for m in c.visible_records] == ["a", "c"]
    assert len(everyone.calls) == 1

    c.set_status("")
    assert c.total == 3


def test_status_and_fees_due_exclude_each_other(member_lists, alerts, admin):
    everyone, due = member_lists
    c = member_controller(member_lists, alerts, admin)
    c.set_status("frozen")

    c.show_fees_due(True)
    assert c.filters == {}
    assert c.total == 1

    c.set_status("frozen")
    assert not c.fees_due
    assert c.filters == {"status": "frozen"}
    assert [m.id for m in c.visible_records] == ["b"]
    assert len(everyone.calls) == 2


def test_member_search_covers_name_email_phone(member_lists, alerts, admin):
    c = member_controller(member_lists, alerts, admin)
    c.set_search("M b")
    assert [m.id for m in c.filtered_records] == ["b"]
    c.set_search("c@gym")
    assert [m.id for m in c.filtered_records] == ["c"]
