import datetime

import pytest
from PySide6 import QtCore

from conftest import make_ctx, messages
from core.routes import parse_route
from models.payment import FOR_MEMBERSHIP, FOR_PERSONAL_TRAINING
from ui.pages import session_detail
from ui.pages.dashboard_page import DashboardPage
from ui.pages.member_detail import MemberDetailPage
from ui.pages.members_page import MembersPage
from ui.pages.payment_detail import PaymentDetailPage
from ui.pages.session_detail import SessionDetailPage

MEMBER = {"_id": "m1", "firstName": "John", "lastName": "Doe", "email": "john@gym.test", "phone": "5551234567",
          "membershipStatus": "active"}
LATE = {**MEMBER, "_id": "m2", "firstName": "Jane", "daysRemaining": -3, "dueStatus": "overdue"}
PLAN = {"_id": "ms1", "name": "Gold", "description": "All access", "price": 5000,
        "duration": {"value": 3, "unit": "months"}, "features": ["Sauna"], "classesIncluded": 8}
CUSTOM = {**PLAN, "_id": "ms9", "name": "Custom Plan - 4000.00", "price": 4000}
SESSION = {"_id": "s1", "class": {"_id": "c1", "name": "Yoga"}, "instructor": "t1",
           "startTime": "2025-03-05T09:00:00Z", "endTime": "2025-03-05T10:00:00Z", "room": "Studio 1",
           "maxCapacity": 2, "enrolledMembers": [{"member": MEMBER, "attended": False}]}


@pytest.fixture
def ctx(client, local_store, alerts, scheduler, admin):
    return make_ctx(client, local_store, alerts, scheduler, admin)


# --- MEMBERS LIST ---

@pytest.fixture
def members_backend(backend):
    backend.on("GET", "/api/members", [MEMBER])
    backend.on("GET", "/api/members/fees-due", [LATE])
    return backend


def test_fees_due_toggle_swaps_the_list(ctx, members_backend):
    page = MembersPage(ctx)
    page.controller.load()

    page.b_fees.setChecked(True)

    assert members_backend.paths()[-1] == "/api/members/fees-due"
    assert page.b_fees.text() == "✖ Clear Fees Due Filter"
    assert page.table.item(0, 0).text() == "Jane Doe  [Overdue]"


def test_picking_a_status_leaves_fees_due(ctx, members_backend):
    page = MembersPage(ctx)
    page.b_fees.setChecked(True)

    page.status.setCurrentIndex(page.status.findData("active"))

    assert not page.b_fees.isChecked()
    assert page.b_fees.text() == "💰 Show Fees Due"
    assert members_backend.paths()[-1] == "/api/members"
    assert page.controller.filters == {"status": "active"}
    assert page.table.rowCount() == 1


def test_fees_due_resets_the_status_filter(ctx, members_backend):
    page = MembersPage(ctx)
    page.status.setCurrentIndex(page.status.findData("frozen"))
    assert page.table.rowCount() == 0

    page.b_fees.setChecked(True)

    assert page.status.currentIndex() == 0
    assert page.controller.filters == {}
    assert page.table.rowCount() == 1


def test_fees_due_preset_from_the_dashboard(ctx, members_backend):
    page = MembersPage(ctx)
    page.apply_query("fees-due")
    assert page.controller.fees_due
    assert page.b_fees.isChecked()


# --- MEMBER FORM ---

@pytest.fixture
def plans_backend(backend):
    backend.on("GET", "/api/memberships/status/active", [PLAN])
    backend.on("POST", "/api/members", MEMBER)
    backend.on("POST", "/api/memberships", CUSTOM)
    backend.on("PUT", "/api/members/m1", MEMBER)
    return backend


def new_member(ctx, fee: float = 0) -> MemberDetailPage:
    page = MemberDetailPage(ctx, parse_route("members/new"))
    page.first_name.setText("John")
    page.last_name.setText("Doe")
    page.email.setText("john@gym.test")
    page.phone.setText("5551234567")
    page.plan.setCurrentIndex(page.plan.findData("ms1"))
    page.custom_fee.setValue(fee)
    return page


def test_plan_sets_the_end_date(ctx, plans_backend):
    page = new_member(ctx)
    page.start_date.setDate(QtCore.QDate(2025, 1, 31))
    assert page.end_date.date().toPython() == datetime.date(2025, 4, 30)


def test_custom_fee_creates_and_assigns_a_plan(ctx, plans_backend, alerts):
    page = new_member(ctx, fee=4000)
    page.on_save()

    assert plans_backend.paths() == [
        "/api/memberships/status/active", "/api/members", "/api/memberships", "/api/members/m1",
    ]
    plan = plans_backend.body(2)
    assert plan["name"] == "Custom Plan - 4000.00"
    assert plan["duration"] == {"value": 3, "unit": "months"}
    assert plan["classesIncluded"] == 8
    assert plans_backend.body(3) == {"membershipType": "ms9"}
    assert messages(alerts) == [
        ("Member created successfully", "success"),
        ("Member created with custom membership plan", "success"),
    ]
    assert ctx.visited == ["members"]


def test_member_survives_a_failed_custom_plan(ctx, plans_backend, alerts):
    plans_backend.on("POST", "/api/memberships", {"msg": "Server error"}, status=500)
    page = new_member(ctx, fee=4000)
    page.on_save()

    assert messages(alerts)[-1] == (
        "Member created but failed to create custom membership plan. Please create it manually.", "warning")
    assert ctx.visited == ["members"]


def test_plain_member_skips_the_custom_plan(ctx, plans_backend, alerts):
    page = new_member(ctx)
    page.on_save()
    assert "/api/memberships" not in plans_backend.paths()
    assert plans_backend.body(1)["membershipType"] == "ms1"
    assert messages(alerts) == [("Member created successfully", "success")]


def test_member_form_shows_missing_fields(ctx, plans_backend):
    page = MemberDetailPage(ctx, parse_route("members/new"))
    page.on_save()
    assert page.errors.labels["firstName"].text() == "First name is required"
    assert plans_backend.paths() == ["/api/memberships/status/active"]


# --- PAYMENT FORM ---

def test_plan_fills_amount_and_purpose(ctx, backend):
    backend.on("GET", "/api/memberships/status/active", [PLAN])
    page = PaymentDetailPage(ctx, parse_route("payments/new"))
    page.purpose.setCurrentIndex(page.purpose.findData("merchandise"))

    page.plan.setCurrentIndex(page.plan.findData("ms1"))

    assert page.amount.value() == 5000
    assert page.purpose.currentData() == FOR_MEMBERSHIP
    assert page.payload()["membership"] == "ms1"


def test_trainer_row_only_for_personal_training(ctx, backend):
    backend.on("GET", "/api/staff", [{"_id": "t1", "firstName": "Ann", "lastName": "Lee", "position": "trainer"}])
    page = PaymentDetailPage(ctx, parse_route("payments/new"))
    assert page.staff_row.isHidden()

    page.purpose.setCurrentIndex(page.purpose.findData(FOR_PERSONAL_TRAINING))
    page.staff.setCurrentIndex(page.staff.findData("t1"))

    assert not page.staff_row.isHidden()
    assert page.plan_row.isHidden()
    payload = page.payload()
    assert payload["staff"] == "t1"
    assert payload["membership"] is None


# --- SESSION ENROLLMENT ---

@pytest.fixture
def session_backend(backend):
    backend.on("GET", "/api/classes/sessions/s1", SESSION)
    backend.on("POST", "/api/classes/sessions/s1/enroll", {"msg": "ok"})
    backend.on("DELETE", "/api/classes/sessions/s1/enroll/m1", {"msg": "ok"})
    backend.on("PUT", "/api/classes/sessions/s1/attendance/m1", {"msg": "ok"})
    return backend


def test_enroll_sends_the_member(ctx, session_backend, alerts):
    page = SessionDetailPage(ctx, parse_route("sessions/s1"))
    page.enroll_box.addItem("Jane Doe", "m2")
    page.enroll_box.setCurrentIndex(page.enroll_box.findData("m2"))

    page.on_enroll()

    assert session_backend.body(-2) == {"member": "m2"}
    assert messages(alerts) == [("Member enrolled successfully", "success")]


def test_enrolling_twice_is_refused(ctx, session_backend, alerts):
    page = SessionDetailPage(ctx, parse_route("sessions/s1"))
    page.enroll_box.addItem("John Doe", "m1")
    page.enroll_box.setCurrentIndex(page.enroll_box.findData("m1"))
    session_backend.requests.clear()

    page.on_enroll()

    assert session_backend.requests == []
    assert messages(alerts) == [("Member is already enrolled in this session", "warning")]


def test_mark_attended(ctx, session_backend, alerts):
    page = SessionDetailPage(ctx, parse_route("sessions/s1"))
    page.on_mark("m1", True)
    assert session_backend.body(-2) == {"attended": True}
    assert messages(alerts) == [("Member marked as attended", "success")]


@pytest.mark.parametrize("answer, sent", [(True, True), (False, False)])
def test_unenroll_asks_first(ctx, session_backend, monkeypatch, answer, sent):
    monkeypatch.setattr(session_detail, "confirm", lambda *args: answer)
    page = SessionDetailPage(ctx, parse_route("sessions/s1"))
    page.on_unenroll("m1", "John Doe")
    assert ("/api/classes/sessions/s1/enroll/m1" in session_backend.paths()) == sent


# --- DASHBOARD ---

def test_dashboard_fills_cards_and_lists(ctx, backend):
    today = datetime.date.today().isoformat()
    backend.on("GET", "/api/dashboard/stats", {"activeMembers": 42, "totalRevenue": 125000, "feesDueCount": 3,
                                               "membershipGrowth": 12.5})
    backend.on("GET", "/api/members/recent", [{**MEMBER, "createdAt": "2025-03-01T10:00:00Z"}])
    backend.on("GET", f"/api/classes/sessions/date/{today}", [SESSION])
    page = DashboardPage(ctx)

    page.load()

    assert page.cards["active_members"].value.text() == "42"
    assert page.cards["total_revenue"].value.text() == "Rs. 125,000.00"
    assert page.cards["membership_growth"].value.text() == "+12.5%"
    assert page.recent.item(0, 2).text() == "No Plan"
    assert page.sessions.item(0, 3).text() == "1/2"


def test_dashboard_error_is_one_alert(ctx, alerts):
    page = DashboardPage(ctx)
    page.load()
    assert messages(alerts) == [("Error loading dashboard data. Please try again.", "error")]


def test_fees_due_card_opens_filtered_members(ctx):
    page = DashboardPage(ctx)
    page.cards["fees_due_count"].clicked.emit()
    assert ctx.visited == ["members?fees-due"]
