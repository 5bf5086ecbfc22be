"""Which buttons each role gets on the real list and detail screens."""
from typing import List

import pytest
from PySide6 import QtWidgets

from conftest import make_ctx, make_user, messages
from core.routes import parse_route
from models.user import Role
from ui.pages.attendance_detail import AttendanceDetailPage
from ui.pages.attendance_page import AttendancePage
from ui.pages.classes_page import ClassesPage
from ui.pages.gyms_page import GymsPage
from ui.pages.member_detail import MemberDetailPage
from ui.pages.members_page import MembersPage
from ui.pages.membership_detail import MembershipDetailPage
from ui.pages.memberships_page import MembershipsPage
from ui.pages.payment_detail import PaymentDetailPage
from ui.pages.payments_page import PaymentsPage
from ui.pages.session_detail import SessionDetailPage
from ui.pages.sessions_page import SessionsPage
from ui.pages.staff_page import StaffPage

MEMBER = {"_id": "m1", "firstName": "John", "lastName": "Doe", "email": "john@gym.test", "phone": "5551234567",
          "membershipStatus": "active"}
PLAN = {"_id": "ms1", "name": "Gold", "description": "All access", "price": 5000,
        "duration": {"value": 1, "unit": "months"}}
PAYMENT = {"_id": "p1", "member": MEMBER, "membership": PLAN, "amount": 5000, "paymentMethod": "cash",
           "paymentDate": "2025-03-05T09:00:00Z", "invoiceNumber": "INV-0001"}
SESSION = {"_id": "s1", "class": {"_id": "c1", "name": "Yoga"},
           "instructor": {"_id": "t1", "firstName": "Ann", "lastName": "Lee"},
           "startTime": "2025-03-05T09:00:00Z", "endTime": "2025-03-05T10:00:00Z", "room": "Studio 1",
           "maxCapacity": 10, "enrolledMembers": [{"member": MEMBER, "attended": False}]}
GYM_CLASS = {"_id": "c1", "name": "Yoga", "category": "yoga", "duration": 60, "capacity": 10}
TRAINER = {"_id": "t1", "firstName": "Ann", "lastName": "Lee", "email": "ann@gym.test", "phone": "5550001111",
           "position": "trainer"}
ATTENDANCE = {"_id": "a1", "member": MEMBER, "checkInTime": "2025-03-05T09:00:00Z", "attendanceType": "gym"}


@pytest.fixture
def gym_backend(backend):
    backend.on("GET", "/api/members", [MEMBER])
    backend.on("GET", "/api/members/m1", MEMBER)
    backend.on("GET", "/api/memberships", [PLAN])
    backend.on("GET", "/api/memberships/ms1", PLAN)
    backend.on("GET", "/api/payments", [PAYMENT])
    backend.on("GET", "/api/payments/p1", PAYMENT)
    backend.on("GET", "/api/payments/member/m1", [PAYMENT])
    backend.on("GET", "/api/classes/sessions/all", [SESSION])
    backend.on("GET", "/api/classes/sessions/s1", SESSION)
    backend.on("GET", "/api/classes", [GYM_CLASS])
    backend.on("GET", "/api/staff", [TRAINER])
    backend.on("GET", "/api/attendance", [ATTENDANCE])
    backend.on("GET", "/api/attendance/a1", ATTENDANCE)
    backend.on("GET", "/api/gyms", [{"_id": "g1", "name": "Main Branch"}])
    return backend


@pytest.fixture
def page_for(client, gym_backend, local_store, alerts, scheduler):
    """Builds a page for a user of the given role, with its records loaded."""
    def build(page_cls, role: Role, path: str = None):
        ctx = make_ctx(client, local_store, alerts, scheduler, make_user(role))
        if path is None:
            page = page_cls(ctx)
            page.controller.load()
        else:
            page = page_cls(ctx, parse_route(path))
        return page
    return build


def action_labels(page, row: int = 0) -> List[str]:
    cell = page.table.cellWidget(row, len(page.columns))
    return [b.text() for b in cell.findChildren(QtWidgets.QPushButton)]


# --- LIST SCREENS ---

LISTS = [MembersPage, MembershipsPage, PaymentsPage, SessionsPage, ClassesPage, StaffPage]


@pytest.mark.parametrize("page_cls", LISTS)
@pytest.mark.parametrize("role", [Role.ADMIN, Role.MANAGER])
def test_modifiers_get_every_row_action(page_for, page_cls, role):
    page = page_for(page_cls, role)
    assert page.table.rowCount() == 1
    assert action_labels(page) == ["View", "Edit", "Delete"]
    assert not page.b_add.isHidden()


@pytest.mark.parametrize("page_cls", LISTS)
@pytest.mark.parametrize("role", [Role.STAFF, Role.TRAINER])
def test_other_roles_only_view(page_for, page_cls, role):
    page = page_for(page_cls, role)
    assert page.table.rowCount() == 1
    assert action_labels(page) == ["View"]
    assert page.b_add.isHidden()


def test_admin_sees_check_out_on_open_attendance(page_for):
    page = page_for(AttendancePage, Role.ADMIN)
    assert action_labels(page) == ["View", "Check Out", "Edit", "Delete"]
    assert not page.b_add.isHidden()


def test_staff_cannot_check_out_edit_or_delete_attendance(page_for):
    page = page_for(AttendancePage, Role.STAFF)
    assert action_labels(page) == ["View"]
    assert page.b_add.isHidden()


@pytest.mark.parametrize("role, labels, add_hidden", [
    (Role.SUPERADMIN, ["Edit", "Delete"], False),
    (Role.ADMIN, [], True),
])
def test_gyms_need_superadmin(page_for, role, labels, add_hidden):
    page = page_for(GymsPage, role)
    assert action_labels(page) == labels
    assert page.b_add.isHidden() == add_hidden


# --- DETAIL SCREENS ---

DETAILS = [
    (MemberDetailPage, "members/m1"),
    (MembershipDetailPage, "memberships/ms1"),
    (PaymentDetailPage, "payments/p1"),
    (SessionDetailPage, "sessions/s1"),
    (AttendanceDetailPage, "attendance/a1"),
]


@pytest.mark.parametrize("page_cls, path", DETAILS)
def test_staff_view_has_no_edit_or_delete(page_for, page_cls, path):
    page = page_for(page_cls, Role.STAFF, path)
    assert page.record is not None
    assert page.b_edit.isHidden()
    assert page.b_delete.isHidden()
    assert page.b_save.isHidden()


@pytest.mark.parametrize("page_cls, path", DETAILS)
def test_admin_view_offers_edit_and_delete(page_for, page_cls, path):
    page = page_for(page_cls, Role.ADMIN, path)
    assert not page.b_edit.isHidden()
    assert not page.b_delete.isHidden()


@pytest.mark.parametrize("role, hidden", [(Role.STAFF, True), (Role.ADMIN, False)])
def test_check_out_button_follows_role(page_for, role, hidden):
    page = page_for(AttendanceDetailPage, role, "attendance/a1")
    assert page.b_checkout.isHidden() == hidden


def test_staff_check_out_from_detail_is_refused(page_for, gym_backend, alerts):
    page = page_for(AttendanceDetailPage, Role.STAFF, "attendance/a1")
    gym_backend.requests.clear()

    page.on_checkout()

    assert messages(alerts) == [("You are not authorized to perform this action", "warning")]
    assert gym_backend.requests == []


@pytest.mark.parametrize("role, hidden, buttons", [
    (Role.STAFF, True, []),
    (Role.ADMIN, False, ["✔ Mark Attended", "Unenroll"]),
])
def test_enrollment_controls_follow_role(page_for, role, hidden, buttons):
    page = page_for(SessionDetailPage, role, "sessions/s1")
    cell = page.enrolled.cellWidget(0, 3)
    assert page.enroll_bar.isHidden() == hidden
    assert [b.text() for b in cell.findChildren(QtWidgets.QPushButton)] == buttons
