import pytest

from core.exceptions import ValidationError
from core.validators import (
    ensure_valid, is_valid_email, validate_attendance, validate_certification, validate_class, validate_gym,
    validate_member, validate_membership, validate_payment, validate_session, validate_shift, validate_staff,
)


def test_attendance_required_fields():
    errors = validate_attendance({})
    assert set(errors) == {"member", "checkInTime", "attendanceType"}


def test_attendance_check_out_must_follow_check_in():
    base = {"member": "m1", "attendanceType": "gym", "checkInTime": "2025-03-05T09:00:00Z"}
    assert validate_attendance({**base, "checkOutTime": "2025-03-05T10:30:00Z"}) == {}
    assert "checkOutTime" in validate_attendance({**base, "checkOutTime": "2025-03-05T09:00:00Z"})
    assert "checkOutTime" in validate_attendance({**base, "checkOutTime": "2025-03-04T23:00:00Z"})
    assert validate_attendance({**base, "checkOutTime": "not a date"}) == {"checkOutTime": "Invalid check-out time"}


def test_attendance_session_only_required_for_class():
    base = {"member": "m1", "checkInTime": "2025-03-05T09:00:00Z"}
    assert validate_attendance({**base, "attendanceType": "gym"}) == {}
    assert validate_attendance({**base, "attendanceType": "class"}) == {
        "classSession": "Class session is required for class attendance"}
    assert validate_attendance({**base, "attendanceType": "class", "classSession": "s1"}) == {}


def test_class_numbers_must_be_positive():
    ok = {"name": "Yoga", "category": "yoga", "duration": 60, "capacity": 20}
    assert validate_class(ok) == {}
    assert validate_class({**ok, "duration": 0}) == {"duration": "Duration must be greater than 0"}
    assert validate_class({**ok, "capacity": None}) == {"capacity": "Capacity is required"}
    assert validate_class({**ok, "capacity": "many"}) == {"capacity": "Capacity must be a number"}
    assert set(validate_class({"name": " ", "duration": 30, "capacity": 5})) == {"name", "category"}


@pytest.mark.parametrize("email, valid", [
    ("john@gym.test", True),
    ("a@b.co", True),
    ("john@gym", False),
    ("john gym@x.io", False),
    ("", False),
])
def test_email_pattern(email, valid):
    assert is_valid_email(email) is valid


def test_staff_rules():
    ok = {"firstName": "Sara", "lastName": "Khan", "email": "sara@gym.test", "phone": "555", "position": "trainer"}
    assert validate_staff(ok) == {}
    assert validate_staff({**ok, "email": "nope"}) == {"email": "Email is invalid"}
    assert set(validate_staff({})) == {"firstName", "lastName", "email", "phone", "position"}


def test_gym_rules():
    assert validate_gym({"name": "Iron", "contactEmail": "hi@iron.gym"}) == {}
    assert validate_gym({"name": "Iron", "contactEmail": "iron"}) == {"contactEmail": "Please enter a valid email"}
    assert validate_gym({}) == {"name": "Name is required", "contactEmail": "Email is required"}


def test_sub_item_rules():
    assert validate_certification({"name": "CPR"}) == {}
    assert validate_certification({"name": ""}) == {"name": "Certification name is required"}
    assert validate_shift({"day": "Monday", "startTime": "09:00", "endTime": "17:00"}) == {}
    assert set(validate_shift({"day": ""})) == {"day", "startTime", "endTime"}


def test_ensure_valid_raises_with_errors():
    with pytest.raises(ValidationError) as info:
        ensure_valid(validate_certification, {"name": ""})
    assert info.value.errors == {"name": "Certification name is required"}
    data = {"name": "CPR"}
    assert ensure_valid(validate_certification, data) is data


# --- MEMBERS, MEMBERSHIPS, PAYMENTS, SESSIONS ---

MEMBER = {"firstName": "John", "lastName": "Doe", "email": "john@gym.test", "phone": "5551234567"}


def test_member_required_fields():
    assert set(validate_member({})) == {"firstName", "lastName", "email", "phone"}
    assert validate_member(MEMBER) == {}
    assert validate_member({**MEMBER, "email": "john"}) == {"email": "Email is invalid"}


def test_member_end_date_after_start():
    dates = {"startDate": "2025-03-05T00:00:00Z", "endDate": "2025-03-01T00:00:00Z"}
    assert validate_member({**MEMBER, **dates}) == {"endDate": "End date must be after start date"}
    assert validate_member({**MEMBER, "startDate": "2025-03-05T00:00:00Z", "endDate": "2025-06-05T00:00:00Z"}) == {}


def test_membership_rules():
    plan = {"name": "Gold", "description": "All access", "price": 0, "duration": {"value": 1, "unit": "months"}}
    assert validate_membership(plan) == {}
    assert validate_membership({**plan, "price": -5}) == {"price": "Price cannot be negative"}
    assert validate_membership({**plan, "price": "abc"}) == {"price": "Price must be a number"}
    assert validate_membership({**plan, "duration": {"value": 0, "unit": ""}}) == {
        "durationValue": "Duration value is required", "durationUnit": "Duration unit is required"}
    assert set(validate_membership({})) == {"name", "description", "price", "durationValue", "durationUnit"}


def test_payment_membership_or_trainer_by_purpose():
    base = {"member": "m1", "amount": 100, "paymentMethod": "cash", "paymentDate": "2025-03-05T00:00:00Z"}
    assert validate_payment({**base, "paymentFor": "membership"}) == {
        "membership": "Membership is required when payment is for membership"}
    assert validate_payment({**base, "paymentFor": "personal_training"}) == {
        "staff": "Staff member is required for personal training payments"}
    assert validate_payment({**base, "paymentFor": "merchandise"}) == {}
    assert validate_payment({**base, "paymentFor": "other", "amount": "ten"}) == {"amount": "Amount must be a number"}


def test_session_rules():
    session = {"class": "c1", "instructor": "t1", "room": "Studio 1", "maxCapacity": 10,
               "startTime": "2025-03-05T09:00:00Z", "endTime": "2025-03-05T10:00:00Z"}
    assert validate_session(session) == {}
    assert validate_session({**session, "endTime": "2025-03-05T09:00:00Z"}) == {
        "endTime": "End time must be after start time"}
    assert validate_session({**session, "maxCapacity": 0}) == {"maxCapacity": "Capacity must be greater than 0"}
    assert set(validate_session({})) == {"class", "instructor", "startTime", "endTime", "room", "maxCapacity"}
