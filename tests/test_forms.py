import pytest

from conftest import messages
from core.exceptions import ApiError, NotFoundError
from core.forms import FormController
from core.routes import FormMode
from core.validators import validate_attendance, validate_staff


class Recorder:
    """Stands in for a create/update service call."""
    def __init__(self, reply=None, error=None):
        self.calls = []
        self.reply = reply
        self.error = error

    def __call__(self, *args):
        self.calls.append(args)
        if self.error:
            raise self.error
        return self.reply


def attendance_form(alerts, mode=FormMode.CREATE, create=None, update=None, **kwargs):
    return FormController(
        mode, validate_attendance, create or Recorder({"_id": "a1"}), update or Recorder({"_id": "a1"}), alerts,
        messages={"created": "Member checked in successfully",
                  "updated": "Attendance record updated successfully",
                  "not_found": "Attendance record not found"},
        **kwargs,
    )


VALID = {
    "member": "m1",
    "checkInTime": "2025-03-05T09:00:00+00:00",
    "checkOutTime": None,
    "attendanceType": "gym",
    "notes": "",
}


def test_valid_create_calls_backend_and_alerts(alerts):
    create = Recorder({"_id": "a1"})
    form = attendance_form(alerts, create=create)
    saved = []
    form.saved.connect(saved.append)

    assert form.submit(dict(VALID)) is True
    assert create.calls == [(VALID,)]
    assert saved == [{"_id": "a1"}]
    assert messages(alerts) == [("Member checked in successfully", "success")]
    assert form.errors == {}


def test_edit_calls_update_with_record_id(alerts):
    update = Recorder({"_id": "a1"})
    form = attendance_form(alerts, FormMode.EDIT, update=update, record_id="a1")
    form.submit(dict(VALID))
    assert update.calls == [("a1", VALID)]
    assert messages(alerts) == [("Attendance record updated successfully", "success")]


@pytest.mark.parametrize("check_out", ["2025-03-05T09:00:00+00:00", "2025-03-05T08:59:00+00:00"])
def test_check_out_not_after_check_in_blocks_submit(alerts, check_out):
    create = Recorder()
    form = attendance_form(alerts, create=create)

    assert form.submit({**VALID, "checkOutTime": check_out}) is False
    assert form.errors == {"checkOutTime": "Check-out time must be after check-in time"}
    assert create.calls == []
    assert alerts.alerts == ()


def test_class_attendance_requires_session(alerts):
    create = Recorder()
    form = attendance_form(alerts, create=create)
    emitted = []
    form.errors_changed.connect(emitted.append)

    assert form.submit({**VALID, "attendanceType": "class", "classSession": None}) is False
    assert "classSession" in form.errors
    assert emitted[-1] == form.errors
    assert create.calls == []


def test_view_mode_refuses_to_submit(alerts):
    create, update = Recorder(), Recorder()
    form = attendance_form(alerts, FormMode.VIEW, create=create, update=update, record_id="a1")
    assert form.read_only
    assert form.submit(dict(VALID)) is False
    assert create.calls == [] and update.calls == []


def test_server_errors_merge_into_field_errors(alerts):
    err = ApiError("Email already exists", 400, {"email": "Email already exists"})
    form = FormController(FormMode.CREATE, validate_staff, Recorder(error=err), Recorder(), alerts)
    saved = []
    form.saved.connect(saved.append)

    started = form.submit({"firstName": "A", "lastName": "B", "email": "a@b.co", "phone": "1", "position": "trainer"})

    assert started is True
    assert form.errors == {"email": "Email already exists"}
    assert messages(alerts) == [("Email already exists", "error")]
    assert saved == []
    assert form.busy is False


def test_clear_error_drops_only_that_field(alerts):
    form = attendance_form(alerts)
    form.submit({"attendanceType": "class"})
    assert {"member", "checkInTime", "classSession"} <= set(form.errors)

    form.clear_error("member")
    assert "member" not in form.errors
    assert "checkInTime" in form.errors
    form.clear_error("notAField")


def test_load_emits_record(alerts):
    form = attendance_form(alerts, FormMode.EDIT, record_id="a1")
    loaded = []
    form.loaded.connect(loaded.append)
    form.load(lambda: {"_id": "a1"})
    assert loaded == [{"_id": "a1"}]


def test_missing_record_alerts_and_goes_back(alerts):
    went_back = []
    form = attendance_form(alerts, FormMode.VIEW, record_id="gone", navigate_to=lambda: went_back.append(True))
    loaded = []
    form.loaded.connect(loaded.append)

    def fetch():
        raise NotFoundError("Not found", 404)

    form.load(fetch)
    assert loaded == []
    assert went_back == [True]
    assert messages(alerts) == [("Attendance record not found", "error")]


def test_other_load_errors_stay_on_page(alerts):
    went_back = []
    form = attendance_form(alerts, FormMode.EDIT, record_id="a1", navigate_to=lambda: went_back.append(True))

    def fetch():
        raise ApiError("Network error")

    form.load(fetch)
    assert went_back == []
    assert messages(alerts) == [("Network error", "error")]
