from core.alerts import REMOVE_ALERT, SET_ALERT, Alert, AlertStore, alert_reducer, normalize_severity


def test_reducer_adds_and_removes_without_mutating():
    a = Alert("1", "Saved", "success")
    state = ()
    added = alert_reducer(state, {"type": SET_ALERT, "payload": a})
    assert added == (a,)
    assert state == ()
    assert alert_reducer(added, {"type": REMOVE_ALERT, "payload": "1"}) == ()


def test_reducer_ignores_unknown_actions():
    state = (Alert("1", "x"),)
    assert alert_reducer(state, {"type": "SOMETHING_ELSE"}) is state


def test_legacy_danger_maps_to_error():
    assert normalize_severity("danger") == "error"
    assert normalize_severity("WARNING") == "warning"
    assert normalize_severity(None) == "info"
    assert normalize_severity("loud") == "info"


def test_every_alert_gets_a_unique_id(alerts):
    ids = {alerts.set_alert("Same message") for _ in range(20)}
    assert len(ids) == 20
    assert len(alerts.alerts) == 20


def test_alert_is_dismissed_after_timeout(alerts, scheduler):
    alerts.set_alert("Member checked in successfully", "success", timeout_ms=5000)
    scheduler.advance(4999)
    assert len(alerts.alerts) == 1
    scheduler.advance(1)
    assert alerts.alerts == ()


def test_timeouts_only_remove_their_own_alert(alerts, scheduler):
    alerts.set_alert("first", timeout_ms=1000)
    scheduler.advance(500)
    second = alerts.set_alert("second", timeout_ms=1000)
    scheduler.advance(500)
    assert [a.id for a in alerts.alerts] == [second]


def test_alert_without_timeout_stays_until_removed(alerts, scheduler):
    alert_id = alerts.set_alert("Sticky", "warning", timeout_ms=None)
    scheduler.advance(60_000)
    assert [a.message for a in alerts.alerts] == ["Sticky"]
    alerts.remove_alert(alert_id)
    assert alerts.alerts == ()


def test_remove_is_idempotent(alerts):
    emitted = []
    alerts.changed.connect(emitted.append)
    alert_id = alerts.set_alert("x")
    alerts.remove_alert(alert_id)
    alerts.remove_alert(alert_id)
    assert len(emitted) == 2


def test_changed_carries_the_new_state(scheduler):
    store = AlertStore(scheduler)
    seen = []
    store.changed.connect(seen.append)
    store.set_alert("Oops", "danger")
    assert seen[-1][0].severity == "error"
    assert seen[-1][0].message == "Oops"
