import json

from core.storage import LocalStore


def test_token_persists_between_instances(tmp_path):
    path = tmp_path / "client.json"
    LocalStore(path).set_token("abc")
    assert LocalStore(path).get_token() == "abc"


def test_clearing_token_removes_key(local_store):
    local_store.set_token("abc")
    local_store.set_token(None)
    assert local_store.get_token() is None
    assert "token" not in json.loads(local_store.path.read_text())


def test_dark_mode_unset_vs_saved(local_store):
    assert local_store.get_dark_mode() is None
    local_store.set_dark_mode(False)
    assert local_store.get_dark_mode() is False
    local_store.set_dark_mode(True)
    assert local_store.get_dark_mode() is True


def test_string_dark_mode_is_understood(tmp_path):
    path = tmp_path / "client.json"
    path.write_text(json.dumps({"darkMode": "true"}))
    assert LocalStore(path).get_dark_mode() is True


def test_corrupt_file_is_treated_as_empty(tmp_path):
    path = tmp_path / "client.json"
    path.write_text("{not json")
    store = LocalStore(path)
    assert store.get_token() is None

    store.set("gymName", "SOLID")
    assert json.loads(path.read_text()) == {"gymName": "SOLID"}


def test_missing_parent_directory_is_created(tmp_path):
    store = LocalStore(tmp_path / "nested" / "dir" / "client.json")
    store.set_token("t")
    assert store.path.exists()


def test_remove_unknown_key_is_noop(local_store):
    local_store.remove("nothing")
    assert not local_store.path.exists()
