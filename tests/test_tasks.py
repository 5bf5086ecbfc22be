import pytest

from core.exceptions import ApiError, NotFoundError
from core.tasks import as_api_error, run_sync


def collect():
    return [], []


def test_result_goes_to_on_done():
    done, failed = collect()
    run_sync(lambda: 42, done.append, failed.append)
    assert done == [42]
    assert failed == []


def test_api_errors_pass_through_unchanged():
    err = NotFoundError("Not found", 404)
    done, failed = collect()

    def boom():
        raise err

    run_sync(boom, done.append, failed.append)
    assert done == []
    assert failed == [err]


def test_unexpected_errors_are_wrapped():
    done, failed = collect()

    def boom():
        raise KeyError("firstName")

    run_sync(boom, done.append, failed.append)
    assert isinstance(failed[0], ApiError)
    assert failed[0].message == "'firstName'"
    assert failed[0].status is None


def test_blank_exception_uses_class_name():
    assert as_api_error(RuntimeError()).message == "RuntimeError"


def test_on_done_errors_are_not_reported_as_call_failures():
    failed = []

    def on_done(result):
        raise AssertionError("callback bug")

    with pytest.raises(AssertionError):
        run_sync(lambda: 1, on_done, failed.append)
    assert failed == []
