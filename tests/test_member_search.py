from functools import partial

from core.member_search import MemberSearch
from core.scheduler import Debouncer
from services import member_service

MEMBERS = [{"_id": "m1", "firstName": "John", "lastName": "Doe", "email": "john@gym.test", "phone": "5551234567"}]


def test_debouncer_delivers_only_the_last_trigger(scheduler):
    calls = []
    debouncer = Debouncer(scheduler, 300, calls.append)

    debouncer.trigger("j")
    scheduler.advance(200)
    debouncer.trigger("jo")
    scheduler.advance(200)
    debouncer.trigger("joh")
    assert calls == []
    assert debouncer.pending

    scheduler.advance(300)
    assert calls == ["joh"]
    assert not debouncer.pending


def test_debouncer_cancel_drops_pending_call(scheduler):
    calls = []
    debouncer = Debouncer(scheduler, 300, calls.append)
    debouncer.trigger("x")
    debouncer.cancel()
    scheduler.advance(1000)
    assert calls == []


def make_search(client, scheduler):
    search = MemberSearch(partial(member_service.search_members, client), scheduler)
    results = []
    search.results.connect(results.append)
    return search, results


def test_blank_term_without_selection_lists_first_members(client, backend, scheduler):
    backend.on("GET", "/api/members", MEMBERS)
    search, results = make_search(client, scheduler)

    search.term_changed("", has_selection=False)
    assert backend.requests == []
    scheduler.advance(300)

    assert backend.last.url.path == "/api/members"
    assert dict(backend.last.url.params) == {"limit": "50", "sort": "firstName"}
    assert [m.full_name for m in results[-1]] == ["John Doe"]


def test_typing_searches_once_after_pause(client, backend, scheduler):
    backend.on("GET", "/api/members/search", MEMBERS)
    search, results = make_search(client, scheduler)

    for term in ("j", "jo", "joh"):
        search.term_changed(term)
        scheduler.advance(100)
    assert backend.requests == []

    scheduler.advance(300)
    assert len(backend.requests) == 1
    assert backend.last.url.path == "/api/members/search"
    assert backend.last.url.params["term"] == "joh"
    assert results[-1][0].id == "m1"


def test_blank_term_with_selection_uses_search_endpoint(client, backend, scheduler):
    backend.on("GET", "/api/members/search", [])
    search, results = make_search(client, scheduler)
    search.term_changed("   ", has_selection=True)
    scheduler.advance(300)
    assert backend.paths() == ["/api/members/search"]
    assert results == [[]]


def test_failed_lookup_keeps_previous_options(client, backend, scheduler):
    backend.on("GET", "/api/members/search", {"msg": "boom"}, status=500)
    search, results = make_search(client, scheduler)
    loading = []
    search.loading_changed.connect(loading.append)

    search.term_changed("jo")
    scheduler.advance(300)

    assert results == []
    assert loading == [True, False]
