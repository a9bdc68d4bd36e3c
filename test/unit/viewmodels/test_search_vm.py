import pytest

from app.viewmodels.search_vm import ERROR_MESSAGE, SearchVM
from conftest import FakeSearchClient, make_page
from core.errors import SearchError
from core.models import SearchStatus


def _started_vm(client, **kwargs):
    vm = SearchVM(client, **kwargs)
    vm.start()
    return vm


def test_start_fetches_seed_term_once(fake_client):
    vm = SearchVM(fake_client)
    assert vm.status is SearchStatus.IDLE

    vm.start()
    vm.start()

    assert fake_client.calls == [("galaxy", 1, 24)]
    assert vm.query == "galaxy"
    assert vm.page == 1


def test_successful_fetch_replaces_results_and_total_pages(fake_client):
    vm = _started_vm(fake_client)

    assert len(vm.photos) == 24
    assert vm.total_pages == 5
    assert vm.loading is False
    assert vm.error_message == ""
    assert vm.status is SearchStatus.SUCCESS


def test_first_page_shows_next_but_not_previous(fake_client):
    vm = _started_vm(fake_client)

    assert vm.has_previous is False
    assert vm.has_next is True


def test_results_are_replaced_not_merged(fake_client):
    vm = _started_vm(fake_client)
    fake_client.responses.append(make_page(3, 1, start=100))

    vm.submit_search("cats")

    assert [p.id for p in vm.photos] == ["p100", "p101", "p102"]
    assert vm.total_pages == 1
    assert vm.has_next is False


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_submission_is_ignored(fake_client, query):
    vm = _started_vm(fake_client)
    before = (vm.query, vm.page, vm.photos, vm.total_pages, vm.latest_token)

    assert vm.submit_search(query) is None

    assert len(fake_client.calls) == 1
    assert (vm.query, vm.page, vm.photos, vm.total_pages, vm.latest_token) == before


def test_submit_search_strips_and_resets_page(fake_client):
    vm = _started_vm(fake_client)
    vm.set_page(3)

    vm.submit_search("  mountains  ")

    assert fake_client.calls[-1] == ("mountains", 1, 24)
    assert vm.page == 1
    assert vm.query == "mountains"


def test_submit_from_later_page_issues_exactly_one_fetch(fake_client):
    vm = _started_vm(fake_client)
    vm.set_page(4)
    calls_before = len(fake_client.calls)

    vm.submit_search("birds")

    assert fake_client.calls[calls_before:] == [("birds", 1, 24)]


def test_previous_from_page_three_fetches_page_two_same_query(fake_client):
    vm = _started_vm(fake_client)
    vm.submit_search("ocean")
    vm.set_page(3)

    vm.previous_page()

    assert vm.page == 2
    assert fake_client.calls[-1] == ("ocean", 2, 24)


def test_next_page_uses_current_query(fake_client):
    vm = _started_vm(fake_client)

    vm.next_page()

    assert fake_client.calls[-1] == ("galaxy", 2, 24)
    assert vm.has_previous is True


@pytest.mark.parametrize("page", [0, -1, 6, 100])
def test_set_page_out_of_bounds_is_ignored(fake_client, page):
    vm = _started_vm(fake_client)

    assert vm.set_page(page) is None

    assert vm.page == 1
    assert len(fake_client.calls) == 1


def test_set_page_before_any_results_is_ignored(fake_client):
    vm = SearchVM(fake_client)

    assert vm.set_page(1) is None
    assert fake_client.calls == []


def test_previous_on_first_and_next_on_last_page_do_nothing(fake_client):
    vm = _started_vm(fake_client)
    vm.previous_page()
    vm.set_page(5)
    vm.next_page()

    assert vm.page == 5
    assert [c[1] for c in fake_client.calls] == [1, 5]


def test_select_category_searches_shortcut_term(fake_client):
    vm = _started_vm(fake_client)
    vm.set_page(2)

    vm.select_category("Birds")

    assert fake_client.calls[-1] == ("birds", 1, 24)
    assert vm.query == "birds"
    assert vm.page == 1


def test_select_category_accepts_term_and_any_case(fake_client):
    vm = _started_vm(fake_client)

    vm.select_category("CAR")

    assert fake_client.calls[-1] == ("car", 1, 24)


def test_select_unknown_category_raises(fake_client):
    vm = _started_vm(fake_client)

    with pytest.raises(ValueError, match="Unknown category"):
        vm.select_category("dogs")


def test_custom_categories(fake_client):
    vm = SearchVM(fake_client, categories=[("Space", "nebula")])

    vm.select_category("Space")

    assert vm.categories == (("Space", "nebula"),)
    assert fake_client.calls == [("nebula", 1, 24)]


def test_failure_sets_message_and_keeps_previous_results(fake_client):
    vm = _started_vm(fake_client)
    photos_before = vm.photos
    fake_client.responses.append(SearchError("boom"))

    vm.next_page()

    assert vm.error_message == ERROR_MESSAGE
    assert vm.loading is False
    assert vm.status is SearchStatus.FAILURE
    assert vm.photos == photos_before
    assert vm.total_pages == 5


def test_failure_on_first_load_leaves_results_empty():
    client = FakeSearchClient()
    client.responses.append(RuntimeError("network down"))

    vm = _started_vm(client)

    assert vm.photos == ()
    assert vm.total_pages == 0
    assert vm.error_message == ERROR_MESSAGE


def test_new_search_after_failure_recovers_and_clears_error(fake_client):
    fake_client.responses.append(SearchError("boom"))
    vm = _started_vm(fake_client)

    vm.submit_search("galaxy")

    assert vm.error_message == ""
    assert vm.status is SearchStatus.SUCCESS
    assert len(vm.photos) == 24


def test_failure_is_logged(fake_client, log_messages):
    fake_client.responses.append(SearchError("HTTP 401"))

    _started_vm(fake_client)

    assert any("HTTP 401" in m for m in log_messages)


def test_loading_flag_while_request_in_flight(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)

    request = vm.start()

    assert vm.loading is True
    assert vm.status is SearchStatus.LOADING
    deferred.resolve(request.token, make_page(24, 5))
    assert vm.loading is False


def test_fetch_clears_previous_error(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    deferred.fail(first.token, SearchError("boom"))
    assert vm.error_message == ERROR_MESSAGE

    vm.submit_search("stars")

    assert vm.error_message == ""
    assert vm.loading is True


def test_stale_response_is_discarded(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    second = vm.submit_search("cats")

    deferred.resolve(second.token, make_page(2, 1, start=50))
    deferred.resolve(first.token, make_page(24, 5))

    assert [p.id for p in vm.photos] == ["p50", "p51"]
    assert vm.total_pages == 1
    assert vm.query == "cats"


def test_stale_response_does_not_clear_loading(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    second = vm.submit_search("cats")

    deferred.resolve(first.token, make_page(24, 5))

    assert vm.loading is True
    assert vm.photos == ()
    deferred.resolve(second.token, make_page(1, 1))
    assert vm.loading is False


def test_stale_failure_is_ignored(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    second = vm.submit_search("cats")

    deferred.resolve(second.token, make_page(3, 2))
    deferred.fail(first.token, SearchError("late failure"))

    assert vm.error_message == ""
    assert vm.status is SearchStatus.SUCCESS


def test_page_reset_fetch_pairs_new_query_with_page_one(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    deferred.resolve(first.token, make_page(24, 5))
    paged = vm.set_page(3)

    reset = vm.submit_search("birds")

    assert (paged.query, paged.page) == ("galaxy", 3)
    assert (reset.query, reset.page) == ("birds", 1)
    assert reset.token > paged.token


def test_tokens_increase_monotonically(fake_client):
    vm = SearchVM(fake_client)
    tokens = [vm.submit_search(q).token for q in ("a", "b", "c")]

    assert tokens == [1, 2, 3]
    assert vm.latest_token == 3


def test_listeners_are_notified_on_each_transition(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    seen = []
    vm.add_listener(lambda v: seen.append((v.status, v.loading)))

    request = vm.start()
    deferred.resolve(request.token, make_page(1, 1))

    assert seen == [(SearchStatus.LOADING, True), (SearchStatus.SUCCESS, False)]


def test_removed_listener_is_not_called(fake_client):
    vm = SearchVM(fake_client)
    seen = []

    def listener(v):
        seen.append(v.status)

    vm.add_listener(listener)
    vm.remove_listener(listener)
    vm.start()

    assert seen == []


def test_custom_page_size_is_sent(fake_client):
    vm = SearchVM(fake_client, per_page=10)

    vm.submit_search("trees")

    assert fake_client.calls == [("trees", 1, 10)]


def test_page_change_is_ignored_while_new_search_loads(fake_client, deferred):
    vm = SearchVM(fake_client, dispatcher=deferred)
    first = vm.start()
    deferred.resolve(first.token, make_page(24, 5))

    pending = vm.submit_search("rareterm")

    assert vm.next_page() is None
    assert vm.set_page(2) is None
    assert [(r.query, r.page) for r, _, _ in deferred.pending.values()] == [("rareterm", 1)]
    deferred.resolve(pending.token, make_page(1, 1))
    assert vm.page == 1
    assert vm.has_next is False
