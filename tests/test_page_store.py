"""Tests for navcache.pages.store — page cache, staleness and eviction."""

import pytest

from navcache._internal.types import ComponentRef
from navcache.config import CacheConfig
from navcache.pages.store import PageCacheStore
from navcache.pages.types import ChangeKind, PageChange

EVENTS_VIEW = ComponentRef(object(), name="EventsView")


def _register_in_order(store: PageCacheStore, clock, keys: str) -> None:
    for key in keys:
        clock.advance()
        store.register_page(key, EVENTS_VIEW, {"page": key})


class TestRegisterAndRead:
    def test_register_then_get(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {"list": [1, 2, 3]})
        assert page_store.get_page_data("events") == {"list": [1, 2, 3]}

    def test_overwrite_replaces_data(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {"v": 1})
        page_store.register_page("events", EVENTS_VIEW, {"v": 2})

        assert page_store.get_page_data("events") == {"v": 2}
        assert page_store.get_cached_pages() == ["events"]

    def test_component_returned_verbatim(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, None)
        assert page_store.get_component("events") is EVENTS_VIEW

    def test_unknown_key_returns_none_without_creating(self, page_store: PageCacheStore) -> None:
        assert page_store.get_page_data("placements") is None
        assert "placements" not in page_store.get_cached_pages()
        assert len(page_store) == 0

    def test_register_sets_fresh_timestamp(self, page_store: PageCacheStore, clock) -> None:
        clock.now = 42.0
        page_store.register_page("events", EVENTS_VIEW, {})

        entry = page_store.get_entry("events")
        assert entry is not None
        assert entry.last_visited == 42.0
        assert entry.is_stale is False


class TestStaleness:
    def test_scenario_stale_hides_visit_restores(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {"list": [1, 2, 3]})
        assert page_store.get_page_data("events") == {"list": [1, 2, 3]}

        page_store.mark_page_stale("events")
        assert page_store.get_page_data("events") is None
        assert "events" in page_store  # hidden, not deleted

        page_store.visit_page("events")
        assert page_store.get_page_data("events") == {"list": [1, 2, 3]}

    def test_reregister_clears_staleness(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {"v": 1})
        page_store.mark_page_stale("events")
        page_store.register_page("events", EVENTS_VIEW, {"v": 2})

        assert page_store.get_page_data("events") == {"v": 2}

    def test_mark_stale_unknown_key_is_noop(self, page_store: PageCacheStore) -> None:
        page_store.mark_page_stale("nope")
        assert page_store.get_cached_pages() == []

    def test_stale_read_does_not_touch(self, page_store: PageCacheStore, clock) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        page_store.mark_page_stale("events")
        before = page_store.get_entry("events").last_visited

        clock.advance(10)
        page_store.get_page_data("events")

        assert page_store.get_entry("events").last_visited == before

    def test_is_cached_reflects_staleness(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        assert page_store.is_cached("events") is True
        page_store.mark_page_stale("events")
        assert page_store.is_cached("events") is False


class TestVisitAndClear:
    def test_visit_sets_current_page(self, page_store: PageCacheStore) -> None:
        page_store.visit_page("gallery")
        assert page_store.get_current_page() == "gallery"
        assert page_store.get_cached_pages() == []

    def test_visit_bumps_recency(self, page_store: PageCacheStore, clock) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        clock.advance(5)
        page_store.visit_page("events")
        assert page_store.get_entry("events").last_visited == clock.now

    def test_clear_page(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        page_store.clear_page("events")

        assert page_store.get_page_data("events") is None
        assert page_store.get_cached_pages() == []

    def test_clear_unknown_page_is_harmless(self, page_store: PageCacheStore) -> None:
        page_store.clear_page("nope")
        assert len(page_store) == 0

    def test_clear_all(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        page_store.visit_page("events")
        page_store.clear()

        assert len(page_store) == 0
        assert page_store.get_current_page() == ""

    def test_accessors_do_not_touch(self, page_store: PageCacheStore, clock) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        before = page_store.get_entry("events").last_visited

        clock.advance(10)
        page_store.get_cached_pages()
        page_store.get_current_page()
        page_store.is_cached("events")

        assert page_store.get_entry("events").last_visited == before


class TestEviction:
    def test_cleanup_keeps_five_most_recent(self, manual_page_store: PageCacheStore, clock) -> None:
        _register_in_order(manual_page_store, clock, "ABCDEF")
        assert len(manual_page_store) == 6

        evicted = manual_page_store.cleanup()

        assert evicted == ["A"]
        assert set(manual_page_store.get_cached_pages()) == {"B", "C", "D", "E", "F"}

    def test_cleanup_under_ceiling_is_silent(self, manual_page_store: PageCacheStore, clock) -> None:
        _register_in_order(manual_page_store, clock, "ABCDE")
        calls: list[int] = []
        manual_page_store.subscribe(lambda: calls.append(1))

        assert manual_page_store.cleanup() == []
        assert calls == []

    def test_cleanup_notifies_when_evicting(self, manual_page_store: PageCacheStore, clock) -> None:
        _register_in_order(manual_page_store, clock, "ABCDEFG")
        changes: list[PageChange] = []
        manual_page_store.listen(changes.append)

        manual_page_store.cleanup()

        assert changes == [PageChange(ChangeKind.EVICTED, ("B", "A"))]

    def test_read_counts_as_touch(self, manual_page_store: PageCacheStore, clock) -> None:
        _register_in_order(manual_page_store, clock, "ABCDEF")
        clock.advance()
        manual_page_store.get_page_data("A")

        manual_page_store.cleanup()

        assert "A" in manual_page_store
        assert "B" not in manual_page_store

    def test_read_touch_can_be_disabled(self, clock) -> None:
        store = PageCacheStore(CacheConfig(auto_evict=False, touch_on_read=False), clock=clock)
        _register_in_order(store, clock, "ABCDEF")
        clock.advance()
        store.get_page_data("A")

        store.cleanup()

        assert "A" not in store

    def test_stale_entries_count_toward_ceiling(self, manual_page_store: PageCacheStore, clock) -> None:
        _register_in_order(manual_page_store, clock, "ABCDEF")
        manual_page_store.mark_page_stale("F")

        manual_page_store.cleanup()

        assert "F" in manual_page_store
        assert len(manual_page_store) == 5

    def test_equal_timestamps_use_touch_order(self, manual_page_store: PageCacheStore) -> None:
        # Clock never advances: insertion order decides
        for key in "ABCDEF":
            manual_page_store.register_page(key, EVENTS_VIEW, {})

        manual_page_store.cleanup()

        assert "A" not in manual_page_store

    def test_auto_evict_on_register(self, page_store: PageCacheStore, clock) -> None:
        _register_in_order(page_store, clock, "ABCDEF")

        assert len(page_store) == 5
        assert set(page_store.get_cached_pages()) == {"B", "C", "D", "E", "F"}

    def test_custom_ceiling(self, clock) -> None:
        store = PageCacheStore(CacheConfig(max_pages=2), clock=clock)
        _register_in_order(store, clock, "ABC")
        assert store.get_cached_pages() == ["B", "C"]


class TestNotifications:
    @pytest.mark.parametrize(
        ("operation", "kind"),
        [
            (lambda s: s.register_page("events", EVENTS_VIEW, {}), ChangeKind.REGISTERED),
            (lambda s: s.visit_page("events"), ChangeKind.VISITED),
            (lambda s: s.mark_page_stale("events"), ChangeKind.STALE),
            (lambda s: s.clear_page("events"), ChangeKind.CLEARED),
        ],
    )
    def test_each_mutation_notifies_with_descriptor(
        self, page_store: PageCacheStore, operation, kind: ChangeKind,
    ) -> None:
        changes: list[PageChange] = []
        page_store.listen(changes.append)

        operation(page_store)

        assert changes == [PageChange(kind, ("events",))]

    def test_identical_register_still_notifies(self, page_store: PageCacheStore) -> None:
        calls: list[int] = []
        page_store.subscribe(lambda: calls.append(1))

        page_store.register_page("events", EVENTS_VIEW, {"v": 1})
        page_store.register_page("events", EVENTS_VIEW, {"v": 1})

        assert calls == [1, 1]

    def test_subscriber_sees_post_mutation_state(self, page_store: PageCacheStore) -> None:
        seen: list[object] = []
        page_store.subscribe(lambda: seen.append(page_store.get_page_data("events")))

        page_store.register_page("events", EVENTS_VIEW, {"v": 1})

        assert seen == [{"v": 1}]

    def test_unsubscribed_callback_not_called(self, page_store: PageCacheStore) -> None:
        calls: list[int] = []
        unsubscribe = page_store.subscribe(lambda: calls.append(1))

        unsubscribe()
        unsubscribe()
        page_store.register_page("events", EVENTS_VIEW, {})

        assert calls == []

    def test_stats(self, page_store: PageCacheStore) -> None:
        page_store.register_page("events", EVENTS_VIEW, {})
        page_store.register_page("gallery", EVENTS_VIEW, {})
        page_store.mark_page_stale("gallery")
        page_store.visit_page("events")

        assert page_store.stats() == {
            "size": 2,
            "stale": 1,
            "capacity": 5,
            "current_page": "events",
            "subscribers": 0,
        }
