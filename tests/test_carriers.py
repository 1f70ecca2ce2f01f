"""
Tests for the Future helpers and Stream replay.

Tests contracts for:
- empty futures: filter rejection, empty sources and empty inners
- waiters released as soon as a future becomes empty
- cancellation in both directions along a chain of derived futures
- memoized streams traversed from several threads
"""
import threading
import time
from concurrent.futures import Future

from hkt_engine.anym import from_future
from hkt_engine.carriers import Maybe, Stream, futures


class TestEmptyFutures:
    """Test that emptiness propagates through the combinators."""

    def test_rejecting_filter_empties_derived(self):
        derived = futures.filter_future(futures.completed(1), lambda x: x > 5)
        assert futures.is_empty(derived)
        assert not derived.done()
        assert futures.snapshot(derived) == ("pending",)

    def test_accepting_filter_completes(self):
        derived = futures.filter_future(futures.completed(9), lambda x: x > 5)
        assert derived.result(timeout=1) == 9
        assert not futures.is_empty(derived)

    def test_map_over_empty_is_empty(self):
        assert futures.is_empty(futures.map_future(futures.pending(), lambda x: x + 1))

    def test_flat_map_into_empty_is_empty(self):
        derived = futures.flat_map_future(futures.completed(1), lambda x: futures.pending())
        assert futures.is_empty(derived)

    def test_emptiness_reaches_downstream(self):
        source = Future()
        mapped = futures.map_future(futures.filter_future(source, lambda x: x > 5), str)
        assert not futures.is_empty(mapped)
        source.set_result(1)
        assert futures.is_empty(mapped)

    def test_settle_returns_at_once_when_empty(self):
        derived = futures.filter_future(futures.completed(1), lambda x: x > 5)
        started = time.monotonic()
        assert futures.settle(derived, timeout=30) == Maybe.nothing()
        assert time.monotonic() - started < 5

    def test_late_rejection_wakes_waiter(self):
        source = Future()
        derived = futures.filter_future(source, lambda x: x > 5)
        timer = threading.Timer(0.05, source.set_result, args=(1,))
        timer.start()
        try:
            assert futures.wait_settled(derived, timeout=30)
            assert futures.is_empty(derived)
        finally:
            timer.join()

    def test_wait_settled_times_out_on_plain_pending(self):
        assert not futures.wait_settled(Future(), timeout=0.01)

    def test_empty_anym_is_absent_without_waiting(self):
        """A filtered-out future folds to its seed instead of timing out."""
        value = from_future(futures.completed(1)).filter(lambda x: x > 5)
        started = time.monotonic()
        assert not value.is_present()
        assert value.fold_left(0, lambda acc, x: acc + x) == 0
        assert time.monotonic() - started < 5


class TestCancellation:
    """Test cancellation along derived futures."""

    def test_cancelling_derived_cancels_source(self):
        source = Future()
        derived = futures.map_future(source, lambda x: x + 1)
        assert derived.cancel()
        assert source.cancelled()

    def test_cancelling_source_cancels_derived(self):
        source = Future()
        derived = futures.filter_future(source, bool)
        assert source.cancel()
        assert derived.cancelled()

    def test_cancelling_derived_cancels_inner(self):
        source = Future()
        inner = Future()
        derived = futures.flat_map_future(source, lambda x: inner)
        source.set_result(1)
        assert derived.cancel()
        assert inner.cancelled()

    def test_outer_cancel_reaches_anym_result(self):
        source = Future()
        derived = from_future(source).map(lambda x: x * 2).unwrap()
        source.cancel()
        assert derived.cancelled()
        assert futures.snapshot(derived) == ("cancelled",)

    def test_empty_future_cannot_be_cancelled(self):
        empty = futures.pending()
        assert not empty.cancel()
        assert futures.is_empty(empty)


class TestStreamReplay:
    """Test memoized streams over one-shot iterators."""

    def test_replays_pulled_elements(self):
        stream = Stream.from_iterable(iter([1, 2, 3]))
        assert list(stream) == [1, 2, 3]
        assert list(stream) == [1, 2, 3]

    def test_concurrent_traversals_see_every_element(self):
        def slow():
            for i in range(50):
                time.sleep(0.001)
                yield i

        stream = Stream.from_iterable(slow())
        results = [None] * 4

        def drain(slot):
            results[slot] = list(stream)

        threads = [threading.Thread(target=drain, args=(slot,)) for slot in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results == [list(range(50))] * 4

    def test_unsized_iterable_is_unbounded_unless_told(self):
        assert not Stream.from_iterable(x for x in range(3)).bounded
        assert Stream.from_iterable((x for x in range(3)), bounded=True).bounded
