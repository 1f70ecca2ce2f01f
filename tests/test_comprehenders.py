"""
Tests for comprehender dispatch.

Tests contracts for:
- driving a foreign carrier through its registered comprehender
- resolution by MRO, then by ABC, with per-class caching
- cross-family flat_map conversion
- UnknownCarrier for unhandled types
- stateful ordered maps
"""
from collections.abc import Iterator

import pytest

from hkt_engine.carriers import Identity, Maybe, Stream, futures
from hkt_engine.comprehension import (
    AsyncIterableComprehender,
    Comprehender,
    ComprehenderRegistry,
    IteratorComprehender,
    ListComprehender,
    MaybeComprehender,
    StreamComprehender,
    async_from,
    collect,
    default_comprehenders,
    run_stateful,
)
from hkt_engine.config import EngineConfig
from hkt_engine.kernel import Lineage, UnknownCarrier


class Box:
    """A foreign carrier with its own map / flat_map."""

    def __init__(self, value):
        self.value = value

    def map(self, fn):
        return Box(fn(self.value))

    def flat_map(self, fn):
        return fn(self.value)

    def __eq__(self, other):
        return isinstance(other, Box) and other.value == self.value


class BoxComprehender(Comprehender):
    target_type = Box

    def of(self, value):
        return Box(value)

    def empty(self):
        raise TypeError("Box is never empty")

    def map(self, carrier, fn):
        return carrier.map(fn)

    def flat_map(self, carrier, fn):
        return carrier.flat_map(fn)

    def to_iterable(self, carrier):
        return iter((carrier.value,))


class Running:
    """Running total; flush appends a marker to the last element."""

    def __init__(self):
        self.total = 0

    def step(self, element):
        self.total += element
        return self.total

    def flush(self, last):
        return (last, "end")


@pytest.fixture
def registry():
    comprehenders = ComprehenderRegistry(default_comprehenders(EngineConfig()))
    comprehenders.register(BoxComprehender())
    return comprehenders


class TestForeignCarrier:
    """Test a carrier registered from outside the engine."""

    def test_map_matches_native(self, registry):
        """Dispatching map agrees with the carrier's own map."""
        f = lambda x: x * 7  # noqa: E731
        assert registry.map(Box(3), f) == Box(3).map(f)

    def test_filter_is_emulated(self, registry):
        """No native filter: flat_map + of is used for kept values."""
        assert registry.filter(Box(4), lambda x: x > 0) == Box(4)

    def test_unit(self, registry):
        assert registry.unit(Box(1), 9) == Box(9)

    def test_duplicate_registration_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.register(BoxComprehender())


class TestResolution:
    """Test MRO and ABC resolution."""

    def test_exact_type(self, registry):
        assert isinstance(registry.resolve(Maybe.just(1)), MaybeComprehender)

    def test_subclass_found_through_mro(self, registry):
        class Tagged(list):
            pass
        assert isinstance(registry.resolve(Tagged([1])), ListComprehender)

    def test_generator_found_through_abc(self, registry):
        gen = (x for x in range(3))
        assert isinstance(registry.resolve(gen), IteratorComprehender)

    def test_async_generator_found_through_abc(self, registry):
        assert isinstance(registry.resolve(async_from([1])), AsyncIterableComprehender)

    def test_resolution_is_cached(self, registry):
        first = registry.resolve(Stream.of(1))
        assert registry.find(Stream) is first
        assert isinstance(first, StreamComprehender)

    def test_unknown_carrier(self, registry):
        with pytest.raises(UnknownCarrier) as exc:
            registry.resolve(object())
        assert exc.value.operation == "resolve"
        assert not registry.handles(3.5)

    def test_registration_clears_cache(self):
        """A later, more specific comprehender wins over an earlier ABC match."""
        class Counter(Iterator):
            def __next__(self):
                raise StopIteration

        class CounterComprehender(IteratorComprehender):
            target_type = Counter

        comprehenders = ComprehenderRegistry(default_comprehenders(EngineConfig()))
        assert isinstance(comprehenders.resolve(Counter()), IteratorComprehender)
        custom = CounterComprehender()
        comprehenders.register(custom)
        assert comprehenders.resolve(Counter()) is custom


class TestCrossTypeFlatMap:
    """Test flat_map returning a carrier of another family."""

    def test_list_receives_every_element_of_stream(self, registry):
        result = registry.flat_map([1, 2], lambda x: Stream.of(x, x * 10))
        assert result == [1, 10, 2, 20]

    def test_list_receives_maybe(self, registry):
        result = registry.flat_map([1, 2, 3], lambda x: Maybe.just(x) if x != 2 else Maybe.nothing())
        assert result == [1, 3]

    def test_maybe_receives_first_of_list(self, registry):
        assert registry.flat_map(Maybe.just(1), lambda x: [x + 1, x + 2]) == Maybe.just(2)

    def test_maybe_receives_empty_list(self, registry):
        assert registry.flat_map(Maybe.just(1), lambda x: []) == Maybe.nothing()

    def test_maybe_receives_identity(self, registry):
        assert registry.flat_map(Maybe.just(2), lambda x: Identity(x * 2)) == Maybe.just(4)

    def test_future_result_into_list(self, registry):
        result = registry.flat_map([1], lambda x: futures.completed(x + 1))
        assert result == [2]

    def test_pending_future_is_empty(self):
        comprehenders = ComprehenderRegistry(default_comprehenders(EngineConfig(future_timeout=0.01)))
        assert comprehenders.flat_map([1], lambda x: futures.pending()) == []

    def test_box_into_list(self, registry):
        assert registry.flat_map([1, 2], lambda x: Box(x)) == [1, 2]


class TestStateful:
    """Test ordered stateful maps."""

    def test_run_stateful_flushes_last(self):
        assert list(run_stateful([1, 2, 3], Running)) == [1, 3, (6, "end")]

    def test_run_stateful_empty(self):
        assert list(run_stateful([], Running)) == []

    def test_stream_map_stateful_is_replayable(self, registry):
        """Each traversal starts from fresh state."""
        stream = registry.resolve(Stream.of(1, 2)).map_stateful(Stream.of(1, 2), Running)
        assert stream.to_list() == [1, (3, "end")]
        assert stream.to_list() == [1, (3, "end")]

    def test_value_carrier_element_is_its_own_last(self, registry):
        comprehender = registry.resolve(Maybe.just(5))
        assert comprehender.map_stateful(Maybe.just(5), Running) == Maybe.just((5, "end"))

    def test_async_map_stateful(self, registry):
        import asyncio
        comprehender = registry.resolve(async_from([1, 2]))
        result = comprehender.map_stateful(async_from([1, 2]), Running)
        assert asyncio.run(collect(result)) == [1, (3, "end")]


class TestLineage:
    """Test lineage declarations."""

    def test_lineages(self, registry):
        assert registry.resolve(Maybe.just(1)).lineage is Lineage.VALUE
        assert registry.resolve(futures.completed(1)).lineage is Lineage.VALUE
        assert registry.resolve((1,)).lineage is Lineage.SEQUENCE
        assert registry.resolve(Stream.empty()).lineage is Lineage.SEQUENCE
