"""
Comprehenders for the reference carriers and Python's own containers.

Representative element used when a flat_map crosses into a value-lineage
family:

- Maybe:          the present value, or empty
- Identity:       the value
- Future:         the result, blocking up to `future_timeout`; an empty or
                  still pending future is empty
- Stream/list/tuple/iterator: the first element, or empty
- async iterable: the first item, driving a private event loop (refused
                  from inside a running loop)

Sequence-lineage targets receive every element instead.
"""
from __future__ import annotations

import asyncio
import itertools
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from concurrent.futures import Future
from typing import Any, Callable, Iterable

from ..carriers import futures
from ..carriers.identity import Identity
from ..carriers.maybe import Maybe
from ..carriers.stream import Stream
from ..kernel.errors import MissingInstance
from ..kernel.types import Lineage
from .comprehender import CollapsePolicy, Comprehender, StatefulStep, run_stateful


# =============================================================================
# VALUE LINEAGE
# =============================================================================

class MaybeComprehender(Comprehender):
    target_type = Maybe

    def of(self, value: Any) -> Maybe:
        return Maybe.just(value)

    def empty(self) -> Maybe:
        return Maybe.nothing()

    def map(self, carrier: Maybe, fn: Callable) -> Maybe:
        return carrier.map(fn)

    def flat_map(self, carrier: Maybe, fn: Callable) -> Maybe:
        return carrier.flat_map(fn)

    def filter(self, carrier: Maybe, predicate: Callable) -> Maybe:
        return carrier.filter(predicate)

    def to_iterable(self, carrier: Maybe) -> Iterable[Any]:
        return iter(carrier)


class IdentityComprehender(Comprehender):
    target_type = Identity

    def of(self, value: Any) -> Identity:
        return Identity(value)

    def empty(self) -> Identity:
        raise MissingInstance("Identity has no empty value", marker=Identity, operation="empty")

    def map(self, carrier: Identity, fn: Callable) -> Identity:
        return carrier.map(fn)

    def flat_map(self, carrier: Identity, fn: Callable) -> Identity:
        return carrier.flat_map(fn)

    def to_iterable(self, carrier: Identity) -> Iterable[Any]:
        return iter(carrier)


class FutureComprehender(Comprehender):
    """Futures reject sequence results in a value flat_map."""
    target_type = Future
    collapse = CollapsePolicy.REJECT

    def of(self, value: Any) -> Future:
        return futures.completed(value)

    def empty(self) -> Future:
        return futures.pending()

    def map(self, carrier: Future, fn: Callable) -> Future:
        return futures.map_future(carrier, fn)

    def flat_map(self, carrier: Future, fn: Callable) -> Future:
        return futures.flat_map_future(carrier, fn)

    def filter(self, carrier: Future, predicate: Callable) -> Future:
        return futures.filter_future(carrier, predicate)

    def to_iterable(self, carrier: Future) -> Iterable[Any]:
        return iter(futures.settle(carrier, self.config.future_timeout))


# =============================================================================
# SEQUENCE LINEAGE
# =============================================================================

class StreamComprehender(Comprehender):
    target_type = Stream
    lineage = Lineage.SEQUENCE

    def of(self, value: Any) -> Stream:
        return Stream.of(value)

    def empty(self) -> Stream:
        return Stream.empty()

    def map(self, carrier: Stream, fn: Callable) -> Stream:
        return carrier.map(fn)

    def flat_map(self, carrier: Stream, fn: Callable) -> Stream:
        return carrier.flat_map(fn)

    def filter(self, carrier: Stream, predicate: Callable) -> Stream:
        return carrier.filter(predicate)

    def to_iterable(self, carrier: Stream) -> Iterable[Any]:
        return carrier

    def from_iterable(self, items: Iterable[Any]) -> Stream:
        return Stream.from_iterable(items)

    def map_stateful(self, carrier: Stream, factory: Callable[[], StatefulStep]) -> Stream:
        # fresh state on every traversal
        return Stream(lambda: run_stateful(carrier, factory), carrier.bounded)


class ListComprehender(Comprehender):
    target_type = list
    lineage = Lineage.SEQUENCE

    def of(self, value: Any) -> list:
        return [value]

    def empty(self) -> list:
        return []

    def map(self, carrier: list, fn: Callable) -> list:
        return [fn(x) for x in carrier]

    def flat_map(self, carrier: list, fn: Callable) -> list:
        return [y for x in carrier for y in fn(x)]

    def filter(self, carrier: list, predicate: Callable) -> list:
        return [x for x in carrier if predicate(x)]

    def to_iterable(self, carrier: list) -> Iterable[Any]:
        return carrier

    def from_iterable(self, items: Iterable[Any]) -> list:
        return list(items)


class TupleComprehender(ListComprehender):
    target_type = tuple

    def of(self, value: Any) -> tuple:
        return (value,)

    def empty(self) -> tuple:
        return ()

    def map(self, carrier: tuple, fn: Callable) -> tuple:
        return tuple(fn(x) for x in carrier)

    def flat_map(self, carrier: tuple, fn: Callable) -> tuple:
        return tuple(y for x in carrier for y in fn(x))

    def filter(self, carrier: tuple, predicate: Callable) -> tuple:
        return tuple(x for x in carrier if predicate(x))

    def from_iterable(self, items: Iterable[Any]) -> tuple:
        return tuple(items)


class IteratorComprehender(Comprehender):
    """One-shot iterators and generators; every operation stays lazy."""
    target_type = Iterator
    lineage = Lineage.SEQUENCE

    def of(self, value: Any) -> Iterator:
        return iter((value,))

    def empty(self) -> Iterator:
        return iter(())

    def map(self, carrier: Iterator, fn: Callable) -> Iterator:
        return map(fn, carrier)

    def flat_map(self, carrier: Iterator, fn: Callable) -> Iterator:
        return itertools.chain.from_iterable(map(fn, carrier))

    def filter(self, carrier: Iterator, predicate: Callable) -> Iterator:
        return filter(predicate, carrier)

    def to_iterable(self, carrier: Iterator) -> Iterable[Any]:
        return carrier

    def from_iterable(self, items: Iterable[Any]) -> Iterator:
        return iter(items)


class AsyncIterableComprehender(Comprehender):
    """
    Async iterables stand in for reactive publishers.

    map/flat_map/filter build async generators and never block. Enumerating
    from synchronous code (`to_iterable`) runs a private event loop and is
    refused by asyncio when a loop is already running in this thread.
    """
    target_type = AsyncIterable
    lineage = Lineage.SEQUENCE

    def of(self, value: Any) -> AsyncIterator:
        return async_from((value,))

    def empty(self) -> AsyncIterator:
        return async_from(())

    def map(self, carrier: AsyncIterable, fn: Callable) -> AsyncIterator:
        async def _map():
            async for item in carrier:
                yield fn(item)
        return _map()

    def flat_map(self, carrier: AsyncIterable, fn: Callable) -> AsyncIterator:
        async def _flat_map():
            async for item in carrier:
                async for inner in fn(item):
                    yield inner
        return _flat_map()

    def filter(self, carrier: AsyncIterable, predicate: Callable) -> AsyncIterator:
        async def _filter():
            async for item in carrier:
                if predicate(item):
                    yield item
        return _filter()

    def to_iterable(self, carrier: AsyncIterable) -> Iterable[Any]:
        return iter(asyncio.run(collect(carrier)))

    def from_iterable(self, items: Iterable[Any]) -> AsyncIterator:
        return async_from(items)

    def map_stateful(self, carrier: AsyncIterable, factory: Callable[[], StatefulStep]) -> AsyncIterator:
        async def _stateful():
            state = factory()
            previous: list[Any] = []
            async for item in carrier:
                result = state.step(item)
                if previous:
                    yield previous.pop()
                previous.append(result)
            if previous:
                yield state.flush(previous.pop())
        return _stateful()


async def async_from(items: Iterable[Any]) -> AsyncIterator:
    """An async iterator over a synchronous iterable."""
    for item in items:
        yield item


async def collect(source: AsyncIterable) -> list[Any]:
    """Drain an async iterable into a list."""
    return [item async for item in source]


async def head(source: AsyncIterable) -> list[Any]:
    """The first item of an async iterable, or nothing; the rest is never pulled."""
    async for item in source:
        return [item]
    return []


def default_comprehenders(config) -> list[Comprehender]:
    """Concrete types first; ABC targets are matched in this order after the MRO walk."""
    return [
        MaybeComprehender(config),
        IdentityComprehender(config),
        FutureComprehender(config),
        StreamComprehender(config),
        ListComprehender(config),
        TupleComprehender(config),
        IteratorComprehender(config),
        AsyncIterableComprehender(config),
    ]
