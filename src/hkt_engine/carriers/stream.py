"""
Stream: a lazy, replayable sequence carrier (sequence lineage).

A Stream is built from a factory returning a fresh iterator, so it can be
traversed more than once. Streams built from one-shot iterators memoize
what they have pulled. `bounded` records whether the stream is known to be
finite; unbounded streams come from `iterate`/`generate`/`cycle` and lose
that status only through `limit`.
"""
from __future__ import annotations

import itertools
import threading
from collections.abc import Sized
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class _Replay:
    """Memoizing view over a one-shot iterator, safe to traverse from several threads."""
    __slots__ = ("_source", "_seen", "_lock", "_exhausted")

    def __init__(self, source: Iterator[Any]):
        self._source = source
        self._seen: list[Any] = []
        self._lock = threading.Lock()
        self._exhausted = False

    def _pull(self, index: int) -> bool:
        """Make sure `index` is memoized; False once the source is exhausted."""
        with self._lock:
            while index >= len(self._seen):
                if self._exhausted:
                    return False
                try:
                    self._seen.append(next(self._source))
                except StopIteration:
                    self._exhausted = True
                    return False
            return True

    def __call__(self) -> Iterator[Any]:
        index = 0
        while index < len(self._seen) or self._pull(index):
            yield self._seen[index]
            index += 1


class Stream(Generic[T]):
    __slots__ = ("_factory", "bounded")

    def __init__(self, factory: Callable[[], Iterator[T]], bounded: bool = True):
        self._factory = factory
        self.bounded = bounded

    # -------------------------------------------------------------------------
    # construction
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, *values: T) -> Stream[T]:
        return cls(lambda: iter(values), True)

    @classmethod
    def empty(cls) -> Stream[Any]:
        return cls(lambda: iter(()), True)

    @classmethod
    def from_iterable(cls, source: Iterable[T], bounded: Optional[bool] = None) -> Stream[T]:
        """
        Wrap any iterable. Sized sources are replayed directly; iterators are
        memoized. `bounded` defaults to whether the source is Sized.
        """
        if isinstance(source, Stream):
            return source
        if bounded is None:
            bounded = isinstance(source, Sized)
        if isinstance(source, Iterator):
            return cls(_Replay(source), bounded)
        return cls(lambda: iter(source), bounded)

    @classmethod
    def iterate(cls, seed: T, fn: Callable[[T], T]) -> Stream[T]:
        def _gen() -> Iterator[T]:
            current = seed
            while True:
                yield current
                current = fn(current)
        return cls(_gen, False)

    @classmethod
    def generate(cls, supplier: Callable[[], T]) -> Stream[T]:
        return cls(lambda: (supplier() for _ in itertools.count()), False)

    # -------------------------------------------------------------------------
    # monadic surface
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[T], R]) -> Stream[R]:
        factory = self._factory
        return Stream(lambda: map(fn, factory()), self.bounded)

    def flat_map(self, fn: Callable[[T], Iterable[R]]) -> Stream[R]:
        factory = self._factory
        return Stream(
            lambda: itertools.chain.from_iterable(fn(x) for x in factory()),
            self.bounded,
        )

    def filter(self, predicate: Callable[[T], bool]) -> Stream[T]:
        factory = self._factory
        return Stream(lambda: filter(predicate, factory()), self.bounded)

    def limit(self, count: int) -> Stream[T]:
        factory = self._factory
        return Stream(lambda: itertools.islice(factory(), count), True)

    def concat(self, other: Iterable[T]) -> Stream[T]:
        factory = self._factory
        other_stream = Stream.from_iterable(other)
        return Stream(
            lambda: itertools.chain(factory(), iter(other_stream)),
            self.bounded and other_stream.bounded,
        )

    def to_list(self) -> list[T]:
        return list(self)

    def __iter__(self) -> Iterator[T]:
        return iter(self._factory())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stream):
            return NotImplemented
        if not (self.bounded and other.bounded):
            return self is other
        return self.to_list() == other.to_list()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self.bounded:
            return "Stream(<unbounded>)"
        return f"Stream.of({', '.join(repr(x) for x in self)})"
