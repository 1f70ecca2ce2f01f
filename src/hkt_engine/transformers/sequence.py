"""
Sequence-shaped transformers: StreamT and ListT.

Windowing runs across the concatenation of the inner sequences in the
order the outer emits them, through the outer comprehender's stateful
map, so outer cardinality and ordering are untouched. Every other
sequence operation is applied to each inner on its own.
"""
from __future__ import annotations

import itertools
from random import Random
from typing import Any, Callable, Iterable, Optional

from ..anym import factory
from ..carriers.stream import Stream
from ..kernel.errors import CycleOnInfinite, UnorderableInfinite
from ..registry.context import Context
from ..typeclasses.monoid import Monoid
from . import sequence_ops as ops
from .base import Transformer
from .shapes import LIST_SHAPE, STREAM_SHAPE, InnerShape
from .windows import (
    Grouped,
    GroupedStatefullyUntil,
    GroupedUntil,
    GroupedWhile,
    Sliding,
    Windower,
)


class _WindowStep:
    """Feeds each inner into one windower; an inner becomes the windows it completed."""

    def __init__(self, shape: InnerShape, windower: Windower, operation: str,
                 supplier: Optional[Callable] = None):
        self.shape = shape
        self.windower = windower
        self.operation = operation
        self.supplier = supplier or list

    def step(self, inner: Any) -> Any:
        shape = self.shape
        if not shape.is_bounded(inner):
            raise UnorderableInfinite(
                "cannot window across an unbounded inner sequence",
                marker=shape.name,
                operation=self.operation,
            )
        windows: list[Any] = []
        for element in shape.to_iterable(inner):
            windows.extend(map(self.supplier, self.windower.push(element)))
        return shape.from_iterable(windows, True)

    def flush(self, last: Any) -> Any:
        rest = [self.supplier(window) for window in self.windower.finish()]
        if not rest:
            return last
        return self.shape.concat(last, self.shape.from_iterable(rest, True))


class SequenceTransformer(Transformer):
    __slots__ = ()

    @classmethod
    def empty_stream(cls, context: Optional[Context] = None):
        """A transformer over an empty outer Stream."""
        return cls(factory.from_iterable(Stream.empty(), context))

    def unit_iterator(self, values: Iterable[Any], bounded: bool = True):
        """`values` as one inner in this outer carrier."""
        return self._with(self.outer.unit(self.shape.from_iterable(values, bounded)))

    def _per_inner(
        self,
        op: Callable[[Iterable[Any]], Iterable[Any]],
        operation: str,
        *,
        ordered: bool = False,
        cyclic: bool = False,
        bounded: Optional[bool] = None,
    ):
        """
        Apply `op` to the elements of every inner.

        `ordered` ops need the whole inner before emitting and `cyclic` ops
        replay it, so both refuse unbounded inners. `bounded` overrides
        whether the result is known to be finite.
        """
        shape = self.shape

        def _apply(inner: Any) -> Any:
            finite = shape.is_bounded(inner)
            if not finite and cyclic:
                raise CycleOnInfinite("cannot cycle an unbounded inner sequence",
                                      marker=shape.name, operation=operation)
            if not finite and ordered:
                raise UnorderableInfinite("operation needs the whole inner sequence",
                                          marker=shape.name, operation=operation)
            return shape.transform(inner, op, finite if bounded is None else bounded)
        return self._each(_apply)

    def _windowed(self, factory: Callable[[], Windower], operation: str, supplier: Optional[Callable] = None):
        """`supplier` builds each window from its list of elements, `tuple` for instance."""
        shape = self.shape
        comprehender = self.outer.comprehender
        carrier = comprehender.map_stateful(
            self.outer.carrier,
            lambda: _WindowStep(shape, factory(), operation, supplier),
        )
        return self._with(self.outer._rewrap(carrier))

    # -------------------------------------------------------------------------
    # bind
    # -------------------------------------------------------------------------

    def flat_map(self, fn: Callable[[Any], Transformer]):
        """
        For each inner, run `fn` over its elements in order through the
        outer and concatenate the resulting inners.
        """
        shape = self.shape
        outer = self.outer

        def _bind(inner: Any) -> Any:
            if not shape.is_bounded(inner):
                raise UnorderableInfinite(
                    "cannot bind across an unbounded inner sequence",
                    marker=shape.name,
                    operation="flat_map",
                )
            acc = outer.unit(shape.empty())
            for element in shape.to_iterable(inner):
                acc = acc.flat_map(
                    lambda left, element=element: fn(element).outer.map(
                        lambda right, left=left: shape.concat(left, right)
                    )
                )
            return acc
        return self._with(outer.flat_map(_bind))

    # -------------------------------------------------------------------------
    # zipping
    # -------------------------------------------------------------------------

    def zip(self, other: Any, zipper: Optional[Callable[[Any, Any], Any]] = None):
        """
        With a plain iterable, every inner is zipped against it. With another
        sequence transformer, each pair of inners drawn through the outer's
        flat_map is zipped.
        """
        shape = self.shape
        if isinstance(other, Transformer):
            other_shape = other.shape
            other_outer = other.outer

            def _pair(left: Any) -> Any:
                return other_outer.map(
                    lambda right: shape.transform(
                        left,
                        lambda xs: ops.zip_with(xs, other_shape.to_iterable(right), zipper),
                        shape.is_bounded(left) or other_shape.is_bounded(right),
                    )
                )
            return self._with(self.outer.flat_map(_pair))

        source = Stream.from_iterable(other)

        def _zip(inner: Any) -> Any:
            return shape.transform(
                inner,
                lambda xs: ops.zip_with(xs, source, zipper),
                shape.is_bounded(inner) or source.bounded,
            )
        return self._each(_zip)

    def zip3(self, second: Any, third: Any):
        return self.zip(second).zip(third, lambda ab, c: (ab[0], ab[1], c))

    def zip4(self, second: Any, third: Any, fourth: Any):
        return self.zip3(second, third).zip(fourth, lambda abc, d: (*abc, d))

    def zip_with_index(self):
        return self._per_inner(ops.zip_with_index, "zip_with_index")

    # -------------------------------------------------------------------------
    # windowing across inners
    # -------------------------------------------------------------------------

    def sliding(self, size: int, increment: int = 1):
        return self._windowed(lambda: Sliding(size, increment), "sliding")

    def grouped(self, size: int, supplier: Optional[Callable] = None):
        return self._windowed(lambda: Grouped(size), "grouped", supplier)

    def grouped_until(self, predicate: Callable[[Any], bool], supplier: Optional[Callable] = None):
        return self._windowed(lambda: GroupedUntil(predicate), "grouped_until", supplier)

    def grouped_while(self, predicate: Callable[[Any], bool], supplier: Optional[Callable] = None):
        return self._windowed(lambda: GroupedWhile(predicate), "grouped_while", supplier)

    def grouped_statefully_until(self, predicate: Callable[[list[Any], Any], bool]):
        return self._windowed(lambda: GroupedStatefullyUntil(predicate), "grouped_statefully_until")

    def grouped_by(self, classifier: Callable[[Any], Any], downstream: Optional[Callable] = None):
        """
        Each inner becomes its `(key, group)` pairs, keys in order of first
        appearance. `downstream` reduces each group's list of elements.
        """
        return self._per_inner(
            lambda xs: ops.group_by(xs, classifier, downstream), "grouped_by", ordered=True
        )

    # -------------------------------------------------------------------------
    # per-inner operations
    # -------------------------------------------------------------------------

    def scan_left(self, seed: Any, fn: Optional[Callable[[Any, Any], Any]] = None):
        """`scan_left(monoid)` or `scan_left(seed, fn)`."""
        seed, fn = _seeded(seed, fn)
        return self._per_inner(lambda xs: ops.scan_left(xs, seed, fn), "scan_left")

    def scan_right(self, seed: Any, fn: Optional[Callable[[Any, Any], Any]] = None):
        """`scan_right(monoid)` or `scan_right(seed, fn)`."""
        seed, fn = _seeded(seed, fn)
        return self._per_inner(lambda xs: ops.scan_right(xs, seed, fn), "scan_right", ordered=True)

    def distinct(self):
        return self._per_inner(ops.distinct, "distinct")

    def sorted(self, key: Optional[Callable[[Any], Any]] = None, reverse: bool = False):
        return self._per_inner(lambda xs: ops.sort(xs, key, reverse), "sorted", ordered=True)

    def shuffle(self, rng: Optional[Random] = None):
        return self._per_inner(lambda xs: ops.shuffle(xs, rng), "shuffle", ordered=True)

    def reverse(self):
        return self._per_inner(ops.reverse, "reverse", ordered=True)

    def take_while(self, predicate: Callable[[Any], bool]):
        return self._per_inner(lambda xs: ops.take_while(xs, predicate), "take_while")

    def take_until(self, predicate: Callable[[Any], bool]):
        return self._per_inner(lambda xs: ops.take_until(xs, predicate), "take_until")

    def drop_while(self, predicate: Callable[[Any], bool]):
        return self._per_inner(lambda xs: ops.drop_while(xs, predicate), "drop_while")

    def drop_until(self, predicate: Callable[[Any], bool]):
        return self._per_inner(lambda xs: ops.drop_until(xs, predicate), "drop_until")

    limit_while = take_while
    limit_until = take_until
    skip_while = drop_while
    skip_until = drop_until

    def skip(self, count: int):
        return self._per_inner(lambda xs: ops.skip(xs, count), "skip")

    def limit(self, count: int):
        return self._per_inner(lambda xs: ops.limit(xs, count), "limit", bounded=True)

    def skip_last(self, count: int):
        return self._per_inner(lambda xs: ops.skip_last(xs, count), "skip_last", ordered=True)

    def limit_last(self, count: int):
        return self._per_inner(lambda xs: ops.limit_last(xs, count), "limit_last", ordered=True)

    take_right = limit_last
    drop_right = skip_last

    def slice(self, start: int, stop: int):
        return self._per_inner(lambda xs: ops.slice_(xs, start, stop), "slice", bounded=True)

    def intersperse(self, separator: Any):
        return self._per_inner(lambda xs: ops.intersperse(xs, separator), "intersperse")

    def on_empty(self, value: Any):
        return self.on_empty_get(lambda: value)

    def on_empty_get(self, supplier: Callable[[], Any]):
        return self._per_inner(lambda xs: ops.on_empty_get(xs, supplier), "on_empty_get")

    def on_empty_throw(self, supplier: Callable[[], BaseException]):
        return self._per_inner(lambda xs: ops.on_empty_throw(xs, supplier), "on_empty_throw")

    def cycle(self, times: int, monoid: Optional[Monoid] = None):
        """
        Repeat each inner `times` times. With a monoid the inner is first
        reduced to one element, which is then repeated.
        """
        if monoid is None:
            return self._per_inner(lambda xs: ops.cycle(list(xs), times), "cycle", cyclic=True)
        return self._per_inner(lambda xs: ops.cycle([monoid.fold(xs)], times), "cycle", cyclic=True)

    def cycle_while(self, predicate: Callable[[Any], bool]):
        return self._per_inner(
            lambda xs: ops.cycle_while(list(xs), predicate), "cycle_while", cyclic=True, bounded=False
        )

    def cycle_until(self, predicate: Callable[[Any], bool]):
        return self._per_inner(
            lambda xs: ops.cycle_until(list(xs), predicate), "cycle_until", cyclic=True, bounded=False
        )

    def combine(self, predicate: Callable[[Any, Any], bool], op: Callable[[Any, Any], Any]):
        return self._per_inner(lambda xs: ops.combine(xs, predicate, op), "combine")

    # -------------------------------------------------------------------------
    # reductions
    # -------------------------------------------------------------------------

    def reduce(self, monoid: Monoid):
        """Outer of each inner reduced by `monoid`."""
        shape = self.shape
        return self.outer.map(lambda inner: monoid.fold(shape.to_iterable(inner)))

    def stream(self) -> Stream:
        """Every element of every inner, in outer order."""
        shape = self.shape
        outer = self.outer
        return Stream(
            lambda: itertools.chain.from_iterable(shape.to_iterable(inner) for inner in outer),
            False,
        )


def _seeded(seed: Any, fn: Optional[Callable[[Any, Any], Any]]) -> tuple[Any, Callable[[Any, Any], Any]]:
    if fn is None:
        if not isinstance(seed, Monoid):
            raise TypeError("scan needs a monoid or a seed and a function")
        return seed.zero, seed.combine
    return seed, fn


class StreamT(SequenceTransformer):
    """Outer<Stream<A>>"""
    inner_shape = STREAM_SHAPE
    __slots__ = ()


class ListT(SequenceTransformer):
    """Outer<list<A>>"""
    inner_shape = LIST_SHAPE
    __slots__ = ()
