"""
AnyM: a cardinality-preserving facade over any comprehended carrier.

- AnyMValue wraps value-lineage carriers (at most one element)
- AnyMSeq wraps sequence-lineage carriers (zero or more elements)

Both hold the opaque carrier and its comprehender, and expose the common
monadic surface. Every operation returns a fresh AnyM of the same variant.
"""
from __future__ import annotations

import asyncio
from abc import ABC
from collections.abc import AsyncIterable
from functools import reduce
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional

from ..carriers.stream import Stream
from ..comprehension.builtin import head
from ..comprehension.comprehender import CollapsePolicy, Comprehender
from ..kernel.errors import CardinalityMismatch, NoElement
from ..kernel.types import Lineage
from ..registry.context import Context, resolve_context
from ..typeclasses.monoid import Monoid

_MISSING = object()


class AnyM(ABC):
    lineage: ClassVar[Lineage]
    __slots__ = ("carrier", "comprehender", "context")

    def __init__(self, carrier: Any, comprehender: Comprehender, context: Context):
        if comprehender.lineage is not self.lineage:
            raise CardinalityMismatch(
                f"{comprehender!r} is {comprehender.lineage.value}-lineage",
                marker=type(carrier),
                operation=f"{type(self).__name__}()",
            )
        self.carrier = carrier
        self.comprehender = comprehender
        self.context = context

    @staticmethod
    def wrap(carrier: Any, context: Optional[Context] = None) -> AnyM:
        """Wrap `carrier`, picking the variant from its comprehender's lineage."""
        context = resolve_context(context)
        if isinstance(carrier, AnyM):
            return carrier
        comprehender = context.comprehenders.resolve(carrier)
        if comprehender.lineage is Lineage.VALUE:
            return AnyMValue(carrier, comprehender, context)
        return AnyMSeq(carrier, comprehender, context)

    def _rewrap(self, carrier: Any) -> AnyM:
        return type(self)(carrier, self.comprehender, self.context)

    # -------------------------------------------------------------------------
    # monadic surface
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[Any], Any]) -> AnyM:
        return self._rewrap(self.comprehender.map(self.carrier, fn))

    def flat_map(self, fn: Callable[[Any], Any]) -> AnyM:
        """`fn` may return an AnyM or a raw carrier of any known family."""
        return self._rewrap(self.comprehender.flat_map(self.carrier, self._bind_step(fn)))

    def _bind_step(self, fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
        registry = self.context.comprehenders

        def _step(value: Any) -> Any:
            result = fn(value)
            if isinstance(result, AnyM):
                result = result.carrier
            return registry.adapt(self.comprehender, result)
        return _step

    def filter(self, predicate: Callable[[Any], bool]) -> AnyM:
        return self._rewrap(self.comprehender.filter(self.carrier, predicate))

    def peek(self, consumer: Callable[[Any], Any]) -> AnyM:
        def _peek(value: Any) -> Any:
            consumer(value)
            return value
        return self.map(_peek)

    def unit(self, value: Any) -> AnyM:
        return self._rewrap(self.comprehender.of(value))

    def empty(self) -> AnyM:
        return self._rewrap(self.comprehender.empty())

    def unwrap(self) -> Any:
        return self.carrier

    # -------------------------------------------------------------------------
    # observation (may block on asynchronous carriers)
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        return iter(self.comprehender.to_iterable(self.carrier))

    def to_list(self) -> list[Any]:
        return list(self)

    def fold_left(self, seed: Any, fn: Callable[[Any, Any], Any]) -> Any:
        return reduce(fn, self, seed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnyM):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.comprehender is other.comprehender
            and self.carrier == other.carrier
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.carrier!r})"


class AnyMValue(AnyM):
    """At most one element; operations never widen cardinality."""
    lineage = Lineage.VALUE
    __slots__ = ()

    def _bind_step(self, fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
        registry = self.context.comprehenders
        comprehender = self.comprehender

        def _step(value: Any) -> Any:
            result = fn(value)
            if isinstance(result, AnyM):
                result = result.carrier
            if comprehender.accepts(result):
                return result
            source = registry.resolve(result)
            if source.lineage is Lineage.SEQUENCE:
                return comprehender.of(_collapse(comprehender, source, result))
            return registry.adapt(comprehender, result)
        return _step

    def get(self) -> Any:
        first = next(iter(self), _MISSING)
        if first is _MISSING:
            raise NoElement("value is empty", marker=type(self.carrier), operation="get")
        return first

    def is_present(self) -> bool:
        return next(iter(self), _MISSING) is not _MISSING

    def or_else(self, default: Any) -> Any:
        first = next(iter(self), _MISSING)
        return default if first is _MISSING else first

    def combine_eager(self, monoid: Monoid, other: AnyMValue) -> AnyMValue:
        """
        Combine with `other` now, blocking on asynchronous carriers. Two
        present values are combined with `monoid`, a single present value is
        kept, and two empty values give empty.
        """
        values = (next(iter(self), _MISSING), next(iter(other), _MISSING))
        present = [v for v in values if v is not _MISSING]
        if not present:
            return self.empty()
        return self.unit(reduce(monoid.combine, present))

    def flat_map_iterable(self, fn: Callable[[Any], Iterable[Any]]) -> AnyMValue:
        """`fn` returns any iterable; its first element, if any, becomes the value."""
        comprehender = self.comprehender

        def _first(value: Any) -> Any:
            first = next(iter(fn(value)), _MISSING)
            return comprehender.empty() if first is _MISSING else comprehender.of(first)
        return self._rewrap(comprehender.flat_map(self.carrier, _first))

    def flat_map_publisher(self, fn: Callable[[Any], AsyncIterable]) -> AnyMValue:
        """`fn` returns an async iterable; its first item, if any, becomes the value."""
        return self.flat_map_iterable(lambda value: asyncio.run(head(fn(value))))


class AnyMSeq(AnyM):
    """Zero or more elements."""
    lineage = Lineage.SEQUENCE
    __slots__ = ()

    def stream(self) -> Stream:
        return Stream.from_iterable(self.comprehender.to_iterable(self.carrier))


def _collapse(target: Comprehender, source: Comprehender, carrier: Any) -> Any:
    """First element of a sequence returned into a value flat_map."""
    if target.collapse is CollapsePolicy.REJECT:
        raise CardinalityMismatch(
            f"flat_map returned a {source.lineage.value}-lineage carrier",
            marker=target.target_type,
            operation="flat_map",
        )
    first = next(iter(source.to_iterable(carrier)), _MISSING)
    if first is _MISSING:
        raise NoElement(
            "flat_map returned an empty sequence",
            marker=target.target_type,
            operation="flat_map",
        )
    return first
