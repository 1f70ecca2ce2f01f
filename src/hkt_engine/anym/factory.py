"""
AnyM construction.

Each factory resolves the carrier's comprehender through the context and
returns the variant matching its lineage.
"""
from __future__ import annotations

from collections.abc import AsyncIterable
from concurrent.futures import Future
from typing import Any, Iterable, Iterator, Optional

from ..carriers.maybe import Maybe
from ..carriers.stream import Stream
from ..kernel.errors import CardinalityMismatch
from ..kernel.types import Lineage
from ..registry.context import Context, resolve_context
from .values import AnyM, AnyMSeq, AnyMValue


def from_value(carrier: Any, context: Optional[Context] = None) -> AnyM:
    """Wrap any carrier with a registered comprehender."""
    return AnyM.wrap(carrier, context)


def from_iterable(
    iterable: Iterable[Any],
    context: Optional[Context] = None,
    bounded: Optional[bool] = None,
) -> AnyMSeq:
    """
    Sequence-lineage carriers (list, tuple, Stream, iterators) are wrapped
    as they are; any other iterable is wrapped in a Stream.

    A wrapping Stream is bounded when the iterable is Sized, so unsized
    iterables count as unbounded and ordering operations refuse them.
    Passing `bounded` also wraps iterators, with that flag.
    """
    context = resolve_context(context)
    comprehender = context.comprehenders.find(type(iterable))
    if (
        comprehender is None
        or comprehender.lineage is not Lineage.SEQUENCE
        or (bounded is not None and isinstance(iterable, Iterator))
    ):
        iterable = Stream.from_iterable(iterable, bounded)
    return AnyM.wrap(iterable, context)


def from_iterable_value(iterable: Iterable[Any], context: Optional[Context] = None) -> AnyMValue:
    """The first element of `iterable` as a Maybe; an empty iterable is nothing."""
    first = next((Maybe.just(x) for x in iterable), Maybe.nothing())
    return AnyM.wrap(first, context)


def from_optional(value: Any, context: Optional[Context] = None) -> AnyMValue:
    """None is absence; anything else is a present value."""
    return AnyM.wrap(Maybe.of_optional(value), context)


def from_maybe(maybe: Maybe, context: Optional[Context] = None) -> AnyMValue:
    return AnyM.wrap(maybe, context)


def from_future(future: Future, context: Optional[Context] = None) -> AnyMValue:
    if not isinstance(future, Future):
        raise TypeError(f"expected a Future, got {type(future).__name__}")
    return AnyM.wrap(future, context)


def from_publisher(publisher: AsyncIterable, context: Optional[Context] = None) -> AnyMSeq:
    """Async iterables stand in for reactive publishers."""
    if not isinstance(publisher, AsyncIterable):
        raise TypeError(f"expected an async iterable, got {type(publisher).__name__}")
    return AnyM.wrap(publisher, context)


def stream_of(*values: Any, context: Optional[Context] = None) -> AnyMSeq:
    return AnyM.wrap(Stream.of(*values), context)


def of_value(carrier: Any, context: Optional[Context] = None) -> AnyMValue:
    """Wrap a carrier that must be value lineage."""
    return _expect(AnyM.wrap(carrier, context), AnyMValue)


def of_seq(carrier: Any, context: Optional[Context] = None) -> AnyMSeq:
    """Wrap a carrier that must be sequence lineage."""
    return _expect(AnyM.wrap(carrier, context), AnyMSeq)


def _expect(any_m: AnyM, variant: type) -> Any:
    if not isinstance(any_m, variant):
        raise CardinalityMismatch(
            f"carrier is {any_m.lineage.value}-lineage",
            marker=type(any_m.carrier),
            operation=f"to {variant.__name__}",
        )
    return any_m
