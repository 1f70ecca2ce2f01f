"""
Inner shapes: the per-shape operation tables transformers compose with.

A transformer is an outer AnyM plus one of these tables; there is no
subclass per outer carrier. Value shapes may provide `inspect`, a
synchronous presence check that enables the standard transformer bind.
Shapes whose operations depend on the engine configuration (the Future
shape waits up to `future_timeout`) provide `configure`; transformers use
the table bound to the configuration of their outer's context.
"""
from __future__ import annotations

import itertools
from concurrent.futures import Future
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel

from ..carriers import futures
from ..carriers.maybe import Maybe
from ..carriers.stream import Stream
from ..config import EngineConfig
from ..kernel.types import Lineage


class InnerShape(BaseModel):
    name: str
    lineage: Lineage
    carrier_type: type
    of: Callable[[Any], Any]
    empty: Callable[[], Any]
    map: Callable[[Any, Callable], Any]
    flat_map: Callable[[Any, Callable], Any]
    filter: Callable[[Any, Callable], Any]
    to_iterable: Callable[[Any], Iterable[Any]]
    from_iterable: Callable[[Iterable[Any], bool], Any]
    transform: Callable[[Any, Callable[[Iterable[Any]], Iterable[Any]], bool], Any]
    is_bounded: Callable[[Any], bool]
    inspect: Optional[Callable[[Any], Maybe]] = None
    configure: Optional[Callable[..., Any]] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def accepts(self, carrier: Any) -> bool:
        return isinstance(carrier, self.carrier_type)

    def concat(self, left: Any, right: Any) -> Any:
        bounded = self.is_bounded(left) and self.is_bounded(right)
        items = itertools.chain(self.to_iterable(left), self.to_iterable(right))
        return self.from_iterable(items, bounded)

    def configured(self, config: EngineConfig) -> InnerShape:
        """This table with its configuration-dependent operations bound to `config`."""
        if self.configure is None:
            return self
        return self.configure(config)


def _settler(timeout: Optional[float]) -> Callable[[Future], Iterable[Any]]:
    return lambda fut: iter(futures.settle(fut, timeout))


@lru_cache(maxsize=None)
def _future_shape(timeout: Optional[float]) -> InnerShape:
    return FUTURE_SHAPE.model_copy(update={"to_iterable": _settler(timeout)})


MAYBE_SHAPE = InnerShape(
    name="Maybe",
    lineage=Lineage.VALUE,
    carrier_type=Maybe,
    of=Maybe.just,
    empty=Maybe.nothing,
    map=lambda m, f: m.map(f),
    flat_map=lambda m, f: m.flat_map(f),
    filter=lambda m, p: m.filter(p),
    to_iterable=iter,
    from_iterable=lambda items, bounded: next((Maybe.just(x) for x in items), Maybe.nothing()),
    transform=lambda m, op, bounded: next((Maybe.just(x) for x in op(iter(m))), Maybe.nothing()),
    is_bounded=lambda m: True,
    inspect=lambda m: m,
)

FUTURE_SHAPE = InnerShape(
    name="Future",
    lineage=Lineage.VALUE,
    carrier_type=Future,
    of=futures.completed,
    empty=futures.pending,
    map=futures.map_future,
    flat_map=futures.flat_map_future,
    filter=futures.filter_future,
    to_iterable=_settler(EngineConfig.future_timeout),
    from_iterable=lambda items, bounded: next(
        (futures.completed(x) for x in items), futures.pending()
    ),
    transform=lambda fut, op, bounded: futures.flat_map_future(
        fut, lambda v: next((futures.completed(x) for x in op(iter((v,)))), futures.pending())
    ),
    is_bounded=lambda fut: True,
    configure=lambda config: _future_shape(config.future_timeout),
)

STREAM_SHAPE = InnerShape(
    name="Stream",
    lineage=Lineage.SEQUENCE,
    carrier_type=Stream,
    of=Stream.of,
    empty=Stream.empty,
    map=lambda s, f: s.map(f),
    flat_map=lambda s, f: s.flat_map(f),
    filter=lambda s, p: s.filter(p),
    to_iterable=iter,
    from_iterable=lambda items, bounded: Stream.from_iterable(items, bounded),
    # fresh traversal of the source each time the result is iterated
    transform=lambda s, op, bounded: Stream(lambda: iter(op(iter(s))), bounded),
    is_bounded=lambda s: s.bounded,
)

LIST_SHAPE = InnerShape(
    name="List",
    lineage=Lineage.SEQUENCE,
    carrier_type=list,
    of=lambda a: [a],
    empty=list,
    map=lambda xs, f: [f(x) for x in xs],
    flat_map=lambda xs, f: [y for x in xs for y in f(x)],
    filter=lambda xs, p: [x for x in xs if p(x)],
    to_iterable=iter,
    from_iterable=lambda items, bounded: list(items),
    transform=lambda xs, op, bounded: list(op(iter(xs))),
    is_bounded=lambda xs: True,
)
