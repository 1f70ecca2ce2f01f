"""Stream instances: MonadPlus, Foldable, Traverse, Unfoldable."""
from __future__ import annotations

from functools import reduce
from typing import Any, Callable, Optional

from hypothesis import strategies as st

from ..carriers.stream import Stream
from ..config import EngineConfig
from ..kernel.types import Kind, Marker
from ..laws.samplers import Sampler, small_ints
from ..typeclasses import (
    Applicative,
    Foldable,
    MonadPlus,
    Monoid,
    Traverse,
    Unfoldable,
)

STREAM = Marker("Stream", (Stream,))


def concat() -> Monoid:
    return Monoid.of(Stream.empty(), lambda a, b: a.concat(b))


def monad_plus(monoid: Optional[Monoid] = None) -> MonadPlus:
    return MonadPlus.derive(
        STREAM,
        pure=Stream.of,
        bind=lambda f, s: s.flat_map(f),
        fmap=lambda f, s: s.map(f),
        zero=Stream.empty,
        select=lambda p, s: s.filter(p),
        monoid=monoid or concat(),
    )


def traverse_iterable(applicative: Applicative, fn: Callable[[Any], Kind], items) -> Kind:
    """Left-to-right effectful traversal collecting into a list inside G."""
    acc = applicative.unit([])
    for item in items:
        acc = applicative.map2(lambda xs, b: xs + [b], acc, fn(item))
    return acc


def unfold_iter(seed: Any, fn: Callable[[Any], Optional[tuple]]):
    state = seed
    while True:
        step = fn(state)
        if step is None:
            return
        value, state = step
        yield value


def foldable() -> Foldable:
    return Foldable(
        marker=STREAM,
        foldl=lambda z, f, s: reduce(f, s, z),
        foldr=lambda z, f, s: reduce(lambda acc, a: f(a, acc), reversed(s.to_list()), z),
    )


def traverse() -> Traverse:
    return Traverse(
        marker=STREAM,
        fmap=lambda f, s: s.map(f),
        traverse=lambda g, f, s: g.map(Stream.from_iterable, traverse_iterable(g, f, s)),
    )


def unfoldable() -> Unfoldable:
    # unfold is assumed to terminate, so the result counts as bounded
    return Unfoldable(
        marker=STREAM,
        unfoldr=lambda seed, fn: Stream(lambda: unfold_iter(seed, fn), True),
    )


def sampler() -> Sampler:
    arbitrary = st.lists(small_ints, max_size=5).map(lambda xs: Stream.of(*xs))
    return Sampler(marker=STREAM, arbitrary=arbitrary, observe=lambda s: s.to_list())


def install(registry, config: EngineConfig) -> None:
    registry.register_all(STREAM, monad_plus(), foldable(), traverse(), unfoldable(), sampler())
