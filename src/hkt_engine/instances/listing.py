"""Instances for the builtin list."""
from __future__ import annotations

from functools import reduce
from typing import Optional

from hypothesis import strategies as st

from ..config import EngineConfig
from ..kernel.types import Marker
from ..laws.samplers import Sampler, small_ints
from ..typeclasses import Foldable, MonadPlus, Monoid, Traverse, Unfoldable
from .stream import traverse_iterable, unfold_iter

LIST = Marker("List", (list,))


def monad_plus(monoid: Optional[Monoid] = None) -> MonadPlus:
    return MonadPlus.derive(
        LIST,
        pure=lambda a: [a],
        bind=lambda f, xs: [y for x in xs for y in f(x)],
        fmap=lambda f, xs: [f(x) for x in xs],
        zero=list,
        select=lambda p, xs: [x for x in xs if p(x)],
        monoid=monoid or Monoid.of([], lambda a, b: a + b),
    )


def install(registry, config: EngineConfig) -> None:
    registry.register_all(
        LIST,
        monad_plus(),
        Foldable(
            marker=LIST,
            foldl=lambda z, f, xs: reduce(f, xs, z),
            foldr=lambda z, f, xs: reduce(lambda acc, a: f(a, acc), reversed(xs), z),
        ),
        Traverse(
            marker=LIST,
            fmap=lambda f, xs: [f(x) for x in xs],
            traverse=traverse_iterable,
        ),
        Unfoldable(marker=LIST, unfoldr=lambda seed, fn: list(unfold_iter(seed, fn))),
        Sampler(marker=LIST, arbitrary=st.lists(small_ints, max_size=5), observe=list),
    )
