"""
Future instances over concurrent.futures.Future.

- unit: an already-completed future
- empty: a future that never completes (`futures.pending()`)
- filter: a rejected value leaves an empty future
- plus: by default the left future if it has completed, else the right one
- fold/traverse: block for the result up to `EngineConfig.future_timeout`;
  an empty future, or one still pending after that, is folded as empty
"""
from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Optional

from hypothesis import strategies as st

from ..carriers import futures
from ..config import EngineConfig
from ..kernel.types import Kind, Marker
from ..laws.samplers import Sampler, small_ints
from ..typeclasses import Applicative, Foldable, MonadPlus, Monoid, Traverse

FUTURE = Marker("Future", (Future,))

_EMPTY = futures.pending()


def first_completed() -> Monoid:
    return Monoid.of(_EMPTY, futures.first_completed)


def monad_plus(monoid: Optional[Monoid] = None) -> MonadPlus:
    return MonadPlus(
        marker=FUTURE,
        fmap=lambda f, fut: futures.map_future(fut, f),
        pure=futures.completed,
        apply=futures.ap_future,
        bind=lambda f, fut: futures.flat_map_future(fut, f),
        zero=futures.pending,
        select=lambda p, fut: futures.filter_future(fut, p),
        monoid=monoid or first_completed(),
    )


def foldable(config: EngineConfig) -> Foldable:
    timeout = config.future_timeout
    return Foldable(
        marker=FUTURE,
        foldl=lambda z, f, fut: futures.settle(fut, timeout).fold(lambda: z, lambda a: f(z, a)),
        foldr=lambda z, f, fut: futures.settle(fut, timeout).fold(lambda: z, lambda a: f(a, z)),
    )


def traverse(config: EngineConfig) -> Traverse:
    timeout = config.future_timeout

    def _traverse(applicative: Applicative, fn: Callable[[Any], Kind], fut: Future) -> Kind:
        value = futures.settle(fut, timeout)
        if not value.is_present():
            return applicative.unit(futures.pending())
        return applicative.map(futures.completed, fn(value.get()))

    return Traverse(
        marker=FUTURE,
        fmap=lambda f, fut: futures.map_future(fut, f),
        traverse=_traverse,
    )


def sampler(config: EngineConfig) -> Sampler:
    arbitrary = st.one_of(
        small_ints.map(futures.completed),
        st.builds(futures.pending),
        st.builds(lambda: futures.failed(ValueError("sample failure"))),
    )
    return Sampler(
        marker=FUTURE,
        arbitrary=arbitrary,
        observe=lambda fut: futures.snapshot(fut, config.sampler_timeout),
        failure=futures.is_failed,
    )


def install(registry, config: EngineConfig) -> None:
    registry.register_all(
        FUTURE, monad_plus(), foldable(config), traverse(config), sampler(config)
    )
