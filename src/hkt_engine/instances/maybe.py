"""Maybe instances: MonadPlus, Foldable, Traverse, Unfoldable."""
from __future__ import annotations

from typing import Any, Callable, Optional

from hypothesis import strategies as st

from ..carriers.maybe import Maybe
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

MAYBE = Marker("Maybe", (Maybe,))


def first_present() -> Monoid:
    """Default MonadPlus combine: the first present Maybe."""
    return Monoid.of(Maybe.nothing(), lambda a, b: a.or_maybe(b))


def monad_plus(monoid: Optional[Monoid] = None) -> MonadPlus:
    return MonadPlus.derive(
        MAYBE,
        pure=Maybe.just,
        bind=lambda f, m: m.flat_map(f),
        fmap=lambda f, m: m.map(f),
        zero=Maybe.nothing,
        select=lambda p, m: m.filter(p),
        monoid=monoid or first_present(),
    )


def _traverse(applicative: Applicative, fn: Callable[[Any], Kind], m: Maybe) -> Kind:
    if not m.is_present():
        return applicative.unit(Maybe.nothing())
    return applicative.map(Maybe.just, fn(m.get()))


def _unfoldr(seed: Any, fn: Callable[[Any], Optional[tuple]]) -> Maybe:
    step = fn(seed)
    return Maybe.nothing() if step is None else Maybe.just(step[0])


def foldable() -> Foldable:
    return Foldable(
        marker=MAYBE,
        foldl=lambda z, f, m: f(z, m.get()) if m.is_present() else z,
        foldr=lambda z, f, m: f(m.get(), z) if m.is_present() else z,
    )


def traverse() -> Traverse:
    return Traverse(marker=MAYBE, fmap=lambda f, m: m.map(f), traverse=_traverse)


def unfoldable() -> Unfoldable:
    return Unfoldable(marker=MAYBE, unfoldr=_unfoldr)


def sampler() -> Sampler:
    arbitrary = st.one_of(st.just(Maybe.nothing()), small_ints.map(Maybe.just))
    return Sampler(marker=MAYBE, arbitrary=arbitrary, observe=lambda m: m)


def install(registry, config: EngineConfig) -> None:
    registry.register_all(MAYBE, monad_plus(), foldable(), traverse(), unfoldable(), sampler())
