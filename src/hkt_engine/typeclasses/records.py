"""
Type-class records.

A record is a frozen bundle of carrier-level functions for one marker. The
kind-level methods (`map`, `unit`, `flat_map`, ...) check the marker of
every Kind they receive, call the carrier-level function on the narrowed
carrier and widen the result again.

Hierarchy (each level extends the previous):

    Functor -> Applicative -> Monad -> MonadZero -> MonadPlus
    Functor -> Traverse
    Foldable
    Unfoldable

Field naming: carrier-level functions use the classic names (`fmap`,
`pure`, `apply`, `bind`, `zero`, `select`, `foldl`, `foldr`, `traverse`,
`unfoldr`), kind-level methods the operation names.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel

from ..kernel.types import Kind, Marker, check_kind, widen
from .monoid import Monoid


class Capability(Enum):
    """Capability levels a marker can claim in the registry."""
    FUNCTOR = "functor"
    APPLICATIVE = "applicative"
    MONAD = "monad"
    MONAD_ZERO = "monad_zero"
    MONAD_PLUS = "monad_plus"
    FOLDABLE = "foldable"
    TRAVERSE = "traverse"
    UNFOLDABLE = "unfoldable"
    SAMPLER = "sampler"

    @property
    def record_type(self) -> Optional[type]:
        return _RECORD_TYPES.get(self)


class TypeClass(BaseModel):
    """Common base: every record is keyed by its marker and immutable."""
    marker: Marker

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def _in(self, kind: Any, operation: str) -> Any:
        return check_kind(self.marker, kind, operation)

    def _out(self, carrier: Any) -> Kind:
        return widen(self.marker, carrier)


# =============================================================================
# FUNCTOR / APPLICATIVE / MONAD
# =============================================================================

class Functor(TypeClass):
    fmap: Callable[[Callable, Any], Any]

    def map(self, fn: Callable[[Any], Any], kind: Kind) -> Kind:
        return self._out(self.fmap(fn, self._in(kind, "map")))


class Applicative(Functor):
    pure: Callable[[Any], Any]
    apply: Callable[[Any, Any], Any]

    def unit(self, value: Any) -> Kind:
        return self._out(self.pure(value))

    def ap(self, fn_kind: Kind, kind: Kind) -> Kind:
        """Apply a wrapped function to a wrapped value."""
        return self._out(self.apply(self._in(fn_kind, "ap"), self._in(kind, "ap")))

    def map2(self, fn: Callable[[Any, Any], Any], ka: Kind, kb: Kind) -> Kind:
        curried = self.map(lambda a: lambda b: fn(a, b), ka)
        return self.ap(curried, kb)


class Monad(Applicative):
    bind: Callable[[Callable, Any], Any]

    @classmethod
    def derive(
        cls,
        marker: Marker,
        pure: Callable[[Any], Any],
        bind: Callable[[Callable, Any], Any],
        fmap: Optional[Callable[[Callable, Any], Any]] = None,
        apply: Optional[Callable[[Any, Any], Any]] = None,
        **extra: Any,
    ):
        """Build a record from `pure` and `bind`, deriving `fmap`/`apply`."""
        if fmap is None:
            fmap = lambda f, c: bind(lambda a: pure(f(a)), c)  # noqa: E731
        if apply is None:
            apply = lambda cf, c: bind(lambda f: fmap(f, c), cf)  # noqa: E731
        return cls(marker=marker, fmap=fmap, pure=pure, apply=apply, bind=bind, **extra)

    def flat_map(self, fn: Callable[[Any], Kind], kind: Kind) -> Kind:
        """`fn` returns a Kind of the same marker; the result is flattened."""
        carrier = self._in(kind, "flat_map")
        return self._out(self.bind(lambda a: self._in(fn(a), "flat_map"), carrier))

    def join(self, nested: Kind) -> Kind:
        """Flatten a Kind whose elements are Kinds of the same marker."""
        return self.flat_map(lambda inner: inner, nested)


class MonadZero(Monad):
    zero: Callable[[], Any]
    select: Callable[[Callable, Any], Any]

    @classmethod
    def derive(cls, marker, pure, bind, fmap=None, apply=None, select=None, **extra):
        """As Monad.derive; `select` defaults to filtering via bind + zero."""
        if select is None:
            zero = extra["zero"]
            select = lambda p, c: bind(lambda a: pure(a) if p(a) else zero(), c)  # noqa: E731
        return super().derive(marker, pure, bind, fmap=fmap, apply=apply, select=select, **extra)

    def empty(self) -> Kind:
        return self._out(self.zero())

    def filter(self, predicate: Callable[[Any], bool], kind: Kind) -> Kind:
        return self._out(self.select(predicate, self._in(kind, "filter")))


class MonadPlus(MonadZero):
    """
    MonadZero plus a monoidal combine over carriers.

    `monoid.zero` must behave as `empty()`; an explicit monoid passed to
    `plus` overrides the default tie-breaking.
    """
    monoid: Monoid

    def plus(self, a: Kind, b: Kind, monoid: Optional[Monoid] = None) -> Kind:
        m = monoid or self.monoid
        ca = self._in(a, "plus")
        cb = self._in(b, "plus")
        return self._out(m.combine(ca, cb))

    def sum(self, kinds: Iterable[Kind], monoid: Optional[Monoid] = None) -> Kind:
        result = self.empty()
        for kind in kinds:
            result = self.plus(result, kind, monoid)
        return result


# =============================================================================
# FOLDABLE / TRAVERSE / UNFOLDABLE
# =============================================================================

class Foldable(TypeClass):
    foldl: Callable[[Any, Callable, Any], Any]
    foldr: Callable[[Any, Callable, Any], Any]

    def fold_left(self, seed: Any, fn: Callable[[Any, Any], Any], kind: Kind) -> Any:
        """fn(acc, element), elements left to right."""
        return self.foldl(seed, fn, self._in(kind, "fold_left"))

    def fold_right(self, seed: Any, fn: Callable[[Any, Any], Any], kind: Kind) -> Any:
        """fn(element, acc), elements right to left."""
        return self.foldr(seed, fn, self._in(kind, "fold_right"))

    def fold_map(self, monoid: Monoid, fn: Callable[[Any], Any], kind: Kind) -> Any:
        return self.fold_left(monoid.zero, lambda acc, a: monoid.combine(acc, fn(a)), kind)


class Traverse(Functor):
    """
    `traverse(applicative_g, fn, carrier)` returns a Kind of G whose element
    is a carrier of this family.
    """
    traverse: Callable[[Applicative, Callable, Any], Kind]

    def traverse_a(self, applicative: Applicative, fn: Callable[[Any], Kind], kind: Kind) -> Kind:
        """Kind<G, Kind<F, B>> from fn: A -> Kind<G, B>."""
        result = self.traverse(applicative, fn, self._in(kind, "traverse_a"))
        return applicative.map(self._out, result)

    def sequence_a(self, applicative: Applicative, kind: Kind) -> Kind:
        return self.traverse_a(applicative, lambda g: g, kind)


class Unfoldable(TypeClass):
    """unfoldr(seed, fn) where fn(seed) returns None or (element, next_seed)."""
    unfoldr: Callable[[Any, Callable], Any]

    def unfold(self, seed: Any, fn: Callable[[Any], Optional[tuple[Any, Any]]]) -> Kind:
        return self._out(self.unfoldr(seed, fn))

    def replicate(self, count: int, value: Any) -> Kind:
        return self.unfold(count, lambda n: (value, n - 1) if n > 0 else None)

    def none(self) -> Kind:
        return self.unfold(None, lambda _: None)


_RECORD_TYPES: dict[Capability, type] = {
    Capability.FUNCTOR: Functor,
    Capability.APPLICATIVE: Applicative,
    Capability.MONAD: Monad,
    Capability.MONAD_ZERO: MonadZero,
    Capability.MONAD_PLUS: MonadPlus,
    Capability.FOLDABLE: Foldable,
    Capability.TRAVERSE: Traverse,
    Capability.UNFOLDABLE: Unfoldable,
}


def register_record_type(capability: Capability, record_type: type) -> None:
    """Associate a capability with a record class defined outside this module."""
    _RECORD_TYPES[capability] = record_type
