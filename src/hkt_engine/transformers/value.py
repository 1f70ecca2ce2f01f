"""
Value-shaped transformers: MaybeT and FutureT.

The inner carrier holds at most one element. When the shape can inspect
presence synchronously (Maybe) `flat_map` is the standard transformer bind
through the outer's flat_map. Otherwise (Future) the bound function's
transformer is reduced to its first inner carrier, which blocks only if
that transformer's outer is asynchronous.
"""
from __future__ import annotations

from typing import Any, Callable

from ..kernel.errors import NoElement
from .base import Transformer
from .shapes import FUTURE_SHAPE, MAYBE_SHAPE

_MISSING = object()


class ValueTransformer(Transformer):
    __slots__ = ()

    def flat_map(self, fn: Callable[[Any], Transformer]):
        shape = self.shape
        outer = self.outer
        if shape.inspect is not None:
            def _bind(inner: Any) -> Any:
                return shape.inspect(inner).fold(
                    lambda: outer.unit(shape.empty()),
                    lambda a: fn(a).outer,
                )
            return self._with(outer.flat_map(_bind))

        def _first_inner(a: Any) -> Any:
            first = next(iter(fn(a).outer), _MISSING)
            if first is _MISSING:
                raise NoElement("bound transformer is empty", marker=shape.name, operation="flat_map")
            return first
        return self._each(lambda inner: shape.flat_map(inner, _first_inner))

    def or_else(self, default: Any):
        """Outer of plain values, `default` where the inner is empty."""
        shape = self.shape
        return self.outer.map(lambda inner: next(iter(shape.to_iterable(inner)), default))

    def is_present(self):
        shape = self.shape
        return self.outer.map(lambda inner: next(iter(shape.to_iterable(inner)), _MISSING) is not _MISSING)


class MaybeT(ValueTransformer):
    """Outer<Maybe<A>>"""
    inner_shape = MAYBE_SHAPE
    __slots__ = ()


class FutureT(ValueTransformer):
    """Outer<Future<A>>"""
    inner_shape = FUTURE_SHAPE
    __slots__ = ()
