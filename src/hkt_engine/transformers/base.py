"""
Transformer base: an outer AnyM whose elements are inner carriers of one shape.

    T<Outer, Inner, A>  wraps  Outer<Inner<A>>

Every operation maps over the outer carrier, so the outer's effect order
is preserved exactly, and an empty or failed inner only affects its own
outer element. Values are immutable; each operation returns a new one.
"""
from __future__ import annotations

from functools import reduce
from typing import Any, Callable, ClassVar, Iterable, Optional

from ..anym import factory
from ..anym.values import AnyM
from ..registry.context import Context
from .shapes import InnerShape


class Transformer:
    inner_shape: ClassVar[InnerShape]
    __slots__ = ("outer",)

    def __init__(self, outer: AnyM):
        if not isinstance(outer, AnyM):
            outer = AnyM.wrap(outer)
        self.outer = outer

    @property
    def shape(self) -> InnerShape:
        """The inner shape, bound to the configuration of the outer's context."""
        return self.inner_shape.configured(self.outer.context.config)

    # -------------------------------------------------------------------------
    # construction
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, outer: Any, context: Optional[Context] = None):
        """From an AnyM (or raw carrier) whose elements are inner carriers."""
        return cls(AnyM.wrap(outer, context))

    @classmethod
    def from_any_m(cls, any_m: AnyM):
        """Wrap each element of `any_m` in the inner shape."""
        return cls(any_m.map(cls.inner_shape.of))

    @classmethod
    def from_iterable(
        cls,
        inners: Iterable[Any],
        context: Optional[Context] = None,
        bounded: Optional[bool] = None,
    ):
        """Outer sequence of `inners`; `bounded` as for `anym.from_iterable`."""
        return cls(factory.from_iterable(inners, context, bounded))

    @classmethod
    def from_iterable_value(cls, inners: Iterable[Any], context: Optional[Context] = None):
        """Outer Maybe holding the first inner of `inners`."""
        return cls(factory.from_iterable_value(inners, context))

    @classmethod
    def from_optional(cls, inner: Any, context: Optional[Context] = None):
        return cls(factory.from_optional(inner, context))

    @classmethod
    def from_future(cls, future_of_inner, context: Optional[Context] = None):
        return cls(factory.from_future(future_of_inner, context))

    @classmethod
    def from_publisher(cls, publisher_of_inners, context: Optional[Context] = None):
        return cls(factory.from_publisher(publisher_of_inners, context))

    @classmethod
    def from_value(cls, carrier: Any, context: Optional[Context] = None):
        return cls(factory.from_value(carrier, context))

    @classmethod
    def pure(cls, value: Any, outer: AnyM):
        """`value` in the inner shape, in the outer carrier `outer` belongs to."""
        return cls(outer.unit(cls.inner_shape.of(value)))

    @staticmethod
    def lift(fn: Callable[[Any], Any]) -> Callable[[Transformer], Transformer]:
        """Turn A -> B into T[A] -> T[B]."""
        return lambda transformer: transformer.map(fn)

    def _with(self, outer: AnyM):
        return type(self)(outer)

    def _each(self, fn: Callable[[Any], Any]):
        """Map every inner carrier."""
        return self._with(self.outer.map(fn))

    # -------------------------------------------------------------------------
    # shared surface
    # -------------------------------------------------------------------------

    def unit(self, value: Any):
        return self._with(self.outer.unit(self.shape.of(value)))

    def empty(self):
        return self._with(self.outer.unit(self.shape.empty()))

    def map(self, fn: Callable[[Any], Any]):
        shape = self.shape
        return self._each(lambda inner: shape.map(inner, fn))

    def flat_map_inner(self, fn: Callable[[Any], Any]):
        """`fn` returns an inner carrier; flattening happens per outer element."""
        shape = self.shape
        return self._each(lambda inner: shape.flat_map(inner, fn))

    def filter(self, predicate: Callable[[Any], bool]):
        shape = self.shape
        return self._each(lambda inner: shape.filter(inner, predicate))

    def filter_not(self, predicate: Callable[[Any], bool]):
        return self.filter(lambda x: not predicate(x))

    def not_null(self):
        return self.filter(lambda x: x is not None)

    def of_type(self, kind: type):
        return self.filter(lambda x: isinstance(x, kind))

    def peek(self, consumer: Callable[[Any], Any]):
        def _peek(value: Any) -> Any:
            consumer(value)
            return value
        return self.map(_peek)

    def unwrap(self) -> AnyM:
        return self.outer

    # -------------------------------------------------------------------------
    # folds (per inner, results stay in the outer)
    # -------------------------------------------------------------------------

    def fold_left(self, seed: Any, fn: Callable[[Any, Any], Any]) -> AnyM:
        shape = self.shape
        return self.outer.map(lambda inner: reduce(fn, shape.to_iterable(inner), seed))

    def fold_right(self, seed: Any, fn: Callable[[Any, Any], Any]) -> AnyM:
        shape = self.shape
        return self.outer.map(
            lambda inner: reduce(lambda acc, x: fn(x, acc), reversed(list(shape.to_iterable(inner))), seed)
        )

    def materialize(self) -> list[list[Any]]:
        """Nested lists of the elements; blocks on asynchronous carriers."""
        return [list(self.shape.to_iterable(inner)) for inner in self.outer]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transformer):
            return NotImplemented
        return type(self) is type(other) and self.outer == other.outer

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.outer!r})"
