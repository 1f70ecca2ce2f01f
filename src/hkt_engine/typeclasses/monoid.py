"""
Monoids: an identity element plus an associative combine.

Used by MonadPlus.plus (explicit tie-breaking), Foldable.fold_map and the
monoid variants of scan/cycle on sequence transformers.
"""
from __future__ import annotations

from functools import reduce
from typing import Any, Callable, Iterable

from pydantic import BaseModel


class Monoid(BaseModel):
    """Identity `zero` and associative `combine(a, b)`."""
    zero: Any
    combine: Callable[[Any, Any], Any]

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @classmethod
    def of(cls, zero: Any, combine: Callable[[Any, Any], Any]) -> Monoid:
        return cls(zero=zero, combine=combine)

    def fold(self, items: Iterable[Any]) -> Any:
        """Reduce `items` left to right starting from `zero`."""
        return reduce(self.combine, items, self.zero)

    def __call__(self, a: Any, b: Any) -> Any:
        return self.combine(a, b)


def int_sum() -> Monoid:
    return Monoid.of(0, lambda a, b: a + b)


def int_product() -> Monoid:
    return Monoid.of(1, lambda a, b: a * b)


def string_concat() -> Monoid:
    return Monoid.of("", lambda a, b: a + b)


def list_concat() -> Monoid:
    return Monoid.of([], lambda a, b: list(a) + list(b))


def first_non_null() -> Monoid:
    """Keeps the left operand unless it is None."""
    return Monoid.of(None, lambda a, b: b if a is None else a)
