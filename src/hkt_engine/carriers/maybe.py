"""
Maybe: an optional value carrier (value lineage).

`Maybe.just(v)` holds exactly one value (which may itself be None);
`Maybe.nothing()` holds none. Instances are immutable and compare by content.
"""
from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")

_ABSENT = object()


class Maybe(Generic[T]):
    __slots__ = ("_value",)

    def __init__(self, value: Any = _ABSENT):
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Maybe is immutable")

    # -------------------------------------------------------------------------
    # construction
    # -------------------------------------------------------------------------

    @classmethod
    def just(cls, value: T) -> Maybe[T]:
        return cls(value)

    @classmethod
    def nothing(cls) -> Maybe[Any]:
        return _NOTHING

    @classmethod
    def of_optional(cls, value: Optional[T]) -> Maybe[T]:
        """Python's None is read as absence."""
        return _NOTHING if value is None else cls(value)

    # -------------------------------------------------------------------------
    # observation
    # -------------------------------------------------------------------------

    def is_present(self) -> bool:
        return self._value is not _ABSENT

    def get(self) -> T:
        if self._value is _ABSENT:
            raise ValueError("Maybe.nothing() has no value")
        return self._value

    def or_else(self, default: T) -> T:
        return self._value if self.is_present() else default

    def fold(self, on_empty: Callable[[], R], on_value: Callable[[T], R]) -> R:
        return on_value(self._value) if self.is_present() else on_empty()

    # -------------------------------------------------------------------------
    # monadic surface
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[T], R]) -> Maybe[R]:
        return Maybe(fn(self._value)) if self.is_present() else _NOTHING

    def flat_map(self, fn: Callable[[T], Maybe[R]]) -> Maybe[R]:
        return fn(self._value) if self.is_present() else _NOTHING

    def filter(self, predicate: Callable[[T], bool]) -> Maybe[T]:
        if self.is_present() and predicate(self._value):
            return self
        return _NOTHING

    def or_maybe(self, other: Maybe[T]) -> Maybe[T]:
        """First present of self, other."""
        return self if self.is_present() else other

    def __iter__(self) -> Iterator[T]:
        if self.is_present():
            yield self._value

    def __bool__(self) -> bool:
        return self.is_present()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maybe):
            return NotImplemented
        if not self.is_present() or not other.is_present():
            return self.is_present() == other.is_present()
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("Maybe", self._value)) if self.is_present() else hash("Maybe.nothing")

    def __repr__(self) -> str:
        return f"Maybe.just({self._value!r})" if self.is_present() else "Maybe.nothing()"


_NOTHING: Maybe[Any] = Maybe()
