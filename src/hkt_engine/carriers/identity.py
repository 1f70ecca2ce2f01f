"""Identity: the trivial carrier holding exactly one value."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Identity(Generic[T]):
    value: T

    def map(self, fn: Callable[[T], Any]) -> Identity:
        return Identity(fn(self.value))

    def flat_map(self, fn: Callable[[T], Identity]) -> Identity:
        return fn(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value
