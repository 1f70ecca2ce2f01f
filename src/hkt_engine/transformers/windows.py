"""
Push-based windowing.

A Windower receives elements one at a time (`push`) and returns the
windows each element completes; `finish` returns what is still buffered.
Being push-based lets a sequence transformer window across the
concatenation of its inner sequences and attribute every window to the
outer element whose inner completed it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable


class Windower(ABC):

    @abstractmethod
    def push(self, element: Any) -> list[list[Any]]:
        pass

    @abstractmethod
    def finish(self) -> list[list[Any]]:
        pass


class Sliding(Windower):
    """
    Windows of `size` elements advancing by `increment`.

    A sequence shorter than `size` yields one partial window; a trailing
    partial window is emitted only if it holds elements no earlier window
    covered.
    """

    def __init__(self, size: int, increment: int = 1):
        if size < 1 or increment < 1:
            raise ValueError("size and increment must be positive")
        self.size = size
        self.increment = increment
        self._buffer: list[Any] = []
        self._fresh = 0
        self._skip = 0

    def push(self, element: Any) -> list[list[Any]]:
        if self._skip:
            self._skip -= 1
            return []
        self._buffer.append(element)
        self._fresh += 1
        if len(self._buffer) < self.size:
            return []
        window = list(self._buffer)
        if self.increment < self.size:
            self._buffer = self._buffer[self.increment:]
        else:
            self._buffer = []
            self._skip = self.increment - self.size
        self._fresh = 0
        return [window]

    def finish(self) -> list[list[Any]]:
        if self._fresh and self._buffer:
            return [list(self._buffer)]
        return []


class Grouped(Windower):
    """Consecutive batches of `size`; the last batch may be short."""

    def __init__(self, size: int):
        if size < 1:
            raise ValueError("size must be positive")
        self.size = size
        self._batch: list[Any] = []

    def push(self, element: Any) -> list[list[Any]]:
        self._batch.append(element)
        if len(self._batch) < self.size:
            return []
        batch, self._batch = self._batch, []
        return [batch]

    def finish(self) -> list[list[Any]]:
        return [self._batch] if self._batch else []


class GroupedUntil(Windower):
    """A batch closes, inclusive, on the first element matching the predicate."""

    def __init__(self, predicate: Callable[[Any], bool]):
        self.predicate = predicate
        self._batch: list[Any] = []

    def push(self, element: Any) -> list[list[Any]]:
        self._batch.append(element)
        if not self.predicate(element):
            return []
        batch, self._batch = self._batch, []
        return [batch]

    def finish(self) -> list[list[Any]]:
        return [self._batch] if self._batch else []


class GroupedWhile(GroupedUntil):
    """Batches grow while the predicate holds; the first failing element closes one."""

    def __init__(self, predicate: Callable[[Any], bool]):
        super().__init__(lambda element: not predicate(element))


class GroupedStatefullyUntil(GroupedUntil):
    """As GroupedUntil, but the predicate also sees the batch so far (element included)."""

    def __init__(self, predicate: Callable[[list[Any], Any], bool]):
        self.batch_predicate = predicate
        super().__init__(lambda element: self.batch_predicate(list(self._batch), element))
