"""
Comprehender dispatch.

Resolution order for a carrier of class C:
1. the classes of C.__mro__, most specific first (declared bases in
   declaration order, then their supertypes)
2. abstract targets (ABCs such as Iterator or AsyncIterable) in
   registration order, which also catches virtual subclasses

The first hit is cached per class. Cache inserts are insert-or-return-
existing, so two threads resolving the same class concurrently agree.
"""
from __future__ import annotations

import logging
import threading
from abc import ABCMeta
from typing import Any, Callable, Iterable, Optional

from ..kernel.errors import UnknownCarrier
from .comprehender import Comprehender

logger = logging.getLogger(__name__)


class ComprehenderRegistry:
    """At most one comprehender per target type."""

    def __init__(self, comprehenders: Iterable[Comprehender] = ()):
        self._by_type: dict[type, Comprehender] = {}
        self._abstract: list[Comprehender] = []
        self._cache: dict[type, Comprehender] = {}
        self._lock = threading.Lock()
        for comprehender in comprehenders:
            self.register(comprehender)

    def register(self, comprehender: Comprehender) -> None:
        target = comprehender.target_type
        with self._lock:
            if target in self._by_type:
                raise ValueError(f"Comprehender already registered for {target.__name__}")
            self._by_type = {**self._by_type, target: comprehender}
            if isinstance(target, ABCMeta):
                self._abstract = self._abstract + [comprehender]
            self._cache = {}
        logger.debug(f"Registered {comprehender!r}")

    def targets(self) -> list[type]:
        return list(self._by_type)

    # -------------------------------------------------------------------------
    # resolution
    # -------------------------------------------------------------------------

    def find(self, cls: type) -> Optional[Comprehender]:
        cached = self._cache.get(cls)
        if cached is not None:
            return cached
        found = self._search(cls)
        if found is None:
            return None
        logger.debug(f"Resolved {cls.__name__} to {found!r}")
        return self._cache.setdefault(cls, found)

    def _search(self, cls: type) -> Optional[Comprehender]:
        for klass in cls.__mro__:
            hit = self._by_type.get(klass)
            if hit is not None:
                return hit
        for comprehender in self._abstract:
            if issubclass(cls, comprehender.target_type):
                return comprehender
        return None

    def resolve(self, carrier: Any) -> Comprehender:
        found = self.find(type(carrier))
        if found is None:
            raise UnknownCarrier(
                "no comprehender registered for this carrier",
                marker=type(carrier),
                operation="resolve",
            )
        return found

    def handles(self, carrier: Any) -> bool:
        return self.find(type(carrier)) is not None

    # -------------------------------------------------------------------------
    # dispatched operations
    # -------------------------------------------------------------------------

    def map(self, carrier: Any, fn: Callable[[Any], Any]) -> Any:
        return self.resolve(carrier).map(carrier, fn)

    def filter(self, carrier: Any, predicate: Callable[[Any], bool]) -> Any:
        return self.resolve(carrier).filter(carrier, predicate)

    def unit(self, carrier: Any, value: Any) -> Any:
        return self.resolve(carrier).of(value)

    def empty(self, carrier: Any) -> Any:
        return self.resolve(carrier).empty()

    def flat_map(self, carrier: Any, fn: Callable[[Any], Any]) -> Any:
        """flat_map whose function may return a carrier of any known family."""
        comprehender = self.resolve(carrier)
        return comprehender.flat_map(carrier, lambda a: self.adapt(comprehender, fn(a)))

    def adapt(self, target: Comprehender, result: Any) -> Any:
        """Bring a flat_map result into `target`'s family."""
        if target.accepts(result):
            return result
        source = self.resolve(result)
        if source is target:
            return result
        return source.resolve_for_cross_type_flat_map(target, result)

    def to_iterable(self, carrier: Any) -> Iterable[Any]:
        return self.resolve(carrier).to_iterable(carrier)
