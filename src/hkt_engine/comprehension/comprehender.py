"""
Comprehender protocol.

A comprehender drives one carrier type through map / flat_map / filter /
of / empty without the caller knowing the carrier's marker. It also knows
how to enumerate a carrier (`to_iterable`), how to rebuild one from
elements (`from_iterable`, sequence lineage) and how to convert one of
its carriers into another family when a flat_map crosses families
(`resolve_for_cross_type_flat_map`).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional, Protocol

from ..config import EngineConfig
from ..kernel.types import Lineage

_MISSING = object()


class CollapsePolicy(Enum):
    """What a value-lineage flat_map does when it receives a sequence."""
    FIRST = "first"    # keep the first element, NoElement when empty
    REJECT = "reject"  # raise CardinalityMismatch


class StatefulStep(Protocol):
    """
    Ordered, stateful element transformation.

    `step(element)` returns the transformed element; `flush(last)` receives
    the transformation of the final element and may enrich it with whatever
    state is still buffered.
    """

    def step(self, element: Any) -> Any: ...

    def flush(self, last: Any) -> Any: ...


def run_stateful(items: Iterable[Any], factory: Callable[[], StatefulStep]) -> Iterator[Any]:
    """Drive a fresh StatefulStep over `items`, holding back one result for flush."""
    state = factory()
    previous = _MISSING
    for item in items:
        result = state.step(item)
        if previous is not _MISSING:
            yield previous
        previous = result
    if previous is not _MISSING:
        yield state.flush(previous)


class Comprehender(ABC):
    """
    Base class for carrier drivers.

    Subclasses set `target_type` and `lineage`, and implement `of`, `empty`,
    `map`, `flat_map` and `to_iterable`. `filter` defaults to emulation via
    flat_map for carriers with no native filter.
    """
    target_type: ClassVar[type]
    lineage: ClassVar[Lineage] = Lineage.VALUE
    collapse: ClassVar[CollapsePolicy] = CollapsePolicy.FIRST

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    @abstractmethod
    def of(self, value: Any) -> Any:
        pass

    @abstractmethod
    def empty(self) -> Any:
        pass

    @abstractmethod
    def map(self, carrier: Any, fn: Callable[[Any], Any]) -> Any:
        pass

    @abstractmethod
    def flat_map(self, carrier: Any, fn: Callable[[Any], Any]) -> Any:
        """`fn` returns a carrier of this comprehender's target type."""
        pass

    def filter(self, carrier: Any, predicate: Callable[[Any], bool]) -> Any:
        return self.flat_map(carrier, lambda a: self.of(a) if predicate(a) else self.empty())

    @abstractmethod
    def to_iterable(self, carrier: Any) -> Iterable[Any]:
        """Elements of `carrier`, blocking where the carrier is asynchronous."""
        pass

    def from_iterable(self, items: Iterable[Any]) -> Any:
        """Rebuild a carrier from elements. Value lineage keeps the first."""
        first = next(iter(items), _MISSING)
        return self.empty() if first is _MISSING else self.of(first)

    def map_stateful(self, carrier: Any, factory: Callable[[], StatefulStep]) -> Any:
        """Ordered stateful map; a value carrier's single element is its own last."""
        if self.lineage is Lineage.VALUE:
            def _single(element: Any) -> Any:
                state = factory()
                return state.flush(state.step(element))
            return self.map(carrier, _single)
        return self.from_iterable(run_stateful(self.to_iterable(carrier), factory))

    def resolve_for_cross_type_flat_map(self, target: Comprehender, carrier: Any) -> Any:
        """
        Convert `carrier` (of this comprehender) into `target`'s family.

        Sequence targets receive every element; value targets receive the
        representative element (the first one), or empty.
        """
        items = self.to_iterable(carrier)
        if target.lineage is Lineage.SEQUENCE:
            return target.from_iterable(items)
        first = next(iter(items), _MISSING)
        return target.empty() if first is _MISSING else target.of(first)

    def accepts(self, carrier: Any) -> bool:
        return isinstance(carrier, self.target_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target_type.__name__})"
