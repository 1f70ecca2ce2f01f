"""
Kernel: Kind encoding.

Python has no higher-kinded types, so a type constructor of arity one is
represented by a `Marker` value and a carrier is lifted into "higher-kinded
position" by tagging it: `Kind[F, A]` = (marker F, carrier of A).

- Markers are compared by identity; one marker per carrier family.
- `widen` is the only way to build a Kind; it rejects absent carriers and,
  when the marker declares its carrier types, carriers of another family.
- `narrow` checks the tag at runtime and returns the underlying carrier.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from .errors import InvalidKind, KindMismatch

A = TypeVar("A")
B = TypeVar("B")
F = TypeVar("F")


class Lineage(Enum):
    """Cardinality class of a carrier."""
    VALUE = "value"        # at most one element
    SEQUENCE = "sequence"  # zero or more elements


class Marker:
    """
    Opaque nominal tag for a carrier family.

    Two markers are equal only if they are the same object, so a marker
    declared once per family is the identity of that family across the
    instance registry, the law suites and the transformer lifts.
    """
    __slots__ = ("name", "carrier_types")

    def __init__(self, name: str, carrier_types: tuple[type, ...] = ()):
        self.name = name
        self.carrier_types = tuple(carrier_types)

    def accepts(self, carrier: Any) -> bool:
        if not self.carrier_types:
            return True
        return isinstance(carrier, self.carrier_types)

    def widen(self, carrier: Any) -> Kind:
        return widen(self, carrier)

    def narrow(self, kind: Kind) -> Any:
        return narrow(self, kind)

    def __repr__(self) -> str:
        return f"Marker({self.name})"


@dataclass(frozen=True, eq=False)
class Kind(Generic[F, A]):
    """
    A carrier tagged with its constructor marker.

    Immutable; mutation of the carrier itself follows the carrier's own
    contract. Build with `widen`, take apart with `narrow`.
    """
    marker: Marker
    carrier: Any

    def convert(self, fn: Callable[[Kind[F, A]], B]) -> B:
        """Apply `fn` to this Kind, typically a narrowing function."""
        return fn(self)

    def then(self, fn: Callable[[Kind[F, A]], Kind]) -> Kind:
        """Chain a type-class call: `k.then(lambda h: functor.map(f, h))`."""
        return fn(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kind):
            return NotImplemented
        return self.marker is other.marker and self.carrier == other.carrier

    def __hash__(self) -> int:
        return hash(id(self.marker))

    def __repr__(self) -> str:
        return f"Kind[{self.marker.name}]({self.carrier!r})"


def widen(marker: Marker, carrier: Any) -> Kind:
    """Tag `carrier` with `marker`. O(1)."""
    if isinstance(carrier, Kind):
        if carrier.marker is marker:
            return carrier
        raise KindMismatch(
            f"cannot re-tag a Kind of {carrier.marker.name}",
            marker=marker,
            operation="widen",
        )
    if carrier is None:
        raise InvalidKind("carrier is absent", marker=marker, operation="widen")
    if not marker.accepts(carrier):
        raise InvalidKind(
            f"{type(carrier).__name__} is not a {marker.name} carrier",
            marker=marker,
            operation="widen",
        )
    return Kind(marker, carrier)


def narrow(marker: Marker, kind: Any) -> Any:
    """Strip the tag, asserting it is `marker`. O(1)."""
    if not isinstance(kind, Kind):
        raise KindMismatch(
            f"expected a Kind, got {type(kind).__name__}",
            marker=marker,
            operation="narrow",
        )
    if kind.marker is not marker:
        raise KindMismatch(
            f"Kind is tagged {kind.marker.name}",
            marker=marker,
            operation="narrow",
        )
    return kind.carrier


def check_kind(marker: Marker, kind: Any, operation: str) -> Any:
    """narrow() reporting the caller's operation name on mismatch."""
    if not isinstance(kind, Kind) or kind.marker is not marker:
        got = kind.marker.name if isinstance(kind, Kind) else type(kind).__name__
        raise KindMismatch(f"argument is {got}", marker=marker, operation=operation)
    return kind.carrier
