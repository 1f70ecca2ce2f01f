"""
Kernel: error taxonomy.

Structural:  KindMismatch, InvalidKind
Registry:    MissingInstance, UnknownCarrier, RegistrySealed
Semantic:    NoElement, CycleOnInfinite, UnorderableInfinite, CardinalityMismatch
Test-time:   LawViolation

Every library-raised failure carries the marker (or carrier) it concerns and
the operation that raised it. Carrier-native failures are never wrapped.
"""
from __future__ import annotations

from typing import Any, Optional


class HigherKindError(Exception):
    """Base class for failures introduced by the engine itself."""

    def __init__(
        self,
        message: str,
        *,
        marker: Any = None,
        operation: Optional[str] = None,
    ):
        self.marker = marker
        self.operation = operation
        self.message = message
        super().__init__(self._render())

    def _render(self) -> str:
        parts = []
        if self.marker is not None:
            parts.append(f"[{_label(self.marker)}]")
        if self.operation:
            parts.append(f"{self.operation}:")
        parts.append(self.message)
        return " ".join(parts)


def _label(marker: Any) -> str:
    name = getattr(marker, "name", None)
    if isinstance(name, str):
        return name
    if isinstance(marker, type):
        return marker.__name__
    return type(marker).__name__


# =============================================================================
# STRUCTURAL
# =============================================================================

class KindMismatch(HigherKindError):
    """A Kind was narrowed (or consumed) under a marker it was not widened with."""
    pass


class InvalidKind(HigherKindError):
    """Attempt to widen an absent carrier, or a carrier outside the marker's family."""
    pass


# =============================================================================
# REGISTRY
# =============================================================================

class MissingInstance(HigherKindError):
    """No type-class record of the requested capability is registered."""
    pass


class UnknownCarrier(HigherKindError):
    """No comprehender handles the runtime type of a carrier."""
    pass


class RegistrySealed(HigherKindError):
    """Registration attempted after the registry was sealed."""
    pass


# =============================================================================
# SEMANTIC
# =============================================================================

class NoElement(HigherKindError):
    """Cardinality collapse was attempted on an empty source."""
    pass


class CycleOnInfinite(HigherKindError):
    """cycle/cycle_while/cycle_until requested over an unbounded inner sequence."""
    pass


class UnorderableInfinite(HigherKindError):
    """sorted/shuffle/reverse requested over an unbounded inner sequence."""
    pass


class CardinalityMismatch(HigherKindError, TypeError):
    """A value-lineage flat_map produced a sequence and the carrier rejects collapse."""
    pass


# =============================================================================
# TEST-TIME
# =============================================================================

class LawViolation(HigherKindError, AssertionError):
    """An algebraic law did not hold for a registered instance."""

    def __init__(
        self,
        message: str,
        *,
        marker: Any = None,
        operation: Optional[str] = None,
        law: Optional[str] = None,
        sample: Any = None,
    ):
        self.law = law
        self.sample = sample
        super().__init__(message, marker=marker, operation=operation or law)
