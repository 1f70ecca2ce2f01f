"""
Kernel: Kind encoding and error taxonomy.

Provides:
- Marker, Kind, widen, narrow: constructor tags and kinded values
- Lineage: value vs sequence cardinality
- HigherKindError and its subclasses
"""
from .errors import (
    CardinalityMismatch,
    CycleOnInfinite,
    HigherKindError,
    InvalidKind,
    KindMismatch,
    LawViolation,
    MissingInstance,
    NoElement,
    RegistrySealed,
    UnknownCarrier,
    UnorderableInfinite,
)
from .types import (
    Kind,
    Lineage,
    Marker,
    check_kind,
    narrow,
    widen,
)

__all__ = [
    "CardinalityMismatch",
    "CycleOnInfinite",
    "HigherKindError",
    "InvalidKind",
    "Kind",
    "KindMismatch",
    "LawViolation",
    "Lineage",
    "Marker",
    "MissingInstance",
    "NoElement",
    "RegistrySealed",
    "UnknownCarrier",
    "UnorderableInfinite",
    "check_kind",
    "narrow",
    "widen",
]
