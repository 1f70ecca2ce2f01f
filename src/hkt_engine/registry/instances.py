"""
Instance registry: marker -> type-class records.

Write phase: `register` during bootstrap, serialized by a lock.
Read phase: `lookup`/`require` without synchronization. The registry seals
itself on the first read when configured to, after which writes raise
RegistrySealed.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..kernel.errors import KindMismatch, MissingInstance, RegistrySealed
from ..kernel.types import Marker
from ..typeclasses.records import Capability, TypeClass

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """
    Lookup from constructor marker to the records supplied for it.

    A lookup for a capability is answered by any record of that level or
    a more capable one: a registered MonadPlus satisfies FUNCTOR.
    """

    def __init__(self, seal_on_first_read: bool = True):
        self._records: dict[int, list[TypeClass]] = {}
        self._markers: dict[int, Marker] = {}
        self._lock = threading.Lock()
        self._sealed = False
        self._seal_on_first_read = seal_on_first_read

    # -------------------------------------------------------------------------
    # write phase
    # -------------------------------------------------------------------------

    def register(self, marker: Marker, record: TypeClass) -> None:
        if record.marker is not marker:
            raise KindMismatch(
                f"record is keyed by {record.marker.name}",
                marker=marker,
                operation="register",
            )
        with self._lock:
            if self._sealed:
                raise RegistrySealed("registry is sealed", marker=marker, operation="register")
            records = self._records.setdefault(id(marker), [])
            if any(type(existing) is type(record) for existing in records):
                raise ValueError(
                    f"{type(record).__name__} already registered for {marker.name}"
                )
            # Publish a new list so lock-free readers never see a partial append
            self._records[id(marker)] = records + [record]
            self._markers[id(marker)] = marker
        logger.debug(f"Registered {type(record).__name__} for {marker.name}")

    def register_all(self, marker: Marker, *records: TypeClass) -> None:
        for record in records:
            self.register(marker, record)

    def seal(self) -> None:
        with self._lock:
            if not self._sealed:
                self._sealed = True
                logger.info(f"Instance registry sealed with {len(self._markers)} markers")

    @property
    def sealed(self) -> bool:
        return self._sealed

    # -------------------------------------------------------------------------
    # read phase
    # -------------------------------------------------------------------------

    def _on_read(self) -> None:
        if self._seal_on_first_read and not self._sealed:
            self.seal()

    def lookup(self, marker: Marker, capability: Capability) -> Optional[TypeClass]:
        self._on_read()
        wanted = capability.record_type
        if wanted is None:
            return None
        for record in self._records.get(id(marker), ()):
            if isinstance(record, wanted):
                return record
        return None

    def require(self, marker: Marker, capability: Capability) -> TypeClass:
        record = self.lookup(marker, capability)
        if record is None:
            raise MissingInstance(
                f"no {capability.value} instance registered",
                marker=marker,
                operation="require",
            )
        return record

    def capabilities(self, marker: Marker) -> set[Capability]:
        """Every capability the marker's records satisfy."""
        self._on_read()
        records = self._records.get(id(marker), ())
        return {
            cap for cap in Capability
            if cap.record_type is not None
            and any(isinstance(r, cap.record_type) for r in records)
        }

    def markers(self) -> list[Marker]:
        self._on_read()
        return list(self._markers.values())

    def __contains__(self, marker: Marker) -> bool:
        return id(marker) in self._markers
