"""
Engine context: the registries and configuration passed through the API.

Every public entry point accepts an optional `context`; when omitted, the
process-wide default context is used. The default context is bootstrapped
once, on first use, with the built-in instances and comprehenders.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from ..comprehension import ComprehenderRegistry, default_comprehenders
from ..config import EngineConfig
from ..instances import install_defaults
from ..kernel.types import Marker
from ..typeclasses.records import Capability, TypeClass
from .instances import InstanceRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Context:
    """Explicit engine context."""
    instances: InstanceRegistry
    comprehenders: ComprehenderRegistry
    config: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def bootstrap(cls, config: Optional[EngineConfig] = None, seal: bool = False) -> Context:
        """Build a context holding every built-in instance and comprehender."""
        config = config or EngineConfig()
        instances = InstanceRegistry(seal_on_first_read=config.seal_on_first_read)
        install_defaults(instances, config)
        comprehenders = ComprehenderRegistry(default_comprehenders(config))
        if seal:
            instances.seal()
        return cls(instances=instances, comprehenders=comprehenders, config=config)

    def require(self, marker: Marker, capability: Capability) -> TypeClass:
        return self.instances.require(marker, capability)

    def lookup(self, marker: Marker, capability: Capability) -> Optional[TypeClass]:
        return self.instances.lookup(marker, capability)


_default: Optional[Context] = None
_default_lock = threading.Lock()


def default_context() -> Context:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Context.bootstrap()
                logger.debug("Default context bootstrapped")
    return _default


def set_default_context(context: Optional[Context]) -> None:
    """Replace (or with None, discard) the default context."""
    global _default
    with _default_lock:
        _default = context


def resolve_context(context: Optional[Context]) -> Context:
    return context if context is not None else default_context()
