"""
Instance registry and engine context.

Provides:
- InstanceRegistry: marker -> type-class records, sealed after bootstrap
- Context: explicit registries + config, with a lazily built default
"""
from .context import Context, default_context, resolve_context, set_default_context
from .instances import InstanceRegistry

__all__ = [
    "Context",
    "InstanceRegistry",
    "default_context",
    "resolve_context",
    "set_default_context",
]
