"""
Built-in instances.

Provides markers and type-class records for:
- MAYBE:    MonadPlus, Foldable, Traverse, Unfoldable
- IDENTITY: Monad, Foldable, Traverse
- FUTURE:   MonadPlus, Foldable, Traverse
- STREAM:   MonadPlus, Foldable, Traverse, Unfoldable
- LIST:     MonadPlus, Foldable, Traverse, Unfoldable
"""
from . import future, identity, listing, maybe, stream
from .future import FUTURE
from .identity import IDENTITY
from .listing import LIST
from .maybe import MAYBE
from .stream import STREAM

_MODULES = (maybe, identity, future, stream, listing)


def install_defaults(registry, config) -> None:
    """Register every built-in instance into `registry`."""
    for module in _MODULES:
        module.install(registry, config)


__all__ = [
    "FUTURE",
    "IDENTITY",
    "LIST",
    "MAYBE",
    "STREAM",
    "install_defaults",
]
