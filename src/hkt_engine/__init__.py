"""
hkt-engine: higher-kinded abstractions and monad transformers.

Layers, leaves first:
- kernel:        Marker, Kind, widen/narrow, error taxonomy
- typeclasses:   Functor .. MonadPlus, Foldable, Traverse, Unfoldable, Monoid
- registry:      InstanceRegistry and the explicit Context
- comprehension: runtime dispatch over carriers known only by their type
- anym:          AnyMValue / AnyMSeq facade
- transformers:  MaybeT, FutureT, StreamT, ListT
- laws:          samplers and law suites
"""
from .anym import AnyM, AnyMSeq, AnyMValue
from .carriers import Identity, Maybe, Stream
from .config import EngineConfig, load_config
from .instances import FUTURE, IDENTITY, LIST, MAYBE, STREAM
from .kernel import Kind, Marker, narrow, widen
from .registry import Context, default_context, set_default_context
from .transformers import FutureT, ListT, MaybeT, StreamT
from .typeclasses import Capability, Monoid

__version__ = "0.1.0"

__all__ = [
    "AnyM",
    "AnyMSeq",
    "AnyMValue",
    "Capability",
    "Context",
    "EngineConfig",
    "FUTURE",
    "FutureT",
    "IDENTITY",
    "Identity",
    "Kind",
    "LIST",
    "ListT",
    "MAYBE",
    "Marker",
    "Maybe",
    "MaybeT",
    "Monoid",
    "STREAM",
    "Stream",
    "StreamT",
    "default_context",
    "load_config",
    "narrow",
    "set_default_context",
    "widen",
]
