"""
Reference carriers driven by the engine.

Provides:
- Maybe: optional value (value lineage)
- Identity: exactly one value
- Stream: lazy replayable sequence (sequence lineage)
- futures: non-blocking combinators over concurrent.futures.Future
"""
from . import futures
from .identity import Identity
from .maybe import Maybe
from .stream import Stream

__all__ = [
    "Identity",
    "Maybe",
    "Stream",
    "futures",
]
