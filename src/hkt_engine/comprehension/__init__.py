"""
Comprehender dispatch: drive carriers known only at runtime.

Provides:
- Comprehender, CollapsePolicy, StatefulStep: the protocol
- ComprehenderRegistry: type-keyed resolution with MRO/ABC walk and cache
- concrete comprehenders for Maybe, Identity, Future, Stream, list, tuple,
  iterators and async iterables
"""
from .builtin import (
    AsyncIterableComprehender,
    FutureComprehender,
    IdentityComprehender,
    IteratorComprehender,
    ListComprehender,
    MaybeComprehender,
    StreamComprehender,
    TupleComprehender,
    async_from,
    collect,
    default_comprehenders,
    head,
)
from .comprehender import CollapsePolicy, Comprehender, StatefulStep, run_stateful
from .dispatch import ComprehenderRegistry

__all__ = [
    "AsyncIterableComprehender",
    "CollapsePolicy",
    "Comprehender",
    "ComprehenderRegistry",
    "FutureComprehender",
    "IdentityComprehender",
    "IteratorComprehender",
    "ListComprehender",
    "MaybeComprehender",
    "StatefulStep",
    "StreamComprehender",
    "TupleComprehender",
    "async_from",
    "collect",
    "default_comprehenders",
    "head",
    "run_stateful",
]
