"""
Monad transformers.

Provides:
- MaybeT, FutureT (value inner shapes)
- StreamT, ListT (sequence inner shapes)
- InnerShape tables and push-based windowers
"""
from .base import Transformer
from .sequence import ListT, SequenceTransformer, StreamT
from .shapes import FUTURE_SHAPE, LIST_SHAPE, MAYBE_SHAPE, STREAM_SHAPE, InnerShape
from .value import FutureT, MaybeT, ValueTransformer
from .windows import Grouped, GroupedStatefullyUntil, GroupedUntil, GroupedWhile, Sliding, Windower

__all__ = [
    "Transformer",
    "ValueTransformer",
    "SequenceTransformer",
    "MaybeT",
    "FutureT",
    "StreamT",
    "ListT",
    "InnerShape",
    "MAYBE_SHAPE",
    "FUTURE_SHAPE",
    "STREAM_SHAPE",
    "LIST_SHAPE",
    "Windower",
    "Sliding",
    "Grouped",
    "GroupedUntil",
    "GroupedWhile",
    "GroupedStatefullyUntil",
]
