"""
AnyM facade.

Provides:
- AnyM, AnyMValue, AnyMSeq
- from_value, from_iterable, from_iterable_value, from_optional, from_maybe,
  from_future, from_publisher, stream_of, of_value, of_seq
"""
from .factory import (
    from_future,
    from_iterable,
    from_iterable_value,
    from_maybe,
    from_optional,
    from_publisher,
    from_value,
    of_seq,
    of_value,
    stream_of,
)
from .values import AnyM, AnyMSeq, AnyMValue

__all__ = [
    "AnyM",
    "AnyMSeq",
    "AnyMValue",
    "from_future",
    "from_iterable",
    "from_iterable_value",
    "from_maybe",
    "from_optional",
    "from_publisher",
    "from_value",
    "of_seq",
    "of_value",
    "stream_of",
]
