"""
Observation hooks for the law suites.

A Sampler is registered per marker under Capability.SAMPLER. It tells the law
suite how to generate carriers (a hypothesis strategy) and how to turn a
carrier into a value that can be compared with `==` (a Future, for
instance, is observed as a snapshot of its outcome). `failure` recognizes
carriers holding a carrier-native failure; laws that assume a successful
carrier skip them.
"""
from __future__ import annotations

from typing import Any, Callable

from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from ..kernel.types import Kind
from ..typeclasses.records import Capability, TypeClass, register_record_type

# Element values drawn for every built-in carrier
small_ints = st.integers(min_value=-100, max_value=100)


def _never_failed(carrier: Any) -> bool:
    return False


class Sampler(TypeClass):
    arbitrary: SearchStrategy
    observe: Callable[[Any], Any]
    failure: Callable[[Any], bool] = _never_failed

    def kinds(self) -> SearchStrategy:
        """Strategy drawing Kinds of this marker."""
        return self.arbitrary.map(self._out)

    def view(self, kind: Kind) -> Any:
        return self.observe(self._in(kind, "observe"))

    def same(self, left: Kind, right: Kind) -> bool:
        return self.view(left) == self.view(right)

    def failed(self, kind: Kind) -> bool:
        return self.failure(self._in(kind, "failed"))


register_record_type(Capability.SAMPLER, Sampler)
