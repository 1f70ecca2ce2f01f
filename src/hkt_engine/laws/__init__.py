"""
Law checking.

Provides:
- Sampler: per-marker observation hook (registered under Capability.SAMPLER)
- suite.LawSuite: algebraic law checks over a context's instances
"""
from .samplers import Sampler

__all__ = ["Sampler"]
