"""
Type-class protocol.

Provides:
- Functor, Applicative, Monad, MonadZero, MonadPlus: the monadic tower
- Foldable, Traverse, Unfoldable: structural capabilities
- Capability: registry keys for the record levels
- Monoid and stock monoids
"""
from .monoid import (
    Monoid,
    first_non_null,
    int_product,
    int_sum,
    list_concat,
    string_concat,
)
from .records import (
    Applicative,
    Capability,
    Foldable,
    Functor,
    Monad,
    MonadPlus,
    MonadZero,
    Traverse,
    TypeClass,
    Unfoldable,
    register_record_type,
)

__all__ = [
    "Applicative",
    "Capability",
    "Foldable",
    "Functor",
    "Monad",
    "MonadPlus",
    "MonadZero",
    "Monoid",
    "Traverse",
    "TypeClass",
    "Unfoldable",
    "first_non_null",
    "int_product",
    "int_sum",
    "list_concat",
    "register_record_type",
    "string_concat",
]
