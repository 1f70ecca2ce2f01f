"""Identity instances: Monad, Foldable, Traverse."""
from __future__ import annotations

from ..carriers.identity import Identity
from ..config import EngineConfig
from ..kernel.types import Marker
from ..laws.samplers import Sampler, small_ints
from ..typeclasses import Foldable, Monad, Traverse

IDENTITY = Marker("Identity", (Identity,))


def monad() -> Monad:
    return Monad.derive(
        IDENTITY,
        pure=Identity,
        bind=lambda f, i: i.flat_map(f),
        fmap=lambda f, i: i.map(f),
    )


def install(registry, config: EngineConfig) -> None:
    registry.register_all(
        IDENTITY,
        monad(),
        Foldable(
            marker=IDENTITY,
            foldl=lambda z, f, i: f(z, i.value),
            foldr=lambda z, f, i: f(i.value, z),
        ),
        Traverse(
            marker=IDENTITY,
            fmap=lambda f, i: i.map(f),
            traverse=lambda g, f, i: g.map(Identity, f(i.value)),
        ),
        Sampler(
            marker=IDENTITY,
            arbitrary=small_ints.map(Identity),
            observe=lambda i: i,
        ),
    )
