"""
Tests for the instance registry and engine context.

Tests contracts for:
- register / lookup / require with capability subsumption
- duplicate and mis-keyed registrations
- sealing on first read
- default context lifecycle
"""
import threading

import pytest

from hkt_engine.carriers import Maybe
from hkt_engine.config import EngineConfig
from hkt_engine.instances import FUTURE, IDENTITY, LIST, MAYBE, STREAM, maybe
from hkt_engine.kernel import KindMismatch, Marker, MissingInstance, RegistrySealed
from hkt_engine.registry import (
    Context,
    InstanceRegistry,
    default_context,
    resolve_context,
    set_default_context,
)
from hkt_engine.typeclasses import Capability, Functor, MonadPlus


TAG = Marker("Tag")


def tag_functor(marker=TAG) -> Functor:
    return Functor(marker=marker, fmap=lambda f, c: f(c))


class TestInstanceRegistry:
    """Test registration and lookup."""

    def test_register_and_require(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        record = tag_functor()
        registry.register(TAG, record)
        assert registry.require(TAG, Capability.FUNCTOR) is record

    def test_lookup_missing_returns_none(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        registry.register(TAG, tag_functor())
        assert registry.lookup(TAG, Capability.MONAD) is None

    def test_require_missing_raises(self):
        """require names the marker when nothing is registered."""
        registry = InstanceRegistry(seal_on_first_read=False)
        with pytest.raises(MissingInstance) as exc:
            registry.require(TAG, Capability.MONAD)
        assert exc.value.marker is TAG

    def test_monad_plus_satisfies_lower_levels(self):
        """A MonadPlus record answers functor through monad_zero lookups."""
        registry = InstanceRegistry(seal_on_first_read=False)
        record = maybe.monad_plus()
        registry.register(MAYBE, record)
        for capability in (
            Capability.FUNCTOR,
            Capability.APPLICATIVE,
            Capability.MONAD,
            Capability.MONAD_ZERO,
            Capability.MONAD_PLUS,
        ):
            assert registry.lookup(MAYBE, capability) is record
        assert Capability.FOLDABLE not in registry.capabilities(MAYBE)

    def test_duplicate_record_type_rejected(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        registry.register(TAG, tag_functor())
        with pytest.raises(ValueError):
            registry.register(TAG, tag_functor())

    def test_record_keyed_by_other_marker_rejected(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        with pytest.raises(KindMismatch):
            registry.register(TAG, tag_functor(Marker("Else")))

    def test_markers_compared_by_identity(self):
        """A marker with the same name is a different family."""
        registry = InstanceRegistry(seal_on_first_read=False)
        registry.register(TAG, tag_functor())
        assert registry.lookup(Marker("Tag"), Capability.FUNCTOR) is None
        assert TAG in registry

    def test_concurrent_registration(self):
        """Writes from several threads all land."""
        registry = InstanceRegistry(seal_on_first_read=False)
        markers = [Marker(f"M{i}") for i in range(20)]
        threads = [
            threading.Thread(target=registry.register, args=(m, tag_functor(m))) for m in markers
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry.markers()) == 20


class TestSealing:
    """Test the one-shot seal."""

    def test_seals_on_first_read(self):
        registry = InstanceRegistry(seal_on_first_read=True)
        registry.register(TAG, tag_functor())
        registry.lookup(TAG, Capability.FUNCTOR)
        assert registry.sealed
        with pytest.raises(RegistrySealed):
            registry.register(Marker("Late"), tag_functor(Marker("Late")))

    def test_no_seal_when_disabled(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        registry.lookup(TAG, Capability.FUNCTOR)
        assert not registry.sealed
        registry.register(TAG, tag_functor())

    def test_explicit_seal(self):
        registry = InstanceRegistry(seal_on_first_read=False)
        registry.seal()
        with pytest.raises(RegistrySealed):
            registry.register(TAG, tag_functor())


class TestContext:
    """Test context bootstrap and the default context."""

    def test_bootstrap_installs_builtins(self):
        ctx = Context.bootstrap(EngineConfig(seal_on_first_read=False))
        assert set(ctx.instances.markers()) >= {MAYBE, IDENTITY, FUTURE, STREAM, LIST}
        assert isinstance(ctx.require(STREAM, Capability.MONAD_PLUS), MonadPlus)

    def test_bootstrap_seal(self):
        ctx = Context.bootstrap(EngineConfig(seal_on_first_read=False), seal=True)
        assert ctx.instances.sealed

    def test_extend_before_first_read(self):
        """Custom instances can be added until the registry is read."""
        ctx = Context.bootstrap()
        ctx.instances.register(TAG, tag_functor())
        functor = ctx.require(TAG, Capability.FUNCTOR)
        assert functor.fmap(str, 3) == "3"

    def test_default_context_is_shared(self):
        assert default_context() is default_context()
        assert resolve_context(None) is default_context()

    def test_set_default_context(self):
        previous = default_context()
        custom = Context.bootstrap()
        try:
            set_default_context(custom)
            assert default_context() is custom
        finally:
            set_default_context(previous)

    def test_resolve_explicit_context(self):
        ctx = Context.bootstrap()
        assert resolve_context(ctx) is ctx

    def test_maybe_instance_from_default(self):
        functor = default_context().require(MAYBE, Capability.FUNCTOR)
        assert functor.fmap(len, Maybe.just("ab")) == Maybe.just(2)
