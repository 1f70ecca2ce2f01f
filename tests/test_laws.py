"""
Tests for the law suites over the built-in instances.

Tests contracts for:
- every built-in marker satisfies the laws of the capabilities it claims
- a broken instance is reported with its law and counterexample
- reports serialize to plain dicts
"""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from hkt_engine.carriers import Maybe
from hkt_engine.config import EngineConfig
from hkt_engine.instances import FUTURE, IDENTITY, LIST, MAYBE, STREAM
from hkt_engine.instances import maybe as maybe_instances
from hkt_engine.instances import stream as stream_instances
from hkt_engine.kernel import LawViolation, Marker
from hkt_engine.laws import Sampler
from hkt_engine.laws.suite import LawSuite
from hkt_engine.registry import Context
from hkt_engine.typeclasses import Capability, Functor


def suite(**overrides) -> LawSuite:
    config = EngineConfig(seal_on_first_read=False, law_samples=12, **overrides)
    return LawSuite(Context.bootstrap(config))


class TestBuiltinInstances:
    """Test laws for every shipped marker."""

    @pytest.mark.parametrize("marker", [MAYBE, IDENTITY, FUTURE, STREAM, LIST])
    def test_check_all(self, marker):
        checked = suite().check_all(marker)
        assert "functor" in checked
        assert "kind_round_trip" in checked

    def test_monad_plus_families_checked(self):
        checked = suite().check_all(LIST)
        assert {"monad_zero", "monad_plus", "foldable", "traverse"} <= set(checked)

    def test_identity_has_no_zero(self):
        checked = suite().check_all(IDENTITY)
        assert "monad_zero" not in checked
        assert "monad" in checked

    def test_run_all_passes(self):
        report = suite().run_all()
        assert report.passed, [r.detail for r in report.failures]
        markers = {r.marker for r in report.results}
        assert markers == {"Maybe", "Identity", "Future", "Stream", "List"}

    def test_settings_follow_config(self):
        laws = suite(law_seed=1)
        assert laws.settings.max_examples == 12
        assert laws.settings.database is None

    def test_database_directory(self, tmp_path):
        laws = suite(law_database=str(tmp_path))
        assert laws.settings.database is not None


class TestSamplerStrategies:
    """Test that samplers generate carriers of their own marker."""

    @given(maybe_instances.sampler().kinds())
    def test_maybe_kinds(self, kind):
        assert kind.marker is MAYBE
        assert isinstance(kind.carrier, Maybe)

    @given(stream_instances.sampler().kinds())
    def test_stream_kinds_are_bounded(self, kind):
        assert kind.marker is STREAM
        assert kind.carrier.bounded
        assert len(kind.carrier.to_list()) <= 5


class TestBrokenInstance:
    """Test that violations are detected and reported."""

    @pytest.fixture
    def broken(self):
        marker = Marker("Broken", (list,))
        ctx = Context.bootstrap(EngineConfig(seal_on_first_read=False, law_samples=5))
        ctx.instances.register_all(
            marker,
            # drops the last element, so map(id, xs) != xs for non-empty xs
            Functor(marker=marker, fmap=lambda f, xs: [f(x) for x in xs[:-1]]),
            Sampler(marker=marker, arbitrary=st.lists(st.integers(0, 9), min_size=1), observe=list),
        )
        return marker, LawSuite(ctx)

    def test_check_raises(self, broken):
        marker, laws = broken
        with pytest.raises(LawViolation) as exc:
            laws.check_functor(marker)
        assert exc.value.law == "functor identity"
        assert exc.value.marker is marker

    def test_counterexample_is_shrunk(self, broken):
        marker, laws = broken
        with pytest.raises(LawViolation) as exc:
            laws.check_functor(marker)
        assert exc.value.sample.carrier == [0]

    def test_same_seed_same_counterexample(self, broken):
        marker, laws = broken
        samples = []
        for _ in range(2):
            with pytest.raises(LawViolation) as exc:
                laws.check_functor(marker)
            samples.append(exc.value.sample.carrier)
        assert samples[0] == samples[1]

    def test_run_all_reports(self, broken):
        marker, laws = broken
        report = laws.run_all()
        assert not report.passed
        failure = report.failures[0]
        assert failure.marker == "Broken"
        assert failure.law == "functor"
        data = report.to_dict()
        assert data["passed"] is False
        assert any(r["marker"] == "Broken" for r in data["results"])

    def test_missing_sampler_is_skipped(self):
        marker = Marker("Unsampled")
        ctx = Context.bootstrap(EngineConfig(seal_on_first_read=False, law_samples=3))
        ctx.instances.register(marker, Functor(marker=marker, fmap=lambda f, c: f(c)))
        report = LawSuite(ctx).run_all()
        assert "Unsampled" not in {r.marker for r in report.results}
        assert ctx.instances.lookup(marker, Capability.SAMPLER) is None
