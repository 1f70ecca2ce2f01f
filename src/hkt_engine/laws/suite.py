"""
Law suites over registered instances.

For every marker with a Sampler, each capability the marker claims is
checked against its algebraic laws on generated carriers:

- Functor: identity, composition
- Applicative: identity, homomorphism, interchange, composition
- Monad: left identity, right identity, associativity
- MonadZero: bind absorption, filter identities
- MonadPlus: left/right identity, associativity, explicit monoid override
- Foldable: singleton and empty folds, left/right agreement
- Traverse: identity applicative, naturality (Maybe -> List)
- Kind round trip: narrow(widen(c)) is c, widen(narrow(k)) == k

Examples are generated by hypothesis, seeded from EngineConfig.law_seed so a
failing run repeats, and shrunk to a minimal counterexample before the
LawViolation propagates. `EngineConfig.law_database` keeps failing examples
between runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from hypothesis import HealthCheck, assume, given, seed, settings
from hypothesis import strategies as st
from hypothesis.database import DirectoryBasedExampleDatabase
from hypothesis.strategies import SearchStrategy

from ..instances import IDENTITY, LIST, MAYBE
from ..kernel.errors import LawViolation
from ..kernel.types import Kind, Marker, narrow, widen
from .samplers import small_ints
from ..registry.context import Context, resolve_context
from ..typeclasses import Capability, Monoid

logger = logging.getLogger(__name__)

_INT_FUNCTIONS: tuple[Callable[[int], int], ...] = (
    lambda x: x + 1,
    lambda x: x * 2,
    lambda x: -x,
    lambda x: x % 7,
    lambda x: x - 3,
)

int_functions = st.sampled_from(_INT_FUNCTIONS)


def _identity(x: Any) -> Any:
    return x


def _compose(f: Callable) -> Callable:
    return lambda g: lambda a: f(g(a))


# =============================================================================
# REPORTING
# =============================================================================

@dataclass
class LawResult:
    """Outcome of one law family for one marker."""
    marker: str
    law: str
    passed: bool
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "marker": self.marker,
            "law": self.law,
            "passed": self.passed,
            "detail": self.detail,
        }


@dataclass
class LawReport:
    results: list[LawResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[LawResult]:
        return [r for r in self.results if not r.passed]

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "results": [r.to_dict() for r in self.results],
        }


# =============================================================================
# SUITE
# =============================================================================

class LawSuite:
    """
    Checks registered instances against their laws.

    Each `check_*` method raises LawViolation for the smallest counterexample
    hypothesis finds; `run_all` collects results across every sampled marker
    instead.
    """

    def __init__(self, context: Optional[Context] = None):
        self.context = resolve_context(context)
        self.instances = self.context.instances
        self.config = self.context.config
        database = self.config.law_database
        self.settings = settings(
            max_examples=self.config.law_samples,
            database=DirectoryBasedExampleDatabase(database) if database else None,
            deadline=None,
            report_multiple_bugs=False,
            suppress_health_check=[HealthCheck.too_slow],
        )

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------

    def _sampler(self, marker: Marker):
        return self.instances.require(marker, Capability.SAMPLER)

    def _kinds(self, marker: Marker) -> SearchStrategy:
        return self._sampler(marker).kinds()

    def _holds(self, law: Callable[..., None], *strategies: SearchStrategy) -> None:
        """Run `law` over generated examples; a shrunk LawViolation propagates."""
        seed(self.config.law_seed)(self.settings(given(*strategies)(law)))()

    def _kleisli(self, marker: Marker) -> SearchStrategy:
        """Functions A -> Kind<F, B>, using empty and plus where the marker has them."""
        plus = self.instances.lookup(marker, Capability.MONAD_PLUS)
        zero = self.instances.lookup(marker, Capability.MONAD_ZERO)
        monad = self.instances.require(marker, Capability.MONAD)

        def build(f: Callable[[int], int], g: Callable[[int], int]) -> Callable[[int], Kind]:
            if plus is not None:
                return lambda a: plus.empty() if a % 5 == 0 else plus.plus(plus.unit(f(a)), plus.unit(g(a)))
            if zero is not None:
                return lambda a: zero.empty() if a % 5 == 0 else zero.unit(f(a))
            return lambda a: monad.unit(f(a))

        return st.builds(build, int_functions, int_functions)

    def _expect(self, holds: bool, marker: Marker, law: str, sample: Any) -> None:
        if not holds:
            raise LawViolation(f"{law} does not hold", marker=marker, law=law, sample=sample)

    # -------------------------------------------------------------------------
    # laws
    # -------------------------------------------------------------------------

    def check_functor(self, marker: Marker) -> None:
        functor = self.instances.require(marker, Capability.FUNCTOR)
        sampler = self._sampler(marker)

        def functor_laws(x: Kind, f: Callable, g: Callable) -> None:
            self._expect(sampler.same(functor.map(_identity, x), x), marker, "functor identity", x)
            self._expect(
                sampler.same(functor.map(lambda a: f(g(a)), x), functor.map(f, functor.map(g, x))),
                marker, "functor composition", x,
            )

        self._holds(functor_laws, sampler.kinds(), int_functions, int_functions)

    def check_applicative(self, marker: Marker) -> None:
        app = self.instances.require(marker, Capability.APPLICATIVE)
        sampler = self._sampler(marker)

        def applicative_laws(x: Kind, a: int, f: Callable) -> None:
            self._expect(sampler.same(app.ap(app.unit(_identity), x), x), marker, "applicative identity", x)
            self._expect(
                sampler.same(app.ap(app.unit(f), app.unit(a)), app.unit(f(a))),
                marker, "applicative homomorphism", a,
            )
            u = app.map(lambda k: lambda y: y + k, x)
            self._expect(
                sampler.same(app.ap(u, app.unit(a)), app.ap(app.unit(lambda fn: fn(a)), u)),
                marker, "applicative interchange", x,
            )

        def composition(u_src: Kind, v_src: Kind, w: Kind) -> None:
            u = app.map(lambda k: lambda y: y + k, u_src)
            v = app.map(lambda k: lambda y: y * k, v_src)
            left = app.ap(app.ap(app.ap(app.unit(_compose), u), v), w)
            right = app.ap(u, app.ap(v, w))
            self._expect(sampler.same(left, right), marker, "applicative composition", (u_src, v_src, w))

        self._holds(applicative_laws, sampler.kinds(), small_ints, int_functions)
        self._holds(composition, sampler.kinds(), sampler.kinds(), sampler.kinds())

    def check_monad(self, marker: Marker) -> None:
        monad = self.instances.require(marker, Capability.MONAD)
        sampler = self._sampler(marker)

        def left_identity(a: int, f: Callable) -> None:
            self._expect(sampler.same(monad.flat_map(f, monad.unit(a)), f(a)), marker, "monad left identity", a)

        def right_identity_and_associativity(x: Kind, f: Callable, g: Callable) -> None:
            self._expect(sampler.same(monad.flat_map(monad.unit, x), x), marker, "monad right identity", x)
            self._expect(
                sampler.same(
                    monad.flat_map(g, monad.flat_map(f, x)),
                    monad.flat_map(lambda a: monad.flat_map(g, f(a)), x),
                ),
                marker, "monad associativity", x,
            )

        self._holds(left_identity, small_ints, self._kleisli(marker))
        self._holds(right_identity_and_associativity, sampler.kinds(), self._kleisli(marker), self._kleisli(marker))

    def check_monad_zero(self, marker: Marker) -> None:
        zero = self.instances.require(marker, Capability.MONAD_ZERO)
        sampler = self._sampler(marker)

        def absorption(f: Callable) -> None:
            self._expect(sampler.same(zero.flat_map(f, zero.empty()), zero.empty()), marker, "zero absorption", None)

        def filter_identities(x: Kind) -> None:
            assume(not sampler.failed(x))
            self._expect(
                sampler.same(zero.filter(lambda _: False, x), zero.empty()), marker, "filter false is empty", x
            )
            self._expect(sampler.same(zero.filter(lambda _: True, x), x), marker, "filter true is identity", x)

        self._holds(absorption, self._kleisli(marker))
        self._holds(filter_identities, sampler.kinds())

    def check_monad_plus(self, marker: Marker) -> None:
        plus = self.instances.require(marker, Capability.MONAD_PLUS)
        sampler = self._sampler(marker)
        right_biased = Monoid.of(plus.monoid.zero, lambda a, b: b)

        def plus_laws(a: Kind, b: Kind, c: Kind) -> None:
            self._expect(sampler.same(plus.plus(plus.empty(), a), a), marker, "plus left identity", a)
            self._expect(sampler.same(plus.plus(a, plus.empty()), a), marker, "plus right identity", a)
            self._expect(
                sampler.same(plus.plus(plus.plus(a, b), c), plus.plus(a, plus.plus(b, c))),
                marker, "plus associativity", (a, b, c),
            )
            self._expect(sampler.same(plus.plus(a, b, right_biased), b), marker, "plus explicit monoid", (a, b))

        self._holds(plus_laws, sampler.kinds(), sampler.kinds(), sampler.kinds())

    def check_foldable(self, marker: Marker) -> None:
        foldable = self.instances.require(marker, Capability.FOLDABLE)
        app = self.instances.lookup(marker, Capability.APPLICATIVE)
        zero = self.instances.lookup(marker, Capability.MONAD_ZERO)
        sampler = self._sampler(marker)
        add = lambda acc, a: acc + a  # noqa: E731

        if zero is not None:
            self._expect(foldable.fold_left(0, add, zero.empty()) == 0, marker, "fold empty", None)
            self._expect(foldable.fold_right(0, add, zero.empty()) == 0, marker, "fold empty", None)

        def singleton(a: int) -> None:
            self._expect(foldable.fold_left(0, add, app.unit(a)) == a, marker, "fold singleton", a)
            self._expect(foldable.fold_right(0, add, app.unit(a)) == a, marker, "fold singleton", a)

        def agreement(x: Kind) -> None:
            assume(not sampler.failed(x))
            left = foldable.fold_left([], lambda acc, a: acc + [a], x)
            right = foldable.fold_right([], lambda a, acc: [a] + acc, x)
            self._expect(left == right, marker, "fold left/right agreement", x)

        if app is not None:
            self._holds(singleton, small_ints)
        self._holds(agreement, sampler.kinds())

    def check_traverse(self, marker: Marker) -> None:
        traverse = self.instances.require(marker, Capability.TRAVERSE)
        sampler = self._sampler(marker)
        identity_app = self.instances.require(IDENTITY, Capability.APPLICATIVE)
        maybe_zero = self.instances.require(MAYBE, Capability.MONAD_ZERO)
        list_app = self.instances.require(LIST, Capability.APPLICATIVE)

        def traverse_laws(x: Kind, f: Callable) -> None:
            assume(not sampler.failed(x))
            traversed = narrow(IDENTITY, traverse.traverse_a(identity_app, lambda a: identity_app.unit(f(a)), x))
            self._expect(
                sampler.same(traversed.value, traverse.map(f, x)), marker, "traverse identity applicative", x
            )

            def k(a: Any) -> Kind:
                return maybe_zero.unit(f(a)) if a % 4 else maybe_zero.empty()

            via_maybe = [sampler.view(inner) for inner in narrow(MAYBE, traverse.traverse_a(maybe_zero, k, x))]
            via_list = [
                sampler.view(inner)
                for inner in narrow(LIST, traverse.traverse_a(list_app, lambda a: widen(LIST, list(narrow(MAYBE, k(a)))), x))
            ]
            self._expect(via_maybe == via_list, marker, "traverse naturality", x)

        self._holds(traverse_laws, sampler.kinds(), int_functions)

    def check_kind_round_trip(self, marker: Marker) -> None:
        def round_trip(x: Kind) -> None:
            carrier = narrow(marker, x)
            self._expect(narrow(marker, widen(marker, carrier)) is carrier, marker, "narrow after widen", x)
            self._expect(widen(marker, narrow(marker, x)) == x, marker, "widen after narrow", x)

        self._holds(round_trip, self._kinds(marker))

    # -------------------------------------------------------------------------
    # drivers
    # -------------------------------------------------------------------------

    def _checks(self, marker: Marker) -> list[tuple[str, Callable[[Marker], None]]]:
        claimed = self.instances.capabilities(marker)
        plan = [
            (Capability.FUNCTOR, "functor", self.check_functor),
            (Capability.APPLICATIVE, "applicative", self.check_applicative),
            (Capability.MONAD, "monad", self.check_monad),
            (Capability.MONAD_ZERO, "monad_zero", self.check_monad_zero),
            (Capability.MONAD_PLUS, "monad_plus", self.check_monad_plus),
            (Capability.FOLDABLE, "foldable", self.check_foldable),
            (Capability.TRAVERSE, "traverse", self.check_traverse),
        ]
        checks = [(name, check) for cap, name, check in plan if cap in claimed]
        checks.append(("kind_round_trip", self.check_kind_round_trip))
        return checks

    def check_all(self, marker: Marker) -> list[str]:
        """Check every law family the marker claims; returns the families checked."""
        names = []
        for name, check in self._checks(marker):
            check(marker)
            names.append(name)
        logger.info(f"{marker.name}: {len(names)} law families hold")
        return names

    def run_all(self) -> LawReport:
        """Check every sampled marker, collecting violations instead of raising."""
        report = LawReport()
        for marker in self.instances.markers():
            if self.instances.lookup(marker, Capability.SAMPLER) is None:
                logger.debug(f"No sampler for {marker.name}, skipping laws")
                continue
            for name, check in self._checks(marker):
                try:
                    check(marker)
                except LawViolation as e:
                    logger.warning(f"Law violation: {e}")
                    report.results.append(LawResult(marker.name, name, False, str(e)))
                else:
                    report.results.append(LawResult(marker.name, name, True))
        return report
