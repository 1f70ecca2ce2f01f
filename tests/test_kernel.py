"""
Tests for the Kind encoding and error taxonomy.

Tests contracts for:
- widen / narrow round trips and identity-compared markers
- InvalidKind on absent or foreign carriers
- KindMismatch on narrowing under the wrong marker
- error messages carrying marker and operation
"""
import pytest

from hkt_engine.carriers import Maybe
from hkt_engine.kernel import (
    HigherKindError,
    InvalidKind,
    Kind,
    KindMismatch,
    LawViolation,
    Marker,
    NoElement,
    check_kind,
    narrow,
    widen,
)


BOX = Marker("Box", (list,))
OTHER = Marker("Other")


class TestWidenNarrow:
    """Test moving carriers in and out of higher-kinded position."""

    def test_round_trip_returns_same_carrier(self):
        """narrow(widen(c)) is c."""
        carrier = [1, 2, 3]
        assert narrow(BOX, widen(BOX, carrier)) is carrier

    def test_widen_after_narrow_is_equal(self):
        """widen(narrow(k)) == k."""
        kind = widen(BOX, [1])
        assert widen(BOX, narrow(BOX, kind)) == kind

    def test_widen_existing_kind_is_identity(self):
        """Widening a Kind of the same marker returns it unchanged."""
        kind = widen(BOX, [1])
        assert widen(BOX, kind) is kind

    def test_marker_methods_delegate(self):
        """Marker.widen / Marker.narrow mirror the functions."""
        kind = BOX.widen([4])
        assert BOX.narrow(kind) == [4]

    def test_widen_none_is_invalid(self):
        """Absent carriers cannot be widened."""
        with pytest.raises(InvalidKind):
            widen(BOX, None)

    def test_widen_foreign_carrier_is_invalid(self):
        """A marker with declared carrier types rejects other types."""
        with pytest.raises(InvalidKind):
            widen(BOX, (1, 2))

    def test_unrestricted_marker_accepts_anything(self):
        """A marker without carrier types accepts any present value."""
        assert narrow(OTHER, widen(OTHER, "text")) == "text"

    def test_narrow_wrong_marker_fails(self):
        """Narrowing under another marker raises KindMismatch."""
        kind = widen(OTHER, [1])
        with pytest.raises(KindMismatch):
            narrow(BOX, kind)

    def test_narrow_non_kind_fails(self):
        """Raw carriers are not Kinds."""
        with pytest.raises(KindMismatch):
            narrow(BOX, [1])

    def test_retag_kind_fails(self):
        """A Kind cannot be re-widened under another marker."""
        with pytest.raises(KindMismatch):
            widen(OTHER, widen(BOX, [1]))


class TestKindValue:
    """Test Kind equality and immutability."""

    def test_equality_requires_same_marker(self):
        """Kinds with equal carriers but different markers differ."""
        twin = Marker("Box", (list,))
        assert widen(BOX, [1]) != widen(twin, [1])

    def test_equal_kinds_hash_equal(self):
        """Equal Kinds can share a set slot."""
        assert len({widen(BOX, [1]), widen(BOX, [1])}) == 1

    def test_kind_is_frozen(self):
        """Kinds are immutable."""
        kind = widen(BOX, [1])
        with pytest.raises(Exception):
            kind.carrier = [2]

    def test_convert_and_then(self):
        """convert applies a narrowing function, then chains Kind calls."""
        kind = widen(OTHER, Maybe.just(2))
        assert kind.convert(lambda k: narrow(OTHER, k)) == Maybe.just(2)
        assert kind.then(lambda k: widen(OTHER, narrow(OTHER, k).map(str))) == widen(OTHER, Maybe.just("2"))

    def test_kind_is_a_kind(self):
        assert isinstance(widen(BOX, []), Kind)


class TestErrors:
    """Test the error taxonomy."""

    def test_message_names_marker_and_operation(self):
        """Library errors carry the marker and operation name."""
        with pytest.raises(KindMismatch) as exc:
            check_kind(BOX, widen(OTHER, 1), "map")
        assert exc.value.marker is BOX
        assert exc.value.operation == "map"
        assert "[Box]" in str(exc.value)
        assert "map:" in str(exc.value)

    def test_errors_share_base(self):
        """Every library error is a HigherKindError."""
        assert issubclass(NoElement, HigherKindError)
        assert issubclass(InvalidKind, HigherKindError)

    def test_law_violation_is_assertion(self):
        """LawViolation carries law and sample and fails tests as an assertion."""
        error = LawViolation("broken", marker=BOX, law="functor identity", sample=[1])
        assert isinstance(error, AssertionError)
        assert error.law == "functor identity"
        assert error.sample == [1]
        assert error.operation == "functor identity"
