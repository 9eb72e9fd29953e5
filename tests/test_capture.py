"""
Tests for capture targets.

These tests verify:
    - Single and sequence slots store what they receive
    - Tuple targets fan out positionally, including nested tuples
    - Arity violations raise TupleArityError
    - External objects take part through their own capture()
"""

import pytest

from dosugar.capture import (
    UNBOUND,
    CapturedTuple,
    Ref,
    SeqRef,
    TupleTarget,
    capture,
    target_kind,
    target_label,
    holds_sequence,
    materialize,
)
from dosugar.errors import TupleArityError


class TestRef:
    """Test single-value slots."""

    def test_starts_unbound(self):
        ref = Ref("x")
        assert ref.value is UNBOUND
        assert not ref.is_bound

    def test_capture_overwrites(self):
        ref = Ref("x")
        capture(ref, 1)
        capture(ref, 2)
        assert ref.value == 2
        assert ref.is_bound

    def test_none_is_a_value(self):
        """None is stored, not treated as unbound."""
        ref = Ref()
        capture(ref, None)
        assert ref.value is None
        assert ref.is_bound


class TestSeqRef:
    """Test sequence slots."""

    def test_capture_copies_iterable(self):
        source = [1, 2, 3]
        seq = SeqRef("xs")
        capture(seq, source)
        source.append(4)
        assert seq.values == [1, 2, 3]

    def test_capture_generator(self):
        seq = SeqRef()
        capture(seq, (i * i for i in range(3)))
        assert seq.values == [0, 1, 4]

    def test_scalar_becomes_single_item(self):
        seq = SeqRef()
        capture(seq, 5)
        assert seq.values == [5]

    def test_string_is_not_split(self):
        seq = SeqRef()
        capture(seq, "abc")
        assert seq.values == ["abc"]


class TestTupleTarget:
    """Test positional fan-out."""

    def test_fan_out(self):
        a, b = Ref("a"), Ref("b")
        capture(TupleTarget((a, b)), CapturedTuple(1, "one"))
        assert a.value == 1
        assert b.value == "one"

    def test_nested_fan_out(self):
        a, b, c = Ref("a"), Ref("b"), Ref("c")
        target = TupleTarget((TupleTarget((a, b)), c))
        capture(target, CapturedTuple(CapturedTuple(1, 2), 3))
        assert (a.value, b.value, c.value) == (1, 2, 3)

    def test_discard_component(self):
        b = Ref("b")
        capture(TupleTarget((None, b)), CapturedTuple("ignored", 5))
        assert b.value == 5

    def test_arity_mismatch(self):
        with pytest.raises(TupleArityError, match="tuple arity mismatch"):
            capture(TupleTarget((Ref(), Ref())), CapturedTuple(1, 2, 3))

    def test_plain_tuple_rejected(self):
        """A caller's own tuple must never be taken for a fan-out payload."""
        with pytest.raises(TupleArityError):
            capture(TupleTarget((Ref(), Ref())), (1, 2))


class TestExternalTarget:
    """Test objects with their own capture protocol."""

    def test_external_capture(self):
        class Collector:
            def __init__(self):
                self.seen = []

            def capture(self, value):
                self.seen.append(value)

        collector = Collector()
        capture(collector, 1)
        capture(collector, 2)
        assert collector.seen == [1, 2]
        assert target_kind(collector) == "external"

    def test_unsupported_target(self):
        with pytest.raises(TypeError):
            capture(42, 1)


def test_none_discards():
    capture(None, "anything")
    assert target_kind(None) == "discard"


def test_target_labels():
    target = TupleTarget((Ref("x"), TupleTarget((SeqRef("ys"), Ref()))))
    assert target_label(target) == ["x", ["ys", "Ref"]]
    assert target_kind(target) == "tuple"


class TestMaterialize:
    """Test values prepared for repeated capture."""

    def test_one_shot_iterable_survives_second_capture(self):
        seq = SeqRef("xs")
        value = materialize(seq, iter([1, 2]))
        capture(seq, value)
        capture(seq, value)
        assert seq.values == [1, 2]

    def test_tuple_components_materialized(self):
        xs, n = SeqRef("xs"), Ref("n")
        target = TupleTarget((xs, n))
        value = materialize(target, CapturedTuple(iter([3, 4]), 2))
        capture(target, value)
        capture(target, value)
        assert xs.values == [3, 4]
        assert n.value == 2

    def test_single_ref_value_untouched(self):
        it = iter([1])
        assert materialize(Ref(), it) is it

    def test_holds_sequence(self):
        assert holds_sequence(SeqRef())
        assert holds_sequence(TupleTarget((Ref(), TupleTarget((None, SeqRef())))))
        assert not holds_sequence(TupleTarget((Ref(), None)))
        assert not holds_sequence(None)
