"""
Capture targets for dosugar.

A capture target is where a step deposits the value its monad produced,
so that later generators, predicates and yield blocks can read it by name.

Variants:
    - None:        value is discarded
    - Ref:         one slot, read through `.value`
    - SeqRef:      ordered collection, read through `.values`
    - TupleTarget: positional fan-out over a CapturedTuple
    - external:    any object with a `capture(value)` method

ARCHITECTURAL RULE:
    Writing is the only operation. Targets never evaluate anything and
    never touch monads.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from dosugar.errors import TupleArityError


class _Unbound:
    def __repr__(self) -> str:
        return "<unbound>"


UNBOUND = _Unbound()


@dataclass(eq=False)
class Ref:
    """
    Single-value capture slot.

    Example:
        x = Ref("x")
        pick(x, lambda: ListMonad([1, 2, 3]))
        yield_(lambda _: x.value * 10)

    Properties:
        name: Optional label, used only in plan reports
        value: Last captured value (UNBOUND until the first capture)
    """

    name: Optional[str] = None
    value: Any = UNBOUND

    def capture(self, value: Any) -> None:
        self.value = value

    @property
    def is_bound(self) -> bool:
        return self.value is not UNBOUND


@dataclass(eq=False)
class SeqRef:
    """
    Sequence capture slot.

    Iterables are stored as a fresh list, so later mutation of the
    producer's container is not visible here. Strings, bytes and
    non-iterable values become a one-element list.
    """

    name: Optional[str] = None
    values: List[Any] = field(default_factory=list)

    def capture(self, value: Any) -> None:
        self.values = as_sequence(value)


def as_sequence(value: Any) -> List[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return [value]
    return list(value)


class CapturedTuple(tuple):
    """
    Multi-value result produced by a `let` rewrite.

    A distinct type so that a caller's own tuples are never mistaken for
    a fan-out payload.
    """

    def __new__(cls, *components: Any) -> "CapturedTuple":
        return super().__new__(cls, components)

    def __repr__(self) -> str:
        return f"CapturedTuple{tuple.__repr__(self)}"


@dataclass(frozen=True)
class TupleTarget:
    """
    Composite capture target.

    Writes fan out positionally: component i of the CapturedTuple goes to
    targets[i]. Nested TupleTargets are allowed (a step with several
    `let` rewrites builds tuples of tuples).
    """

    targets: Tuple[Any, ...]

    def capture(self, value: Any) -> None:
        if not isinstance(value, CapturedTuple):
            raise TupleArityError(
                f"tuple arity mismatch: expected CapturedTuple of {len(self.targets)}, "
                f"got {type(value).__name__}"
            )
        if len(value) != len(self.targets):
            raise TupleArityError(
                f"tuple arity mismatch: {len(value)} values for {len(self.targets)} targets"
            )
        for target, component in zip(self.targets, value):
            capture(target, component)


def capture(target: Any, value: Any) -> None:
    """
    Deposit `value` into `target`.

    Args:
        target: None, Ref, SeqRef, TupleTarget or any object with `capture`
        value: The raw value produced by a step

    Raises:
        TypeError: If target is not a capture target at all
        TupleArityError: On a tuple fan-out mismatch
    """
    if target is None:
        return
    hook = getattr(target, "capture", None)
    if not callable(hook):
        raise TypeError(f"Unsupported capture target: {type(target)}")
    hook(value)


def target_kind(target: Any) -> str:
    """Classify a target for plan reports."""
    if target is None:
        return "discard"
    if isinstance(target, Ref):
        return "single"
    if isinstance(target, SeqRef):
        return "sequence"
    if isinstance(target, TupleTarget):
        return "tuple"
    return "external"


def target_label(target: Any) -> Any:
    """Human-readable label of a target, recursing into tuples."""
    if target is None:
        return None
    if isinstance(target, TupleTarget):
        return [target_label(t) for t in target.targets]
    name = getattr(target, "name", None)
    if isinstance(name, str):
        return name
    return type(target).__name__


def materialize(target: Any, value: Any) -> Any:
    """
    Return `value` in a form that can be captured into `target` again.

    A step value may be captured more than once (inside a satisfy or let
    rewrite, then by the composer). One-shot iterables bound to a SeqRef
    are turned into a list here so every later capture sees the same items.
    """
    if isinstance(target, SeqRef):
        return as_sequence(value)
    if (
        isinstance(target, TupleTarget)
        and isinstance(value, CapturedTuple)
        and len(value) == len(target.targets)
    ):
        return CapturedTuple(*(materialize(t, c) for t, c in zip(target.targets, value)))
    return value


def holds_sequence(target: Any) -> bool:
    """True when `target` is, or fans out into, a SeqRef."""
    if isinstance(target, SeqRef):
        return True
    if isinstance(target, TupleTarget):
        return any(holds_sequence(t) for t in target.targets)
    return False
