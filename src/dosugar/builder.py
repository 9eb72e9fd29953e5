"""
Builder context and DSL entry points.

A BuilderContext collects the BindingSteps registered while a description
block runs. The block receives its context explicitly; the module-level
pick / satisfy / let / yield_ functions reach the innermost open context
through a ContextVar-held stack, so nested comprehensions each get their
own context and never corrupt an outer one.

Rewrites performed by satisfy and let close over the previous generator
and target of the step, never over the step object, so steps do not keep
themselves alive through their own closures.
"""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple

from dosugar.capture import CapturedTuple, TupleTarget, capture, holds_sequence, materialize
from dosugar.errors import OrderError, OutsideComprehensionError, YieldOverwriteWarning
from dosugar.protocol import ensure_monadic


@dataclass
class BindingStep:
    """
    One registered pick, with any satisfy / let folded into it.

    Properties:
        target: Capture target, or None to discard produced values
        generator: Zero-argument callable returning a monadic value
        terminal_transform: Block attached by yield_ (last step only)
        filters: Number of satisfy() calls folded into this step
        lets: Number of let() calls folded into this step
    """

    target: Any
    generator: Callable[[], Any]
    terminal_transform: Optional[Callable[[Any], Any]] = None
    filters: int = 0
    lets: int = 0


def _check_target(target: Any, operation: str) -> None:
    if target is not None and not callable(getattr(target, "capture", None)):
        raise TypeError(f"{operation}() target must provide capture(), got {type(target).__name__}")


class BuilderContext:
    """Ordered step registry for a single comprehension."""

    def __init__(self) -> None:
        self._steps: List[BindingStep] = []

    @property
    def steps(self) -> Tuple[BindingStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def _last_step(self, operation: str) -> BindingStep:
        if not self._steps:
            raise OrderError(f"{operation}() should be called after pick().")
        return self._steps[-1]

    def pick(self, target: Any, generator: Optional[Callable[[], Any]] = None) -> None:
        """
        Register a binding step.

        Forms:
            pick(target, generator)
            pick(generator)          # produced values are discarded
        """
        if generator is None:
            target, generator = None, target
        if not callable(generator):
            raise TypeError(f"pick() generator must be callable, got {type(generator).__name__}")
        _check_target(target, "pick")
        self._steps.append(BindingStep(target=target, generator=generator))

    def satisfy(self, predicate: Callable[[Any], bool]) -> None:
        """
        Filter the values of the last step.

        The predicate sees the produced value as its argument, and every
        name bound by that step is already captured when it runs.
        """
        step = self._last_step("satisfy")
        index = len(self._steps) - 1
        generator = step.generator
        target = step.target

        def check(value: Any) -> bool:
            capture(target, value)
            return predicate(value)

        def filtered() -> Any:
            m = ensure_monadic(generator(), index)
            if holds_sequence(target):
                m = ensure_monadic(m.map(lambda value: materialize(target, value)), index)
            return m.filter(check)

        step.generator = filtered
        step.filters += 1

    def let(self, target: Any, thunk: Callable[[], Any]) -> None:
        """
        Bind an auxiliary value.

        With no open step the thunk runs right away. Otherwise the last
        step is rewritten to produce CapturedTuple(value, thunk()) and its
        target becomes TupleTarget((previous_target, target)).
        """
        _check_target(target, "let")
        if not self._steps:
            # not inside any bind yet, so evaluate now
            capture(target, thunk())
            return

        step = self._steps[-1]
        index = len(self._steps) - 1
        generator = step.generator
        previous = step.target

        def extend(value: Any) -> CapturedTuple:
            value = materialize(previous, value)
            capture(previous, value)
            return CapturedTuple(value, materialize(target, thunk()))

        def extended() -> Any:
            return ensure_monadic(generator(), index).map(extend)

        step.target = TupleTarget((previous, target))
        step.generator = extended
        step.lets += 1

    def yield_(self, block: Callable[[Any], Any]) -> None:
        """
        Attach the final value-wrapping block to the last step.

        The block receives the value produced by the last step and its
        result is wrapped by the monad's map (not flattened).
        """
        step = self._last_step("yield_")
        if step.terminal_transform is not None:
            warnings.warn(
                "yield_() called more than once; the previous block is replaced",
                YieldOverwriteWarning,
                stacklevel=2,
            )
        step.terminal_transform = block


_context_stack: ContextVar[Tuple[BuilderContext, ...]] = ContextVar(
    "dosugar_context_stack", default=()
)


@contextmanager
def open_context() -> Iterator[BuilderContext]:
    """Push a fresh BuilderContext for the duration of the `with` block."""
    context = BuilderContext()
    token = _context_stack.set(_context_stack.get() + (context,))
    try:
        yield context
    finally:
        _context_stack.reset(token)


def collect_steps(block: Callable[[BuilderContext], Any]) -> Tuple[BindingStep, ...]:
    """Run a description block in a fresh context and return what it registered."""
    with open_context() as context:
        block(context)
    return context.steps


def current_context(operation: str = "current_context") -> BuilderContext:
    stack = _context_stack.get()
    if not stack:
        raise OutsideComprehensionError(f"{operation}() called outside comprehend().")
    return stack[-1]


def context_depth() -> int:
    """Number of comprehensions currently being described."""
    return len(_context_stack.get())


def pick(target: Any, generator: Optional[Callable[[], Any]] = None) -> None:
    current_context("pick").pick(target, generator)


def satisfy(predicate: Callable[[Any], bool]) -> None:
    current_context("satisfy").satisfy(predicate)


def let(target: Any, thunk: Callable[[], Any]) -> None:
    current_context("let").let(target, thunk)


def yield_(block: Callable[[Any], Any]) -> None:
    current_context("yield_").yield_(block)
