"""
Composer: folds registered binding steps into one monadic value.

Given steps s0, s1, ..., sN the result is

    s0.generator().flat_map(v0 ->
        capture(s0.target, v0)
        s1.generator().flat_map(v1 ->
            ...
            sN.generator().map(vN -> capture(sN.target, vN); yield_block(vN))))

When the last step has no yield block its monadic value passes through
untouched. Each value is captured before the next generator is called,
so later generators may read names bound earlier.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Sequence

from dosugar.builder import BindingStep, BuilderContext, collect_steps
from dosugar.capture import capture, materialize
from dosugar.errors import EmptyPipelineError, OrderError
from dosugar.protocol import ensure_monadic


def _check_yield_position(steps: Sequence[BindingStep]) -> None:
    for index, step in enumerate(steps[:-1]):
        if step.terminal_transform is not None:
            raise OrderError(
                f"yield_() must be the last statement: step {index} of {len(steps)} carries it"
            )


def _compose_from(steps: Sequence[BindingStep], index: int) -> Any:
    step = steps[index]
    target = step.target
    m = ensure_monadic(step.generator(), index)

    if step.terminal_transform is not None:
        transform = step.terminal_transform

        def finish(value: Any) -> Any:
            value = materialize(target, value)
            capture(target, value)
            return transform(value)

        return m.map(finish)

    if index + 1 < len(steps):
        def bind(value: Any) -> Any:
            value = materialize(target, value)
            capture(target, value)
            return _compose_from(steps, index + 1)

        return m.flat_map(bind)

    return m


def compose(steps: Sequence[BindingStep]) -> Any:
    """
    Compose a finished step sequence.

    Args:
        steps: Binding steps in registration order

    Returns:
        The composed monadic value

    Raises:
        EmptyPipelineError: If there are no steps
        OrderError: If a yield block sits on any step but the last
    """
    steps = tuple(steps)
    if not steps:
        raise EmptyPipelineError("comprehend() block registered no steps; call pick() at least once.")
    _check_yield_position(steps)
    return _compose_from(steps, 0)


def comprehend(block: Callable[[BuilderContext], Any]) -> Any:
    """
    Run a description block and compose what it registered.

    Example:
        x, y = Ref("x"), Ref("y")

        def pairs(c):
            c.pick(x, lambda: ListMonad([1, 2, 3]))
            c.pick(y, lambda: ListMonad([1, 2, 3]))
            c.satisfy(lambda _: x.value != y.value)
            c.yield_(lambda _: (x.value, y.value))

        comprehend(pairs)   # ListMonad([(1, 2), (1, 3), (2, 1), ...])

    The block's return value is ignored. The context is closed before
    composition starts, so generators may themselves call comprehend().
    """
    return compose(collect_steps(block))


for_ = comprehend


def comprehension(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator for parameterised description blocks.

    The decorated function takes the BuilderContext first; calling the
    result with the remaining arguments composes a fresh pipeline.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return comprehend(lambda context: func(context, *args, **kwargs))

    return wrapper
