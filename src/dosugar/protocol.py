"""
Monad capability protocol.

The composer is written once against this interface. Any type providing
unit / map / flat_map / filter can be used as the target of a
comprehension; nothing else is assumed about it (ordering, cardinality or
strictness are the monad's own business).
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from dosugar.errors import NotMonadicError

T = TypeVar("T")
U = TypeVar("U")

REQUIRED_OPERATIONS = ("map", "flat_map", "filter")


@runtime_checkable
class Monad(Protocol[T]):
    """
    Structural type for monad-like values.

    Properties:
        unit: lift a plain value (classmethod)
        map: transform the contained value(s)
        flat_map: sequence a dependent computation
        filter: keep only values satisfying a predicate
    """

    @classmethod
    def unit(cls, value: Any) -> "Monad[Any]":
        ...

    def map(self, func: Callable[[T], U]) -> "Monad[U]":
        ...

    def flat_map(self, func: Callable[[T], "Monad[U]"]) -> "Monad[U]":
        ...

    def filter(self, predicate: Callable[[T], bool]) -> "Monad[T]":
        ...


def missing_operations(value: Any) -> list:
    """Return the names of composer-required operations `value` lacks."""
    return [name for name in REQUIRED_OPERATIONS if not callable(getattr(value, name, None))]


def is_monadic(value: Any) -> bool:
    """True when `value` supports everything the composer calls on it."""
    return not missing_operations(value)


def ensure_monadic(value: Any, step_index: int) -> Any:
    """
    Return `value` unchanged if it is monad-like.

    Raises:
        NotMonadicError: If a required operation is missing
    """
    missing = missing_operations(value)
    if missing:
        raise NotMonadicError(
            f"Step {step_index} generator returned {type(value).__name__}, "
            f"which lacks: {', '.join(missing)}"
        )
    return value
