"""
Error taxonomy for dosugar.

Every fatal condition raised by the builder or the composer derives from
DoSugarError. Errors raised inside caller-supplied generators, predicates,
thunks or yield blocks are never caught here; they propagate unchanged.
"""


class DoSugarError(Exception):
    """Base class for all dosugar errors."""
    pass


class OrderError(DoSugarError):
    """
    Raised when a DSL operation is used out of order.

    Examples:
        - satisfy() or yield_() before any pick()
        - a yield_() block that is not on the last step at composition time
    """
    pass


class EmptyPipelineError(DoSugarError):
    """Raised when a description block registers no steps at all."""
    pass


class TupleArityError(DoSugarError):
    """
    Raised when a tuple capture target receives the wrong number of values.

    IMPORTANT:
        This is an internal invariant. Correct DSL usage never triggers it,
        so seeing it means the composer itself is broken.
    """
    pass


class OutsideComprehensionError(DoSugarError):
    """Raised when a module-level DSL function runs with no open context."""
    pass


class NotMonadicError(DoSugarError, TypeError):
    """Raised when a step generator returns something without map/flat_map/filter."""
    pass


class YieldOverwriteWarning(UserWarning):
    """Issued when yield_() replaces an already attached yield block."""
    pass
