"""
dosugar: comprehension syntax for any monad-like type.

Describe a chain of dependent binds as a flat block of statements and get
back one composed value:

    x, y = Ref("x"), Ref("y")

    def pairs(c):
        c.pick(x, lambda: ListMonad([1, 2, 3]))
        c.pick(y, lambda: ListMonad([1, 2, 3]))
        c.satisfy(lambda _: x.value != y.value)
        c.yield_(lambda _: (x.value, y.value))

    comprehend(pairs)

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO concrete monads.

It only calls map / flat_map / filter on whatever the generators return.
"""

from .builder import BindingStep, BuilderContext, current_context, let, pick, satisfy, yield_
from .capture import UNBOUND, CapturedTuple, Ref, SeqRef, TupleTarget, capture
from .composer import compose, comprehend, comprehension, for_
from .errors import (
    DoSugarError,
    EmptyPipelineError,
    NotMonadicError,
    OrderError,
    OutsideComprehensionError,
    TupleArityError,
    YieldOverwriteWarning,
)
from .plan import PipelinePlan, PlanReport, analyze_plan, plan, plan_to_dict, plan_to_json, plan_to_yaml
from .protocol import Monad, is_monadic

__version__ = "0.1.0"

__all__ = [
    "BindingStep",
    "BuilderContext",
    "CapturedTuple",
    "DoSugarError",
    "EmptyPipelineError",
    "Monad",
    "NotMonadicError",
    "OrderError",
    "OutsideComprehensionError",
    "PipelinePlan",
    "PlanReport",
    "Ref",
    "SeqRef",
    "TupleArityError",
    "TupleTarget",
    "UNBOUND",
    "YieldOverwriteWarning",
    "analyze_plan",
    "capture",
    "compose",
    "comprehend",
    "comprehension",
    "current_context",
    "for_",
    "is_monadic",
    "let",
    "pick",
    "plan",
    "plan_to_dict",
    "plan_to_json",
    "plan_to_yaml",
    "satisfy",
    "yield_",
]
