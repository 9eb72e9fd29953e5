"""
Pipeline plans: inspect a description block without composing it.

plan() runs a block in a fresh context and keeps the registered steps.
No generator is called, so nothing is pulled from any monad. A `let`
issued before the first pick still evaluates immediately, exactly as it
would under comprehend().

IMPORTANT: Reports are read-only. Composing a plan goes through
PipelinePlan.compose(), which uses the same composer as comprehend().
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

import yaml

from dosugar.builder import BindingStep, BuilderContext, collect_steps
from dosugar.capture import target_kind, target_label
from dosugar.composer import compose


@dataclass
class StepInfo:
    """Structural summary of one binding step."""
    index: int
    target_kind: str
    target: Any = None
    filters: int = 0
    lets: int = 0
    has_yield: bool = False


@dataclass
class PipelinePlan:
    """Steps registered by a description block, in order."""

    steps: Tuple[BindingStep, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def describe(self) -> List[StepInfo]:
        return [
            StepInfo(
                index=i,
                target_kind=target_kind(step.target),
                target=target_label(step.target),
                filters=step.filters,
                lets=step.lets,
                has_yield=step.terminal_transform is not None,
            )
            for i, step in enumerate(self.steps)
        ]

    def compose(self) -> Any:
        return compose(self.steps)


def plan(block: Callable[[BuilderContext], Any]) -> PipelinePlan:
    return PipelinePlan(steps=collect_steps(block))


@dataclass
class PlanReport:
    """Diagnostics for a pipeline plan."""

    total_steps: int = 0
    total_filters: int = 0
    total_lets: int = 0
    has_yield: bool = False
    yield_index: int | None = None
    discarded_steps: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_plan(pipeline: PipelinePlan) -> PlanReport:
    """
    Report on a plan without composing it.

    Checks for:
    - Empty pipelines (composition would fail)
    - A yield block on any step but the last (composition would fail)
    - No yield block at all (last monadic value passes through raw)
    - Steps whose produced values are discarded
    """
    report = PlanReport(total_steps=len(pipeline))

    for info in pipeline.describe():
        report.total_filters += info.filters
        report.total_lets += info.lets
        if info.has_yield:
            report.has_yield = True
            report.yield_index = info.index
        if info.target_kind == "discard":
            report.discarded_steps.append(info.index)

    if report.total_steps == 0:
        report.add_warning("Empty pipeline: no pick() registered")
        return report

    if report.has_yield and report.yield_index != report.total_steps - 1:
        report.add_warning(
            f"Misplaced yield: on step {report.yield_index}, last step is {report.total_steps - 1}"
        )

    if not report.has_yield:
        report.add_warning("No yield: the last step's monadic value is returned as is")

    if report.discarded_steps:
        report.add_warning(
            f"Discarded values: steps {', '.join(str(i) for i in report.discarded_steps)} have no target"
        )

    return report


def step_info_to_dict(info: StepInfo) -> Dict[str, Any]:
    return {
        "index": info.index,
        "target_kind": info.target_kind,
        "target": info.target,
        "filters": info.filters,
        "lets": info.lets,
        "has_yield": info.has_yield,
    }


def plan_to_dict(pipeline: PipelinePlan) -> Dict[str, Any]:
    return {
        "total_steps": len(pipeline),
        "steps": [step_info_to_dict(info) for info in pipeline.describe()],
    }


def plan_to_json(pipeline: PipelinePlan) -> str:
    return json.dumps(plan_to_dict(pipeline), sort_keys=True)


def plan_to_yaml(pipeline: PipelinePlan) -> str:
    return yaml.safe_dump(plan_to_dict(pipeline))
