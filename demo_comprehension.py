#!/usr/bin/env python3
"""
Demo: comprehensions over a tiny list monad.

Builds the pythagorean-triples pipeline, prints its plan report and YAML
dump, then composes it.
"""

from dosugar import Ref, analyze_plan, plan, plan_to_yaml


class Many:
    """Minimal list monad, just enough for the demo."""

    def __init__(self, items):
        self.items = list(items)

    @classmethod
    def unit(cls, value):
        return cls([value])

    def map(self, func):
        return Many(func(i) for i in self.items)

    def flat_map(self, func):
        return Many(j for i in self.items for j in func(i).items)

    def filter(self, predicate):
        return Many(i for i in self.items if predicate(i))


def main():
    x, y, z = Ref("x"), Ref("y"), Ref("z")

    def triples(c):
        c.pick(x, lambda: Many(range(1, 31)))
        c.pick(y, lambda: Many(range(x.value, 31)))
        c.pick(z, lambda: Many(range(y.value, 31)))
        c.satisfy(lambda _: x.value ** 2 + y.value ** 2 == z.value ** 2)
        c.yield_(lambda _: (x.value, y.value, z.value))

    pipeline = plan(triples)
    report = analyze_plan(pipeline)

    print("=" * 70)
    print("PLAN")
    print("=" * 70)
    print(plan_to_yaml(pipeline))
    print(f"Steps: {report.total_steps}  Filters: {report.total_filters}  Lets: {report.total_lets}")
    for warning in report.warnings:
        print(f"  WARNING: {warning}")

    print()
    print("=" * 70)
    print("RESULT")
    print("=" * 70)
    for triple in pipeline.compose().items:
        print(f"  {triple}")


if __name__ == "__main__":
    main()
