"""Execution order of assembled benchmark cases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from benchplan.running.models import BenchmarkCase


class Orderer(Protocol):
    def execution_order(self, cases: Sequence["BenchmarkCase"]) -> Sequence["BenchmarkCase"]:
        """Returns the cases in the order they should run."""


class DefaultOrderer:
    """Keeps declaration and priority order."""

    def execution_order(self, cases: Sequence["BenchmarkCase"]) -> Sequence["BenchmarkCase"]:
        return tuple(cases)

    def __eq__(self, other: object) -> bool:
        return type(other) is DefaultOrderer

    def __hash__(self) -> int:
        return hash(DefaultOrderer)


class JobGroupingOrderer:
    """Runs all cases of the same job together.

    Jobs keep the order of their first appearance; cases keep their relative
    order within a job.
    """

    def execution_order(self, cases: Sequence["BenchmarkCase"]) -> Sequence["BenchmarkCase"]:
        groups: dict[object, list["BenchmarkCase"]] = {}
        for case in cases:
            groups.setdefault(case.job, []).append(case)
        return tuple(case for group in groups.values() for case in group)

    def __eq__(self, other: object) -> bool:
        return type(other) is JobGroupingOrderer

    def __hash__(self) -> int:
        return hash(JobGroupingOrderer)
