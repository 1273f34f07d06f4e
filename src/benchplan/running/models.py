"""Benchmark targets, cases and the per-class run unit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from benchplan.configs.jobs import Job
from benchplan.declarations.members import Callback
from benchplan.parameters.models import ParameterInstances

if TYPE_CHECKING:
    from benchplan.configs.config import ImmutableConfig


@dataclass(frozen=True, slots=True, eq=False)
class Descriptor:
    """One benchmark target with its resolved lifecycle callbacks.

    Built once per class and shared by reference by every case of the target.
    """

    type: type
    workload: Callback
    global_setup: Callback | None = None
    global_cleanup: Callback | None = None
    iteration_setup: Callback | None = None
    iteration_cleanup: Callback | None = None
    description: str | None = None
    baseline: bool = False
    categories: tuple[str, ...] = ()
    operations_per_invoke: int = 1
    method_index: int = 0

    @property
    def workload_display_info(self) -> str:
        return self.description or self.workload.name

    @property
    def display_info(self) -> str:
        return f"{self.type.__name__}.{self.workload_display_info}"

    @property
    def has_categories(self) -> bool:
        return bool(self.categories)

    @property
    def runs_once_per_iteration(self) -> bool:
        return self.iteration_setup is not None or self.iteration_cleanup is not None

    def __repr__(self) -> str:
        return f"Descriptor({self.display_info})"


@dataclass(frozen=True, slots=True)
class BenchmarkCase:
    """A fully resolved (target, job, parameter row) combination."""

    descriptor: Descriptor
    job: Job
    parameters: ParameterInstances
    config: "ImmutableConfig"

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters.parameters)

    @property
    def has_arguments(self) -> bool:
        return bool(self.parameters.arguments)

    @property
    def display_info(self) -> str:
        text = f"{self.descriptor.display_info}: {self.job.resolved_id}"
        if self.parameters.count:
            text += f" [{self.parameters.display_info}]"
        return text

    def __repr__(self) -> str:
        return f"BenchmarkCase({self.display_info})"


@dataclass(frozen=True, slots=True)
class BenchmarkRunInfo:
    """Ordered cases of one benchmark class plus its resolved configuration."""

    benchmark_cases: tuple[BenchmarkCase, ...]
    type: type
    config: "ImmutableConfig"

    def __len__(self) -> int:
        return len(self.benchmark_cases)
