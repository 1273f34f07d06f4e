"""Configuration markers for benchmark classes and workloads."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from benchplan.declarations.markers import ConfigMarker, attach

from .config import BenchmarkConfig
from .jobs import Job, OutlierMode

T = TypeVar("T")


def benchmark_config(config: BenchmarkConfig) -> Callable[[T], T]:
    """Attaches a whole configuration to a class or workload."""

    marker = ConfigMarker(config=config)
    return lambda target: attach(target, marker)


def job(**characteristics: Any) -> Callable[[T], T]:
    """Adds a runnable job (``@job(runtime="cpython3.12", warmup_count=3)``)."""

    return benchmark_config(BenchmarkConfig(jobs=[Job(**characteristics)]))


def simple_job(
    *,
    id: str | None = None,
    runtime: str | None = None,
    launch_count: int | None = None,
    warmup_count: int | None = None,
    iteration_count: int | None = None,
    invocation_count: int | None = None,
) -> Callable[[T], T]:
    return job(
        id=id,
        runtime=runtime,
        launch_count=launch_count,
        warmup_count=warmup_count,
        iteration_count=iteration_count,
        invocation_count=invocation_count,
    )


def dry_job(target: T) -> T:
    return benchmark_config(BenchmarkConfig(jobs=[Job.dry()]))(target)


def job_mutator(**characteristics: Any) -> Callable[[T], T]:
    """Overrides characteristics on every job in scope instead of adding one."""

    return benchmark_config(BenchmarkConfig(jobs=[Job.mutator(**characteristics)]))


def max_iteration_count(count: int) -> Callable[[T], T]:
    return job_mutator(max_iteration_count=count)


def min_iteration_count(count: int) -> Callable[[T], T]:
    return job_mutator(min_iteration_count=count)


def invocation_count(count: int, unroll_factor: int | None = None) -> Callable[[T], T]:
    if unroll_factor is None:
        return job_mutator(invocation_count=count)
    return job_mutator(invocation_count=count, unroll_factor=unroll_factor)


def run_once_per_iteration(target: T) -> T:
    """Runs the workload exactly once per iteration."""

    return job_mutator(invocation_count=1, unroll_factor=1)(target)


def outliers(mode: OutlierMode) -> Callable[[T], T]:
    return job_mutator(outlier_mode=mode)
