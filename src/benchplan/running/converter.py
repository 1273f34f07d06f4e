"""Assembles benchmark cases from decorated classes."""

from __future__ import annotations

import inspect
from dataclasses import replace
from types import ModuleType
from typing import Any, Callable, Iterable, Sequence

import structlog

from benchplan.configs.config import BenchmarkConfig, ImmutableConfig
from benchplan.configs.filters import Filter
from benchplan.configs.jobs import Job
from benchplan.configs.resolver import resolve_method_config, resolve_type_config
from benchplan.declarations.members import BenchmarkMember, MemberTable, collect_members
from benchplan.errors import InvalidBenchmarkDeclarationError
from benchplan.parameters.builder import create_for_arguments, create_for_params
from benchplan.parameters.models import ParameterInstances

from .models import BenchmarkCase, BenchmarkRunInfo, Descriptor
from .targets import TargetResolver

_logger = structlog.get_logger(__name__)

ConfigLike = BenchmarkConfig | ImmutableConfig | None


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------


def type_to_benchmarks(cls: type, config: ConfigLike = None) -> BenchmarkRunInfo:
    """Builds every benchmark case declared by ``cls``."""

    _ensure_benchmark_type(cls)
    table = collect_members(cls)
    if not table.benchmarks:
        raise InvalidBenchmarkDeclarationError(f"No benchmarks were found in {cls.__name__}")
    return _build_run_info(cls, table, table.benchmarks, config)


def methods_to_benchmarks(
    cls: type,
    methods: Sequence[Callable[..., Any]],
    config: ConfigLike = None,
) -> BenchmarkRunInfo:
    """Builds the cases of selected workloads of ``cls`` only.

    Setup and cleanup callbacks are still looked up on the whole class.
    """

    _ensure_benchmark_type(cls)
    if methods is None:
        raise InvalidBenchmarkDeclarationError("Benchmark methods are not provided")

    table = collect_members(cls)
    selected: list[BenchmarkMember] = []
    for method in methods:
        member = _find_member(cls, table, method)
        if member not in selected:
            selected.append(member)
    selected.sort(key=lambda member: member.source_position)

    return _build_run_info(cls, table, selected, config)


def types_to_benchmarks(types: Sequence[type], config: ConfigLike = None) -> list[BenchmarkRunInfo]:
    if not types:
        raise InvalidBenchmarkDeclarationError("No benchmark types were provided")
    return [type_to_benchmarks(cls, config) for cls in types]


def get_runnable_benchmarks(module: ModuleType) -> list[type]:
    """Concrete classes defined in ``module`` that declare at least one benchmark."""

    runnable = []
    for value in vars(module).values():
        if not isinstance(value, type) or value.__module__ != module.__name__:
            continue
        if inspect.isabstract(value) or _is_generic_definition(value):
            continue
        if collect_members(value).benchmarks:
            runnable.append(value)
    return runnable


def module_to_benchmarks(module: ModuleType, config: ConfigLike = None) -> list[BenchmarkRunInfo]:
    if module is None:
        raise InvalidBenchmarkDeclarationError("Module is not provided")
    types = get_runnable_benchmarks(module)
    if not types:
        raise InvalidBenchmarkDeclarationError(f"No runnable benchmarks were found in module {module.__name__}")
    return types_to_benchmarks(types, config)


# ------------------------------------------------------------------
# Assembly
# ------------------------------------------------------------------


def _build_run_info(
    cls: type,
    table: MemberTable,
    members: Sequence[BenchmarkMember],
    config: ConfigLike,
) -> BenchmarkRunInfo:
    type_config = resolve_type_config(cls, config, table=table)
    style = type_config.summary_style
    params_rows = create_for_params(cls, style, table=table) or [ParameterInstances.empty()]
    resolver = TargetResolver(table)

    cases: list[BenchmarkCase] = []
    for index, member in enumerate(members):
        descriptor = _create_descriptor(table, member, resolver, index)
        argument_rows = create_for_arguments(member, cls, style) or [ParameterInstances.empty()]
        rows = [params_row.concat(argument_row) for params_row in params_rows for argument_row in argument_rows]

        method_config = resolve_method_config(member, type_config)
        candidates = (
            BenchmarkCase(
                descriptor=descriptor,
                job=_job_for(descriptor, job),
                parameters=row,
                config=method_config,
            )
            for job in method_config.jobs
            for row in rows
        )
        cases.extend(filter_cases(candidates, method_config.filters))

    ordered = tuple(type_config.orderer.execution_order(tuple(cases)))
    _logger.info(
        "benchmark-cases-assembled",
        type=cls.__name__,
        targets=len(members),
        cases=len(ordered),
    )
    return BenchmarkRunInfo(benchmark_cases=ordered, type=cls, config=type_config)


def filter_cases(cases: Iterable[BenchmarkCase], filters: Sequence[Filter]) -> list[BenchmarkCase]:
    """Keeps the cases accepted by every filter."""

    return [case for case in cases if all(item.predicate(case) for item in filters)]


def _create_descriptor(
    table: MemberTable,
    member: BenchmarkMember,
    resolver: TargetResolver,
    index: int,
) -> Descriptor:
    lifecycle = resolver.resolve(member.name)
    return Descriptor(
        type=table.type,
        workload=member.callback,
        global_setup=lifecycle.global_setup,
        global_cleanup=lifecycle.global_cleanup,
        iteration_setup=lifecycle.iteration_setup,
        iteration_cleanup=lifecycle.iteration_cleanup,
        description=member.marker.description,
        baseline=member.marker.baseline,
        categories=_categories(table, member),
        operations_per_invoke=member.marker.operations_per_invoke,
        method_index=index,
    )


def _categories(table: MemberTable, member: BenchmarkMember) -> tuple[str, ...]:
    result: list[str] = []
    seen: set[str] = set()
    for name in (*member.categories, *table.type_categories, *table.module_categories):
        if name.lower() not in seen:
            seen.add(name.lower())
            result.append(name)
    return tuple(result)


def _job_for(descriptor: Descriptor, job: Job) -> Job:
    # setup/cleanup around every iteration means one invocation per iteration
    if not descriptor.runs_once_per_iteration:
        return job
    if job.invocation_count is not None and job.unroll_factor is not None:
        return job
    return replace(
        job,
        id=job.resolved_id,
        invocation_count=1 if job.invocation_count is None else job.invocation_count,
        unroll_factor=1 if job.unroll_factor is None else job.unroll_factor,
    )


# ------------------------------------------------------------------
# Declaration checks
# ------------------------------------------------------------------


def _is_generic_definition(cls: type) -> bool:
    return bool(getattr(cls, "__parameters__", ()))


def _ensure_benchmark_type(cls: Any) -> None:
    if cls is None:
        raise InvalidBenchmarkDeclarationError("Benchmark type is not provided")
    if not isinstance(cls, type):
        raise InvalidBenchmarkDeclarationError(f"{cls!r} is not a class")
    if _is_generic_definition(cls):
        raise InvalidBenchmarkDeclarationError(
            f"{cls.__name__} is a generic type definition, parametrize it before running"
        )


def _find_member(cls: type, table: MemberTable, method: Any) -> BenchmarkMember:
    if method is None:
        raise InvalidBenchmarkDeclarationError("Benchmark method is not provided")

    function = inspect.unwrap(getattr(method, "__func__", method))
    name = getattr(function, "__name__", None)
    member = table.find_benchmark(name) if name else None
    if member is None:
        raise InvalidBenchmarkDeclarationError(f"{name or method!r} is not a benchmark method of {cls.__name__}")

    definitions = [
        inspect.unwrap(vars(klass)[name]) for klass in cls.__mro__ if inspect.isfunction(vars(klass).get(name))
    ]
    if function is not member.callback.function and function not in definitions:
        raise InvalidBenchmarkDeclarationError(f"{name} is not a benchmark method of {cls.__name__}")
    return member
