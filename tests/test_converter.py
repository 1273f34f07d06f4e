"""Unit tests for benchmark case assembly."""

from __future__ import annotations

import abc
import types
from typing import Generic, TypeVar

import pytest

from benchplan.configs import BenchmarkConfig, Job
from benchplan.declarations import (
    arguments,
    benchmark,
    category,
    global_setup,
    iteration_setup,
    params,
)
from benchplan.errors import InvalidBenchmarkDeclarationError
from benchplan.running import (
    get_runnable_benchmarks,
    methods_to_benchmarks,
    module_to_benchmarks,
    type_to_benchmarks,
    types_to_benchmarks,
)

T = TypeVar("T")


class Matrix:
    size: int = params(1, 2, 3)

    @arguments(10)
    @arguments(20)
    @benchmark
    def run(self, value: int) -> None:
        pass


class Simple:
    value: int = params(1, 2)

    @iteration_setup
    def setup(self) -> None:
        pass

    @benchmark
    def run(self) -> None:
        pass


@category("Class", "shared")
class Categorized:
    @category("Method", "SHARED")
    @benchmark(description="Described", baseline=True)
    def run(self) -> None:
        pass

    @benchmark
    def other(self) -> None:
        pass


class Empty:
    def not_a_benchmark(self) -> None:
        pass


class Open(Generic[T]):
    @benchmark
    def run(self) -> None:
        pass


class Closed(Open[int]):
    pass


class Selective:
    @global_setup
    def setup(self) -> None:
        pass

    @benchmark
    def first(self) -> None:
        pass

    @benchmark
    def second(self) -> None:
        pass

    def helper(self) -> None:
        pass


def test_cases_are_the_cross_product_of_parameters_and_arguments() -> None:
    run_info = type_to_benchmarks(Matrix)

    assert len(run_info) == 3 * 2
    assert [case.parameters.display_info for case in run_info.benchmark_cases[:2]] == [
        "size=1, value=10",
        "size=1, value=20",
    ]
    assert all(case.has_parameters and case.has_arguments for case in run_info.benchmark_cases)


def test_jobs_multiply_the_parameter_rows() -> None:
    config = BenchmarkConfig.default().add_job(Job(id="A"), Job(id="B"))

    run_info = type_to_benchmarks(Matrix, config)

    assert len(run_info) == 3 * 2 * 2
    assert [case.job.id for case in run_info.benchmark_cases] == ["A"] * 6 + ["B"] * 6


def test_params_scenario_yields_one_case_per_value() -> None:
    run_info = type_to_benchmarks(Simple)

    assert [case.parameters.items[0].display_text for case in run_info.benchmark_cases] == ["1", "2"]
    assert run_info.benchmark_cases[0].display_info == "Simple.run: Default [value=1]"
    assert run_info.type is Simple


def test_iteration_setup_runs_the_workload_once_per_iteration() -> None:
    case = type_to_benchmarks(Simple).benchmark_cases[0]

    assert case.job.invocation_count == 1
    assert case.job.unroll_factor == 1
    assert case.job.resolved_id == "Default"


def test_explicit_invocation_count_is_kept() -> None:
    config = BenchmarkConfig.default().add_job(Job(id="Many", invocation_count=16, unroll_factor=4))

    case = type_to_benchmarks(Simple, config).benchmark_cases[0]

    assert case.job == Job(id="Many", invocation_count=16, unroll_factor=4)


def test_descriptor_is_shared_by_every_case_of_a_target() -> None:
    first, second = type_to_benchmarks(Simple).benchmark_cases

    assert first.descriptor is second.descriptor
    assert first.descriptor.iteration_setup.name == "setup"
    assert first.descriptor.runs_once_per_iteration


def test_descriptor_merges_categories_and_metadata() -> None:
    run_info = type_to_benchmarks(Categorized)
    described, other = (case.descriptor for case in run_info.benchmark_cases)

    assert described.categories == ("Method", "SHARED", "Class")
    assert other.categories == ("Class", "shared")
    assert described.display_info == "Categorized.Described"
    assert described.baseline is True
    assert (described.method_index, other.method_index) == (0, 1)


def test_methods_to_benchmarks_selects_workloads() -> None:
    run_info = methods_to_benchmarks(Selective, [Selective.second])

    [case] = run_info.benchmark_cases
    assert case.descriptor.workload.name == "second"
    assert case.descriptor.global_setup.name == "setup"
    assert case.descriptor.method_index == 0


def test_methods_to_benchmarks_accepts_bound_methods_and_keeps_source_order() -> None:
    instance = Selective()

    run_info = methods_to_benchmarks(Selective, [instance.second, Selective.first, Selective.second])

    assert [case.descriptor.workload.name for case in run_info.benchmark_cases] == ["first", "second"]


def test_methods_to_benchmarks_rejects_foreign_and_plain_methods() -> None:
    with pytest.raises(InvalidBenchmarkDeclarationError, match="helper"):
        methods_to_benchmarks(Selective, [Selective.helper])
    with pytest.raises(InvalidBenchmarkDeclarationError, match="run"):
        methods_to_benchmarks(Selective, [Simple.run])
    with pytest.raises(InvalidBenchmarkDeclarationError):
        methods_to_benchmarks(Selective, None)
    with pytest.raises(InvalidBenchmarkDeclarationError):
        methods_to_benchmarks(None, [])


@pytest.mark.parametrize("value", [None, 42, "Simple"])
def test_type_to_benchmarks_rejects_non_classes(value) -> None:
    with pytest.raises(InvalidBenchmarkDeclarationError):
        type_to_benchmarks(value)


def test_class_without_benchmarks_is_rejected() -> None:
    with pytest.raises(InvalidBenchmarkDeclarationError, match="No benchmarks"):
        type_to_benchmarks(Empty)


def test_generic_definition_is_rejected_but_parametrized_subclass_is_not() -> None:
    with pytest.raises(InvalidBenchmarkDeclarationError, match="generic"):
        type_to_benchmarks(Open)

    assert len(type_to_benchmarks(Closed)) == 1


def test_types_to_benchmarks_builds_one_run_info_per_type() -> None:
    run_infos = types_to_benchmarks([Simple, Matrix])

    assert [run_info.type for run_info in run_infos] == [Simple, Matrix]
    with pytest.raises(InvalidBenchmarkDeclarationError):
        types_to_benchmarks([])
    with pytest.raises(InvalidBenchmarkDeclarationError):
        types_to_benchmarks([Simple, None])


def _fake_module() -> types.ModuleType:
    module = types.ModuleType("fake_benchmarks")

    class Runnable:
        __module__ = module.__name__

        @benchmark
        def run(self) -> None:
            pass

    class Abstract(abc.ABC):
        __module__ = module.__name__

        @abc.abstractmethod
        def build(self) -> None:
            pass

        @benchmark
        def run(self) -> None:
            pass

    class NoBenchmarks:
        __module__ = module.__name__

    module.Runnable = Runnable
    module.Abstract = Abstract
    module.NoBenchmarks = NoBenchmarks
    module.Imported = Simple
    return module


def test_get_runnable_benchmarks_skips_abstract_foreign_and_empty_classes() -> None:
    module = _fake_module()

    assert get_runnable_benchmarks(module) == [module.Runnable]
    [run_info] = module_to_benchmarks(module)
    assert run_info.type is module.Runnable


def test_module_without_benchmarks_is_rejected() -> None:
    module = types.ModuleType("empty_benchmarks")

    with pytest.raises(InvalidBenchmarkDeclarationError, match="empty_benchmarks"):
        module_to_benchmarks(module)
