"""Unit tests for jobs, configuration merging and mutators."""

from __future__ import annotations

import sys

from benchplan.configs import (
    AllCategoriesFilter,
    AnyCategoriesFilter,
    BenchmarkConfig,
    GlobFilter,
    Job,
    JobGroupingOrderer,
    SimpleFilter,
    job,
    job_mutator,
    max_iteration_count,
    resolve_jobs,
    resolve_method_config,
    resolve_type_config,
)
from benchplan.declarations import benchmark, category, collect_members, params
from benchplan.running import type_to_benchmarks


@job_mutator(warmup_count=5)
class MutatorOnly:
    @benchmark
    def run(self) -> None:
        pass


@job(id="A", runtime="a")
@job(id="B", runtime="b")
@job_mutator(warmup_count=3)
@max_iteration_count(20)
class TwoJobs:
    @benchmark
    def run(self) -> None:
        pass


@job_mutator(iteration_count=9)
@job(id="Late")
class MutatorDeclaredFirst:
    @benchmark
    def run(self) -> None:
        pass


@job(id="Class")
class MethodScoped:
    @job_mutator(iteration_count=7)
    @benchmark
    def mutated(self) -> None:
        pass

    @benchmark
    def plain(self) -> None:
        pass


@job(id="Class")
class Layered:
    @benchmark
    def run(self) -> None:
        pass


@job(id="A")
@job(id="B")
class Grouped:
    size: int = params(1, 2)

    @benchmark
    def first(self) -> None:
        pass

    @benchmark
    def second(self) -> None:
        pass


class Tagged:
    @category("Fast", "IO")
    @benchmark
    def fast_io(self) -> None:
        pass

    @category("fast")
    @benchmark
    def fast(self) -> None:
        pass

    @benchmark
    def untagged(self) -> None:
        pass


def _names(run_info) -> list[str]:
    return [case.descriptor.workload.name for case in run_info.benchmark_cases]


def test_default_job_id_and_generated_ids() -> None:
    assert Job.default().resolved_id == "Default"
    assert Job(id="Named", warmup_count=1).resolved_id == "Named"

    generated = Job(warmup_count=1).resolved_id
    assert generated.startswith("Job-")
    assert len(generated) == len("Job-") + 6
    assert Job(warmup_count=1).resolved_id == generated
    assert Job(warmup_count=2).resolved_id != generated


def test_job_display_info_lists_characteristics() -> None:
    assert Job.default().display_info == "Default"
    assert Job(id="Dry", launch_count=1).display_info == "Dry(launch_count=1)"


def test_apply_never_copies_id_or_mutator_flag() -> None:
    mutator = Job.mutator(id="Mutator", warmup_count=2)

    applied = Job(id="A").apply(mutator)

    assert applied == Job(id="A", warmup_count=2)
    assert applied.is_mutator is False


def test_resolve_jobs_seeds_default_job_for_mutators() -> None:
    assert resolve_jobs([Job.mutator(warmup_count=1)]) == (Job(warmup_count=1),)
    assert resolve_jobs([]) == (Job.default(),)
    assert resolve_jobs([Job(id="A"), Job(id="A")]) == (Job(id="A"),)


def test_mutator_only_class_yields_default_job_with_overrides() -> None:
    run_info = type_to_benchmarks(MutatorOnly)

    [case] = run_info.benchmark_cases
    assert case.job == Job.default().with_(warmup_count=5)
    assert case.job.is_mutator is False


def test_two_mutators_apply_to_each_of_two_jobs() -> None:
    run_info = type_to_benchmarks(TwoJobs)

    jobs = [case.job for case in run_info.benchmark_cases]
    assert jobs == [
        Job(id="A", runtime="a", warmup_count=3, max_iteration_count=20),
        Job(id="B", runtime="b", warmup_count=3, max_iteration_count=20),
    ]


def test_mutator_declared_before_job_still_applies() -> None:
    [case] = type_to_benchmarks(MutatorDeclaredFirst).benchmark_cases

    assert case.job == Job(id="Late", iteration_count=9)


def test_method_mutator_applies_to_class_jobs_only_for_its_method() -> None:
    run_info = type_to_benchmarks(MethodScoped)

    jobs = {case.descriptor.workload.name: case.job for case in run_info.benchmark_cases}
    assert jobs == {"mutated": Job(id="Class", iteration_count=7), "plain": Job(id="Class")}


def test_method_config_reuses_type_config_without_method_markers() -> None:
    table = collect_members(MethodScoped)
    type_config = resolve_type_config(MethodScoped, table=table)

    assert resolve_method_config(table.find_benchmark("plain"), type_config) is type_config
    assert resolve_method_config(table.find_benchmark("mutated"), type_config) is not type_config


def test_type_config_resolution_is_deterministic() -> None:
    base = BenchmarkConfig.default().add_job(Job(warmup_count=1))

    assert resolve_type_config(TwoJobs, base) == resolve_type_config(TwoJobs, base)


def test_base_module_and_class_configs_are_layered(monkeypatch) -> None:
    module_config = BenchmarkConfig(jobs=[Job(id="Module")])
    monkeypatch.setattr(sys.modules[__name__], "__benchplan_config__", module_config, raising=False)
    base = BenchmarkConfig.default().add_job(Job(id="Base"))

    resolved = resolve_type_config(Layered, base)

    assert [item.resolved_id for item in resolved.jobs] == ["Base", "Module", "Class"]


def test_config_builders_leave_the_receiver_untouched() -> None:
    config = BenchmarkConfig.default()

    extended = config.add_job(Job(id="A")).add_filter(GlobFilter(("*",)))

    assert config.jobs == [] and config.filters == []
    assert len(extended.jobs) == 1 and len(extended.filters) == 1


def test_glob_filter_matches_short_and_full_names() -> None:
    config = BenchmarkConfig.default().add_filter(GlobFilter(("Tagged.fast*",)))
    assert _names(type_to_benchmarks(Tagged, config)) == ["fast_io", "fast"]

    full = BenchmarkConfig.default().add_filter(GlobFilter((f"{__name__}.Tagged.untagged",)))
    assert _names(type_to_benchmarks(Tagged, full)) == ["untagged"]


def test_category_filters_ignore_case() -> None:
    any_config = BenchmarkConfig.default().add_filter(AnyCategoriesFilter(("FAST",)))
    all_config = BenchmarkConfig.default().add_filter(AllCategoriesFilter(("fast", "io")))

    assert _names(type_to_benchmarks(Tagged, any_config)) == ["fast_io", "fast"]
    assert _names(type_to_benchmarks(Tagged, all_config)) == ["fast_io"]


def test_every_filter_must_accept_a_case() -> None:
    config = (
        BenchmarkConfig.default()
        .add_filter(AnyCategoriesFilter(("fast",)))
        .add_filter(SimpleFilter(lambda case: case.descriptor.workload.name != "fast"))
    )

    assert _names(type_to_benchmarks(Tagged, config)) == ["fast_io"]


def test_job_grouping_orderer_runs_each_job_together() -> None:
    default_order = type_to_benchmarks(Grouped)
    grouped = type_to_benchmarks(Grouped, BenchmarkConfig.default().with_orderer(JobGroupingOrderer()))

    assert [case.job.id for case in default_order.benchmark_cases] == ["A", "A", "B", "B"] * 2
    assert [case.job.id for case in grouped.benchmark_cases] == ["A"] * 4 + ["B"] * 4
    assert len(grouped) == len(default_order) == 8
