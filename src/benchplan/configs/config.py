"""Benchmark configuration: a mutable union form and its resolved immutable form."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from benchplan.parameters.models import SummaryStyle

from .filters import Filter
from .jobs import Job
from .orderers import DefaultOrderer, Orderer


@dataclass(slots=True)
class BenchmarkConfig:
    """Configuration supplied by the caller or attached with markers.

    ``add_*``/``with_*`` return a new config; the receiver is left untouched.
    """

    jobs: list[Job] = field(default_factory=list)
    filters: list[Filter] = field(default_factory=list)
    orderer: Orderer | None = None
    summary_style: SummaryStyle | None = None

    @classmethod
    def default(cls) -> "BenchmarkConfig":
        return cls()

    @classmethod
    def create(cls, source: "BenchmarkConfig | ImmutableConfig") -> "BenchmarkConfig":
        return cls(
            jobs=list(source.jobs),
            filters=list(source.filters),
            orderer=source.orderer,
            summary_style=source.summary_style,
        )

    def add_job(self, *jobs: Job) -> "BenchmarkConfig":
        return replace(self, jobs=[*self.jobs, *jobs], filters=list(self.filters))

    def add_filter(self, *filters: Filter) -> "BenchmarkConfig":
        return replace(self, jobs=list(self.jobs), filters=[*self.filters, *filters])

    def with_orderer(self, orderer: Orderer) -> "BenchmarkConfig":
        return replace(self, jobs=list(self.jobs), filters=list(self.filters), orderer=orderer)

    def with_summary_style(self, summary_style: SummaryStyle) -> "BenchmarkConfig":
        return replace(self, jobs=list(self.jobs), filters=list(self.filters), summary_style=summary_style)

    @staticmethod
    def union(left: "BenchmarkConfig | ImmutableConfig", right: "BenchmarkConfig") -> "BenchmarkConfig":
        """Merges ``right`` into ``left``: jobs and filters are appended, single
        values set on ``right`` win."""

        return BenchmarkConfig(
            jobs=[*left.jobs, *right.jobs],
            filters=[*left.filters, *right.filters],
            orderer=right.orderer or left.orderer,
            summary_style=right.summary_style or left.summary_style,
        )


def _distinct(jobs: Iterable[Job]) -> list[Job]:
    result: list[Job] = []
    for job in jobs:
        if job not in result:
            result.append(job)
    return result


def resolve_jobs(jobs: Iterable[Job]) -> tuple[Job, ...]:
    """Applies every mutator, in order, to every non-mutator job.

    Without any non-mutator job the mutators are applied to ``Job.default()``.
    The resulting jobs are never mutators themselves.
    """

    jobs = list(jobs)
    mutators = [job for job in jobs if job.is_mutator]
    runnable = _distinct(job for job in jobs if not job.is_mutator) or [Job.default()]

    resolved = []
    for job in runnable:
        for mutator in mutators:
            job = job.apply(mutator)
        resolved.append(job)
    return tuple(_distinct(resolved))


@dataclass(frozen=True, slots=True)
class ImmutableConfig:
    """Fully resolved configuration of a benchmark class or method."""

    jobs: tuple[Job, ...]
    filters: tuple[Filter, ...]
    orderer: Orderer
    summary_style: SummaryStyle

    @classmethod
    def build(cls, config: BenchmarkConfig) -> "ImmutableConfig":
        return cls(
            jobs=resolve_jobs(config.jobs),
            filters=tuple(config.filters),
            orderer=config.orderer or DefaultOrderer(),
            summary_style=config.summary_style or SummaryStyle.default(),
        )

    def get_jobs(self) -> tuple[Job, ...]:
        return self.jobs

    def get_filters(self) -> tuple[Filter, ...]:
        return self.filters
