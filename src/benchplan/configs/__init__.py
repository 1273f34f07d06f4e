"""Jobs, configuration sources and their resolution."""

from .attributes import (
	benchmark_config,
	dry_job,
	invocation_count,
	job,
	job_mutator,
	max_iteration_count,
	min_iteration_count,
	outliers,
	run_once_per_iteration,
	simple_job,
)
from .config import BenchmarkConfig, ImmutableConfig, resolve_jobs
from .filters import AllCategoriesFilter, AnyCategoriesFilter, Filter, GlobFilter, SimpleFilter
from .jobs import Job, OutlierMode
from .orderers import DefaultOrderer, JobGroupingOrderer, Orderer
from .resolver import resolve_method_config, resolve_type_config

__all__ = [
	"benchmark_config",
	"dry_job",
	"invocation_count",
	"job",
	"job_mutator",
	"max_iteration_count",
	"min_iteration_count",
	"outliers",
	"run_once_per_iteration",
	"simple_job",
	"BenchmarkConfig",
	"ImmutableConfig",
	"resolve_jobs",
	"AllCategoriesFilter",
	"AnyCategoriesFilter",
	"Filter",
	"GlobFilter",
	"SimpleFilter",
	"Job",
	"OutlierMode",
	"DefaultOrderer",
	"JobGroupingOrderer",
	"Orderer",
	"resolve_method_config",
	"resolve_type_config",
]
