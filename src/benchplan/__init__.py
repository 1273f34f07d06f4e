"""benchplan: turns decorated benchmark classes into ordered, validated benchmark cases."""

from benchplan.configs import (
	BenchmarkConfig,
	ImmutableConfig,
	Job,
	benchmark_config,
	job,
	job_mutator,
)
from benchplan.declarations import (
	arguments,
	arguments_source,
	benchmark,
	category,
	global_cleanup,
	global_setup,
	iteration_cleanup,
	iteration_setup,
	params,
	params_all_values,
	params_source,
)
from benchplan.errors import InvalidBenchmarkDeclarationError, ValidationFailedError
from benchplan.running import (
	BenchmarkCase,
	BenchmarkRunInfo,
	methods_to_benchmarks,
	module_to_benchmarks,
	type_to_benchmarks,
	types_to_benchmarks,
)
from benchplan.validators import ExecutionValidator, ReturnValueValidator, ValidationError, raise_for_errors

__version__ = "0.1.0"

__all__ = [
	"BenchmarkConfig",
	"ImmutableConfig",
	"Job",
	"benchmark_config",
	"job",
	"job_mutator",
	"arguments",
	"arguments_source",
	"benchmark",
	"category",
	"global_cleanup",
	"global_setup",
	"iteration_cleanup",
	"iteration_setup",
	"params",
	"params_all_values",
	"params_source",
	"InvalidBenchmarkDeclarationError",
	"ValidationFailedError",
	"BenchmarkCase",
	"BenchmarkRunInfo",
	"methods_to_benchmarks",
	"module_to_benchmarks",
	"type_to_benchmarks",
	"types_to_benchmarks",
	"ExecutionValidator",
	"ReturnValueValidator",
	"ValidationError",
	"raise_for_errors",
	"__version__",
]
