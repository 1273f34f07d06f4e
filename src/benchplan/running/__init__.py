"""Turning decorated classes into ordered benchmark cases."""

from .converter import (
	filter_cases,
	get_runnable_benchmarks,
	methods_to_benchmarks,
	module_to_benchmarks,
	type_to_benchmarks,
	types_to_benchmarks,
)
from .models import BenchmarkCase, BenchmarkRunInfo, Descriptor
from .targets import ResolvedLifecycle, TargetResolver, order_candidates, resolve_callback

__all__ = [
	"filter_cases",
	"get_runnable_benchmarks",
	"methods_to_benchmarks",
	"module_to_benchmarks",
	"type_to_benchmarks",
	"types_to_benchmarks",
	"BenchmarkCase",
	"BenchmarkRunInfo",
	"Descriptor",
	"ResolvedLifecycle",
	"TargetResolver",
	"order_candidates",
	"resolve_callback",
]
