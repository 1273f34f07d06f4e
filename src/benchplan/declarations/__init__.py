"""Declarative markers and the member table built from them."""

from .markers import (
	ParamField,
	Role,
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
from .members import CallKind, Callback, LifecycleEntry, MemberTable, collect_members

__all__ = [
	"ParamField",
	"Role",
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
	"CallKind",
	"Callback",
	"LifecycleEntry",
	"MemberTable",
	"collect_members",
]
