"""Parameter definitions and the parameter matrix builder."""

from .builder import all_values_of, create_for_arguments, create_for_params, expand, map_value, read_source_values
from .models import (
	ArrayParam,
	CompositeParam,
	ParameterDefinition,
	ParameterInstance,
	ParameterInstances,
	SummaryStyle,
)

__all__ = [
	"ArrayParam",
	"CompositeParam",
	"ParameterDefinition",
	"ParameterInstance",
	"ParameterInstances",
	"SummaryStyle",
	"all_values_of",
	"create_for_arguments",
	"create_for_params",
	"expand",
	"map_value",
	"read_source_values",
]
