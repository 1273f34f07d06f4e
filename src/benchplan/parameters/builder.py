"""Turns parameter and argument declarations into concrete rows of values."""

from __future__ import annotations

import enum
import inspect
import itertools
import types
import typing
from typing import Any, Iterable, Sequence

import structlog

from benchplan.declarations.markers import ParamMode
from benchplan.declarations.members import BenchmarkMember, MemberTable, ParamMember, collect_members
from benchplan.errors import InvalidBenchmarkDeclarationError

from .models import ArrayParam, ParameterDefinition, ParameterInstance, ParameterInstances, SummaryStyle

_logger = structlog.get_logger(__name__)
_MISSING = object()


# ------------------------------------------------------------------
# Named parameters
# ------------------------------------------------------------------


def create_for_params(
    cls: type,
    summary_style: SummaryStyle | None = None,
    *,
    table: MemberTable | None = None,
) -> list[ParameterInstances]:
    """Returns every row of the named-parameter cross product of ``cls``."""

    table = table or collect_members(cls)
    definitions = [_definition_for(cls, member) for member in table.parameters]
    return expand(definitions, summary_style)


def _definition_for(cls: type, member: ParamMember) -> ParameterDefinition:
    field = member.field
    if field.mode is ParamMode.VALUES:
        values = tuple(map_value(value, member.parameter_type) for value in field.values)
    elif field.mode is ParamMode.SOURCE:
        values = tuple(map_value(value, member.parameter_type) for value in read_source_values(cls, field.source))
    else:
        values = all_values_of(member.parameter_type)

    return ParameterDefinition(
        name=member.name,
        is_static=field.is_static,
        values=values,
        is_argument=False,
        parameter_type=member.parameter_type,
        priority=field.priority,
    )


def expand(
    definitions: Iterable[ParameterDefinition],
    summary_style: SummaryStyle | None = None,
) -> list[ParameterInstances]:
    """Cartesian product of the definitions' value sets.

    Definitions are ordered by ascending priority (stable); the last axis varies
    fastest. Definitions without values contribute no axis.
    """

    style = summary_style or SummaryStyle.default()
    axes = [definition for definition in sorted(definitions, key=lambda d: d.priority) if definition.values]
    if not axes:
        return [ParameterInstances.empty()]

    return [
        ParameterInstances(
            tuple(ParameterInstance.create(definition, value, style) for definition, value in zip(axes, combination))
        )
        for combination in itertools.product(*(definition.values for definition in axes))
    ]


# ------------------------------------------------------------------
# Positional arguments
# ------------------------------------------------------------------


def create_for_arguments(
    member: BenchmarkMember,
    cls: type,
    summary_style: SummaryStyle | None = None,
) -> list[ParameterInstances]:
    """Returns the argument rows of one workload, one row per declaration."""

    parameters = member.callback.positional_parameters()
    if not parameters:
        return [ParameterInstances.empty()]

    style = summary_style or SummaryStyle.default()
    hints = member.callback.parameter_types()
    priority = sum(marker.priority for marker in member.arguments)
    if member.arguments_source is not None:
        priority += member.arguments_source.priority

    definitions = [
        ParameterDefinition(
            name=parameter.name,
            is_static=False,
            values=(),
            is_argument=True,
            parameter_type=hints.get(
                parameter.name,
                object if parameter.annotation is inspect.Parameter.empty else parameter.annotation,
            ),
            priority=priority,
        )
        for parameter in parameters
    ]

    defaults = [parameter.default for parameter in parameters]
    rows = [_argument_row(member, definitions, defaults, marker.values, style) for marker in member.arguments]

    if member.arguments_source is not None:
        for element in read_source_values(cls, member.arguments_source.name):
            if len(definitions) > 1 and isinstance(element, (tuple, list)):
                values = tuple(element)
            else:
                values = (element,)
            rows.append(_argument_row(member, definitions, defaults, values, style))

    return rows


def _argument_row(
    member: BenchmarkMember,
    definitions: Sequence[ParameterDefinition],
    defaults: Sequence[Any],
    values: Sequence[Any],
    style: SummaryStyle,
) -> ParameterInstances:
    required = sum(1 for default in defaults if default is inspect.Parameter.empty)
    if not required <= len(values) <= len(definitions):
        expected = str(len(definitions)) if required == len(definitions) else f"{required} to {len(definitions)}"
        raise InvalidBenchmarkDeclarationError(
            f"Benchmark {member.callback.qualified_name} has invalid number of defined arguments: "
            f"{len(values)} instead of {expected}."
        )
    # trailing parameters with defaults keep the row as long as the signature
    values = tuple(values) + tuple(defaults[len(values):])
    return ParameterInstances(
        tuple(
            ParameterInstance.create(definition, map_value(value, definition.parameter_type), style)
            for definition, value in zip(definitions, values)
        )
    )


# ------------------------------------------------------------------
# Value sources
# ------------------------------------------------------------------


def _create_instance(cls: type, source_name: str) -> Any:
    try:
        return cls()
    except Exception as exc:
        raise InvalidBenchmarkDeclarationError(
            f"Unable to create instance of {cls.__name__} to read {source_name}: {exc}"
        ) from exc


def _read_member(cls: type, name: str, member: Any) -> Any:
    # methods first, then properties
    if isinstance(member, (staticmethod, classmethod)):
        return getattr(cls, name)()
    if inspect.isfunction(member):
        return getattr(_create_instance(cls, name), name)()
    if isinstance(member, property):
        if member.fget is None:
            raise InvalidBenchmarkDeclarationError(f"{name} of {cls.__name__} is not readable")
        return getattr(_create_instance(cls, name), name)
    if callable(member) and not isinstance(member, type):
        return member()
    return member


def read_source_values(cls: type, name: str | None) -> tuple[Any, ...]:
    """Values produced by the source member ``name`` of ``cls``.

    An unknown member yields no values; a member that fails while being read
    is a declaration error.
    """

    member = inspect.getattr_static(cls, name, _MISSING) if name else _MISSING
    if member is _MISSING:
        _logger.warning("parameter-source-not-found", type=cls.__name__, source=name)
        return ()

    try:
        raw = _read_member(cls, name, member)
    except InvalidBenchmarkDeclarationError:
        raise
    except Exception as exc:
        raise InvalidBenchmarkDeclarationError(
            f"Unable to read values from {name} declared in {cls.__name__}: {exc}"
        ) from exc

    return _to_tuple(raw)


def _to_tuple(value: Any) -> tuple[Any, ...]:
    if isinstance(value, (str, bytes, bytearray)):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(value)
    return (value,)


# ------------------------------------------------------------------
# Value mapping
# ------------------------------------------------------------------


def optional_inner_type(parameter_type: Any) -> Any | None:
    """``X`` for ``Optional[X]`` / ``X | None``, otherwise ``None``."""

    origin = typing.get_origin(parameter_type)
    if origin is not typing.Union and origin is not types.UnionType:
        return None
    args = typing.get_args(parameter_type)
    if type(None) not in args:
        return None
    rest = [arg for arg in args if arg is not type(None)]
    if len(rest) == 1:
        return rest[0]
    return typing.Union[tuple(rest)]


def _enum_type(parameter_type: Any) -> type[enum.Enum] | None:
    candidate = optional_inner_type(parameter_type) or parameter_type
    if isinstance(candidate, type) and issubclass(candidate, enum.Enum):
        return candidate
    return None


def map_value(value: Any, parameter_type: Any) -> Any:
    """Normalises a raw declared value against the declared parameter type."""

    if value is None:
        return None
    if isinstance(value, list):
        return ArrayParam.from_object(value)

    enum_type = _enum_type(parameter_type)
    if enum_type is not None and not isinstance(value, enum_type):
        try:
            return enum_type(value)
        except ValueError as exc:
            raise InvalidBenchmarkDeclarationError(
                f"{value!r} is not a valid {enum_type.__name__}"
            ) from exc
    return value


def all_values_of(parameter_type: Any) -> tuple[Any, ...]:
    """Every legal value of ``parameter_type`` for ``params_all_values``."""

    if parameter_type is bool:
        return (False, True)

    inner = optional_inner_type(parameter_type)
    if inner is not None:
        return (None, *all_values_of(inner))

    if isinstance(parameter_type, type):
        if issubclass(parameter_type, enum.Flag):
            # combinations of flags are unbounded, use the empty flag
            return (parameter_type(0),)
        if issubclass(parameter_type, enum.Enum):
            return tuple(parameter_type)
        try:
            return (parameter_type(),)
        except Exception as exc:
            raise InvalidBenchmarkDeclarationError(
                f"Unable to create a default value of {parameter_type.__name__}: {exc}"
            ) from exc

    raise InvalidBenchmarkDeclarationError(f"Unable to enumerate the values of {parameter_type!r}")
