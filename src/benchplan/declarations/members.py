"""Registration table built from a decorated class.

``collect_members`` walks the class MRO once and turns the raw markers into a
typed :class:`MemberTable`. Everything downstream (parameter matrix, target
resolution, configuration) reads this table instead of probing the class.
"""

from __future__ import annotations

import asyncio
import collections.abc
import concurrent.futures
import inspect
import sys
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

from .markers import (
    MODULE_CATEGORIES_ATTR,
    MODULE_CONFIG_ATTR,
    ArgumentsMarker,
    ArgumentsSourceMarker,
    BenchmarkMarker,
    CategoryMarker,
    ConfigMarker,
    LifecycleMarker,
    ParamField,
    Role,
    own_markers,
)

_DEFERRED_ORIGINS = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
    asyncio.Task,
    concurrent.futures.Future,
)


class CallKind(str, Enum):
    """How a callback hands back its result."""

    SYNCHRONOUS = "synchronous"
    DEFERRED_VOID = "deferred_void"
    DEFERRED_VALUE = "deferred_value"

    @property
    def is_deferred(self) -> bool:
        return self is not CallKind.SYNCHRONOUS


def _unwrap_function(member: Any) -> Any:
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return inspect.unwrap(member) if callable(member) else member


def _return_annotation(func: Any) -> Any:
    try:
        hints = typing.get_type_hints(func)
    except Exception:
        # unresolvable forward references: fall back to the raw annotation
        hints = dict(getattr(func, "__annotations__", {}) or {})
    return hints.get("return", inspect.Signature.empty)


def _is_none_annotation(annotation: Any) -> bool:
    return annotation is None or annotation is type(None) or annotation == "None"


def call_kind_of(func: Any) -> CallKind:
    """Classifies a callback from its declaration."""

    raw = _unwrap_function(func)
    annotation = _return_annotation(raw)
    if inspect.iscoroutinefunction(raw):
        return CallKind.DEFERRED_VOID if _is_none_annotation(annotation) else CallKind.DEFERRED_VALUE

    origin = typing.get_origin(annotation) or annotation
    if isinstance(origin, type) and issubclass(origin, _DEFERRED_ORIGINS):
        args = typing.get_args(annotation)
        # Coroutine[Y, S, R] carries its result last, the others first
        result = args[-1] if args else inspect.Signature.empty
        return CallKind.DEFERRED_VOID if _is_none_annotation(result) else CallKind.DEFERRED_VALUE
    return CallKind.SYNCHRONOUS


@dataclass(frozen=True, slots=True)
class Callback:
    """Handle to a method of a benchmark class."""

    name: str
    function: Callable[..., Any]
    declaring_type: type
    kind: CallKind = CallKind.SYNCHRONOUS

    @classmethod
    def create(cls, name: str, member: Any, declaring_type: type) -> "Callback":
        return cls(
            name=name,
            function=_unwrap_function(member),
            declaring_type=declaring_type,
            kind=call_kind_of(member),
        )

    def bind(self, instance: Any) -> Callable[..., Any]:
        return getattr(instance, self.name)

    def invoke(self, instance: Any, *args: Any) -> Any:
        return self.bind(instance)(*args)

    @property
    def returns_nothing(self) -> bool:
        """True when the declaration says no value comes back."""

        if self.kind is CallKind.DEFERRED_VOID:
            return True
        return self.kind is CallKind.SYNCHRONOUS and _is_none_annotation(_return_annotation(self.function))

    @property
    def qualified_name(self) -> str:
        return f"{self.declaring_type.__name__}.{self.name}"

    def positional_parameters(self) -> list[inspect.Parameter]:
        """Parameters filled from argument rows (``self`` excluded)."""

        signature = inspect.signature(self.function)
        result = [
            parameter
            for parameter in signature.parameters.values()
            if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        ]
        return result[1:] if result and result[0].name in ("self", "cls") else result

    def parameter_types(self) -> dict[str, Any]:
        try:
            return typing.get_type_hints(self.function)
        except Exception:
            return {}


@dataclass(frozen=True, slots=True)
class BenchmarkMember:
    callback: Callback
    marker: BenchmarkMarker
    arguments: tuple[ArgumentsMarker, ...] = ()
    arguments_source: ArgumentsSourceMarker | None = None
    categories: tuple[str, ...] = ()
    configs: tuple[ConfigMarker, ...] = ()

    @property
    def name(self) -> str:
        return self.callback.name

    @property
    def source_position(self) -> tuple[str, int]:
        code = getattr(self.callback.function, "__code__", None)
        if code is None:
            return ("", 0)
        return (code.co_filename, code.co_firstlineno)


@dataclass(frozen=True, slots=True)
class LifecycleEntry:
    role: Role
    targets: tuple[str, ...]
    callback: Callback

    def matches(self, workload_name: str) -> bool:
        return not self.targets or workload_name in self.targets


@dataclass(frozen=True, slots=True)
class ParamMember:
    name: str
    field: ParamField
    parameter_type: Any
    declaring_type: type


@dataclass(frozen=True, slots=True)
class MemberTable:
    """Everything the pipeline needs to know about one benchmark class."""

    type: type
    benchmarks: tuple[BenchmarkMember, ...]
    lifecycle: tuple[LifecycleEntry, ...]
    parameters: tuple[ParamMember, ...]
    type_configs: tuple[ConfigMarker, ...]
    type_categories: tuple[str, ...]
    module_configs: tuple[Any, ...]
    module_categories: tuple[str, ...]

    def candidates(self, role: Role) -> tuple[LifecycleEntry, ...]:
        return tuple(entry for entry in self.lifecycle if entry.role is role)

    def find_benchmark(self, name: str) -> BenchmarkMember | None:
        for member in self.benchmarks:
            if member.name == name:
                return member
        return None


def iter_class_members(cls: type) -> Iterator[tuple[str, list[tuple[type, Any]]]]:
    """Yields ``(name, [(owner, value), ...])`` with the most derived definition first.

    Names come in declaration order, base classes first.
    """

    order: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name in vars(klass):
            order.setdefault(name, None)

    for name in order:
        definitions = [(klass, vars(klass)[name]) for klass in cls.__mro__ if name in vars(klass)]
        yield name, definitions


def _class_type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except Exception:
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}) or {})
        return hints


def _merge_markers(definitions: list[tuple[type, Any]]) -> list[Any]:
    merged: list[Any] = []
    seen: set[int] = set()
    for _, value in definitions:
        for marker in own_markers(value):
            if id(marker) not in seen:
                seen.add(id(marker))
                merged.append(marker)
    return merged


def _is_method(value: Any) -> bool:
    return inspect.isfunction(_unwrap_function(value))


def _module_values(cls: type, attr: str) -> tuple[Any, ...]:
    module = sys.modules.get(cls.__module__)
    value = getattr(module, attr, None) if module is not None else None
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def collect_members(cls: type) -> MemberTable:
    """Builds the member table of ``cls``, inherited members included.

    A derived override of a decorated base method inherits the base markers and
    becomes the callback.
    """

    hints = _class_type_hints(cls)
    benchmarks: list[BenchmarkMember] = []
    lifecycle: list[LifecycleEntry] = []
    parameters: list[ParamMember] = []

    for name, definitions in iter_class_members(cls):
        owner, value = definitions[0]

        if isinstance(value, ParamField):
            parameter_type = hints.get(name)
            if parameter_type is None:
                parameter_type = type(value.values[0]) if value.values and value.values[0] is not None else object
            parameters.append(ParamMember(name=name, field=value, parameter_type=parameter_type, declaring_type=owner))
            continue

        if not _is_method(value):
            continue

        markers = _merge_markers(definitions)
        if not markers:
            continue
        callback = Callback.create(name, value, owner)

        for marker in markers:
            if isinstance(marker, LifecycleMarker):
                lifecycle.append(LifecycleEntry(role=marker.role, targets=marker.targets, callback=callback))

        benchmark_marker = next((m for m in markers if isinstance(m, BenchmarkMarker)), None)
        if benchmark_marker is None:
            continue
        benchmarks.append(
            BenchmarkMember(
                callback=callback,
                marker=benchmark_marker,
                arguments=tuple(m for m in markers if isinstance(m, ArgumentsMarker)),
                arguments_source=next((m for m in markers if isinstance(m, ArgumentsSourceMarker)), None),
                categories=tuple(c for m in markers if isinstance(m, CategoryMarker) for c in m.categories),
                configs=tuple(m for m in markers if isinstance(m, ConfigMarker)),
            )
        )

    benchmarks.sort(key=lambda member: member.source_position)

    type_markers = [marker for klass in reversed(cls.__mro__) for marker in own_markers(klass)]

    return MemberTable(
        type=cls,
        benchmarks=tuple(benchmarks),
        lifecycle=tuple(lifecycle),
        parameters=tuple(parameters),
        type_configs=tuple(m for m in type_markers if isinstance(m, ConfigMarker)),
        type_categories=tuple(c for m in type_markers if isinstance(m, CategoryMarker) for c in m.categories),
        module_configs=_module_values(cls, MODULE_CONFIG_ATTR),
        module_categories=tuple(str(c) for c in _module_values(cls, MODULE_CATEGORIES_ATTR)),
    )
