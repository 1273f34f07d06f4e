"""Declarative markers: decorators for workloads, lifecycle callbacks and arguments,
plus the class-level parameter fields.

Decorators only record a marker on the decorated object; nothing is resolved
until :func:`benchplan.declarations.members.collect_members` builds the member
table for a class.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, TypeVar

if TYPE_CHECKING:
    from benchplan.configs.config import BenchmarkConfig

MARKERS_ATTR = "__benchplan_markers__"
MODULE_CONFIG_ATTR = "__benchplan_config__"
MODULE_CATEGORIES_ATTR = "__benchplan_categories__"

T = TypeVar("T")


class Role(str, Enum):
    """Role of a lifecycle callback."""

    GLOBAL_SETUP = "global_setup"
    GLOBAL_CLEANUP = "global_cleanup"
    ITERATION_SETUP = "iteration_setup"
    ITERATION_CLEANUP = "iteration_cleanup"

    @property
    def may_be_deferred(self) -> bool:
        return self in (Role.GLOBAL_SETUP, Role.GLOBAL_CLEANUP)


@dataclass(frozen=True, slots=True)
class BenchmarkMarker:
    description: str | None = None
    baseline: bool = False
    operations_per_invoke: int = 1


@dataclass(frozen=True, slots=True)
class LifecycleMarker:
    role: Role
    targets: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ArgumentsMarker:
    values: tuple[Any, ...]
    priority: int = 0


@dataclass(frozen=True, slots=True)
class ArgumentsSourceMarker:
    name: str
    priority: int = 0


@dataclass(frozen=True, slots=True)
class CategoryMarker:
    categories: tuple[str, ...]


@dataclass(frozen=True, slots=True, eq=False)
class ConfigMarker:
    """A configuration source attached to a class or a workload."""

    config: "BenchmarkConfig"


def _marker_host(target: Any) -> Any:
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def attach(target: T, marker: Any) -> T:
    """Records ``marker`` on ``target`` keeping source order of stacked decorators."""

    host = _marker_host(target)
    # own __dict__ only: a subclass must not pick up its base's class markers twice
    existing = getattr(host, "__dict__", {}).get(MARKERS_ATTR, ())
    # decorators apply bottom-up, prepend so the topmost marker comes first
    setattr(host, MARKERS_ATTR, (marker, *existing))
    return target


def own_markers(target: Any) -> tuple[Any, ...]:
    """Markers attached directly to ``target`` (not inherited)."""

    host = _marker_host(target)
    if isinstance(host, property):
        host = host.fget
    return tuple(getattr(host, "__dict__", {}).get(MARKERS_ATTR, ()))


def _normalize_targets(targets: str | Iterable[str] | None) -> tuple[str, ...]:
    if targets is None:
        return ()
    if isinstance(targets, str):
        return (targets,)
    return tuple(targets)


def benchmark(
    func: Callable[..., Any] | None = None,
    *,
    description: str | None = None,
    baseline: bool = False,
    operations_per_invoke: int = 1,
) -> Any:
    """Marks a method as a benchmark workload.

    Usable bare (``@benchmark``) or with options (``@benchmark(baseline=True)``).
    """

    if operations_per_invoke < 1:
        raise ValueError("operations_per_invoke must be positive")
    marker = BenchmarkMarker(
        description=description,
        baseline=baseline,
        operations_per_invoke=operations_per_invoke,
    )

    def decorate(target: T) -> T:
        return attach(target, marker)

    if func is not None:
        return decorate(func)
    return decorate


def _lifecycle(role: Role) -> Callable[..., Any]:
    def decorator(
        func: Callable[..., Any] | None = None,
        *,
        targets: str | Iterable[str] | None = None,
    ) -> Any:
        marker = LifecycleMarker(role=role, targets=_normalize_targets(targets))

        def decorate(target: T) -> T:
            return attach(target, marker)

        if func is not None:
            return decorate(func)
        return decorate

    decorator.__name__ = role.value
    decorator.__qualname__ = role.value
    decorator.__doc__ = (
        f"Marks a method as the ``{role.value}`` callback.\n\n"
        "With ``targets`` it only governs the named workloads."
    )
    return decorator


global_setup = _lifecycle(Role.GLOBAL_SETUP)
global_cleanup = _lifecycle(Role.GLOBAL_CLEANUP)
iteration_setup = _lifecycle(Role.ITERATION_SETUP)
iteration_cleanup = _lifecycle(Role.ITERATION_CLEANUP)


def arguments(*values: Any, priority: int = 0) -> Callable[[T], T]:
    """Adds one row of positional argument values to a workload."""

    marker = ArgumentsMarker(values=tuple(values), priority=priority)
    return lambda target: attach(target, marker)


def arguments_source(name: str, *, priority: int = 0) -> Callable[[T], T]:
    """Reads argument rows from the method or property called ``name``."""

    marker = ArgumentsSourceMarker(name=name, priority=priority)
    return lambda target: attach(target, marker)


def category(*names: str) -> Callable[[T], T]:
    """Tags a workload or a whole class with categories."""

    marker = CategoryMarker(categories=tuple(names))
    return lambda target: attach(target, marker)


# ---------------------------------------------------------------------------
# Parameter fields
# ---------------------------------------------------------------------------


class ParamMode(str, Enum):
    VALUES = "values"
    SOURCE = "source"
    ALL_VALUES = "all_values"


_UNSET = object()


class ParamField:
    """Class-level descriptor declaring a benchmark parameter.

    Instance fields keep their bound value in the instance ``__dict__``; static
    fields keep a single value on the descriptor, shared by every instance.
    """

    def __init__(
        self,
        mode: ParamMode,
        *,
        values: tuple[Any, ...] = (),
        source: str | None = None,
        priority: int = 0,
        static: bool = False,
        default: Any = None,
    ) -> None:
        self.mode = mode
        self.values = values
        self.source = source
        self.priority = priority
        self.is_static = static
        self.default = default
        self.name: str | None = None
        self.owner: type | None = None
        self._static_value: Any = _UNSET

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self.is_static:
            return self.default if self._static_value is _UNSET else self._static_value
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.is_static:
            self._static_value = value
            return
        instance.__dict__[self.name] = value

    def set_static(self, value: Any) -> None:
        self._static_value = value

    def __repr__(self) -> str:
        return f"ParamField({self.name!r}, mode={self.mode.value})"


def params(*values: Any, priority: int = 0, static: bool = False) -> Any:
    """Declares a parameter with an inline list of values."""

    return ParamField(ParamMode.VALUES, values=tuple(values), priority=priority, static=static)


def params_source(name: str, *, priority: int = 0, static: bool = False) -> Any:
    """Declares a parameter whose values come from the member called ``name``."""

    return ParamField(ParamMode.SOURCE, source=name, priority=priority, static=static)


def params_all_values(*, priority: int = 0, static: bool = False) -> Any:
    """Declares a parameter taking every value of its annotated type."""

    return ParamField(ParamMode.ALL_VALUES, priority=priority, static=static)
