"""Parameter definitions, concrete values and their display form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Protocol, runtime_checkable

NULL_DISPLAY = "?"
_ELLIPSIS = "(...)"


@dataclass(frozen=True, slots=True)
class SummaryStyle:
    """Display options that influence how parameter values are rendered."""

    max_parameter_column_width: int = 20

    @classmethod
    def default(cls) -> "SummaryStyle":
        return cls()


@runtime_checkable
class CompositeParam(Protocol):
    """Wrapper for values whose natural form has no stable display or equality."""

    @property
    def value(self) -> Any:
        """The value handed to the benchmark."""

    @property
    def display_text(self) -> str:
        """Text shown in place of the value."""


def _element_type_name(items: tuple[Any, ...]) -> str:
    types = {type(item.value if isinstance(item, ArrayParam) else item) for item in items}
    if len(types) == 1:
        return next(iter(types)).__name__
    return "object"


@dataclass(frozen=True, slots=True)
class ArrayParam:
    """Opaque composite parameter for ``list`` values (``int[3]``)."""

    items: tuple[Any, ...]

    @classmethod
    def from_object(cls, value: list[Any]) -> "ArrayParam":
        return cls(tuple(cls.from_object(item) if isinstance(item, list) else item for item in value))

    @property
    def value(self) -> list[Any]:
        # fresh list per call so a benchmark mutating it cannot leak into other cases
        return [item.value if isinstance(item, ArrayParam) else item for item in self.items]

    @property
    def display_text(self) -> str:
        if not self.items:
            return "Array[0]"
        return f"{_element_type_name(self.items)}[{len(self.items)}]"


def trim_display(text: str, max_width: int) -> str:
    """Shortens ``text`` to roughly ``max_width`` characters, keeping both ends."""

    if max_width <= 0 or len(text) <= max_width:
        return text
    keep = max((max_width - len(_ELLIPSIS)) // 2, 1)
    return text[:keep] + _ELLIPSIS + text[-keep:]


def format_value(value: Any) -> str:
    if value is None:
        return NULL_DISPLAY
    if isinstance(value, CompositeParam):
        return value.display_text
    if isinstance(value, Enum):
        return value.name if value.name is not None else str(value.value)
    if isinstance(value, type):
        return value.__name__
    return str(value)


@dataclass(frozen=True, slots=True)
class ParameterDefinition:
    """A named parameter or positional argument and its legal values.

    An empty ``values`` tuple means the value is supplied externally.
    """

    name: str
    is_static: bool
    values: tuple[Any, ...]
    is_argument: bool
    parameter_type: Any
    priority: int = 0


@dataclass(frozen=True, slots=True, eq=False)
class ParameterInstance:
    """One concrete value bound to a :class:`ParameterDefinition`."""

    definition: ParameterDefinition
    raw_value: Any
    display_text: str

    @classmethod
    def create(
        cls,
        definition: ParameterDefinition,
        value: Any,
        summary_style: SummaryStyle | None = None,
    ) -> "ParameterInstance":
        style = summary_style or SummaryStyle.default()
        text = trim_display(format_value(value), style.max_parameter_column_width)
        return cls(definition=definition, raw_value=value, display_text=text)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def is_static(self) -> bool:
        return self.definition.is_static

    @property
    def is_argument(self) -> bool:
        return self.definition.is_argument

    @property
    def priority(self) -> int:
        return self.definition.priority

    @property
    def value(self) -> Any:
        if isinstance(self.raw_value, CompositeParam):
            return self.raw_value.value
        return self.raw_value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterInstance):
            return NotImplemented
        if self.name != other.name or self.is_argument != other.is_argument:
            return False
        # 1 == 1.0 == True in Python, but they are different parameter values
        if type(self.raw_value) is not type(other.raw_value):
            return False
        return bool(self.raw_value == other.raw_value)

    def __hash__(self) -> int:
        return hash((self.name, self.is_argument, type(self.raw_value).__name__, self.display_text))

    def __repr__(self) -> str:
        return f"ParameterInstance({self.name}={self.display_text})"


@dataclass(frozen=True, slots=True)
class ParameterInstances:
    """One row of the parameter cross product: named parameters, then arguments."""

    items: tuple[ParameterInstance, ...] = ()

    @classmethod
    def empty(cls) -> "ParameterInstances":
        return cls(())

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ParameterInstance]:
        return iter(self.items)

    def __getitem__(self, name: str) -> Any:
        for item in self.items:
            if item.name == name:
                return item.value
        raise KeyError(name)

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def parameters(self) -> tuple[ParameterInstance, ...]:
        return tuple(item for item in self.items if not item.is_argument)

    @property
    def arguments(self) -> tuple[ParameterInstance, ...]:
        return tuple(item for item in self.items if item.is_argument)

    @property
    def display_info(self) -> str:
        return ", ".join(f"{item.name}={item.display_text}" for item in self.items)

    @property
    def value_info(self) -> str:
        return "[" + self.display_info + "]" if self.items else "Empty"

    def concat(self, other: "ParameterInstances") -> "ParameterInstances":
        return ParameterInstances(self.items + other.items)
