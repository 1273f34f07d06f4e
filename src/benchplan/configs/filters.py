"""Predicates deciding which benchmark cases are kept."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from benchplan.running.models import BenchmarkCase


class Filter(Protocol):
    """Minimal interface of a case filter."""

    def predicate(self, case: "BenchmarkCase") -> bool:
        """Returns ``True`` when the case should be kept."""


@dataclass(frozen=True, slots=True)
class SimpleFilter:
    """Wraps a plain callable."""

    function: Callable[["BenchmarkCase"], bool]

    def predicate(self, case: "BenchmarkCase") -> bool:
        return bool(self.function(case))


@dataclass(frozen=True, slots=True)
class GlobFilter:
    """Keeps cases whose ``module.Type.method`` or ``Type.method`` matches a pattern."""

    patterns: tuple[str, ...]

    def predicate(self, case: "BenchmarkCase") -> bool:
        descriptor = case.descriptor
        short = f"{descriptor.type.__name__}.{descriptor.workload.name}"
        full = f"{descriptor.type.__module__}.{short}"
        return any(fnmatchcase(full, pattern) or fnmatchcase(short, pattern) for pattern in self.patterns)


def _lowered(categories: tuple[str, ...]) -> set[str]:
    return {category.lower() for category in categories}


@dataclass(frozen=True, slots=True)
class AnyCategoriesFilter:
    categories: tuple[str, ...]

    def predicate(self, case: "BenchmarkCase") -> bool:
        return bool(_lowered(case.descriptor.categories) & _lowered(self.categories))


@dataclass(frozen=True, slots=True)
class AllCategoriesFilter:
    categories: tuple[str, ...]

    def predicate(self, case: "BenchmarkCase") -> bool:
        return _lowered(self.categories) <= _lowered(case.descriptor.categories)
