"""Validation results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from benchplan.errors import ValidationFailedError

if TYPE_CHECKING:
    from benchplan.configs.config import ImmutableConfig
    from benchplan.running.models import BenchmarkCase, BenchmarkRunInfo


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One problem found by a validator.

    ``is_critical`` errors abort the run; the others are reported only.
    """

    is_critical: bool
    message: str
    benchmark_case: "BenchmarkCase | None" = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ValidationParameters:
    benchmarks: tuple["BenchmarkCase", ...]
    config: "ImmutableConfig | None" = None

    @classmethod
    def from_run_info(cls, run_info: "BenchmarkRunInfo") -> "ValidationParameters":
        return cls(benchmarks=tuple(run_info.benchmark_cases), config=run_info.config)

    @classmethod
    def from_run_infos(cls, run_infos: Iterable["BenchmarkRunInfo"]) -> "ValidationParameters":
        cases: list["BenchmarkCase"] = []
        for run_info in run_infos:
            cases.extend(run_info.benchmark_cases)
        return cls(benchmarks=tuple(cases))


def has_critical(errors: Iterable[ValidationError]) -> bool:
    return any(error.is_critical for error in errors)


def raise_for_errors(errors: Sequence[ValidationError]) -> None:
    """Raises :class:`ValidationFailedError` when any error is critical."""

    critical = [error for error in errors if error.is_critical]
    if critical:
        raise ValidationFailedError(critical)
