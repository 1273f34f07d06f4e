"""Jobs: named bundles of execution settings."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

DEFAULT_JOB_ID = "Default"
_META_FIELDS = frozenset({"id", "is_mutator"})


class OutlierMode(str, Enum):
    """Which outliers the measurement engine removes."""

    DONT_REMOVE = "dont_remove"
    REMOVE_UPPER = "remove_upper"
    REMOVE_LOWER = "remove_lower"
    REMOVE_ALL = "remove_all"


@dataclass(frozen=True, slots=True)
class Job:
    """Execution settings for a benchmark case.

    Every characteristic defaults to ``None`` ("not set"). A mutator job is never
    run on its own; its set characteristics are applied on top of every other job.
    """

    id: str | None = None
    runtime: str | None = None
    platform: str | None = None
    toolchain: str | None = None
    launch_count: int | None = None
    warmup_count: int | None = None
    iteration_count: int | None = None
    invocation_count: int | None = None
    unroll_factor: int | None = None
    min_iteration_count: int | None = None
    max_iteration_count: int | None = None
    outlier_mode: OutlierMode | None = None
    max_relative_error: float | None = None
    is_mutator: bool = False

    @classmethod
    def default(cls) -> "Job":
        return cls()

    @classmethod
    def dry(cls) -> "Job":
        return cls(id="Dry", launch_count=1, warmup_count=1, iteration_count=1, invocation_count=1, unroll_factor=1)

    @classmethod
    def in_process(cls) -> "Job":
        return cls(id="InProcess", toolchain="in-process")

    @classmethod
    def mutator(cls, **characteristics: Any) -> "Job":
        return cls(is_mutator=True, **characteristics)

    def characteristics(self) -> dict[str, Any]:
        """Characteristics explicitly set on this job, in field order."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if item.name not in _META_FIELDS and getattr(self, item.name) is not None
        }

    def with_(self, **characteristics: Any) -> "Job":
        return replace(self, **characteristics)

    def apply(self, mutator: "Job") -> "Job":
        """Copy of this job with the mutator's set characteristics on top.

        Neither the mutator flag nor the id are copied.
        """

        return replace(self, **mutator.characteristics())

    @property
    def resolved_id(self) -> str:
        if self.id:
            return self.id
        characteristics = self.characteristics()
        if not characteristics:
            return DEFAULT_JOB_ID
        text = ";".join(f"{key}={_stable_text(value)}" for key, value in sorted(characteristics.items()))
        return "Job-" + hashlib.sha1(text.encode("utf-8")).hexdigest()[:6].upper()

    @property
    def display_info(self) -> str:
        characteristics = self.characteristics()
        if not characteristics:
            return self.resolved_id
        details = ", ".join(f"{key}={_stable_text(value)}" for key, value in characteristics.items())
        return f"{self.resolved_id}({details})"


def _stable_text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
