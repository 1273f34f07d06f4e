"""Environment-driven settings for embedding the pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .logging import parse_level

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class RunnerSettings:
    """Settings shared by the CLI and embedding code.

    Environment variables:
    - `BENCHPLAN_FAIL_ON_ERROR`: treat validation errors as critical (default: on)
    - `BENCHPLAN_MAX_PARAM_WIDTH`: max width of parameter display text (default: 20)
    - `BENCHPLAN_LOG_LEVEL`: log level name or number (default: info)
    """

    fail_on_error: bool = True
    max_parameter_column_width: int = 20
    log_level: int = logging.INFO

    @classmethod
    def default(cls) -> "RunnerSettings":
        return cls()

    @classmethod
    def from_env(cls) -> "RunnerSettings":
        defaults = cls.default()
        return cls(
            fail_on_error=_env_flag("BENCHPLAN_FAIL_ON_ERROR", defaults.fail_on_error),
            max_parameter_column_width=_env_int(
                "BENCHPLAN_MAX_PARAM_WIDTH", defaults.max_parameter_column_width
            ),
            log_level=parse_level(os.getenv("BENCHPLAN_LOG_LEVEL"), defaults.log_level),
        )

    def base_config(self):
        """Builds the caller-side base configuration for these settings."""

        from benchplan.configs import BenchmarkConfig
        from benchplan.parameters import SummaryStyle

        return BenchmarkConfig.default().with_summary_style(
            SummaryStyle(max_parameter_column_width=self.max_parameter_column_width)
        )

    def validator(self):
        from benchplan.validators import ExecutionValidator

        return ExecutionValidator.FAIL_ON_ERROR if self.fail_on_error else ExecutionValidator.DONT_FAIL_ON_ERROR

    def validators(self, *, check_return_values: bool = False) -> list:
        """Validators to run, in order; the return value check is opt-in."""

        from benchplan.validators import ReturnValueValidator

        validators = [self.validator()]
        if check_return_values:
            validators.append(
                ReturnValueValidator.FAIL_ON_ERROR if self.fail_on_error else ReturnValueValidator.DONT_FAIL_ON_ERROR
            )
        return validators
