"""Runs every benchmark case through one full lifecycle without measuring it."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import threading
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable

import structlog

from benchplan.declarations.markers import ParamField, Role
from benchplan.parameters.models import ParameterInstance, ParameterInstances
from benchplan.running.models import BenchmarkCase, BenchmarkRunInfo

from .awaiting import close_thread_loop, discard, get_result, is_deferred
from .models import ValidationError, ValidationParameters

_logger = structlog.get_logger(__name__)

# one benchmark executes at a time in this process
_EXECUTION_LOCK = threading.Lock()

# asyncio cancellation derives from BaseException
_CALLBACK_ERRORS = (Exception, asyncio.CancelledError, concurrent.futures.CancelledError)


def _display_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def bind_parameter(instance: Any, parameter: ParameterInstance) -> None:
    """Assigns a named parameter value to the instance, or to its class when static."""

    owner = type(instance)
    if not parameter.is_static:
        setattr(instance, parameter.name, parameter.value)
        return
    member = inspect.getattr_static(owner, parameter.name, None)
    if isinstance(member, ParamField):
        member.set_static(parameter.value)
    else:
        setattr(owner, parameter.name, parameter.value)


@dataclass(slots=True)
class _Executor:
    instance: Any
    case: BenchmarkCase

    def invoke(self) -> Any:
        arguments = [argument.value for argument in self.case.parameters.arguments]
        result = self.case.descriptor.workload.invoke(self.instance, *arguments)
        return get_result(result)


def _group_by_type(cases: Iterable[BenchmarkCase]) -> dict[type, list[BenchmarkCase]]:
    groups: dict[type, list[BenchmarkCase]] = {}
    for case in cases:
        groups.setdefault(case.descriptor.type, []).append(case)
    return groups


def _group_by_parameters(executors: Iterable[_Executor]) -> list[tuple[ParameterInstances, list[_Executor]]]:
    groups: list[tuple[ParameterInstances, list[_Executor]]] = []
    for executor in executors:
        for parameters, members in groups:
            if parameters == executor.case.parameters:
                members.append(executor)
                break
        else:
            groups.append((executor.case.parameters, [executor]))
    return groups


class ExecutionValidator:
    """Executes setup, workload and cleanup of every case once.

    Failures never propagate: each one becomes a :class:`ValidationError`,
    critical when the validator fails on error.
    """

    FAIL_ON_ERROR: ClassVar["ExecutionValidator"]
    DONT_FAIL_ON_ERROR: ClassVar["ExecutionValidator"]

    def __init__(self, fail_on_error: bool) -> None:
        self.treats_warnings_as_errors = fail_on_error

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fail_on_error={self.treats_warnings_as_errors})"

    def validate(self, source: ValidationParameters | BenchmarkRunInfo) -> list[ValidationError]:
        if isinstance(source, BenchmarkRunInfo):
            source = ValidationParameters.from_run_info(source)

        errors: list[ValidationError] = []
        try:
            for benchmark_type, cases in _group_by_type(source.benchmarks).items():
                self._validate_type(benchmark_type, cases, errors)
        finally:
            close_thread_loop()

        _logger.info(
            "validation-finished",
            validator=type(self).__name__,
            cases=len(source.benchmarks),
            errors=len(errors),
            critical=sum(1 for error in errors if error.is_critical),
        )
        return errors

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _validate_type(self, benchmark_type: type, cases: list[BenchmarkCase], errors: list[ValidationError]) -> None:
        executors: list[_Executor] = []
        abandoned: list[_Executor] = []

        try:
            for case in cases:
                try:
                    instance = benchmark_type()
                except Exception as exc:
                    message = _display_message(exc)
                    self._add(errors, f"Unable to create instance of {benchmark_type.__name__}, exception was: {message}")
                    continue

                executor = _Executor(instance, case)
                if not self._fill_parameters(executor, errors):
                    abandoned.append(executor)
                    continue
                if not self._call_lifecycle(executor, Role.GLOBAL_SETUP, errors):
                    abandoned.append(executor)
                    continue
                if not self._call_lifecycle(executor, Role.ITERATION_SETUP, errors):
                    abandoned.append(executor)
                    continue
                executors.append(executor)

            with _EXECUTION_LOCK:
                self._execute(executors, errors)
        finally:
            for executor in executors:
                self._call_lifecycle(executor, Role.ITERATION_CLEANUP, errors)
                self._call_lifecycle(executor, Role.GLOBAL_CLEANUP, errors)
            for executor in abandoned:
                self._call_lifecycle(executor, Role.GLOBAL_CLEANUP, errors)

    def _execute(self, executors: list[_Executor], errors: list[ValidationError]) -> None:
        for executor in executors:
            self._invoke(executor, errors)

    def _invoke(self, executor: _Executor, errors: list[ValidationError]) -> tuple[bool, Any]:
        try:
            return True, executor.invoke()
        except _CALLBACK_ERRORS as exc:
            self._add(
                errors,
                f"Failed to execute benchmark '{executor.case.display_info}', "
                f"exception was: '{_display_message(exc)}'",
                executor.case,
            )
            return False, None

    def _fill_parameters(self, executor: _Executor, errors: list[ValidationError]) -> bool:
        succeeded = True
        for parameter in executor.case.parameters.parameters:
            try:
                bind_parameter(executor.instance, parameter)
            except Exception as exc:
                succeeded = False
                self._add(errors, _display_message(exc), executor.case)
        return succeeded

    def _call_lifecycle(self, executor: _Executor, role: Role, errors: list[ValidationError]) -> bool:
        callback = getattr(executor.case.descriptor, role.value)
        if callback is None:
            return True

        type_name = executor.case.descriptor.type.__name__
        if callback.kind.is_deferred and not role.may_be_deferred:
            self._add(errors, f"[{role.value}] cannot be async. Error in type {type_name}", executor.case)
            return False

        try:
            result = callback.invoke(executor.instance)
            if is_deferred(result):
                if not role.may_be_deferred:
                    discard(result)
                    self._add(errors, f"[{role.value}] cannot be async. Error in type {type_name}", executor.case)
                    return False
                get_result(result)
        except _CALLBACK_ERRORS as exc:
            self._add(
                errors,
                f"Failed to execute [{role.value}] for {type_name}, exception was {_display_message(exc)}",
                executor.case,
            )
            return False
        return True

    def _add(self, errors: list[ValidationError], message: str, case: BenchmarkCase | None = None) -> None:
        error = ValidationError(is_critical=self.treats_warnings_as_errors, message=message, benchmark_case=case)
        errors.append(error)
        _logger.warning(
            "validation-error",
            message=message,
            critical=error.is_critical,
            case=case.display_info if case is not None else None,
        )


class ReturnValueValidator(ExecutionValidator):
    """Checks that every workload of a parameter row returns the same value.

    Deferred workloads are compared on their resolved value. Workloads
    declared to return nothing are left out of the comparison.
    """

    FAIL_ON_ERROR: ClassVar["ReturnValueValidator"]
    DONT_FAIL_ON_ERROR: ClassVar["ReturnValueValidator"]

    def _execute(self, executors: list[_Executor], errors: list[ValidationError]) -> None:
        for parameters, group in _group_by_parameters(executors):
            results: list[tuple[_Executor, Any]] = []
            failed = False
            seen: list[Any] = []
            for executor in group:
                workload = executor.case.descriptor.workload
                # one run per workload, whatever the number of jobs
                if workload in seen:
                    continue
                seen.append(workload)

                succeeded, value = self._invoke(executor, errors)
                if not succeeded:
                    failed = True
                elif not workload.returns_nothing:
                    results.append((executor, value))

            if failed or not results:
                continue
            first = results[0][1]
            if any(value != first for _, value in results[1:]):
                self._report_inconsistent(parameters, results, errors)

    def _report_inconsistent(
        self,
        parameters: ParameterInstances,
        results: list[tuple[_Executor, Any]],
        errors: list[ValidationError],
    ) -> None:
        type_name = results[0][0].case.descriptor.type.__name__
        values = ", ".join(
            f"{executor.case.descriptor.workload_display_info}: {value!r}" for executor, value in results
        )
        message = f"Inconsistent benchmark return values in {type_name}: {values}"
        if parameters.count:
            message += f" [{parameters.display_info}]"
        self._add(errors, message)


ExecutionValidator.FAIL_ON_ERROR = ExecutionValidator(True)
ExecutionValidator.DONT_FAIL_ON_ERROR = ExecutionValidator(False)

ReturnValueValidator.FAIL_ON_ERROR = ReturnValueValidator(True)
ReturnValueValidator.DONT_FAIL_ON_ERROR = ReturnValueValidator(False)
