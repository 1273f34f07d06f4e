"""Command line interface: list or validate the benchmarks of a module."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from argparse import ArgumentParser, BooleanOptionalAction, Namespace
from dataclasses import replace
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from benchplan.configs import GlobFilter
from benchplan.errors import InvalidBenchmarkDeclarationError
from benchplan.running import BenchmarkRunInfo, module_to_benchmarks, types_to_benchmarks
from benchplan.shared import RunnerSettings, configure_logging, write_error_report
from benchplan.validators import ValidationParameters, has_critical


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="benchplan",
        description="Assemble the benchmark cases declared in a module and run each of them once.",
    )
    parser.add_argument(
        "module",
        help="Importable module name or path to a .py file",
    )
    parser.add_argument(
        "--type",
        dest="type_names",
        action="append",
        metavar="NAME",
        help="Only this benchmark class (can be provided multiple times)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the assembled cases instead of validating them",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        metavar="GLOB",
        help="Keep cases matching Type.method or module.Type.method (can be provided multiple times)",
    )
    parser.add_argument(
        "--fail-on-error",
        action=BooleanOptionalAction,
        default=None,
        help="Treat validation errors as critical (default: BENCHPLAN_FAIL_ON_ERROR or on)",
    )
    parser.add_argument(
        "--check-return-values",
        action="store_true",
        help="Also check that the workloads of each parameter row return the same value",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logs",
    )
    return parser


def load_module(target: str) -> ModuleType:
    """Imports ``target`` by module name, or from a file when it names a ``.py`` file."""

    path = Path(target)
    if path.suffix != ".py":
        return importlib.import_module(target)

    if not path.is_file():
        raise FileNotFoundError(f"Benchmark file not found: {path}")
    name = path.stem
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load benchmarks from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def _find_type(module: ModuleType, name: str) -> type:
    value = getattr(module, name, None)
    if not isinstance(value, type):
        raise InvalidBenchmarkDeclarationError(f"Module {module.__name__} has no class named {name}")
    return value


def _assemble(args: Namespace, module: ModuleType, settings: RunnerSettings) -> list[BenchmarkRunInfo]:
    config = settings.base_config()
    if args.filters:
        config = config.add_filter(GlobFilter(tuple(args.filters)))
    if args.type_names:
        return types_to_benchmarks([_find_type(module, name) for name in args.type_names], config)
    return module_to_benchmarks(module, config)


def _run(args: Namespace, settings: RunnerSettings, context: dict[str, Any]) -> int:
    """Loads, assembles and validates; `context` records progress for error reports."""

    logger = structlog.get_logger(__name__)

    context["stage"] = "load"
    try:
        module = load_module(args.module)
    except (ImportError, OSError) as exc:
        logger.error("module-not-loaded", module=args.module, error=str(exc))
        return 1

    context["stage"] = "assemble"
    try:
        run_infos = _assemble(args, module, settings)
    except InvalidBenchmarkDeclarationError as exc:
        logger.error("invalid-benchmark-declaration", module=args.module, error=str(exc))
        return 1

    context["types"] = [run_info.type.__name__ for run_info in run_infos]
    context["cases"] = sum(len(run_info) for run_info in run_infos)
    if args.list:
        for run_info in run_infos:
            for case in run_info.benchmark_cases:
                print(case.display_info)
        return 0

    logger.info("validating-benchmarks", module=module.__name__, types=len(run_infos))
    parameters = ValidationParameters.from_run_infos(run_infos)
    context["stage"] = "validate"
    errors = []
    for validator in settings.validators(check_return_values=args.check_return_values):
        context["validator"] = type(validator).__name__
        errors.extend(validator.validate(parameters))
    for error in errors:
        print(error.message)

    if has_critical(errors):
        logger.error("validation-failed", errors=len(errors))
        return 1
    logger.info("validation-complete", errors=len(errors))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    context: dict[str, Any] = {"module": args.module, "stage": "settings"}
    try:
        settings = RunnerSettings.from_env()
        if args.fail_on_error is not None:
            settings = replace(settings, fail_on_error=args.fail_on_error)
        configure_logging(level=logging.DEBUG if args.verbose else settings.log_level)
        return _run(args, settings, context)
    except Exception as exc:
        report = write_error_report(exc, where="cli", context=context)
        structlog.get_logger(__name__).exception("benchplan-failed", error=str(exc), report=str(report.path))
        return 1


if __name__ == "__main__":
    sys.exit(main())
