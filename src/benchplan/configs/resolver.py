"""Merges configuration from module, class and method scope."""

from __future__ import annotations

from typing import Any

import structlog

from benchplan.declarations.markers import ConfigMarker
from benchplan.declarations.members import BenchmarkMember, MemberTable, collect_members
from benchplan.errors import InvalidBenchmarkDeclarationError

from .config import BenchmarkConfig, ImmutableConfig

_logger = structlog.get_logger(__name__)


def _as_config(source: Any, where: str) -> BenchmarkConfig:
    if isinstance(source, ConfigMarker):
        source = source.config
    if isinstance(source, ImmutableConfig):
        return BenchmarkConfig.create(source)
    if isinstance(source, BenchmarkConfig):
        return source
    raise InvalidBenchmarkDeclarationError(f"{where} is not a BenchmarkConfig: {source!r}")


def resolve_type_config(
    cls: type,
    config: BenchmarkConfig | ImmutableConfig | None = None,
    *,
    table: MemberTable | None = None,
) -> ImmutableConfig:
    """Base config, then module-scope config, then class markers (base classes first)."""

    table = table or collect_members(cls)
    merged = BenchmarkConfig.create(config) if config is not None else BenchmarkConfig.default()

    for source in table.module_configs:
        merged = BenchmarkConfig.union(merged, _as_config(source, f"module config of {cls.__module__}"))
    for marker in table.type_configs:
        merged = BenchmarkConfig.union(merged, _as_config(marker, f"config of {cls.__name__}"))

    resolved = ImmutableConfig.build(merged)
    _logger.debug(
        "type-config-resolved",
        type=cls.__name__,
        jobs=[job.resolved_id for job in resolved.jobs],
        filters=len(resolved.filters),
    )
    return resolved


def resolve_method_config(member: BenchmarkMember, type_config: ImmutableConfig) -> ImmutableConfig:
    """Adds the workload's own config markers on top of the class config."""

    if not member.configs:
        return type_config

    merged = BenchmarkConfig.create(type_config)
    for marker in member.configs:
        merged = BenchmarkConfig.union(merged, _as_config(marker, f"config of {member.callback.qualified_name}"))
    return ImmutableConfig.build(merged)
