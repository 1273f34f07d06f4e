"""Matching of setup/cleanup callbacks to the workloads they govern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from benchplan.declarations.markers import Role
from benchplan.declarations.members import Callback, LifecycleEntry, MemberTable


@dataclass(frozen=True, slots=True)
class ResolvedLifecycle:
    global_setup: Callback | None = None
    global_cleanup: Callback | None = None
    iteration_setup: Callback | None = None
    iteration_cleanup: Callback | None = None


def order_candidates(candidates: Sequence[LifecycleEntry]) -> list[LifecycleEntry]:
    """Most specific first: longer target lists before shorter, untargeted last."""

    return sorted(candidates, key=lambda entry: len(entry.targets), reverse=True)


def resolve_callback(workload_name: str, candidates: Sequence[LifecycleEntry]) -> Callback | None:
    """Picks the callback of one role that governs ``workload_name``.

    ``candidates`` must already be ordered with :func:`order_candidates`.
    """

    for entry in candidates:
        if entry.matches(workload_name):
            return entry.callback
    return None


class TargetResolver:
    """Resolves every lifecycle role for the workloads of one class.

    Candidates are sorted once per class, lookups are then per workload.
    """

    def __init__(self, table: MemberTable) -> None:
        self._candidates = {role: order_candidates(table.candidates(role)) for role in Role}

    def resolve(self, workload_name: str) -> ResolvedLifecycle:
        return ResolvedLifecycle(
            global_setup=resolve_callback(workload_name, self._candidates[Role.GLOBAL_SETUP]),
            global_cleanup=resolve_callback(workload_name, self._candidates[Role.GLOBAL_CLEANUP]),
            iteration_setup=resolve_callback(workload_name, self._candidates[Role.ITERATION_SETUP]),
            iteration_cleanup=resolve_callback(workload_name, self._candidates[Role.ITERATION_CLEANUP]),
        )
