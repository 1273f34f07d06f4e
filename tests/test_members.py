"""Unit tests for decorators and the member table."""

from __future__ import annotations

import concurrent.futures
import sys

from benchplan.declarations import (
    CallKind,
    Role,
    arguments,
    benchmark,
    category,
    collect_members,
    global_setup,
    iteration_cleanup,
    params,
)
from benchplan.declarations.markers import BenchmarkMarker, own_markers
from benchplan.declarations.members import Callback, call_kind_of


class Plain:
    @benchmark
    def first(self) -> None:
        pass

    @benchmark(description="Second one", baseline=True, operations_per_invoke=4)
    def second(self) -> None:
        pass

    def helper(self) -> None:
        pass


class Base:
    size: int = params(1, 2)

    @global_setup
    def setup(self) -> None:
        pass

    @category("Base")
    @benchmark
    def run(self) -> None:
        pass


@category("Derived")
class Derived(Base):
    def run(self) -> None:
        pass

    @iteration_cleanup(targets="run")
    def cleanup(self) -> None:
        pass


class Kinds:
    def sync(self) -> int:
        return 1

    async def deferred_void(self) -> None:
        pass

    async def deferred_value(self) -> int:
        return 1

    def future_value(self) -> concurrent.futures.Future[int]:
        raise NotImplementedError


class WithArgs:
    @arguments(1, "a")
    @benchmark
    def run(self, number: int, text: str) -> None:
        pass


def test_benchmark_decorator_records_marker() -> None:
    markers = own_markers(Plain.second)

    assert markers == (BenchmarkMarker(description="Second one", baseline=True, operations_per_invoke=4),)
    assert own_markers(Plain.helper) == ()


def test_collect_members_keeps_source_order() -> None:
    table = collect_members(Plain)

    assert [member.name for member in table.benchmarks] == ["first", "second"]
    assert table.find_benchmark("helper") is None
    assert table.find_benchmark("second").marker.baseline is True


def test_derived_override_inherits_base_markers() -> None:
    table = collect_members(Derived)

    [member] = table.benchmarks
    assert member.callback.declaring_type is Derived
    assert member.callback.function is vars(Derived)["run"]
    assert member.categories == ("Base",)
    assert table.type_categories == ("Derived",)


def test_collect_members_finds_inherited_lifecycle_and_parameters() -> None:
    table = collect_members(Derived)

    roles = {entry.role: entry for entry in table.lifecycle}
    assert roles[Role.GLOBAL_SETUP].callback.declaring_type is Base
    assert roles[Role.ITERATION_CLEANUP].targets == ("run",)
    assert [parameter.name for parameter in table.parameters] == ["size"]
    assert table.parameters[0].parameter_type is int


def test_module_scope_categories_are_read(monkeypatch) -> None:
    monkeypatch.setattr(sys.modules[__name__], "__benchplan_categories__", ["Module"], raising=False)

    table = collect_members(Plain)

    assert table.module_categories == ("Module",)


def test_call_kind_is_fixed_from_the_declaration() -> None:
    assert call_kind_of(Kinds.sync) is CallKind.SYNCHRONOUS
    assert call_kind_of(Kinds.deferred_void) is CallKind.DEFERRED_VOID
    assert call_kind_of(Kinds.deferred_value) is CallKind.DEFERRED_VALUE
    assert call_kind_of(Kinds.future_value) is CallKind.DEFERRED_VALUE
    assert CallKind.DEFERRED_VOID.is_deferred
    assert not CallKind.SYNCHRONOUS.is_deferred


def test_void_declarations_return_nothing() -> None:
    def callback(name: str) -> Callback:
        return Callback.create(name, getattr(Kinds, name), Kinds)

    assert callback("deferred_void").returns_nothing
    assert not callback("deferred_value").returns_nothing
    assert not callback("sync").returns_nothing
    assert collect_members(WithArgs).benchmarks[0].callback.returns_nothing


def test_positional_parameters_skip_self() -> None:
    [member] = collect_members(WithArgs).benchmarks

    assert [parameter.name for parameter in member.callback.positional_parameters()] == ["number", "text"]
    assert member.arguments[0].values == (1, "a")
