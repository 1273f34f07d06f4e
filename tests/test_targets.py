"""Unit tests for setup/cleanup target resolution."""

from __future__ import annotations

from benchplan.declarations import (
    Role,
    benchmark,
    collect_members,
    global_cleanup,
    global_setup,
    iteration_cleanup,
    iteration_setup,
)
from benchplan.declarations.members import Callback, LifecycleEntry
from benchplan.running import TargetResolver, order_candidates, resolve_callback


class Scoped:
    @global_cleanup(targets=["foo"])
    def cleanup_foo(self) -> None:
        pass

    @global_cleanup
    def cleanup_any(self) -> None:
        pass

    @iteration_setup(targets=("foo", "bar"))
    def setup_pair(self) -> None:
        pass

    @iteration_setup(targets="foo")
    def setup_single(self) -> None:
        pass

    @benchmark
    def foo(self) -> None:
        pass

    @benchmark
    def bar(self) -> None:
        pass

    @benchmark
    def baz(self) -> None:
        pass


class BaseLifecycle:
    @global_setup
    def setup(self) -> None:
        pass


class DerivedLifecycle(BaseLifecycle):
    def setup(self) -> None:
        pass

    @benchmark
    def run(self) -> None:
        pass


class MultiRole:
    @iteration_cleanup
    @global_setup
    def prepare(self) -> None:
        pass

    @benchmark
    def run(self) -> None:
        pass


def _entry(targets: tuple[str, ...], name: str) -> LifecycleEntry:
    callback = Callback.create(name, Scoped.foo, Scoped)
    return LifecycleEntry(role=Role.GLOBAL_SETUP, targets=targets, callback=callback)


def test_targeted_cleanup_wins_for_its_target() -> None:
    resolver = TargetResolver(collect_members(Scoped))

    assert resolver.resolve("foo").global_cleanup.name == "cleanup_foo"
    assert resolver.resolve("bar").global_cleanup.name == "cleanup_any"
    assert resolver.resolve("baz").global_cleanup.name == "cleanup_any"


def test_longer_target_list_is_tried_first() -> None:
    resolver = TargetResolver(collect_members(Scoped))

    assert resolver.resolve("foo").iteration_setup.name == "setup_pair"
    assert resolver.resolve("bar").iteration_setup.name == "setup_pair"
    assert resolver.resolve("baz").iteration_setup is None


def test_roles_without_candidates_resolve_to_none() -> None:
    lifecycle = TargetResolver(collect_members(Scoped)).resolve("foo")

    assert lifecycle.global_setup is None
    assert lifecycle.iteration_cleanup is None


def test_derived_override_is_the_inherited_candidate() -> None:
    lifecycle = TargetResolver(collect_members(DerivedLifecycle)).resolve("run")

    assert lifecycle.global_setup.declaring_type is DerivedLifecycle
    assert lifecycle.global_setup.function is vars(DerivedLifecycle)["setup"]


def test_one_method_may_hold_several_roles() -> None:
    lifecycle = TargetResolver(collect_members(MultiRole)).resolve("run")

    assert lifecycle.global_setup.name == "prepare"
    assert lifecycle.iteration_cleanup.name == "prepare"


def test_order_candidates_is_stable_for_equal_lengths() -> None:
    first = _entry(("a",), "first")
    second = _entry(("b",), "second")
    untargeted = _entry((), "untargeted")
    pair = _entry(("a", "b"), "pair")

    ordered = order_candidates([untargeted, first, second, pair])

    assert [entry.callback.name for entry in ordered] == ["pair", "first", "second", "untargeted"]
    assert resolve_callback("b", ordered).name == "pair"
    assert resolve_callback("c", ordered).name == "untargeted"
    assert resolve_callback("c", ordered[:3]) is None
