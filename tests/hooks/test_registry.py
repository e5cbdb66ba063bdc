"""Tests for the hook registry."""

import typing as _typing

import pytest as _pytest

import hookctl.hooks.config as config
import hookctl.hooks.metrics as metrics
import hookctl.hooks.registry as registry

MakeHook = _typing.Callable[..., config.HookDefinition]


@_pytest.fixture
def tracker() -> metrics.MetricsTracker:
    return metrics.MetricsTracker()


@_pytest.fixture
def hook_registry(tracker: metrics.MetricsTracker) -> registry.HookRegistry:
    return registry.HookRegistry(tracker)


class TestHookRegistry:
    """Tests for HookRegistry."""

    def test_register_and_get(self, hook_registry: registry.HookRegistry, make_hook: MakeHook) -> None:
        hook = make_hook("a")
        hook_registry.register(hook)
        assert hook_registry.get("a") is hook
        assert "a" in hook_registry
        assert len(hook_registry) == 1

    def test_get_missing(self, hook_registry: registry.HookRegistry) -> None:
        assert hook_registry.get("missing") is None

    def test_list_preserves_registration_order(
        self,
        hook_registry: registry.HookRegistry,
        make_hook: MakeHook,
    ) -> None:
        for name in ("c", "a", "b"):
            hook_registry.register(make_hook(name))
        assert hook_registry.list_names() == ["c", "a", "b"]

    def test_register_initializes_stats(
        self,
        hook_registry: registry.HookRegistry,
        tracker: metrics.MetricsTracker,
        make_hook: MakeHook,
    ) -> None:
        hook_registry.register(make_hook("a"))
        assert tracker.snapshot("a") == metrics.HookExecutionStats()

    def test_reregister_replaces_definition_and_stats(
        self,
        hook_registry: registry.HookRegistry,
        tracker: metrics.MetricsTracker,
        make_hook: MakeHook,
    ) -> None:
        hook_registry.register(make_hook("a", "echo one"))
        tracker.record("a", 10, success=True, status="success")

        hook_registry.register(make_hook("a", "echo two"))
        definition = hook_registry.get("a")
        assert definition is not None and definition.command == "echo two"
        assert tracker.snapshot("a") == metrics.HookExecutionStats()
        assert hook_registry.list_names() == ["a"]

    def test_replace_all_swaps_table(
        self,
        hook_registry: registry.HookRegistry,
        tracker: metrics.MetricsTracker,
        make_hook: MakeHook,
    ) -> None:
        hook_registry.register(make_hook("old"))
        hook_registry.register(make_hook("kept"))
        tracker.record("kept", 10, success=True, status="success")

        hook_registry.replace_all([make_hook("kept"), make_hook("new")])

        assert hook_registry.list_names() == ["kept", "new"]
        assert hook_registry.get("old") is None
        assert tracker.snapshot("old") is None
        assert tracker.snapshot("kept") == metrics.HookExecutionStats()

    def test_unregister(
        self,
        hook_registry: registry.HookRegistry,
        tracker: metrics.MetricsTracker,
        make_hook: MakeHook,
    ) -> None:
        hook_registry.register(make_hook("a"))
        assert hook_registry.unregister("a")
        assert not hook_registry.unregister("a")
        assert tracker.snapshot("a") is None
