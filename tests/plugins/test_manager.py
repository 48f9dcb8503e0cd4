"""Tests for PluginManager and EventBus."""

from __future__ import annotations

import pytest

from contactctl.plugins import EventBus, PluginManager, hookimpl


class AddRecorder:
    def __init__(self) -> None:
        self.seen: list[str] = []

    @hookimpl
    def post_add(self, contact_id: str) -> None:
        self.seen.append(contact_id)


class MergeFailure:
    @hookimpl
    def post_merge(self, primary_id: str, absorbed_ids: list[str]) -> None:
        raise ValueError("nope")


class TestPluginManager:
    def test_register_and_list(self) -> None:
        pm = PluginManager()
        pm.register_plugin(AddRecorder())
        assert "AddRecorder" in pm.list_plugin_names()

    def test_custom_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(AddRecorder(), name="audit")
        assert "audit" in pm.list_plugin_names()

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = AddRecorder()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        assert "AddRecorder" not in pm.list_plugin_names()

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        pm.discover_and_load()
        assert pm.is_loaded

    def test_hook_call(self) -> None:
        pm = PluginManager()
        plugin = AddRecorder()
        pm.register_plugin(plugin)
        pm.hook.post_add(contact_id="c1")
        assert plugin.seen == ["c1"]

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(AddRecorder, name="from-entry-point")
        pm._instantiate_plugin_classes()
        (plugin,) = [p for p in pm._pm.get_plugins() if isinstance(p, AddRecorder)]
        pm.hook.post_add(contact_id="c9")
        assert plugin.seen == ["c9"]


class TestEventBus:
    def test_dispatch(self) -> None:
        pm = PluginManager()
        plugin = AddRecorder()
        pm.register_plugin(plugin)
        assert EventBus(pm).dispatch("post_add", {"contact_id": "c1"}) == []
        assert plugin.seen == ["c1"]

    def test_unknown_hook(self) -> None:
        assert EventBus(PluginManager()).dispatch("post_nothing", {}) == []

    def test_failure_becomes_warning(self) -> None:
        pm = PluginManager()
        pm.register_plugin(MergeFailure())
        warnings = EventBus(pm).dispatch("post_merge", {"primary_id": "a", "absorbed_ids": ["b"]})
        assert warnings == ["Plugin hook post_merge failed: nope"]

    @pytest.mark.parametrize("hook", ["post_add", "post_update", "post_delete", "post_merge"])
    def test_no_implementations(self, hook: str) -> None:
        pm = PluginManager()
        payloads = {
            "post_add": {"contact_id": "a"},
            "post_update": {"contact_id": "a", "fields_changed": []},
            "post_delete": {"contact_id": "a"},
            "post_merge": {"primary_id": "a", "absorbed_ids": []},
        }
        assert EventBus(pm).dispatch(hook, payloads[hook]) == []
