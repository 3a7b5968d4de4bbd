"""Tests for ghostty.scene.scene -- subtree registration, dispatch, rendering."""

from __future__ import annotations

import asyncio

import pytest

from ghostty.scene.config import SceneConfig
from ghostty.scene.node import Group
from ghostty.scene.scene import Scene

from .test_focus import Dummy
from .virtual_terminal import VirtualTerminal


def _scene(auto_focus: bool = False, **kwargs) -> tuple[Scene, VirtualTerminal]:
    terminal = VirtualTerminal(rows=10, columns=40)
    scene = Scene(terminal=terminal, config=SceneConfig(auto_focus=auto_focus), **kwargs)
    return scene, terminal


class TestConstruction:
    def test_full_screen_uses_terminal_size(self) -> None:
        scene, _ = _scene()
        assert scene.size == (40, 10)
        assert scene.background.size == (20, 10)
        assert scene.children == [scene.background]

    def test_windowed_size(self) -> None:
        scene, _ = _scene(size=(12, 6), full_screen=False)
        assert scene.size == (12, 6)

    def test_windowed_without_size_falls_back_to_terminal(self) -> None:
        scene, _ = _scene(full_screen=False)
        assert scene.size == (40, 10)

    def test_scene_context_on_nodes(self) -> None:
        scene, _ = _scene()
        assert scene.scene is scene
        assert scene.background.scene is scene


class TestSubtreeRegistration:
    def test_nested_focusables_registered(self) -> None:
        scene, _ = _scene()
        panel = Group()
        a = Dummy("a")
        b = Dummy("b")
        panel.add_child(a)
        panel.add_child(b)
        scene.add_child(panel)
        assert scene.focusables == [a, b]
        assert a.scene is scene

    def test_adding_below_attached_node_registers(self) -> None:
        scene, _ = _scene()
        panel = Group()
        scene.add_child(panel)
        a = Dummy("a")
        panel.add_child(a)
        assert scene.focusables == [a]

    def test_detach_unregisters_and_clears_context(self) -> None:
        scene, _ = _scene()
        panel = Group()
        a = Dummy("a")
        panel.add_child(a)
        scene.add_child(panel)
        scene.remove_child(panel)
        assert scene.focusables == []
        assert a.scene is None
        assert panel.scene is None

    def test_detach_focused_moves_focus(self) -> None:
        scene, _ = _scene()
        a, b, c = Dummy("a"), Dummy("b"), Dummy("c")
        for e in (a, b, c):
            scene.add_child(e)
        scene.set_focus(b)
        scene.remove_child(b)
        assert scene.focused is c

    def test_moving_subtree_between_parents_keeps_registration(self) -> None:
        scene, _ = _scene()
        left = Group()
        right = Group()
        scene.add_child(left)
        scene.add_child(right)
        a = Dummy("a")
        left.add_child(a)
        right.add_child(a)
        assert scene.focusables == [a]
        assert a.parent is right

    def test_reattach_within_scene_keeps_focus(self) -> None:
        scene, _ = _scene()
        a, b = Dummy("a"), Dummy("b")
        scene.add_child(a)
        scene.add_child(b)
        scene.set_focus(a)
        a.events.clear()

        scene.add_child(a)
        assert scene.focused is a
        assert scene.children[-1] is a
        assert a.events == []
        assert b.events == []

    def test_moving_focused_node_between_parents_keeps_focus(self) -> None:
        scene, _ = _scene()
        left = Group()
        right = Group()
        scene.add_child(left)
        scene.add_child(right)
        a, b = Dummy("a"), Dummy("b")
        left.add_child(a)
        left.add_child(b)
        scene.set_focus(a)

        right.add_child(a)
        assert scene.focused is a
        assert a.scene is scene
        assert scene.focusables == [a, b]

    def test_auto_focus(self) -> None:
        scene, _ = _scene(auto_focus=True)
        a = Dummy("a")
        scene.add_child(a)
        assert scene.focused is a


class TestDispatch:
    def test_focused_entity_first(self) -> None:
        scene, _ = _scene()
        a = Dummy("a", consume={"tab"})
        b = Dummy("b")
        scene.add_child(a)
        scene.add_child(b)
        scene.set_focus(a)
        assert scene.dispatch_key("tab") is True
        assert scene.focused is a

    def test_navigation_second(self) -> None:
        scene, _ = _scene()
        a = Dummy("a")
        b = Dummy("b")
        scene.add_child(a)
        scene.add_child(b)
        assert scene.dispatch_key("tab") is True
        assert scene.focused is a
        assert scene.dispatch_key("tab") is True
        assert scene.focused is b

    def test_fallback_handler_last(self) -> None:
        scene, _ = _scene()
        seen: list[str] = []
        scene.register_keyboard_handler("q", seen.append)
        assert scene.dispatch_key("q") is True
        assert seen == ["q"]

    def test_fallback_not_reached_when_navigation_handles(self) -> None:
        scene, _ = _scene()
        scene.add_child(Dummy("a"))
        seen: list[str] = []
        scene.register_keyboard_handler("tab", seen.append)
        assert scene.dispatch_key("tab") is True
        assert seen == []

    def test_arrow_without_candidate_reaches_fallback(self) -> None:
        scene, _ = _scene()
        a = Dummy("a")
        scene.add_child(a)
        scene.set_focus(a)
        seen: list[str] = []
        scene.register_keyboard_handler("up", seen.append)
        assert scene.dispatch_key("up") is True
        assert seen == ["up"]

    def test_unhandled(self) -> None:
        scene, _ = _scene()
        assert scene.dispatch_key("z") is False

    def test_unregister_keyboard_handler(self) -> None:
        scene, _ = _scene()
        scene.register_keyboard_handler("q", lambda key: None)
        assert scene.unregister_keyboard_handler("q") is True
        assert scene.unregister_keyboard_handler("q") is False
        assert scene.dispatch_key("q") is False

    def test_spatial_navigation_uses_scene_transforms(self) -> None:
        scene, _ = _scene()
        top = Group((0, 0))
        bottom = Group((0, 8))
        a = Dummy("a", (2, 0))
        b = Dummy("b", (2, 0))
        top.add_child(a)
        bottom.add_child(b)
        scene.add_child(top)
        scene.add_child(bottom)
        scene.render_scene()
        scene.set_focus(a)
        assert scene.dispatch_key("down") is True
        assert scene.focused is b


class TestRenderScheduling:
    def test_render_scene_writes_frame(self) -> None:
        scene, terminal = _scene()
        frame = scene.render_scene()
        assert terminal.get_output() == frame
        assert "\x1b[48;2;0;0;0m" in frame

    def test_request_without_loop_renders_immediately(self) -> None:
        scene, terminal = _scene()
        scene.request_render()
        assert scene.renderer.frame_count == 1

    def test_requests_during_dispatch_coalesce(self) -> None:
        scene, _ = _scene()

        def handler(key: str) -> None:
            scene.request_render()
            scene.request_render()
            assert scene.renderer.frame_count == 0

        scene.register_keyboard_handler("r", handler)
        scene.dispatch_key("r")
        assert scene.renderer.frame_count == 1

    def test_invalidate_from_attached_node(self) -> None:
        scene, _ = _scene()
        group = Group()
        scene.add_child(group)
        group.invalidate()
        assert scene.renderer.frame_count == 1

    def test_detached_node_invalidate_is_noop(self) -> None:
        scene, _ = _scene()
        Group().invalidate()
        assert scene.renderer.frame_count == 0

    @pytest.mark.asyncio
    async def test_request_under_loop_is_deferred_and_coalesced(self) -> None:
        scene, _ = _scene()
        scene.request_render()
        scene.request_render()
        assert scene.renderer.frame_count == 0
        await asyncio.sleep(0)
        assert scene.renderer.frame_count == 1

    @pytest.mark.asyncio
    async def test_direct_render_cancels_pending_request(self) -> None:
        scene, _ = _scene()
        scene.request_render()
        scene.render_scene()
        await asyncio.sleep(0)
        assert scene.renderer.frame_count == 1
