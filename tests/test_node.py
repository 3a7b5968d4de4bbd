"""Tests for ghostty.scene.node -- tree ownership and transform propagation."""

from __future__ import annotations

import gc

import pytest

from ghostty.scene.node import Group, Node, propagate_transform, walk


class TestAttachDetach:
    def test_add_child_sets_parent_and_order(self) -> None:
        root = Group()
        a = Node()
        b = Node()
        assert root.add_child(a) is a
        root.add_child(b)
        assert root.children == [a, b]
        assert a.parent is root
        assert b.parent is root

    def test_reattach_detaches_from_old_parent(self) -> None:
        first = Group()
        second = Group()
        child = Node()
        first.add_child(child)
        second.add_child(child)
        assert first.children == []
        assert second.children == [child]
        assert child.parent is second

    def test_reattach_to_same_parent_keeps_single_entry(self) -> None:
        root = Group()
        a = Node()
        b = Node()
        root.add_child(a)
        root.add_child(b)
        root.add_child(a)
        assert root.children == [b, a]

    def test_remove_child(self) -> None:
        root = Group()
        child = Node()
        root.add_child(child)
        assert root.remove_child(child) is True
        assert root.children == []
        assert child.parent is None

    def test_remove_absent_child_returns_false(self) -> None:
        root = Group()
        root.add_child(Node())
        assert root.remove_child(Node()) is False
        assert len(root.children) == 1

    def test_cannot_attach_ancestor(self) -> None:
        root = Group()
        child = Group()
        root.add_child(child)
        with pytest.raises(ValueError):
            child.add_child(root)
        with pytest.raises(ValueError):
            root.add_child(root)

    def test_parent_link_is_weak(self) -> None:
        parent = Group()
        child = Node()
        parent.add_child(child)
        del parent
        gc.collect()
        assert child.parent is None

    def test_detached_node_has_no_scene(self) -> None:
        assert Node().scene is None


class TestPropagateTransform:
    def test_absolute_is_sum_of_offsets(self) -> None:
        root = Group((1, 2))
        mid = Group((10, 20))
        leaf = Node((3, 4))
        root.add_child(mid)
        mid.add_child(leaf)

        propagate_transform(root)

        assert root.absolute_position == (1, 2)
        assert mid.absolute_position == (11, 22)
        assert leaf.absolute_position == (14, 26)

    def test_stale_until_next_pass(self) -> None:
        root = Group()
        child = Node((5, 5))
        root.add_child(child)
        propagate_transform(root)

        root.position = (10, 0)
        assert child.absolute_position == (5, 5)

        root.update_transform()
        assert child.absolute_position == (15, 5)

    def test_subtree_root_uses_local_offset(self) -> None:
        root = Group((100, 100))
        sub = Group((1, 1))
        leaf = Node((1, 1))
        root.add_child(sub)
        sub.add_child(leaf)

        propagate_transform(sub)
        assert sub.absolute_position == (1, 1)
        assert leaf.absolute_position == (2, 2)

    def test_deep_tree(self) -> None:
        root = Group()
        node: Node = root
        for _ in range(2000):
            child = Group((1, 0))
            node.add_child(child)
            node = child
        propagate_transform(root)
        assert node.absolute_position == (2000, 0)


class TestWalk:
    def _tree(self) -> tuple[Group, Node, Node, Node, Node]:
        root = Group()
        a = Group()
        a1 = Node()
        a2 = Node()
        b = Node()
        root.add_child(a)
        a.add_child(a1)
        a.add_child(a2)
        root.add_child(b)
        return root, a, a1, a2, b

    def test_pre_order(self) -> None:
        root, a, a1, a2, b = self._tree()
        assert list(walk(root)) == [root, a, a1, a2, b]

    def test_visible_only_skips_subtree(self) -> None:
        root, a, a1, a2, b = self._tree()
        a.visible = False
        assert list(walk(root, visible_only=True)) == [root, b]
        assert list(walk(root)) == [root, a, a1, a2, b]
