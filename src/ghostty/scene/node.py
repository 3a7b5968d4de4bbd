"""Scene-graph nodes: ownership, weak parent links and transform propagation.

A ``Node`` owns its ``children`` and refers to its parent through a weak
reference only.  Nodes attached somewhere below a :class:`~ghostty.scene.scene.Scene`
carry an explicit ``scene`` reference, pushed down the subtree on attach and
cleared on detach, so components never search upward for their root.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ghostty.scene.scene import Scene

Position = tuple[int, int]

__all__ = [
    "Group",
    "Node",
    "Position",
    "propagate_transform",
    "walk",
]


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


class Node:
    """A positioned element of the scene tree.

    ``position`` is the local offset from the parent in character cells.
    ``absolute_position`` is a cache written by :func:`propagate_transform`;
    it is only valid right after a transform pass and is *not* invalidated
    when an ancestor moves.
    """

    def __init__(self, position: Position = (0, 0)) -> None:
        self.position: Position = tuple(position)  # type: ignore[assignment]
        self.absolute_position: Position = self.position
        self.visible: bool = True
        self.children: list[Node] = []
        self._parent_ref: weakref.ref[Node] | None = None
        self._scene: Scene | None = None

    # -- relations ---------------------------------------------------------

    @property
    def parent(self) -> Node | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def scene(self) -> Scene | None:
        """The scene this node is attached under, or ``None``."""
        return self._scene

    # -- tree mutation -----------------------------------------------------

    def add_child(self, child: Node) -> Node:
        """Attach *child* as the last child of this node.

        A child that already has a parent is detached from it first.  When
        this node belongs to a scene, the scene adopts the new subtree and
        registers every focusable inside it.  Moving a child within the same
        scene keeps its focusables registered, so focus stays where it is.
        """
        if child is self or child in self.ancestors():
            raise ValueError("cannot attach a node inside its own subtree")

        old_parent = child.parent
        if old_parent is not None:
            if self._scene is not None and child._scene is self._scene:
                old_parent._detach(child)
            else:
                old_parent.remove_child(child)

        child._parent_ref = weakref.ref(self)
        self.children.append(child)

        if self._scene is not None:
            self._scene._adopt_subtree(child)
        return child

    def remove_child(self, child: Node) -> bool:
        """Detach *child*; return ``False`` if it is not a direct child."""
        if not self._detach(child):
            return False

        if child._scene is not None:
            child._scene._release_subtree(child)
        return True

    def _detach(self, child: Node) -> bool:
        for index, existing in enumerate(self.children):
            if existing is child:
                break
        else:
            return False
        del self.children[index]
        child._parent_ref = None
        return True

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    # -- transforms / invalidation ----------------------------------------

    def update_transform(self) -> None:
        """Run :func:`propagate_transform` with this node as the root."""
        propagate_transform(self)

    def invalidate(self) -> None:
        """Ask the owning scene (if any) for a re-render."""
        if self._scene is not None:
            self._scene.request_render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(position={self.position!r})"


class Group(Node):
    """A container node. It draws nothing itself."""


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def walk(root: Node, *, visible_only: bool = False) -> Iterator[Node]:
    """Yield *root* and its descendants in pre-order.

    With *visible_only*, an invisible node is skipped together with its
    whole subtree.
    """
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        if visible_only and not node.visible:
            continue
        yield node
        stack.extend(reversed(node.children))


def propagate_transform(root: Node) -> None:
    """Recompute ``absolute_position`` for every node under *root*.

    The root's absolute position is its local position; every other node's
    is its parent's absolute position plus its own local offset.  Parents are
    always visited before their children.
    """
    root.absolute_position = root.position
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        px, py = node.absolute_position
        for child in reversed(node.children):
            cx, cy = child.position
            child.absolute_position = (px + cx, py + cy)
            stack.append(child)
