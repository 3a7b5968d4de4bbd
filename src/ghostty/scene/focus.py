"""Focus tracking and keyboard navigation.

``FocusRegistry`` keeps the focusable nodes of a scene in tab order;
``FocusManager`` owns the single focused entity and implements tab,
shift-tab and spatial arrow-key navigation over the registry.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Iterable, Iterator, Protocol, runtime_checkable

from ghostty.scene.keys import Key
from ghostty.scene.node import Node, Position

logger = logging.getLogger(__name__)

__all__ = [
    "Focusable",
    "FocusManager",
    "FocusRegistry",
    "find_spatial_candidate",
    "is_focusable",
]


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Focusable(Protocol):
    """A node that can hold keyboard focus.

    ``focused`` is written by :class:`FocusManager` before the matching
    ``on_focus`` / ``on_blur`` hook runs.
    """

    focused: bool
    tab_index: int | None
    absolute_position: Position

    def on_focus(self) -> None: ...

    def on_blur(self) -> None: ...

    def handle_key(self, key: str) -> bool: ...


def is_focusable(obj: object | None) -> bool:
    """Return ``True`` if *obj* is a scene node implementing ``Focusable``."""
    return isinstance(obj, Node) and isinstance(obj, Focusable)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class FocusRegistry:
    """Ordered collection of focusable entities.

    Entities with an explicit ``tab_index`` come first in ascending order,
    entities without one follow, and registration order breaks ties.  The
    order is recomputed on every membership change; call :meth:`resort`
    after changing the ``tab_index`` of an entity that is already
    registered.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[int, Focusable]] = []
        self._seq = count()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Focusable]:
        return (entity for _, entity in self._entries)

    def __contains__(self, entity: object) -> bool:
        return any(existing is entity for _, existing in self._entries)

    @property
    def entities(self) -> list[Focusable]:
        return [entity for _, entity in self._entries]

    def index(self, entity: Focusable) -> int:
        for i, (_, existing) in enumerate(self._entries):
            if existing is entity:
                return i
        raise ValueError(f"{entity!r} is not registered")

    def register(self, entity: Focusable) -> bool:
        """Add *entity*; return ``False`` if it is already registered."""
        if entity in self:
            return False
        self._entries.append((next(self._seq), entity))
        self.resort()
        return True

    def unregister(self, entity: Focusable) -> bool:
        """Remove *entity*; return ``False`` if it was not registered."""
        for i, (_, existing) in enumerate(self._entries):
            if existing is entity:
                del self._entries[i]
                return True
        return False

    def resort(self) -> None:
        self._entries.sort(key=_sort_key)

    def clear(self) -> None:
        self._entries.clear()


def _sort_key(entry: tuple[int, Focusable]) -> tuple[bool, int, int]:
    seq, entity = entry
    tab_index = entity.tab_index
    return (tab_index is None, tab_index or 0, seq)


# ---------------------------------------------------------------------------
# Spatial search
# ---------------------------------------------------------------------------


def find_spatial_candidate(
    origin: Position,
    candidates: Iterable[Focusable],
    direction: str,
) -> Focusable | None:
    """Pick the best candidate from *origin* towards *direction*.

    Only candidates strictly on the requested side are considered.  The
    score is the distance along the direction of travel plus the absolute
    offset on the other axis; the lowest score wins and the first candidate
    seen wins a tie.  Positions are read from the cached
    ``absolute_position`` of each candidate.
    """
    ox, oy = origin
    best: Focusable | None = None
    best_score: int | None = None

    for candidate in candidates:
        cx, cy = candidate.absolute_position
        dx = cx - ox
        dy = cy - oy

        match direction:
            case Key.up if dy < 0:
                score = -dy + abs(dx)
            case Key.down if dy > 0:
                score = dy + abs(dx)
            case Key.left if dx < 0:
                score = -dx + abs(dy)
            case Key.right if dx > 0:
                score = dx + abs(dy)
            case _:
                continue

        if best_score is None or score < best_score:
            best = candidate
            best_score = score

    return best


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


class FocusManager:
    """Holds the focused entity and moves focus through a registry.

    With ``auto_focus`` enabled, the first registry entry is focused whenever
    entities are registered while nothing holds focus.
    """

    def __init__(
        self,
        registry: FocusRegistry | None = None,
        auto_focus: bool = False,
    ) -> None:
        self.registry = registry if registry is not None else FocusRegistry()
        self.auto_focus = auto_focus
        self._focused: Focusable | None = None

    @property
    def focused(self) -> Focusable | None:
        return self._focused

    # -- focus transitions -------------------------------------------------

    def set_focus(self, entity: Focusable | None) -> bool:
        """Focus *entity*, or clear focus when it is ``None``.

        The current entity is always blurred first, so focusing the entity
        that already has focus runs ``on_blur`` and then ``on_focus`` again.
        Returns ``False`` (changing nothing) if *entity* is not registered.
        """
        if entity is not None and entity not in self.registry:
            return False

        previous = self._focused
        if previous is not None:
            previous.focused = False
            previous.on_blur()

        self._focused = entity
        if entity is not None:
            entity.focused = True
            entity.on_focus()

        logger.debug("Focus %r -> %r", previous, entity)
        return True

    def focus_next(self) -> bool:
        entities = self.registry.entities
        if not entities:
            return False
        if self._focused is None:
            return self.set_focus(entities[0])
        i = self.registry.index(self._focused)
        return self.set_focus(entities[(i + 1) % len(entities)])

    def focus_previous(self) -> bool:
        entities = self.registry.entities
        if not entities:
            return False
        if self._focused is None:
            return self.set_focus(entities[-1])
        i = self.registry.index(self._focused)
        return self.set_focus(entities[(i - 1) % len(entities)])

    def focus_direction(self, direction: str) -> bool:
        """Move focus to the nearest entity in an arrow *direction*.

        Needs a focused entity to measure from; returns ``False`` when there
        is none or when no entity lies in that direction.
        """
        current = self._focused
        if current is None:
            return False
        others = (e for e in self.registry if e is not current)
        target = find_spatial_candidate(current.absolute_position, others, direction)
        if target is None:
            return False
        return self.set_focus(target)

    def navigate(self, key: str) -> bool:
        """Handle a navigation key; return ``False`` for anything else."""
        match key:
            case Key.tab:
                return self.focus_next()
            case Key.shift_tab:
                return self.focus_previous()
            case Key.up | Key.down | Key.left | Key.right:
                return self.focus_direction(key)
            case _:
                return False

    # -- membership --------------------------------------------------------

    def register(self, entity: Focusable) -> bool:
        added = self.registry.register(entity)
        self._maybe_auto_focus()
        return added

    def register_many(self, entities: Iterable[Focusable]) -> int:
        added = sum(1 for entity in entities if self.registry.register(entity))
        self._maybe_auto_focus()
        return added

    def unregister(self, entity: Focusable) -> bool:
        return self.unregister_many([entity]) == 1

    def unregister_many(self, entities: Iterable[Focusable]) -> int:
        """Remove *entities* from the registry.

        If the focused entity is among them, focus moves to the first
        surviving entity that followed it in registry order (wrapping
        around), or is cleared when none survive.
        """
        before = self.registry.entities
        removed = [e for e in entities if self.registry.unregister(e)]
        if not removed:
            return 0

        current = self._focused
        if current is not None and any(e is current for e in removed):
            start = next(i for i, e in enumerate(before) if e is current)
            n = len(before)
            successor = None
            for step in range(1, n):
                candidate = before[(start + step) % n]
                if candidate in self.registry:
                    successor = candidate
                    break
            self.set_focus(successor)

        return len(removed)

    def _maybe_auto_focus(self) -> None:
        if self.auto_focus and self._focused is None and len(self.registry):
            self.set_focus(self.registry.entities[0])
