"""TabContainer component - a tab bar over a swappable content area."""

from __future__ import annotations

from dataclasses import dataclass

from ghostty.scene.components.rectangle import Rectangle, Size, check_size
from ghostty.scene.components.text import Text
from ghostty.scene.keys import Key
from ghostty.scene.node import Group, Node, Position
from ghostty.scene.protocol import Color
from ghostty.scene.utils import truncate_to_width, visible_width

_MIN_TAB_WIDTH = 10
_MAX_TAB_WIDTH = 20

TITLE_COLOR: Color = (255, 255, 255)


@dataclass
class Tab:
    title: str
    content: Node
    button: Group
    background: Rectangle


class TabContainer(Group):
    """Tabs with one content node shown at a time.

    Only the active tab's content is attached to the tree, so switching tabs
    also switches which focusable nodes the scene can reach.  The container
    is focusable itself; while focused, left and right cycle through the
    tabs and the active tab is drawn in ``focus_color``.
    """

    def __init__(
        self,
        position: Position = (0, 0),
        size: Size = (40, 20),
        tab_height: int = 3,
        color: Color = (40, 40, 60),
        active_tab_color: Color = (60, 60, 100),
        inactive_tab_color: Color = (50, 50, 80),
        focus_color: Color = (90, 90, 150),
        tab_index: int | None = None,
    ) -> None:
        super().__init__(position)

        self.size: Size = check_size(size)
        self.tab_height = tab_height
        self.color: Color = color
        self.active_tab_color: Color = active_tab_color
        self.inactive_tab_color: Color = inactive_tab_color
        self.focus_color: Color = focus_color

        # Focusable interface
        self.focused: bool = False
        self.tab_index = tab_index

        self.tabs: list[Tab] = []
        self.active_tab_index: int = 0

        self.background = Rectangle(self.size, color)
        self.add_child(self.background)

        self.tab_bar = Group((0, 0))
        self.add_child(self.tab_bar)

        self.content_area = Group((0, tab_height))
        self.add_child(self.content_area)

    @property
    def active_tab(self) -> Tab | None:
        if 0 <= self.active_tab_index < len(self.tabs):
            return self.tabs[self.active_tab_index]
        return None

    def add_tab(self, title: str, content: Node) -> int:
        """Append a tab and return its index.

        The first tab added becomes visible immediately.
        """
        index = len(self.tabs)
        tab_width = max(
            _MIN_TAB_WIDTH, min(_MAX_TAB_WIDTH, self.size[0] // (index + 1))
        )
        # Rectangles are two columns per cell.
        x = sum(tab.background.size[0] * 2 for tab in self.tabs)

        button = Group((x, 0))
        background = Rectangle((tab_width, self.tab_height), self._tab_color(index))
        button.add_child(background)

        shown = truncate_to_width(title, tab_width * 2 - 2)
        text_x = max(1, (tab_width * 2 - visible_width(shown)) // 2)
        button.add_child(Text(shown, TITLE_COLOR, (text_x, self.tab_height // 2)))

        self.tab_bar.add_child(button)
        self.tabs.append(Tab(title, content, button, background))

        if index == self.active_tab_index:
            self.content_area.add_child(content)

        self.invalidate()
        return index

    def set_active_tab(self, index: int) -> bool:
        """Show tab *index*; return ``False`` if there is no such tab."""
        if not 0 <= index < len(self.tabs):
            return False

        new_tab = self.tabs[index]
        if index == self.active_tab_index and new_tab.content.parent is self.content_area:
            return True

        old_tab = self.active_tab
        if old_tab is not None:
            self.content_area.remove_child(old_tab.content)
            old_tab.background.color = self.inactive_tab_color

        self.active_tab_index = index
        new_tab.background.color = self._tab_color(index)
        self.content_area.add_child(new_tab.content)

        self.invalidate()
        return True

    def next_tab(self) -> bool:
        if len(self.tabs) <= 1:
            return False
        return self.set_active_tab((self.active_tab_index + 1) % len(self.tabs))

    def previous_tab(self) -> bool:
        if len(self.tabs) <= 1:
            return False
        return self.set_active_tab((self.active_tab_index - 1) % len(self.tabs))

    def _tab_color(self, index: int) -> Color:
        if index != self.active_tab_index:
            return self.inactive_tab_color
        return self.focus_color if self.focused else self.active_tab_color

    def _refresh_active_color(self) -> None:
        tab = self.active_tab
        if tab is not None:
            tab.background.color = self._tab_color(self.active_tab_index)

    # -- Focusable ---------------------------------------------------------

    def on_focus(self) -> None:
        self._refresh_active_color()
        self.invalidate()

    def on_blur(self) -> None:
        self._refresh_active_color()
        self.invalidate()

    def handle_key(self, key: str) -> bool:
        if not self.focused:
            return False
        match key:
            case Key.right:
                return self.next_tab()
            case Key.left:
                return self.previous_tab()
            case _:
                return False
