"""Button component - a focusable, clickable label on a filled box."""

from __future__ import annotations

from typing import Callable

from ghostty.scene.components.rectangle import Rectangle, Size, check_size
from ghostty.scene.components.text import Text
from ghostty.scene.keys import Key
from ghostty.scene.node import Group, Position
from ghostty.scene.protocol import Color
from ghostty.scene.utils import truncate_to_width, visible_width

_CLICK_KEYS = frozenset({Key.enter, Key.space, " "})


class Button(Group):
    """A button that calls ``on_click`` when activated with enter or space.

    Without an explicit ``size`` the button is sized to its label plus
    padding.  While focused the background switches to ``focus_color``.
    """

    def __init__(
        self,
        text: str,
        position: Position = (0, 0),
        size: Size | None = None,
        color: Color = (100, 100, 200),
        text_color: Color = (255, 255, 255),
        focus_color: Color = (150, 150, 255),
        on_click: Callable[[], None] | None = None,
        tab_index: int | None = None,
    ) -> None:
        super().__init__(position)

        self.color: Color = color
        self.text_color: Color = text_color
        self.focus_color: Color = focus_color
        self.on_click = on_click

        # Focusable interface
        self.focused: bool = False
        self.tab_index = tab_index

        if size is None:
            size = (visible_width(text) + 4, 3)
        self.size: Size = check_size(size)

        self.background = Rectangle(self.size, color)
        self.add_child(self.background)

        self.text = Text("", text_color)
        self.add_child(self.text)
        self.set_label(text)

    @property
    def label(self) -> str:
        return self._label

    def set_label(self, text: str) -> None:
        """Replace the label, re-centering it inside the button."""
        self._label = text
        inner = max(self.size[0] * 2 - 2, 0)
        shown = truncate_to_width(text, inner, ellipsis="")
        text_x = max(1, (self.size[0] * 2 - visible_width(shown)) // 2)
        self.text.text = shown
        self.text.position = (text_x, self.size[1] // 2)
        self.invalidate()

    def click(self) -> None:
        if self.on_click is not None:
            self.on_click()
        self.invalidate()

    # -- Focusable ---------------------------------------------------------

    def on_focus(self) -> None:
        self.background.color = self.focus_color
        self.invalidate()

    def on_blur(self) -> None:
        self.background.color = self.color
        self.invalidate()

    def handle_key(self, key: str) -> bool:
        if self.focused and key in _CLICK_KEYS and self.on_click is not None:
            self.click()
            return True
        return False
