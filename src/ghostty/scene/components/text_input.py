"""TextInput component - single-line editable text field."""

from __future__ import annotations

from typing import Callable

from ghostty.scene.components.rectangle import Rectangle, Size, check_size
from ghostty.scene.components.text import Text
from ghostty.scene.keys import Key, is_printable_key
from ghostty.scene.node import Group, Position
from ghostty.scene.protocol import Color
from ghostty.scene.utils import get_segmenter, visible_width

_segmenter = get_segmenter()

PLACEHOLDER_COLOR: Color = (150, 150, 150)

InputKeyHandler = Callable[[str], bool]


class TextInput(Group):
    """A focusable text field.

    Supports cursor movement (left, right, home, end), backspace and
    delete, and typing printable characters.  Editing works on grapheme
    clusters, so a cursor never lands inside a combined character.

    The value holds at most ``size[0] - 3`` columns of text.  ``on_change``
    is called with the new value after every edit; plain cursor movement
    does not trigger it.
    """

    def __init__(
        self,
        position: Position = (0, 0),
        size: Size = (20, 3),
        color: Color = (50, 50, 70),
        text_color: Color = (255, 255, 255),
        focus_color: Color = (70, 70, 100),
        placeholder: str = "",
        value: str = "",
        on_change: Callable[[str], None] | None = None,
        tab_index: int | None = None,
    ) -> None:
        super().__init__(position)

        self.size: Size = check_size(size)
        self.color: Color = color
        self.text_color: Color = text_color
        self.focus_color: Color = focus_color
        self.placeholder = placeholder
        self.on_change = on_change

        # Focusable interface
        self.focused: bool = False
        self.tab_index = tab_index

        self._value: str = value
        self._cursor: int = len(value)
        self._key_handlers: dict[str, InputKeyHandler] = {}

        self.background = Rectangle(self.size, color)
        self.add_child(self.background)

        text_y = self.size[1] // 2
        self.text = Text("", text_color, (1, text_y))
        self.add_child(self.text)

        self.cursor = Text("|", text_color, (1, text_y))
        self.cursor.visible = False
        self.add_child(self.cursor)

        self._update_display()

    # -- value -------------------------------------------------------------

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor_pos(self) -> int:
        """Cursor offset into :attr:`value`, in code points."""
        return self._cursor

    @property
    def capacity(self) -> int:
        """Maximum visible width of the value."""
        return max(self.size[0] - 3, 0)

    def set_value(self, value: str) -> None:
        """Replace the value and move the cursor to its end."""
        self._value = value
        self._cursor = len(value)
        self._update_display()
        self.invalidate()

    def register_keyboard_handler(self, key: str, handler: InputKeyHandler) -> None:
        """Let *handler* see *key* before the built-in editing does.

        A handler returning ``True`` consumes the key.
        """
        self._key_handlers[key] = handler

    # -- Focusable ---------------------------------------------------------

    def on_focus(self) -> None:
        self.background.color = self.focus_color
        self.cursor.visible = True
        self._update_display()
        self.invalidate()

    def on_blur(self) -> None:
        self.background.color = self.color
        self.cursor.visible = False
        self._update_display()
        self.invalidate()

    def handle_key(self, key: str) -> bool:
        if not self.focused:
            return False

        handler = self._key_handlers.get(key)
        if handler is not None and handler(key):
            self.invalidate()
            return True

        edited = False
        match key:
            case Key.backspace:
                handled = edited = self._delete_before_cursor()
            case Key.delete:
                handled = edited = self._delete_after_cursor()
            case Key.left:
                handled = self._move_left()
            case Key.right:
                handled = self._move_right()
            case Key.home:
                self._cursor = 0
                handled = True
            case Key.end:
                self._cursor = len(self._value)
                handled = True
            case Key.space:
                handled = edited = self._insert(" ")
            case _ if is_printable_key(key):
                handled = edited = self._insert(key)
            case _:
                handled = False

        if not handled:
            return False

        self._update_display()
        if edited and self.on_change is not None:
            self.on_change(self._value)
        self.invalidate()
        return True

    # -- editing -----------------------------------------------------------

    def _insert(self, char: str) -> bool:
        if visible_width(self._value) + visible_width(char) > self.capacity:
            return False
        self._value = self._value[: self._cursor] + char + self._value[self._cursor :]
        self._cursor += len(char)
        return True

    def _delete_before_cursor(self) -> bool:
        if self._cursor == 0:
            return False
        graphemes = _segmenter.segment(self._value[: self._cursor])
        gl = len(graphemes[-1]) if graphemes else 1
        self._value = self._value[: self._cursor - gl] + self._value[self._cursor :]
        self._cursor -= gl
        return True

    def _delete_after_cursor(self) -> bool:
        if self._cursor >= len(self._value):
            return False
        graphemes = _segmenter.segment(self._value[self._cursor :])
        gl = len(graphemes[0]) if graphemes else 1
        self._value = self._value[: self._cursor] + self._value[self._cursor + gl :]
        return True

    def _move_left(self) -> bool:
        if self._cursor == 0:
            return False
        graphemes = _segmenter.segment(self._value[: self._cursor])
        self._cursor -= len(graphemes[-1]) if graphemes else 1
        return True

    def _move_right(self) -> bool:
        if self._cursor >= len(self._value):
            return False
        graphemes = _segmenter.segment(self._value[self._cursor :])
        self._cursor += len(graphemes[0]) if graphemes else 1
        return True

    def _update_display(self) -> None:
        if self._value:
            self.text.text = self._value
            self.text.color = self.text_color
        else:
            self.text.text = self.placeholder
            self.text.color = PLACEHOLDER_COLOR

        text_y = self.size[1] // 2
        self.cursor.position = (1 + visible_width(self._value[: self._cursor]), text_y)
