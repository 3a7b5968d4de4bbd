"""Frame renderer: turns a node tree into protocol output.

A frame is built as a list of string pieces and written to the terminal in a
single ``write`` followed by ``flush``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ghostty.scene.components.image import Image
from ghostty.scene.components.rectangle import Rectangle
from ghostty.scene.components.text import Text
from ghostty.scene.node import Node, propagate_transform, walk
from ghostty.scene.protocol import (
    DEFAULT_CHUNK_SIZE,
    clear_screen,
    encode_image,
    move_cursor,
    reset_colors,
    set_background,
    set_foreground,
)

if TYPE_CHECKING:
    from ghostty.scene.terminal import Terminal

logger = logging.getLogger(__name__)


class Renderer:
    """Draws whole frames of a scene tree onto a :class:`Terminal`."""

    def __init__(self, terminal: Terminal, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.terminal = terminal
        self.chunk_size = chunk_size
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        """Number of frames written so far."""
        return self._frame_count

    def render_frame(self, root: Node) -> str:
        """Render *root* and its visible descendants; return the frame text.

        Transforms are recomputed first, so every node is drawn at its
        current absolute position.
        """
        propagate_transform(root)

        parts: list[str] = [clear_screen()]
        for node in walk(root, visible_only=True):
            parts.extend(self.draw_node(node))

        frame = "".join(parts)
        self.terminal.write(frame)
        self.terminal.flush()

        self._frame_count += 1
        logger.debug("Rendered frame %d (%d bytes)", self._frame_count, len(frame))
        return frame

    def draw_node(self, node: Node) -> list[str]:
        """Return the output pieces for a single node (no children)."""
        match node:
            case Rectangle(fill=True):
                return _draw_filled_rectangle(node)
            case Rectangle():
                return _draw_outlined_rectangle(node)
            case Text():
                return _draw_text(node)
            case Image():
                return self._draw_image(node)
            case _:
                return []

    def _draw_image(self, node: Image) -> list[str]:
        x, y = node.absolute_position
        width, height = node.size
        return [
            move_cursor(y, x),
            encode_image(
                node.data,
                width,
                height,
                image_format=node.image_format,
                position=(x, y),
                chunk_size=self.chunk_size,
            ),
        ]


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------


def _draw_filled_rectangle(node: Rectangle) -> list[str]:
    x, y = node.absolute_position
    width, height = node.size
    background = set_background(*node.color)
    row_text = " " * (width * 2)

    parts: list[str] = []
    for row in range(height):
        parts.append(move_cursor(y + row, x))
        parts.append(background)
        parts.append(row_text)
        parts.append(reset_colors())
    return parts


def _draw_outlined_rectangle(node: Rectangle) -> list[str]:
    x, y = node.absolute_position
    width, height = node.size
    if width == 0 or height == 0:
        return []

    inner = max(width * 2 - 2, 0)
    edge = "+" + "-" * inner + "+"
    side = "|" + " " * inner + "|"

    parts: list[str] = [set_foreground(*node.color), move_cursor(y, x), edge]
    for row in range(1, height - 1):
        parts.append(move_cursor(y + row, x))
        parts.append(side)
    if height > 1:
        parts.append(move_cursor(y + height - 1, x))
        parts.append(edge)
    parts.append(reset_colors())
    return parts


def _draw_text(node: Text) -> list[str]:
    x, y = node.absolute_position
    return [move_cursor(y, x), set_foreground(*node.color), node.text, reset_colors()]
