"""Text node - a single run of coloured text."""

from __future__ import annotations

from ghostty.scene.node import Node, Position
from ghostty.scene.protocol import Color
from ghostty.scene.utils import visible_width


class Text(Node):
    """A string drawn at the node's position in ``color``."""

    def __init__(
        self,
        text: str,
        color: Color = (255, 255, 255),
        position: Position = (0, 0),
    ) -> None:
        super().__init__(position)
        self.text = text
        self.color: Color = color

    @property
    def width(self) -> int:
        """Visible width of the text in terminal columns."""
        return visible_width(self.text)
