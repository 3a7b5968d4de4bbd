"""Rectangle node - a solid or outlined box."""

from __future__ import annotations

from ghostty.scene.node import Node, Position
from ghostty.scene.protocol import Color

Size = tuple[int, int]


def check_size(size: Size) -> Size:
    width, height = size
    if width < 0 or height < 0:
        raise ValueError(f"size must be non-negative, got {size!r}")
    return (width, height)


class Rectangle(Node):
    """A box of ``size`` cells, filled with ``color`` or outlined in it.

    Each cell is drawn two columns wide so boxes look roughly square.
    """

    def __init__(
        self,
        size: Size,
        color: Color = (255, 255, 255),
        fill: bool = True,
        position: Position = (0, 0),
    ) -> None:
        super().__init__(position)
        self.size: Size = check_size(size)
        self.color: Color = color
        self.fill = fill
