"""Image node - pre-encoded image data shown via the graphics protocol."""

from __future__ import annotations

import base64
from pathlib import Path

from ghostty.scene.components.rectangle import Size, check_size
from ghostty.scene.node import Node, Position
from ghostty.scene.protocol import FORMAT_PNG, get_png_dimensions


class Image(Node):
    """Image display node.

    The node never decodes or resizes anything: ``data`` is the base64
    payload and ``size`` the declared pixel width/height sent with it.
    """

    def __init__(
        self,
        data: str | bytes,
        size: Size,
        position: Position = (0, 0),
        image_format: int = FORMAT_PNG,
    ) -> None:
        super().__init__(position)
        if isinstance(data, bytes):
            data = data.decode("ascii")
        self.data: str = data
        self.size: Size = check_size(size)
        self.image_format = image_format

    @classmethod
    def from_png(cls, raw: bytes, position: Position = (0, 0)) -> Image:
        """Build an image node from raw PNG bytes.

        The pixel size is read from the PNG header.
        """
        data = base64.b64encode(raw).decode("ascii")
        dims = get_png_dimensions(data)
        if dims is None:
            raise ValueError("data is not a PNG image")
        return cls(data, (dims.width_px, dims.height_px), position)

    @classmethod
    def from_file(cls, path: str | Path, position: Position = (0, 0)) -> Image:
        return cls.from_png(Path(path).read_bytes(), position)
