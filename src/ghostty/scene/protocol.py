"""Escape-sequence builders for the kitty graphics protocol and ANSI output.

Every function here is pure: it returns the bytes-to-be (as ``str``) and never
touches a stream.  Positions are 0-indexed on input; the +1 translation to the
1-indexed wire form happens in :func:`move_cursor`.
"""

from __future__ import annotations

import base64
import struct
from dataclasses import dataclass

Color = tuple[int, int, int]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ESC = "\x1b"

_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_RESET = "\x1b[0m"

_GRAPHICS_PREFIX = "\x1b_G"
_GRAPHICS_SUFFIX = "\x1b\\"

# Image format tags (``f=``)
FORMAT_RGB = 24
FORMAT_RGBA = 32
FORMAT_PNG = 100

DEFAULT_CHUNK_SIZE = 4096


# ---------------------------------------------------------------------------
# Cursor / colour
# ---------------------------------------------------------------------------


def move_cursor(row: int, col: int) -> str:
    """Move the cursor to 0-indexed (*row*, *col*)."""
    return f"\x1b[{row + 1};{col + 1}H"


def set_foreground(r: int, g: int, b: int) -> str:
    return f"\x1b[38;2;{r};{g};{b}m"


def set_background(r: int, g: int, b: int) -> str:
    return f"\x1b[48;2;{r};{g};{b}m"


def reset_colors() -> str:
    return _RESET


def clear_screen() -> str:
    return _CLEAR_SCREEN


# ---------------------------------------------------------------------------
# Graphics protocol
# ---------------------------------------------------------------------------


def encode_image(
    data: str,
    width: int,
    height: int,
    *,
    image_format: int = FORMAT_PNG,
    action: str = "T",
    transmission: str = "d",
    position: tuple[int, int] | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Build the graphics-protocol sequence(s) transmitting *data*.

    *data* must already be base64 encoded.  A payload longer than
    *chunk_size* is split across several sequences: the first carries every
    parameter with ``m=1``, continuations carry only ``m=1`` and the final one
    ``m=0``.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    params: list[str] = [
        f"f={image_format}",
        f"s={width}",
        f"v={height}",
        f"a={action}",
        f"t={transmission}",
    ]

    def _with_position(items: list[str]) -> list[str]:
        if position is not None:
            x, y = position
            items = items + [f"x={x}", f"y={y}"]
        return items

    if len(data) <= chunk_size:
        head = _with_position(params + ["m=0"])
        return f"{_GRAPHICS_PREFIX}{','.join(head)};{data}{_GRAPHICS_SUFFIX}"

    chunks: list[str] = []
    offset = 0
    is_first = True

    while offset < len(data):
        chunk = data[offset : offset + chunk_size]
        is_last = offset + chunk_size >= len(data)

        if is_first:
            head = _with_position(params + ["m=1"])
            chunks.append(
                f"{_GRAPHICS_PREFIX}{','.join(head)};{chunk}{_GRAPHICS_SUFFIX}"
            )
            is_first = False
        elif is_last:
            chunks.append(f"{_GRAPHICS_PREFIX}m=0;{chunk}{_GRAPHICS_SUFFIX}")
        else:
            chunks.append(f"{_GRAPHICS_PREFIX}m=1;{chunk}{_GRAPHICS_SUFFIX}")

        offset += chunk_size

    return "".join(chunks)


def delete_image(image_id: int) -> str:
    return f"\x1b_Ga=d,d=I,i={image_id}\x1b\\"


def delete_all_images() -> str:
    return "\x1b_Ga=d,d=A\x1b\\"


def is_image_sequence(text: str) -> bool:
    """Return ``True`` if *text* contains a graphics-protocol sequence."""
    return _GRAPHICS_PREFIX in text


# ---------------------------------------------------------------------------
# Image headers
# ---------------------------------------------------------------------------


@dataclass
class ImageDimensions:
    width_px: int
    height_px: int


def get_png_dimensions(base64_data: str) -> ImageDimensions | None:
    """Read the pixel size from a base64-encoded PNG's IHDR chunk."""
    try:
        data = base64.b64decode(base64_data)
    except (ValueError, TypeError):
        return None
    if len(data) < 24 or data[0:4] != b"\x89PNG":
        return None
    width = struct.unpack(">I", data[16:20])[0]
    height = struct.unpack(">I", data[20:24])[0]
    return ImageDimensions(width_px=width, height_px=height)
