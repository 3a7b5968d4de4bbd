"""Display-width helpers for text drawn into character cells.

Node layout is expressed in cells, so labels, placeholders and tab titles are
measured and clipped by their visible terminal width rather than by ``len``.
"""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache

import grapheme
import wcwidth

# Escape sequences that occupy no cells: SGR/cursor CSI, OSC 8 links, APC.
_ZERO_WIDTH_SEQUENCE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"
    r"|\x1b\]8;;[^\x07]*\x07"
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"
)

_ZWJ = 0x200D
_VS16 = 0xFE0F


class _GraphemeSegmenter:
    """Splits text into user-perceived characters."""

    @staticmethod
    def segment(text: str) -> list[str]:
        return list(grapheme.graphemes(text))


def get_segmenter() -> _GraphemeSegmenter:
    return _GraphemeSegmenter()


def _is_emoji_cluster(cluster: str) -> bool:
    for ch in cluster:
        cp = ord(ch)
        if cp in (_ZWJ, _VS16):
            return True
        # Skin-tone modifiers and regional-indicator flags
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return True
    first = ord(cluster[0])
    return first >= 0x1F000 or 0x2600 <= first <= 0x27BF


def cluster_width(cluster: str) -> int:
    """Number of cells one grapheme cluster occupies."""
    if not cluster:
        return 0

    head = cluster[0]
    cp = ord(head)
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 0

    if len(cluster) > 1:
        if _is_emoji_cluster(cluster):
            return 2
        if unicodedata.category(head) in ("Mn", "Me", "Cf"):
            return 0

    return max(wcwidth.wcwidth(head), 0)


@lru_cache(maxsize=512)
def _plain_width(text: str) -> int:
    return sum(cluster_width(c) for c in grapheme.graphemes(text))


def visible_width(text: str) -> int:
    """Cells *text* occupies once escape sequences are removed."""
    if not text:
        return 0
    plain = _ZERO_WIDTH_SEQUENCE.sub("", text)
    if plain.isascii() and plain.isprintable():
        return len(plain)
    return _plain_width(plain)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Fit *text* into *max_width* cells.

    Text that is too wide is cut on a grapheme boundary and *ellipsis* is
    appended; the ellipsis counts towards the width.  With *pad*, the result
    is right-padded with spaces to exactly *max_width* cells.
    """
    if max_width <= 0:
        return ""

    if visible_width(text) <= max_width:
        result = text
    else:
        room = max_width - visible_width(ellipsis)
        if room <= 0:
            result = _leading_cells(ellipsis, max_width)
        else:
            result = _leading_cells(text, room) + ellipsis

    if pad:
        result += " " * (max_width - visible_width(result))
    return result


def _leading_cells(text: str, cells: int) -> str:
    """Longest grapheme prefix of *text* that fits in *cells*."""
    used = 0
    end = 0
    for cluster in grapheme.graphemes(text):
        w = cluster_width(cluster)
        if used + w > cells:
            break
        used += w
        end += len(cluster)
    return text[:end]
