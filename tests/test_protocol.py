"""Tests for ghostty.scene.protocol -- escape-sequence builders."""

from __future__ import annotations

import base64
import struct

import pytest

from ghostty.scene.protocol import (
    ImageDimensions,
    clear_screen,
    delete_all_images,
    delete_image,
    encode_image,
    get_png_dimensions,
    is_image_sequence,
    move_cursor,
    reset_colors,
    set_background,
    set_foreground,
)


def _make_png_header(width: int, height: int) -> bytes:
    """Minimal PNG signature + IHDR chunk."""
    sig = b"\x89PNG\r\n\x1a\n"
    ihdr_data = struct.pack(">II", width, height) + b"\x08\x02\x00\x00\x00"
    ihdr_chunk = struct.pack(">I", 13) + b"IHDR" + ihdr_data + b"\x00\x00\x00\x00"
    return sig + ihdr_chunk


class TestCursorAndColour:
    def test_move_cursor_is_one_indexed(self) -> None:
        assert move_cursor(0, 0) == "\x1b[1;1H"
        assert move_cursor(4, 9) == "\x1b[5;10H"

    def test_colours(self) -> None:
        assert set_foreground(1, 2, 3) == "\x1b[38;2;1;2;3m"
        assert set_background(255, 0, 0) == "\x1b[48;2;255;0;0m"
        assert reset_colors() == "\x1b[0m"

    def test_clear_screen(self) -> None:
        assert clear_screen() == "\x1b[2J\x1b[H"


class TestEncodeImage:
    def test_single_chunk(self) -> None:
        seq = encode_image("AAAA", 10, 20)
        assert seq == "\x1b_Gf=100,s=10,v=20,a=T,t=d,m=0;AAAA\x1b\\"

    def test_position_parameters(self) -> None:
        seq = encode_image("AAAA", 1, 1, image_format=32, position=(3, 7))
        assert seq == "\x1b_Gf=32,s=1,v=1,a=T,t=d,m=0,x=3,y=7;AAAA\x1b\\"

    def test_chunked_payload(self) -> None:
        data = "A" * 10
        seq = encode_image(data, 2, 2, chunk_size=4)
        parts = seq.split("\x1b\\")[:-1]
        assert len(parts) == 3
        assert parts[0] == "\x1b_Gf=100,s=2,v=2,a=T,t=d,m=1;AAAA"
        assert parts[1] == "\x1b_Gm=1;AAAA"
        assert parts[2] == "\x1b_Gm=0;AA"

    def test_exact_chunk_size_is_single_sequence(self) -> None:
        seq = encode_image("A" * 8, 1, 1, chunk_size=8)
        assert seq.count("\x1b_G") == 1
        assert ",m=0;" in seq

    def test_two_chunks(self) -> None:
        seq = encode_image("A" * 9, 1, 1, chunk_size=8)
        assert seq.count("\x1b_G") == 2
        assert seq.endswith("\x1b_Gm=0;A\x1b\\")

    def test_invalid_chunk_size(self) -> None:
        with pytest.raises(ValueError):
            encode_image("AAAA", 1, 1, chunk_size=0)


class TestImageHelpers:
    def test_delete_sequences(self) -> None:
        assert delete_image(5) == "\x1b_Ga=d,d=I,i=5\x1b\\"
        assert delete_all_images() == "\x1b_Ga=d,d=A\x1b\\"

    def test_is_image_sequence(self) -> None:
        assert is_image_sequence(encode_image("AA", 1, 1))
        assert not is_image_sequence("plain text")

    def test_png_dimensions(self) -> None:
        data = base64.b64encode(_make_png_header(640, 480)).decode()
        assert get_png_dimensions(data) == ImageDimensions(640, 480)

    def test_png_dimensions_rejects_other_data(self) -> None:
        data = base64.b64encode(b"GIF89a" + b"\x00" * 30).decode()
        assert get_png_dimensions(data) is None
        assert get_png_dimensions("!!!not base64") is None
