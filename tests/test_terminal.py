"""Tests for ghostty.scene.terminal -- the stdout-backed terminal."""

from __future__ import annotations

import io

from ghostty.scene.config import SceneConfig
from ghostty.scene.terminal import ProcessTerminal


class TestProcessTerminal:
    def test_write_and_flush(self) -> None:
        stream = io.StringIO()
        terminal = ProcessTerminal(stream, SceneConfig())
        terminal.write("abc")
        terminal.flush()
        assert stream.getvalue() == "abc"

    def test_size_falls_back_without_a_tty(self) -> None:
        terminal = ProcessTerminal(io.StringIO(), SceneConfig(default_columns=90, default_rows=30))
        assert terminal.columns == 90
        assert terminal.rows == 30

    def test_write_log(self, tmp_path) -> None:
        log = tmp_path / "frames.log"
        terminal = ProcessTerminal(io.StringIO(), SceneConfig(write_log=str(log)))
        terminal.write("one")
        terminal.write("two")
        assert log.read_text() == "onetwo"

    def test_cursor_visibility(self) -> None:
        stream = io.StringIO()
        terminal = ProcessTerminal(stream, SceneConfig())
        terminal.hide_cursor()
        terminal.show_cursor()
        assert stream.getvalue() == "\x1b[?25l\x1b[?25h"
