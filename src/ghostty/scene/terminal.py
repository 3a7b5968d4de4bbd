"""Terminal output sinks and raw keyboard input sources.

``Terminal`` is what the renderer writes frames to; ``RawInputSource`` is what
the keyboard input task reads from.  ``ProcessTerminal`` and
``StdinInputSource`` back them with the process's own stdout and stdin.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import termios
import tty
from typing import Protocol, TextIO

from ghostty.scene.config import SceneConfig

logger = logging.getLogger(__name__)

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Output sink for rendered frames."""

    def write(self, data: str) -> None: ...

    def flush(self) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


class RawInputSource(Protocol):
    """Byte source for keyboard input.

    ``read`` returns an empty ``bytes`` object at end of input.
    ``enter_raw_mode`` / ``exit_raw_mode`` may raise ``OSError`` or
    ``termios.error`` when the underlying device refuses the change.
    """

    def enter_raw_mode(self) -> None: ...

    def exit_raw_mode(self) -> None: ...

    async def read(self) -> bytes: ...


# ---------------------------------------------------------------------------
# ProcessTerminal
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by ``sys.stdout``.

    Every write can be mirrored to the file named by ``config.write_log``
    (``GHOSTTY_SCENE_WRITE_LOG``), which is handy when debugging frames.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        config: SceneConfig | None = None,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._config = config if config is not None else SceneConfig.from_env()
        self._write_log_path: str = self._config.write_log

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stream.fileno()).columns
        except (ValueError, OSError):
            return self._config.default_columns

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stream.fileno()).lines
        except (ValueError, OSError):
            return self._config.default_rows

    def write(self, data: str) -> None:
        try:
            self._stream.write(data)
        except OSError:
            logger.warning("Terminal write failed", exc_info=True)
            return

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                logger.warning("Cannot append to write log %s", self._write_log_path)

    def flush(self) -> None:
        try:
            self._stream.flush()
        except OSError:
            logger.warning("Terminal flush failed", exc_info=True)

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)
        self.flush()

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)
        self.flush()


# ---------------------------------------------------------------------------
# StdinInputSource
# ---------------------------------------------------------------------------


class StdinInputSource:
    """Raw input from ``sys.stdin`` using cbreak mode and the event loop.

    Reads are driven by ``loop.add_reader``; the reader is removed again
    after every read so nothing is consumed while no task is waiting.
    """

    def __init__(self, fd: int | None = None, read_size: int | None = None) -> None:
        self._fd = fd if fd is not None else sys.stdin.fileno()
        self._read_size = read_size or SceneConfig.from_env().read_size
        self._saved_attrs: list | None = None

    def enter_raw_mode(self) -> None:
        if self._saved_attrs is not None:
            return
        attrs = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        self._saved_attrs = attrs

    def exit_raw_mode(self) -> None:
        if self._saved_attrs is None:
            return
        attrs, self._saved_attrs = self._saved_attrs, None
        termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)

    async def read(self) -> bytes:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[bytes] = loop.create_future()

        def _on_readable() -> None:
            if future.done():
                return
            try:
                future.set_result(os.read(self._fd, self._read_size))
            except OSError as exc:
                future.set_exception(exc)

        loop.add_reader(self._fd, _on_readable)
        try:
            return await future
        finally:
            loop.remove_reader(self._fd)
