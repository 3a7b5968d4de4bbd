"""Keyboard capture: an asyncio task that feeds decoded keys to a scene."""

from __future__ import annotations

import asyncio
import logging
import termios
from typing import Callable, Protocol

from ghostty.scene.config import SceneConfig
from ghostty.scene.keys import decode_keys
from ghostty.scene.terminal import RawInputSource, StdinInputSource

logger = logging.getLogger(__name__)

GlobalKeyHandler = Callable[[str], object]


class KeyDispatcher(Protocol):
    """Anything that accepts logical key tokens (a ``Scene`` or ``InputManager``)."""

    def dispatch_key(self, key: str) -> bool: ...


# ---------------------------------------------------------------------------
# KeyboardInputHandler
# ---------------------------------------------------------------------------


class KeyboardInputHandler:
    """Reads raw input on a background task and dispatches decoded keys.

    ``start`` puts the source into raw mode and spawns the read loop.  The
    loop ends on end of input, on an error (which is logged) or when
    ``stop`` cancels it; raw mode is restored on every one of those paths.
    If raw mode cannot be entered the handler keeps running on whatever
    line-buffered input the terminal delivers.
    """

    def __init__(
        self,
        target: KeyDispatcher | None = None,
        source: RawInputSource | None = None,
        config: SceneConfig | None = None,
    ) -> None:
        self.target = target
        if source is None:
            config = config if config is not None else SceneConfig.from_env()
            source = StdinInputSource(read_size=config.read_size)
        self.source: RawInputSource = source
        self._task: asyncio.Task[None] | None = None
        self._raw_mode: bool = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def raw_mode(self) -> bool:
        return self._raw_mode

    async def start(self) -> None:
        if self.running:
            return

        try:
            self.source.enter_raw_mode()
            self._raw_mode = True
        except (OSError, termios.error):
            logger.warning(
                "Failed to set raw terminal mode; input may be line-buffered",
                exc_info=True,
            )

        self._task = asyncio.get_running_loop().create_task(self._input_loop())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._restore_raw_mode()

    async def wait(self) -> None:
        """Wait until the read loop ends by itself (end of input or error)."""
        if self._task is not None:
            await asyncio.shield(self._task)

    def handle_input(self, chunk: str | bytes) -> None:
        """Decode one chunk of raw input and dispatch every key in it.

        A key handler that raises is logged and the remaining keys are still
        dispatched; only read failures end the input loop.
        """
        if self.target is None:
            return
        for key in decode_keys(chunk):
            try:
                self.target.dispatch_key(key)
            except Exception:
                logger.exception("Key handler failed for %r", key)

    async def _input_loop(self) -> None:
        try:
            while True:
                chunk = await self.source.read()
                if not chunk:
                    logger.debug("Keyboard input reached end of stream")
                    break
                self.handle_input(chunk)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Keyboard input loop failed")
        finally:
            self._restore_raw_mode()

    def _restore_raw_mode(self) -> None:
        if not self._raw_mode:
            return
        self._raw_mode = False
        try:
            self.source.exit_raw_mode()
        except (OSError, termios.error):
            logger.warning("Failed to restore terminal mode", exc_info=True)


# ---------------------------------------------------------------------------
# InputManager
# ---------------------------------------------------------------------------


class InputManager:
    """Keyboard front end with global key handlers.

    Global handlers see every key before the scene does and never stop it
    from reaching the scene.
    """

    def __init__(
        self,
        scene: KeyDispatcher | None = None,
        source: RawInputSource | None = None,
        config: SceneConfig | None = None,
    ) -> None:
        self.scene = scene
        self.keyboard = KeyboardInputHandler(self, source, config)
        self._global_handlers: dict[str, list[GlobalKeyHandler]] = {}

    def set_scene(self, scene: KeyDispatcher | None) -> None:
        self.scene = scene

    async def start(self) -> None:
        await self.keyboard.start()

    async def stop(self) -> None:
        await self.keyboard.stop()

    def register_global_handler(self, key: str, handler: GlobalKeyHandler) -> None:
        self._global_handlers.setdefault(key, []).append(handler)

    def unregister_global_handler(self, key: str, handler: GlobalKeyHandler) -> bool:
        handlers = self._global_handlers.get(key)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._global_handlers[key]
        return True

    def dispatch_key(self, key: str) -> bool:
        for handler in list(self._global_handlers.get(key, ())):
            handler(key)

        if self.scene is not None:
            return self.scene.dispatch_key(key)
        return False

    def simulate_key_press(self, key: str) -> bool:
        """Dispatch an already-decoded key token as if it had been typed."""
        return self.dispatch_key(key)
