"""The ``Scene`` root: focus ownership, key dispatch and render scheduling."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ghostty.scene.components.rectangle import Rectangle, Size
from ghostty.scene.config import SceneConfig
from ghostty.scene.focus import Focusable, FocusManager, is_focusable
from ghostty.scene.node import Group, Node, Position, walk
from ghostty.scene.protocol import Color
from ghostty.scene.renderer import Renderer
from ghostty.scene.terminal import ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

KeyHandler = Callable[[str], object]


class Scene(Group):
    """Root of a scene tree.

    The scene owns a background rectangle, the :class:`FocusManager` for every
    focusable node attached below it, a table of fallback key handlers and
    the :class:`Renderer` that draws it.

    Key dispatch runs in three stages, stopping at the first that handles
    the key:

    1. the focused node's ``handle_key``;
    2. focus navigation (``tab``, ``shift_tab`` and the arrow keys);
    3. a fallback handler registered with :meth:`register_keyboard_handler`.
    """

    def __init__(
        self,
        terminal: Terminal | None = None,
        size: Size | None = None,
        position: Position = (0, 0),
        full_screen: bool = True,
        background_color: Color = (0, 0, 0),
        config: SceneConfig | None = None,
    ) -> None:
        super().__init__(position)

        self.config = config if config is not None else SceneConfig.from_env()
        self.terminal: Terminal = (
            terminal if terminal is not None else ProcessTerminal(config=self.config)
        )
        self.full_screen = full_screen
        self.background_color: Color = background_color

        if full_screen or size is None:
            self.size: Size = (self.terminal.columns, self.terminal.rows)
        else:
            self.size = size

        self.focus = FocusManager(auto_focus=self.config.auto_focus)
        self.renderer = Renderer(self.terminal, chunk_size=self.config.image_chunk_size)
        self._keyboard_handlers: dict[str, KeyHandler] = {}

        # Render scheduling
        self._render_requested: bool = False
        self._render_scheduled: bool = False
        self._dispatch_depth: int = 0

        self._scene = self

        # Rectangles draw two columns per cell.
        width, height = self.size
        self.background = Rectangle(((width + 1) // 2, height), background_color)
        self.add_child(self.background)

    # ------------------------------------------------------------------
    # Subtree bookkeeping (called by Node.add_child / Node.remove_child)
    # ------------------------------------------------------------------

    def _adopt_subtree(self, root: Node) -> None:
        found: list[Focusable] = []
        for node in walk(root):
            node._scene = self
            if is_focusable(node):
                found.append(node)  # type: ignore[arg-type]
        if found:
            self.focus.register_many(found)

    def _release_subtree(self, root: Node) -> None:
        found: list[Focusable] = []
        for node in walk(root):
            node._scene = None
            if is_focusable(node):
                found.append(node)  # type: ignore[arg-type]
        if found:
            self.focus.unregister_many(found)

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    @property
    def focused(self) -> Focusable | None:
        return self.focus.focused

    @property
    def focusables(self) -> list[Focusable]:
        """Registered focusable nodes in tab order."""
        return self.focus.registry.entities

    def set_focus(self, entity: Focusable | None) -> bool:
        return self.focus.set_focus(entity)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def register_keyboard_handler(self, key: str, handler: KeyHandler) -> None:
        """Install the fallback *handler* for *key*, replacing any previous one."""
        self._keyboard_handlers[key] = handler

    def unregister_keyboard_handler(self, key: str) -> bool:
        return self._keyboard_handlers.pop(key, None) is not None

    def dispatch_key(self, key: str) -> bool:
        """Route one logical key token; return ``True`` if anything handled it.

        Render requests made while the key is being handled are held back and
        issued once, after dispatch completes.
        """
        self._dispatch_depth += 1
        try:
            handled = self._dispatch(key)
        finally:
            self._dispatch_depth -= 1
            if self._dispatch_depth == 0 and self._render_requested:
                self._schedule_render()

        if not handled:
            logger.debug("Unhandled key %r", key)
        return handled

    def _dispatch(self, key: str) -> bool:
        focused = self.focus.focused
        if focused is not None and focused.handle_key(key):
            return True

        if self.focus.navigate(key):
            return True

        handler = self._keyboard_handlers.get(key)
        if handler is not None:
            handler(key)
            return True

        return False

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_scene(self) -> str:
        """Render a frame immediately and return its text."""
        self._render_requested = False
        return self.renderer.render_frame(self)

    def request_render(self) -> None:
        """Ask for a frame to be rendered soon.

        Requests coalesce: any number of calls before the frame is drawn
        produce a single render.  Under a running event loop the render runs
        on the next loop iteration; without one it runs immediately, unless a
        key is being dispatched, in which case it runs when dispatch ends.
        """
        if self._render_requested:
            return
        self._render_requested = True
        if self._dispatch_depth == 0:
            self._schedule_render()

    def _schedule_render(self) -> None:
        if self._render_scheduled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running event loop -- render synchronously
            self._do_render_tick()
            return
        self._render_scheduled = True
        loop.call_soon(self._do_render_tick)

    def _do_render_tick(self) -> None:
        self._render_scheduled = False
        if self._render_requested:
            self.render_scene()

    def __repr__(self) -> str:
        return f"Scene(size={self.size!r}, focusables={len(self.focus.registry)})"
