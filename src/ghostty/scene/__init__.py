"""ghostty-scene: retained-mode scene graph for kitty-graphics terminals."""

# Components (re-exported from components package)
from ghostty.scene.components import (
    Button,
    Image,
    Rectangle,
    Size,
    Tab,
    TabContainer,
    Text,
    TextInput,
)

# Configuration
from ghostty.scene.config import SceneConfig

# Focus and navigation
from ghostty.scene.focus import (
    Focusable,
    FocusManager,
    FocusRegistry,
    find_spatial_candidate,
    is_focusable,
)

# Keyboard input
from ghostty.scene.input import InputManager, KeyboardInputHandler
from ghostty.scene.keys import KEY_SEQUENCES, Key, decode_keys

# Scene graph
from ghostty.scene.node import Group, Node, Position, propagate_transform, walk

# Protocol output
from ghostty.scene.protocol import (
    Color,
    clear_screen,
    delete_all_images,
    delete_image,
    encode_image,
    get_png_dimensions,
    move_cursor,
    reset_colors,
    set_background,
    set_foreground,
)
from ghostty.scene.renderer import Renderer
from ghostty.scene.scene import Scene

# Terminal
from ghostty.scene.terminal import (
    ProcessTerminal,
    RawInputSource,
    StdinInputSource,
    Terminal,
)

# Utilities
from ghostty.scene.utils import truncate_to_width, visible_width

__all__ = [
    # Components
    "Button",
    "Image",
    "Rectangle",
    "Size",
    "Tab",
    "TabContainer",
    "Text",
    "TextInput",
    # Configuration
    "SceneConfig",
    # Focus and navigation
    "FocusManager",
    "FocusRegistry",
    "Focusable",
    "find_spatial_candidate",
    "is_focusable",
    # Keyboard input
    "InputManager",
    "KEY_SEQUENCES",
    "Key",
    "KeyboardInputHandler",
    "decode_keys",
    # Scene graph
    "Group",
    "Node",
    "Position",
    "Scene",
    "propagate_transform",
    "walk",
    # Protocol output
    "Color",
    "Renderer",
    "clear_screen",
    "delete_all_images",
    "delete_image",
    "encode_image",
    "get_png_dimensions",
    "move_cursor",
    "reset_colors",
    "set_background",
    "set_foreground",
    # Terminal
    "ProcessTerminal",
    "RawInputSource",
    "StdinInputSource",
    "Terminal",
    # Utilities
    "truncate_to_width",
    "visible_width",
]
