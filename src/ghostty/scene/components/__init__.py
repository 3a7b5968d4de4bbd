"""Scene node components."""

from ghostty.scene.components.button import Button
from ghostty.scene.components.image import Image
from ghostty.scene.components.rectangle import Rectangle, Size, check_size
from ghostty.scene.components.tab_container import Tab, TabContainer
from ghostty.scene.components.text import Text
from ghostty.scene.components.text_input import TextInput

__all__ = [
    "Button",
    "Image",
    "Rectangle",
    "Size",
    "Tab",
    "TabContainer",
    "Text",
    "TextInput",
    "check_size",
]
