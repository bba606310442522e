"""Categorized device events.

Every raw device event the lister keeps becomes one of three immutable
values. The :class:`Category` of a value is the key used by the display
buffer and the counters.
"""

from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    # Declaration order is display order
    KEYBOARD = "Keyboard"
    MOUSE_BUTTON = "MouseButton"
    MOUSE_SCROLL = "MouseScroll"

    @property
    def label(self):
        return self.value


class KeyState(Enum):
    RELEASED = 0
    PRESSED = 1


class ScrollAxis(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class KeyboardEvent:
    keycode: int
    state: KeyState
    name: str = "?"

    category = Category.KEYBOARD

    def describe(self):
        return f"{self.name} ({self.keycode}) {self.state.name.lower()}"


@dataclass(frozen=True)
class MouseButtonEvent:
    button: int
    state: KeyState
    name: str = "?"

    category = Category.MOUSE_BUTTON

    def describe(self):
        return f"{self.name} ({self.button}) {self.state.name.lower()}"


@dataclass(frozen=True)
class MouseScrollEvent:
    delta: int
    axis: ScrollAxis = ScrollAxis.VERTICAL

    category = Category.MOUSE_SCROLL

    def describe(self):
        return f"{self.axis.value} {self.delta:+d}"
