from evdev import ecodes

from .events import KeyboardEvent, KeyState, MouseButtonEvent, MouseScrollEvent, ScrollAxis
from .logger import get_logger

logger = get_logger(__name__)

# BTN_LEFT .. BTN_TASK
MOUSE_BTN_RANGE = range(ecodes.BTN_MOUSE, ecodes.BTN_TASK + 1)

KEY_STATES = {
    0: KeyState.RELEASED,
    1: KeyState.PRESSED,
}

SCROLL_AXES = {
    ecodes.REL_WHEEL: ScrollAxis.VERTICAL,
    ecodes.REL_HWHEEL: ScrollAxis.HORIZONTAL,
}


def code_name(code):
    name = ecodes.BTN.get(code) or ecodes.KEY.get(code)
    if isinstance(name, (list, tuple)):
        # Aliased codes yield several names (e.g. BTN_LEFT / BTN_MOUSE)
        name = name[0]
    return name or "?"


def _classify_key(raw):
    state = KEY_STATES.get(raw.value)
    if state is None:
        # value 2 is kernel autorepeat
        return None
    if raw.code in MOUSE_BTN_RANGE:
        return MouseButtonEvent(button=raw.code, state=state, name=code_name(raw.code))
    return KeyboardEvent(keycode=raw.code, state=state, name=code_name(raw.code))


def _classify_rel(raw):
    axis = SCROLL_AXES.get(raw.code)
    if axis is None or raw.value == 0:
        return None
    return MouseScrollEvent(delta=raw.value, axis=axis)


CLASSIFIERS = {
    ecodes.EV_KEY: _classify_key,
    ecodes.EV_REL: _classify_rel,
}


def classify_event(raw):
    """Map an ``evdev.InputEvent`` to a categorized event, or ``None`` to drop it."""
    classify = CLASSIFIERS.get(raw.type)
    if classify is None:
        return None
    event = classify(raw)
    if event is None:
        logger.debug(f"Dropped event: type={raw.type}, code={raw.code}, value={raw.value}")
    return event
