import fcntl
import os

from evdev import InputDevice, ecodes, list_devices

from .constants import INPUT_DEVICE_DIR
from .errors import CaptureError
from .events import Category
from .logger import get_logger

logger = get_logger(__name__)

PERMISSION_HINT = "(reading input devices needs root or membership of the 'input' group)"


def device_categories(device):
    """Categories a device can produce, judged from its capabilities."""
    caps = device.capabilities()
    keys = set(caps.get(ecodes.EV_KEY, []))
    rels = set(caps.get(ecodes.EV_REL, []))

    categories = []
    if any(code < ecodes.BTN_MISC or code >= ecodes.KEY_OK for code in keys):
        categories.append(Category.KEYBOARD)
    if any(ecodes.BTN_MOUSE <= code <= ecodes.BTN_TASK for code in keys):
        categories.append(Category.MOUSE_BUTTON)
    if rels & {ecodes.REL_WHEEL, ecodes.REL_HWHEEL}:
        categories.append(Category.MOUSE_SCROLL)
    return categories


def set_nonblocking(device):
    fd = device.fd
    flags = fcntl.fcntl(fd, fcntl.F_GETFL)
    fcntl.fcntl(fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)


def autodetect_inputs():
    devices = []
    for path in list_devices(INPUT_DEVICE_DIR):
        try:
            dev = InputDevice(path)
        except OSError as e:
            logger.warning(f"Cannot open {path}: {e}")
            continue
        if device_categories(dev):
            devices.append(dev)
        else:
            dev.close()

    if not devices:
        raise CaptureError(f"No keyboard or mouse input devices could be opened {PERMISSION_HINT}")

    for dev in devices:
        set_nonblocking(dev)
    logger.info(f"Auto-detected {len(devices)} input devices: {', '.join(d.path for d in devices)}")
    return devices


def open_inputs(paths):
    devices = []
    try:
        for path in paths:
            dev = InputDevice(path)
            devices.append(dev)
            set_nonblocking(dev)
    except OSError as e:
        close_inputs(devices)
        raise CaptureError(f"Cannot open input device {path}: {e} {PERMISSION_HINT}") from e

    if not devices:
        raise CaptureError("No input devices given")
    return devices


def close_inputs(devices):
    for dev in devices:
        try:
            dev.close()
        except OSError as e:
            logger.warning(f"Failed to close {dev.path}: {e}")


def describe_inputs():
    """(path, name, categories) for every readable candidate device."""
    rows = []
    for path in list_devices(INPUT_DEVICE_DIR):
        try:
            dev = InputDevice(path)
        except OSError as e:
            logger.warning(f"Cannot open {path}: {e}")
            continue
        try:
            rows.append((dev.path, dev.name, device_categories(dev)))
        finally:
            dev.close()
    return rows
