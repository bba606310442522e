import os

import pytest

pytest.importorskip("gi")
pytest.importorskip("evdev")
from evdev import InputEvent, ecodes
from gi.repository import GLib

from devlister.source import EvdevEventSource


class FakeBridge:
    def __init__(self, accept=True):
        self.sent = []
        self.closed = False
        self.accept = accept

    def send(self, event):
        self.sent.append(event)
        return self.accept

    def close(self):
        self.closed = True


class FakeDevice:
    def __init__(self, path="/dev/input/event9", events=None, error=None):
        self.path = path
        self.name = "Fake Keyboard"
        self.fd = -1
        self.events = list(events or [])
        self.error = error

    def read(self):
        if self.error:
            raise self.error
        if not self.events:
            raise BlockingIOError
        events, self.events = self.events, []
        return iter(events)


def key_raw(code, value=1):
    return InputEvent(0, 0, ecodes.EV_KEY, code, value)


def pump():
    context = GLib.MainContext.default()
    while context.pending():
        context.iteration(False)


def test_io_dispatches_classified_events_in_order():
    dev = FakeDevice(events=[
        key_raw(ecodes.KEY_A),
        InputEvent(0, 0, ecodes.EV_SYN, ecodes.SYN_REPORT, 0),
        key_raw(ecodes.KEY_B),
        InputEvent(0, 0, ecodes.EV_REL, ecodes.REL_WHEEL, 1),
    ])
    bridge = FakeBridge()
    source = EvdevEventSource([dev], bridge)

    assert source._on_io(dev.fd, GLib.IO_IN, dev) == GLib.SOURCE_CONTINUE
    assert [e.category.label for e in bridge.sent] == ["Keyboard", "Keyboard", "MouseScroll"]
    assert bridge.sent[0].keycode == ecodes.KEY_A
    assert source.dispatched == 3

    # nothing pending is not an error
    assert source._on_io(dev.fd, GLib.IO_IN, dev) == GLib.SOURCE_CONTINUE


def test_losing_last_device_closes_bridge():
    first, second = FakeDevice("/dev/input/event1"), FakeDevice("/dev/input/event2", error=OSError(19, "No such device"))
    bridge = FakeBridge()
    source = EvdevEventSource([first, second], bridge)

    assert source._on_io(second.fd, GLib.IO_IN, second) == GLib.SOURCE_REMOVE
    assert not bridge.closed

    assert source._on_io(first.fd, GLib.IO_HUP, first) == GLib.SOURCE_REMOVE
    assert bridge.closed


def test_request_stop_closes_bridge_and_stops_dispatch():
    bridge = FakeBridge()
    source = EvdevEventSource([FakeDevice()], bridge)
    source.request_stop()
    pump()
    assert bridge.closed

    source.dispatch(key_raw(ecodes.KEY_A))
    assert bridge.sent == []


def test_run_until_device_hangs_up():
    read_fd, write_fd = os.pipe()
    dev = FakeDevice(events=[key_raw(ecodes.KEY_A), key_raw(ecodes.KEY_A, 0)])
    dev.fd = read_fd
    os.write(write_fd, b"x")

    def read():
        os.read(read_fd, 1)
        return FakeDevice.read(dev)

    dev.read = read
    bridge = FakeBridge()
    source = EvdevEventSource([dev], bridge)
    GLib.timeout_add(100, lambda: os.close(write_fd) or GLib.SOURCE_REMOVE)
    try:
        source.run()
    finally:
        os.close(read_fd)

    assert len(bridge.sent) == 2
    assert bridge.closed


def test_undelivered_sends_are_not_counted():
    bridge = FakeBridge(accept=False)
    source = EvdevEventSource([FakeDevice()], bridge)
    source.dispatch(key_raw(ecodes.KEY_A))
    assert len(bridge.sent) == 1
    assert source.dispatched == 0
