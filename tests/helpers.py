from devlister.events import KeyboardEvent, KeyState, MouseButtonEvent, MouseScrollEvent, ScrollAxis


class FakeTerminal:
    def __init__(self, fail_after=None):
        self.frames = []
        self.opened = False
        self.closed = False
        self.fail_after = fail_after
        self.last_frame = None

    def open(self):
        self.opened = True

    def write_frame(self, text):
        if self.fail_after is not None and len(self.frames) >= self.fail_after:
            raise OSError("terminal went away")
        self.frames.append(text)
        self.last_frame = text

    def close(self):
        self.closed = True


def key(code, state=KeyState.PRESSED, name=None):
    return KeyboardEvent(keycode=code, state=state, name=name or f"KEY_{code}")


def button(code=272, state=KeyState.PRESSED):
    return MouseButtonEvent(button=code, state=state, name="BTN_LEFT")


def scroll(delta=1, axis=ScrollAxis.VERTICAL):
    return MouseScrollEvent(delta=delta, axis=axis)
