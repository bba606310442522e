import curses
import io

import pytest

from devlister import terminal as terminal_mod
from devlister.constants import CLEAR_SCREEN
from devlister.errors import RenderError
from devlister.terminal import CursesTerminal, StreamTerminal


class FakeScreen:
    def __init__(self, rows=3, cols=10, fail=False):
        self.rows = rows
        self.cols = cols
        self.fail = fail
        self.calls = []

    def getmaxyx(self):
        return self.rows, self.cols

    def erase(self):
        self.calls.append(("erase",))

    def addnstr(self, row, col, text, n):
        if self.fail:
            raise curses.error("addnstr() returned ERR")
        self.calls.append(("addnstr", row, col, text, n))

    def refresh(self):
        self.calls.append(("refresh",))


@pytest.fixture
def fake_curses(monkeypatch):
    screen = FakeScreen()
    calls = []
    monkeypatch.setattr(terminal_mod.curses, "initscr", lambda: screen)
    for name in ("noecho", "cbreak", "nocbreak", "echo", "endwin", "flushinp"):
        monkeypatch.setattr(terminal_mod.curses, name, lambda name=name: calls.append(name))
    monkeypatch.setattr(terminal_mod.curses, "curs_set", lambda visibility: calls.append("curs_set"))
    return screen, calls


def test_stream_terminal_clears_then_writes():
    out = io.StringIO()
    term = StreamTerminal(out, input_stream=io.StringIO())
    term.open()
    term.write_frame("first\n")
    term.write_frame("second\n")
    term.close()

    assert out.getvalue() == f"{CLEAR_SCREEN}first\n{CLEAR_SCREEN}second\n"
    assert term.last_frame == "second\n"


def test_curses_frame_is_clipped_to_window(fake_curses):
    screen, calls = fake_curses
    term = CursesTerminal()
    term.open()
    term.write_frame("a\nb\nc\nd\ne\n")

    assert screen.calls[0] == ("erase",)
    writes = [c for c in screen.calls if c[0] == "addnstr"]
    assert [w[3] for w in writes] == ["a", "b", "c"]
    assert writes[-1][4] == 9
    assert screen.calls[-1] == ("refresh",)
    assert term.last_frame == "a\nb\nc\nd\ne\n"

    term.close()
    assert calls[-1] == "endwin"
    # closing twice is harmless
    term.close()
    assert calls.count("endwin") == 1


def test_curses_write_error_is_render_error(fake_curses):
    screen, _ = fake_curses
    screen.fail = True
    term = CursesTerminal()
    term.open()
    with pytest.raises(RenderError):
        term.write_frame("x\n")
    assert term.last_frame is None


def test_curses_init_failure(monkeypatch):
    def broken():
        raise curses.error("setupterm: could not find terminal")

    monkeypatch.setattr(terminal_mod.curses, "initscr", broken)
    with pytest.raises(RenderError):
        CursesTerminal().open()


def test_curses_close_discards_queued_keystrokes(fake_curses):
    _, calls = fake_curses
    term = CursesTerminal()
    term.open()
    term.close()
    assert "flushinp" in calls
    assert calls.index("flushinp") < calls.index("endwin")


class FakeTty(io.StringIO):
    def __init__(self, tty=True):
        super().__init__()
        self.tty = tty

    def isatty(self):
        return self.tty


def test_stream_close_flushes_tty_input(monkeypatch):
    flushed = []
    monkeypatch.setattr(terminal_mod.termios, "tcflush", lambda fd, queue: flushed.append((fd, queue)))
    tty = FakeTty()
    StreamTerminal(io.StringIO(), input_stream=tty).close()
    assert flushed == [(tty, terminal_mod.termios.TCIFLUSH)]


def test_stream_close_leaves_non_tty_input_alone(monkeypatch):
    flushed = []
    monkeypatch.setattr(terminal_mod.termios, "tcflush", lambda fd, queue: flushed.append(fd))
    StreamTerminal(io.StringIO(), input_stream=FakeTty(tty=False)).close()
    assert flushed == []
