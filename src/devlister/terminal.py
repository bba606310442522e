import curses
import sys
import termios

from .constants import CLEAR_SCREEN
from .errors import RenderError


def flush_tty_input(stream):
    """Discard keystrokes queued on a tty so the shell does not run them after exit."""
    if stream is None or not stream.isatty():
        return
    try:
        termios.tcflush(stream, termios.TCIFLUSH)
    except (termios.error, OSError):
        pass  # not a real terminal after all


class CursesTerminal:
    """
    Full-screen curses output. Every frame erases the window and rewrites it.
    """

    def __init__(self):
        self.stdscr = None
        self.last_frame = None

    def open(self):
        try:
            self.stdscr = curses.initscr()
        except curses.error as e:
            raise RenderError(f"Cannot initialise terminal: {e}") from e
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # terminal cannot hide the cursor

    def write_frame(self, text):
        rows, cols = self.stdscr.getmaxyx()
        self.stdscr.erase()
        try:
            for row, line in enumerate(text.splitlines()[:rows]):
                # Last cell of the window cannot be written without an error
                width = cols - 1 if row == rows - 1 else cols
                self.stdscr.addnstr(row, 0, line, max(width, 0))
            self.stdscr.refresh()
        except curses.error as e:
            raise RenderError(f"Terminal write failed: {e}") from e
        self.last_frame = text

    def close(self):
        if self.stdscr is None:
            return
        self.stdscr = None
        # Monitored keys were also queued on the tty, never read
        curses.flushinp()
        curses.nocbreak()
        curses.echo()
        curses.endwin()


class StreamTerminal:
    """Plain output: ANSI clear and home, then the frame."""

    def __init__(self, stream, input_stream=None):
        self.stream = stream
        self.input_stream = input_stream
        self.last_frame = None

    def open(self):
        pass

    def write_frame(self, text):
        self.stream.write(CLEAR_SCREEN)
        self.stream.write(text)
        self.stream.flush()
        self.last_frame = text

    def close(self):
        flush_tty_input(self.input_stream if self.input_stream is not None else sys.stdin)
