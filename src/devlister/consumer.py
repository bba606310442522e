from .errors import RenderError
from .logger import get_logger
from .snapshot import render_snapshot, take_snapshot

logger = get_logger(__name__)


class EventConsumer:
    """
    Single consumer of the bridge. Owns the display buffer and the counters:
      - admits each received event into the buffer
      - bumps the lifetime counter of its category
      - snapshots both and redraws the whole terminal
    One event is processed to completion before the next receive.
    """

    def __init__(self, bridge, buffer, counters, terminal, render=render_snapshot):
        self.bridge = bridge
        self.buffer = buffer
        self.counters = counters
        self.terminal = terminal
        self.render = render
        self.processed = 0

    async def run(self):
        self.redraw()
        while True:
            event = await self.bridge.recv()
            if event is None:
                break
            self.handle(event)

        logger.info(f"Event stream closed after {self.processed} events")
        self.redraw(closed=True)
        return self.processed

    def handle(self, event):
        self.buffer.admit(event)
        self.counters.increment(event.category)
        self.processed += 1
        logger.debug(f"{event.category.label} event: {event}")
        self.redraw()

    def snapshot(self, closed=False):
        return take_snapshot(self.buffer, self.counters, closed=closed)

    def redraw(self, closed=False):
        try:
            frame = self.render(self.snapshot(closed=closed))
            self.terminal.write_frame(frame)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Failed to render frame: {e}") from e
