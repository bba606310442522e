"""Hand-off channel between the device event source and the render consumer.

The source runs on the GLib main loop thread and must never block, the
consumer is a coroutine on its own asyncio loop. Every ``send`` is scheduled
onto the consumer loop with ``call_soon_threadsafe``, which keeps the order
in which the source thread issued them.
"""

import asyncio
import threading

from .logger import get_logger

logger = get_logger(__name__)

_END_OF_STREAM = object()


class Bridge:
    def __init__(self, loop):
        self._loop = loop
        self._queue = asyncio.Queue()
        self._closed = False
        self._drained = False
        self._lock = threading.Lock()

    @property
    def closed(self):
        return self._closed

    def send(self, event):
        """Fire-and-forget enqueue from any thread. Never blocks, never raises."""
        with self._lock:
            if self._closed:
                logger.debug(f"Bridge closed, dropping {event!r}")
                return False
            return self._schedule(event)

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._schedule(_END_OF_STREAM)
        logger.debug("Bridge closed")

    def _schedule(self, item):
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError as e:
            # Consumer loop is already closed
            logger.debug(f"Bridge send not delivered: {e}")
            return False
        return True

    async def recv(self):
        """Next event in delivery order, or ``None`` once the stream has ended."""
        if self._drained:
            return None
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            self._drained = True
            return None
        return item
