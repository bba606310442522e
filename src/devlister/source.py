# source.py

import signal

from gi.repository import GLib

from .classifier import classify_event
from .constants import CLOSE_SIGNALS
from .logger import get_logger

logger = get_logger(__name__)


class EvdevEventSource:
    """
    Watches input devices from the GLib main loop and feeds classified
    events into the bridge. Runs on the main thread; callbacks never block.

    A close request (SIGINT/SIGTERM/SIGHUP, or every device gone) stops all
    watches, closes the bridge and quits the loop.
    """

    def __init__(self, devices, bridge, classify=classify_event):
        self.devices = list(devices)
        self.bridge = bridge
        self.classify = classify
        self.loop = GLib.MainLoop()
        self._watches = {}
        self._signal_ids = []
        self._stopped = False
        self.dispatched = 0

    def run(self):
        """Block on the GLib main loop until a close request arrives."""
        self.start()
        try:
            self.loop.run()
        except KeyboardInterrupt:
            # PyGObject's own SIGINT fallback quits the loop and re-raises
            logger.info("Close requested by SIGINT")
        finally:
            self._shutdown()
            self._teardown()
        logger.info(f"Event source stopped after {self.dispatched} events")

    def start(self):
        cond = GLib.IO_IN | GLib.IO_ERR | GLib.IO_HUP
        for dev in self.devices:
            watch_id = GLib.io_add_watch(dev.fd, GLib.PRIORITY_DEFAULT, cond, self._on_io, dev)
            self._watches[dev.fd] = watch_id
            logger.debug(f"Watching device: {dev.path} ({dev.name})")

        for name in CLOSE_SIGNALS:
            signum = getattr(signal, name)
            self._signal_ids.append(
                GLib.unix_signal_add(GLib.PRIORITY_HIGH, signum, self._on_close_signal, name)
            )

    def request_stop(self):
        """Thread-safe close request, used when the consumer fails."""
        GLib.idle_add(self._shutdown)

    # ------------------------------------------------------------------
    # GLib callbacks
    # ------------------------------------------------------------------

    def _on_close_signal(self, name):
        logger.info(f"Close requested by {name}")
        self._shutdown()
        # Removed in _teardown
        return GLib.SOURCE_CONTINUE

    def _on_io(self, fd, condition, dev):
        if condition & (GLib.IO_ERR | GLib.IO_HUP):
            logger.warning(f"Device {dev.path} error/closed")
            return self._drop_device(dev)

        try:
            for raw in dev.read():
                self.dispatch(raw)
        except BlockingIOError:
            pass
        except OSError as e:
            logger.warning(f"Error reading {dev.path}: {e}")
            return self._drop_device(dev)
        return GLib.SOURCE_CONTINUE

    def dispatch(self, raw):
        if self._stopped:
            return
        event = self.classify(raw)
        if event is None:
            return
        if self.bridge.send(event):
            self.dispatched += 1

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _drop_device(self, dev):
        self._watches.pop(dev.fd, None)
        self.devices.remove(dev)
        if not self.devices:
            logger.info("No input devices left")
            self._shutdown()
        return GLib.SOURCE_REMOVE

    def _shutdown(self):
        if not self._stopped:
            self._stopped = True
            self.bridge.close()
            self.loop.quit()
        return GLib.SOURCE_REMOVE

    def _teardown(self):
        for watch_id in self._watches.values():
            GLib.source_remove(watch_id)
        self._watches.clear()
        for signal_id in self._signal_ids:
            GLib.source_remove(signal_id)
        self._signal_ids.clear()
