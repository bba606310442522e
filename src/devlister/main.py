import argparse
import asyncio
import sys
import threading

from . import __version__
from .bridge import Bridge
from .config import load_settings
from .constants import EVICTION_POLICIES, EXIT_FAILURE, EXIT_OK
from .consumer import EventConsumer
from .counters import CategoryCounters
from .display_buffer import make_display_buffer
from .errors import DevListerError
from .logger import configure_logging, get_logger, release_held_logs
from .terminal import CursesTerminal, StreamTerminal

logger = get_logger("devlister")


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="devlister",
        description="The hardware device event lister: live view of keyboard and mouse events.",
    )
    parser.add_argument("-k", "--max-keyboard-events", type=positive_int, metavar="N",
                        help="keyboard events kept on screen (default 12, legacy 6)")
    parser.add_argument("-m", "--max-mouse-events", type=positive_int, metavar="N",
                        help="mouse button and mouse scroll events kept on screen, each (default 12, legacy 6)")
    parser.add_argument("--max-events", type=positive_int, metavar="N",
                        help="one capacity for every category, overrides -k and -m")
    parser.add_argument("--eviction", choices=EVICTION_POLICIES,
                        help="strict: hard bound per category (default); "
                             "legacy: shared list with one slot of slack")
    parser.add_argument("-d", "--device", dest="devices", action="append", metavar="PATH",
                        help="input device to watch, repeatable (default: autodetect)")
    parser.add_argument("--list-devices", action="store_true",
                        help="list candidate input devices and exit")
    parser.add_argument("--plain", action="store_true", default=None,
                        help="write frames with ANSI clear instead of curses")
    parser.add_argument("-c", "--config", metavar="PATH", help="YAML configuration file")
    parser.add_argument("--log-level", metavar="LEVEL", help="logging level (default WARNING)")
    parser.add_argument("--log-file", metavar="PATH", help="also write log records to PATH")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args):
    overrides = {
        "max_keyboard_events": args.max_events or args.max_keyboard_events,
        "max_mouse_events": args.max_events or args.max_mouse_events,
        "eviction": args.eviction,
        "devices": args.devices,
        "plain": args.plain,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    return load_settings(args.config, overrides)


def print_devices():
    from .input_devices import describe_inputs

    rows = describe_inputs()
    if not rows:
        print("No readable input devices found.")
    for path, name, categories in rows:
        labels = ", ".join(c.label for c in categories) or "-"
        print(f"{path:<22} {name:<40} {labels}")


def make_terminal(settings):
    if settings.plain or not sys.stdout.isatty():
        return StreamTerminal(sys.stdout)
    return CursesTerminal()


class ConsumerThread(threading.Thread):
    """Runs the consumer coroutine on its own asyncio loop."""

    def __init__(self, consumer, loop, on_failure):
        super().__init__(name="Terminal User Interface", daemon=True)
        self.consumer = consumer
        self.loop = loop
        self.on_failure = on_failure
        self.error = None

    def run(self):
        asyncio.set_event_loop(self.loop)
        try:
            self.loop.run_until_complete(self.consumer.run())
        except Exception as e:
            self.error = e
            # Stop the source so it does not feed an unreceived bridge
            self.on_failure()
        finally:
            self.loop.close()


def monitor(settings, devices, terminal):
    """Run source and consumer until the stream closes. Returns the consumer error, if any."""
    from .source import EvdevEventSource

    loop = asyncio.new_event_loop()
    bridge = Bridge(loop)
    buffer = make_display_buffer(settings.eviction, settings.capacities())
    consumer = EventConsumer(bridge, buffer, CategoryCounters(), terminal)
    source = EvdevEventSource(devices, bridge)

    tui = ConsumerThread(consumer, loop, source.request_stop)
    tui.start()
    logger.debug("Consumer thread started")

    # GLib loop has to own the main thread
    source.run()

    tui.join()
    return tui.error


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.list_devices:
        print_devices()
        return EXIT_OK

    try:
        settings = settings_from_args(args)
        terminal = make_terminal(settings)
        # Console records would be drawn over the curses screen
        configure_logging(settings.log_level, settings.log_file,
                          hold_console=isinstance(terminal, CursesTerminal))
    except DevListerError as e:
        logger.error(f"{e}")
        return EXIT_FAILURE
    except ValueError as e:
        # dictConfig wraps handler failures such as an unwritable log file
        logger.error(f"Cannot configure logging: {e}")
        return EXIT_FAILURE

    from .input_devices import autodetect_inputs, close_inputs, open_inputs

    try:
        devices = open_inputs(settings.devices) if settings.devices else autodetect_inputs()
    except DevListerError as e:
        logger.error(f"{e}")
        release_held_logs()
        return EXIT_FAILURE

    try:
        terminal.open()
        error = monitor(settings, devices, terminal)
    except DevListerError as e:
        logger.error(f"{e}")
        return EXIT_FAILURE
    finally:
        terminal.close()
        release_held_logs()
        close_inputs(devices)

    if isinstance(terminal, CursesTerminal) and terminal.last_frame:
        # curses left the screen, keep the final frame visible
        sys.stdout.write(terminal.last_frame)

    if error is not None:
        logger.error(f"Terminal user interface failed: {error}")
        return EXIT_FAILURE
    return EXIT_OK


def run():
    sys.exit(main())
