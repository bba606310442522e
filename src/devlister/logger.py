#logger.py

import logging
import logging.config
import logging.handlers

from .constants import LOG_FORMAT, LOG_LEVEL

#Records held while curses owns the screen
HELD_RECORDS = 10000


def build_logging_config(level=LOG_LEVEL, log_file=None, hold_console=False):
    """Return a dictConfig mapping with a console handler and, if asked, a file handler.

    With ``hold_console`` the console handler only receives records through a
    memory handler, released by :func:`release_held_logs`.
    """
    if isinstance(level, int):
        level = logging.getLevelName(level)

    handlers = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "detailed",
            "stream": "ext://sys.stderr",
        },
    }
    root_handlers = ["console"]

    if hold_console:
        handlers["held"] = {
            "level": level,
            "class": "logging.handlers.MemoryHandler",
            "capacity": HELD_RECORDS,
            "flushLevel": logging.CRITICAL,
            "target": "console",
        }
        root_handlers = ["held"]

    #Only persist when a file was requested
    if log_file:
        handlers["file"] = {
            "level": level,
            "class": "logging.FileHandler",
            "filename": log_file,
            "formatter": "detailed",
        }
        root_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": LOG_FORMAT
            },
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": root_handlers
        },
    }


def configure_logging(level=LOG_LEVEL, log_file=None, hold_console=False):
    logging.config.dictConfig(build_logging_config(level, log_file, hold_console))


def release_held_logs():
    """Write out console records held back during a curses session."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.MemoryHandler):
            handler.flush()


def get_logger(scope_name: str = __name__) -> logging.Logger:
    """Returns a scoped logger for the given module/class/function."""
    return logging.getLogger(scope_name)
