import logging

# ================================
# Logging
# ================================
LOG_LEVEL = logging.WARNING
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"

# ================================
# Display buffer
# ================================
DEFAULT_KEYBOARD_EVENTS = 12
DEFAULT_MOUSE_EVENTS = 12
DEFAULT_LEGACY_EVENTS = 6   # single capacity of the legacy shape

EVICTION_STRICT = "strict"   # one ring per category, hard bound
EVICTION_LEGACY = "legacy"   # shared sequence, one slot of slack
EVICTION_POLICIES = (EVICTION_STRICT, EVICTION_LEGACY)
DEFAULT_EVICTION = EVICTION_STRICT

# ================================
# Terminal
# ================================
TITLE = "Hardware device events"
QUIT_HINT = "Ctrl+C to quit"
CLEAR_SCREEN = "\x1b[2J\x1b[H"

# ================================
# Input devices
# ================================
INPUT_DEVICE_DIR = "/dev/input"
CLOSE_SIGNALS = ("SIGINT", "SIGTERM", "SIGHUP")

# ================================
# Exit codes
# ================================
EXIT_OK = 0
EXIT_FAILURE = 1
