from dataclasses import dataclass, field, fields, replace
import logging

import yaml

from .constants import (
    DEFAULT_EVICTION,
    DEFAULT_KEYBOARD_EVENTS,
    DEFAULT_LEGACY_EVENTS,
    DEFAULT_MOUSE_EVENTS,
    EVICTION_LEGACY,
    EVICTION_POLICIES,
    LOG_LEVEL,
)
from .errors import ConfigError
from .events import Category


@dataclass(frozen=True)
class Settings:
    max_keyboard_events: int = DEFAULT_KEYBOARD_EVENTS
    max_mouse_events: int = DEFAULT_MOUSE_EVENTS
    eviction: str = DEFAULT_EVICTION
    devices: tuple = field(default_factory=tuple)
    plain: bool = False
    log_level: str = logging.getLevelName(LOG_LEVEL)
    log_file: str = None

    def capacities(self):
        """Per-category capacities; both mouse categories share the mouse value."""
        return {
            Category.KEYBOARD: self.max_keyboard_events,
            Category.MOUSE_BUTTON: self.max_mouse_events,
            Category.MOUSE_SCROLL: self.max_mouse_events,
        }


SETTING_NAMES = {f.name for f in fields(Settings)}
CAPACITY_KEYS = ("max_keyboard_events", "max_mouse_events")


def load_yaml_config(path):
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _positive_int(key, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def _check(key, value):
    if key in ("max_keyboard_events", "max_mouse_events"):
        return _positive_int(key, value)
    if key == "eviction":
        if value not in EVICTION_POLICIES:
            raise ConfigError(f"eviction must be one of {', '.join(EVICTION_POLICIES)}, got {value!r}")
        return value
    if key == "devices":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)) or not all(isinstance(p, str) for p in value):
            raise ConfigError(f"devices must be a list of paths, got {value!r}")
        return tuple(value)
    if key == "plain":
        if not isinstance(value, bool):
            raise ConfigError(f"plain must be true or false, got {value!r}")
        return value
    if key == "log_level":
        level = str(value).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log level {value!r}")
        return level
    if key == "log_file":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"log_file must be a path, got {value!r}")
        return value
    raise ConfigError(f"Unknown configuration key {key!r}")


def apply_overrides(settings, overrides):
    """Return ``settings`` updated with every non-None value in ``overrides``."""
    changes = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in SETTING_NAMES:
            raise ConfigError(f"Unknown configuration key {key!r}")
        changes[key] = _check(key, value)
    return replace(settings, **changes)


def load_settings(config_path=None, overrides=None):
    """Defaults, then the YAML file, then command line overrides."""
    settings = Settings()
    explicit = set()
    for layer in (load_yaml_config(config_path) if config_path else {}, overrides or {}):
        settings = apply_overrides(settings, layer)
        explicit.update(key for key, value in layer.items() if value is not None)

    if settings.eviction == EVICTION_LEGACY:
        # Legacy shape: one smaller capacity unless a value was given
        settings = replace(settings, **{
            key: DEFAULT_LEGACY_EVENTS for key in CAPACITY_KEYS if key not in explicit
        })
    return settings
