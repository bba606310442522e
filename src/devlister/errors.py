class DevListerError(Exception):
    """Base class for every failure the lister reports to the user."""


class ConfigError(DevListerError):
    """Configuration file or option values are unusable."""


class CaptureError(DevListerError):
    """No input device could be opened for capture."""


class RenderError(DevListerError):
    """Building or writing a frame failed inside the consumer."""
