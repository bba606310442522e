"""Live terminal lister of hardware keyboard and mouse events."""

__version__ = "0.1.0"
