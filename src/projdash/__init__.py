"""Project-tracking dashboard state engine."""

__version__ = "0.1.0"
