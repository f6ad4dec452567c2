"""Monthly book club nominations and two-round selection polls."""

__version__ = "0.1.0"
