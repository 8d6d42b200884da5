"""Client-side session controller for players hosted on a remote audio node."""

__version__ = "0.1.0"
