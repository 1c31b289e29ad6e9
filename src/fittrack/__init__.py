"""fittrack: local storage for an exercise library and workout programs."""

__version__ = "0.1.0"
