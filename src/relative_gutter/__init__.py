"""Relative line-number margin engine for text editors."""

__all__ = [
    "adapters",
    "annotations",
    "buffer",
    "bus",
    "config",
    "engine",
    "errors",
    "host",
    "runtime",
    "viewport",
]

__version__ = "0.1.0"
