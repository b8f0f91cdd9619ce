"""Guarded scratch buffers for interactive editing hosts."""

__all__ = [
    "adapters",
    "buffers",
    "config",
    "host",
    "runtime",
    "selectors",
]

__version__ = "0.1.0"
