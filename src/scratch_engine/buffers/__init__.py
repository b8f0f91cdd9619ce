"""Scratch buffer naming, protection lifecycle, and composed commands."""

from .commands import ScratchCommands
from .lifecycle import BufferSnapshot, LifecycleController, ProtectionState
from .names import NameResolver, numbered_suffix

__all__ = [
    "BufferSnapshot",
    "LifecycleController",
    "NameResolver",
    "ProtectionState",
    "ScratchCommands",
    "numbered_suffix",
]
