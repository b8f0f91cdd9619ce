"""Host boundary: collaborator protocols and an in-memory reference host."""

from .memory import (
    BufferExistsError,
    EventDispatcher,
    HostBuffer,
    MemoryDisplay,
    MemoryHost,
    MemoryPersistence,
    MemoryRegistry,
    ScriptedPrompt,
    assign_mode,
)
from .protocols import (
    BufferRegistry,
    ContentModeSelector,
    DestroyDecision,
    Display,
    HostEvents,
    Persistence,
    SaveCancelled,
    UserPrompt,
)

__all__ = [
    "BufferExistsError",
    "BufferRegistry",
    "ContentModeSelector",
    "DestroyDecision",
    "Display",
    "EventDispatcher",
    "HostBuffer",
    "HostEvents",
    "MemoryDisplay",
    "MemoryHost",
    "MemoryPersistence",
    "MemoryRegistry",
    "Persistence",
    "SaveCancelled",
    "ScriptedPrompt",
    "UserPrompt",
    "assign_mode",
]
