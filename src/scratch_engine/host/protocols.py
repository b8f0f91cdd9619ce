"""Boundary protocols describing what the engine needs from an editing host."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Literal, Optional, Protocol, TypeVar

BufferT = TypeVar("BufferT")

HostEvent = Literal["after_save", "before_destroy", "after_destroy"]


class DestroyDecision(Enum):
    """Answer returned by ``before_destroy`` handlers."""

    ALLOW = "allow"
    DEFER = "defer"


class SaveCancelled(RuntimeError):
    """Raised by hosts when the user backs out of an interactive save."""

    def __init__(self, buffer_name: str, reason: str = "cancelled") -> None:
        super().__init__(f"Save of '{buffer_name}' {reason}")
        self.buffer_name = buffer_name
        self.reason = reason


class BufferRegistry(Protocol[BufferT]):
    """Creates and finds buffers by their host-unique name."""

    def lookup(self, name: str) -> Optional[BufferT]:
        ...

    def create(self, name: str) -> BufferT:
        ...

    def generate_unique_name(self, base: str) -> str:
        """Return a name derived from ``base`` that no live buffer uses."""
        ...

    def name_of(self, buffer: BufferT) -> str:
        ...


class Persistence(Protocol[BufferT]):
    """Answers file-backing questions and performs interactive saves."""

    def has_backing_file(self, buffer: BufferT) -> bool:
        ...

    def is_modified(self, buffer: BufferT) -> bool:
        ...

    def save_interactively(self, buffer: BufferT) -> None:
        """Save ``buffer``, asking the user for a path when it has none."""
        ...


class Display(Protocol[BufferT]):
    def show(self, buffer: BufferT, prefer_different_window: bool = False) -> None:
        ...


class ContentModeSelector(Protocol[BufferT]):
    """Best-effort mode selection; implementations must not raise."""

    def select_mode_for(self, buffer: BufferT, hint_path: str) -> Optional[str]:
        ...


class UserPrompt(Protocol):
    """Synchronous yes/no question put to the user."""

    def confirm(self, question: str) -> bool:
        ...


SaveHandler = Callable[[BufferT], None]
DestroyHandler = Callable[[BufferT], DestroyDecision]


class HostEvents(Protocol[BufferT]):
    """Observer registration for host buffer events."""

    def subscribe(
        self, event: HostEvent, callback: Callable[[BufferT], object]
    ) -> None:
        ...

    def unsubscribe(
        self, event: HostEvent, callback: Callable[[BufferT], object]
    ) -> None:
        ...


__all__ = [
    "BufferRegistry",
    "ContentModeSelector",
    "DestroyDecision",
    "DestroyHandler",
    "Display",
    "HostEvent",
    "HostEvents",
    "Persistence",
    "SaveCancelled",
    "SaveHandler",
    "UserPrompt",
]
