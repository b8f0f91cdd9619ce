"""In-memory editing host implementing every boundary protocol.

Used by the Textual demo and the test-suite; real editors provide their own
implementations of the protocols in :mod:`scratch_engine.host.protocols`.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from scratch_engine.buffers.names import numbered_suffix

from .protocols import DestroyDecision, HostEvent, SaveCancelled

PathProvider = Callable[["HostBuffer"], Optional[str]]


@dataclass(eq=False, slots=True)
class HostBuffer:
    """Buffer handle owned by ``MemoryRegistry``; equality is identity."""

    name: str
    text: str = ""
    path: Optional[str] = None
    modified: bool = False
    mode: Optional[str] = None

    def insert(self, text: str) -> None:
        self.text += text
        self.modified = True

    def replace(self, text: str) -> None:
        if text != self.text:
            self.text = text
            self.modified = True


class BufferExistsError(RuntimeError):
    """Raised when creating a buffer under a name that is already live."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Buffer '{name}' already exists")
        self.name = name


class EventDispatcher:
    """Per-event subscriber lists for host buffer notifications."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[HostBuffer], object]]] = {}

    def subscribe(
        self, event: HostEvent, callback: Callable[[HostBuffer], object]
    ) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(
        self, event: HostEvent, callback: Callable[[HostBuffer], object]
    ) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def subscriber_count(self, event: HostEvent) -> int:
        return len(self._subscribers.get(event, []))

    def after_save(self, buffer: HostBuffer) -> None:
        for callback in list(self._subscribers.get("after_save", [])):
            callback(buffer)

    def before_destroy(self, buffer: HostBuffer) -> DestroyDecision:
        decision = DestroyDecision.ALLOW
        for callback in list(self._subscribers.get("before_destroy", [])):
            if callback(buffer) is DestroyDecision.DEFER:
                decision = DestroyDecision.DEFER
        return decision

    def after_destroy(self, buffer: HostBuffer) -> None:
        for callback in list(self._subscribers.get("after_destroy", [])):
            callback(buffer)


class MemoryRegistry:
    def __init__(self, events: EventDispatcher) -> None:
        self.events = events
        self._buffers: Dict[str, HostBuffer] = {}

    def __iter__(self):
        return iter(list(self._buffers.values()))

    def __len__(self) -> int:
        return len(self._buffers)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._buffers)

    def lookup(self, name: str) -> Optional[HostBuffer]:
        return self._buffers.get(name)

    def create(self, name: str) -> HostBuffer:
        if name in self._buffers:
            raise BufferExistsError(name)
        buffer = HostBuffer(name=name)
        self._buffers[name] = buffer
        return buffer

    def generate_unique_name(self, base: str) -> str:
        if base not in self._buffers:
            return base
        return numbered_suffix(base, lambda name: name in self._buffers)

    def name_of(self, buffer: HostBuffer) -> str:
        return buffer.name

    def rename(self, buffer: HostBuffer, new_name: str) -> None:
        if new_name == buffer.name:
            return
        if new_name in self._buffers:
            raise BufferExistsError(new_name)
        self._buffers.pop(buffer.name, None)
        buffer.name = new_name
        self._buffers[new_name] = buffer

    def destroy(self, buffer: HostBuffer) -> bool:
        """Ask ``before_destroy`` subscribers, then drop the buffer if allowed."""

        if self._buffers.get(buffer.name) is not buffer:
            return False
        if self.events.before_destroy(buffer) is DestroyDecision.DEFER:
            return False
        del self._buffers[buffer.name]
        self.events.after_destroy(buffer)
        return True


class MemoryPersistence:
    """Keeps "saved files" in a dict and notifies ``after_save`` subscribers."""

    def __init__(
        self,
        events: EventDispatcher,
        *,
        ask_path: Optional[PathProvider] = None,
    ) -> None:
        self.events = events
        self.ask_path = ask_path or (lambda buffer: None)
        self.files: Dict[str, str] = {}

    def has_backing_file(self, buffer: HostBuffer) -> bool:
        return buffer.path is not None

    def is_modified(self, buffer: HostBuffer) -> bool:
        return buffer.modified

    def save(self, buffer: HostBuffer, path: Optional[str] = None) -> None:
        target = path or buffer.path
        if target is None:
            raise SaveCancelled(buffer.name, "has no file path")
        self.files[target] = buffer.text
        buffer.path = target
        buffer.modified = False
        self.events.after_save(buffer)

    def save_interactively(self, buffer: HostBuffer) -> None:
        path = buffer.path or self.ask_path(buffer)
        if not path:
            raise SaveCancelled(buffer.name)
        self.save(buffer, path)


class MemoryDisplay:
    def __init__(
        self, on_show: Optional[Callable[[HostBuffer, bool], None]] = None
    ) -> None:
        self.current: Optional[HostBuffer] = None
        self.history: List[Tuple[HostBuffer, bool]] = []
        self._on_show = on_show

    def show(self, buffer: HostBuffer, prefer_different_window: bool = False) -> None:
        self.current = buffer
        self.history.append((buffer, prefer_different_window))
        if self._on_show is not None:
            self._on_show(buffer, prefer_different_window)


class ScriptedPrompt:
    """Answers yes/no questions from a queue and records what was asked."""

    def __init__(self, answers: Iterable[bool] = (), *, default: bool = False) -> None:
        self._answers: Deque[bool] = deque(answers)
        self.default = default
        self.questions: List[str] = []

    def queue(self, *answers: bool) -> None:
        self._answers.extend(answers)

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        if self._answers:
            return self._answers.popleft()
        return self.default


def assign_mode(buffer: HostBuffer, mode: str) -> None:
    buffer.mode = mode


@dataclass
class MemoryHost:
    """Bundle of in-memory collaborators sharing one event dispatcher."""

    events: EventDispatcher = field(default_factory=EventDispatcher)
    prompt: ScriptedPrompt = field(default_factory=ScriptedPrompt)
    ask_path: Optional[PathProvider] = None
    on_show: Optional[Callable[[HostBuffer, bool], None]] = None
    registry: MemoryRegistry = field(init=False)
    persistence: MemoryPersistence = field(init=False)
    display: MemoryDisplay = field(init=False)

    def __post_init__(self) -> None:
        self.registry = MemoryRegistry(self.events)
        self.persistence = MemoryPersistence(self.events, ask_path=self.ask_path)
        self.display = MemoryDisplay(self.on_show)


__all__ = [
    "BufferExistsError",
    "EventDispatcher",
    "HostBuffer",
    "MemoryDisplay",
    "MemoryHost",
    "MemoryPersistence",
    "MemoryRegistry",
    "ScriptedPrompt",
    "assign_mode",
]
