"""Protection state machine for scratch buffers and the host hooks guarding it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Iterator, Optional, Union

from scratch_engine.config import ScratchConfig
from scratch_engine.host.protocols import (
    BufferRegistry,
    BufferT,
    ContentModeSelector,
    DestroyDecision,
    Display,
    HostEvents,
    Persistence,
    SaveCancelled,
    UserPrompt,
)
from scratch_engine.runtime import telemetry

from .names import NameResolver

LOGGER_NAME = "scratch_engine.lifecycle"


class ProtectionState(Enum):
    PROTECTED = "protected"
    UNPROTECTED = "unprotected"


@dataclass(frozen=True, slots=True)
class BufferSnapshot:
    """Facts a hook decides from, captured once when the hook starts."""

    name: str
    state: Optional[ProtectionState]
    has_backing_file: bool
    modified: bool

    @property
    def protected(self) -> bool:
        return self.state is ProtectionState.PROTECTED


@dataclass(slots=True)
class _Entry(Generic[BufferT]):
    buffer: BufferT
    state: ProtectionState


class LifecycleController(Generic[BufferT]):
    """Owns scratch protection for every buffer this engine created.

    State lives in a side table keyed by buffer identity. The controller
    subscribes its hooks to ``events`` on construction and drops them again
    in ``close``.
    """

    def __init__(
        self,
        *,
        registry: BufferRegistry[BufferT],
        persistence: Persistence[BufferT],
        display: Display[BufferT],
        mode_selector: ContentModeSelector[BufferT],
        prompt: UserPrompt,
        events: HostEvents[BufferT],
        config: Optional[ScratchConfig] = None,
        names: Optional[NameResolver] = None,
    ) -> None:
        self.registry = registry
        self.persistence = persistence
        self.display = display
        self.mode_selector = mode_selector
        self.prompt = prompt
        self.events = events
        self.config = config or ScratchConfig()
        self.names = names or NameResolver()
        self._entries: Dict[int, _Entry[BufferT]] = {}
        self._closed = False
        events.subscribe("after_save", self.on_save_completed)
        events.subscribe("before_destroy", self.on_destroy_requested)
        events.subscribe("after_destroy", self.forget)

    def close(self) -> None:
        if self._closed:
            return
        self.events.unsubscribe("after_save", self.on_save_completed)
        self.events.unsubscribe("before_destroy", self.on_destroy_requested)
        self.events.unsubscribe("after_destroy", self.forget)
        self._closed = True

    # ------------------------------------------------------------------
    # creation
    def get_or_create(
        self, buffer_or_name: Union[BufferT, str, None] = None
    ) -> Optional[BufferT]:
        """Return the matching buffer, creating a protected one if needed.

        Existing buffers come back untouched. A blank request with blank
        creation disabled only ever looks up the ``""`` name and returns
        ``None`` when nothing matches.
        """

        if buffer_or_name is not None and not isinstance(buffer_or_name, str):
            return buffer_or_name

        name = self.names.resolve(buffer_or_name, self.config)
        existing = self.registry.lookup(name)
        if existing is not None or not name:
            return existing
        return self._create_protected(name)

    def create_new(self, name: Optional[str] = None) -> BufferT:
        """Create and show a fresh protected buffer, never reusing one."""

        base = self.names.resolve(name, self.config, force_default=True)
        unique = self.names.uniquify(
            base, self.registry.lookup, self.registry.generate_unique_name
        )
        buffer = self._create_protected(unique)
        self.display.show(buffer, prefer_different_window=False)
        return buffer

    def _create_protected(self, name: str) -> BufferT:
        with telemetry.span(
            "scratch::create",
            logger_name=LOGGER_NAME,
            component="lifecycle",
            metadata={"buffer": name},
        ) as handle:
            buffer = self.registry.create(name)
            self._entries[id(buffer)] = _Entry(buffer, ProtectionState.PROTECTED)
            mode = self._select_mode(buffer, name)
            handle.add_metadata("mode", mode or "-")
        telemetry.record_event(
            "scratch.created",
            data={"buffer": name, "mode": mode},
            logger_name=LOGGER_NAME,
        )
        return buffer

    def _select_mode(self, buffer: BufferT, name: str) -> Optional[str]:
        try:
            return self.mode_selector.select_mode_for(buffer, name)
        except Exception as exc:  # mode selection is advisory
            telemetry.record_event(
                "scratch.mode_failed",
                level="warning",
                data={"buffer": name, "reason": repr(exc)},
                logger_name=LOGGER_NAME,
            )
            return None

    # ------------------------------------------------------------------
    # manual protection
    def state_of(self, buffer: BufferT) -> Optional[ProtectionState]:
        entry = self._entries.get(id(buffer))
        return entry.state if entry is not None else None

    def is_protected(self, buffer: BufferT) -> bool:
        return self.state_of(buffer) is ProtectionState.PROTECTED

    def protected_buffers(self) -> Iterator[BufferT]:
        for entry in list(self._entries.values()):
            if entry.state is ProtectionState.PROTECTED:
                yield entry.buffer

    def activate(self, buffer: BufferT) -> None:
        self._set_state(buffer, ProtectionState.PROTECTED, reason="activate")

    def deactivate(self, buffer: BufferT) -> None:
        self._set_state(buffer, ProtectionState.UNPROTECTED, reason="deactivate")

    def toggle(self, buffer: BufferT) -> ProtectionState:
        if self.is_protected(buffer):
            self.deactivate(buffer)
            return ProtectionState.UNPROTECTED
        self.activate(buffer)
        return ProtectionState.PROTECTED

    def forget(self, buffer: BufferT) -> None:
        """Drop the state entry of a buffer the host has destroyed."""

        self._entries.pop(id(buffer), None)

    def _set_state(
        self, buffer: BufferT, state: ProtectionState, *, reason: str
    ) -> None:
        entry = self._entries.get(id(buffer))
        if entry is None:
            entry = self._entries[id(buffer)] = _Entry(buffer, state)
        elif entry.state is state:
            return
        entry.state = state
        telemetry.record_event(
            f"scratch.{state.value}",
            data={"buffer": self.registry.name_of(buffer), "reason": reason},
            logger_name=LOGGER_NAME,
        )

    # ------------------------------------------------------------------
    # host hooks
    def snapshot(self, buffer: BufferT) -> BufferSnapshot:
        return BufferSnapshot(
            name=self.registry.name_of(buffer),
            state=self.state_of(buffer),
            has_backing_file=self.persistence.has_backing_file(buffer),
            modified=self.persistence.is_modified(buffer),
        )

    def on_save_completed(self, buffer: BufferT) -> None:
        snap = self.snapshot(buffer)
        if snap.protected and snap.has_backing_file:
            self._set_state(buffer, ProtectionState.UNPROTECTED, reason="saved")

    def needs_confirmation(self, buffer: BufferT) -> bool:
        return self._needs_confirmation(self.snapshot(buffer))

    @staticmethod
    def _needs_confirmation(snap: BufferSnapshot) -> bool:
        return snap.protected and snap.modified and not snap.has_backing_file

    def on_destroy_requested(self, buffer: BufferT) -> DestroyDecision:
        """Offer a save for unsaved scratch content, then allow destruction."""

        snap = self.snapshot(buffer)
        if not self._needs_confirmation(snap):
            return DestroyDecision.ALLOW

        with telemetry.span(
            "scratch::destroy_requested",
            logger_name=LOGGER_NAME,
            component="lifecycle",
            metadata={"buffer": snap.name},
        ) as handle:
            answer = self.prompt.confirm(self.config.question_for(snap.name))
            handle.add_metadata("answer", "yes" if answer else "no")
            telemetry.record_event(
                "scratch.destroy_prompt",
                data={"buffer": snap.name, "save": answer},
                logger_name=LOGGER_NAME,
            )
            if answer:
                self._save_before_destroy(buffer, snap)
        return DestroyDecision.ALLOW

    def _save_before_destroy(self, buffer: BufferT, snap: BufferSnapshot) -> None:
        try:
            self.persistence.save_interactively(buffer)
        except SaveCancelled as exc:
            telemetry.record_event(
                "scratch.save_failed",
                level="warning",
                data={"buffer": snap.name, "reason": exc.reason},
                logger_name=LOGGER_NAME,
            )
        except Exception as exc:  # host save errors never block destruction
            telemetry.record_event(
                "scratch.save_failed",
                level="warning",
                data={"buffer": snap.name, "reason": repr(exc)},
                logger_name=LOGGER_NAME,
            )


__all__ = ["BufferSnapshot", "LifecycleController", "ProtectionState"]
