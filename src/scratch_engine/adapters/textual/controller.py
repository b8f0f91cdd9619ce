"""Textual-facing adapter that drives scratch buffers on the in-memory host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from scratch_engine.buffers import LifecycleController, ProtectionState, ScratchCommands
from scratch_engine.config import ScratchConfig
from scratch_engine.host import HostBuffer, MemoryHost, ScriptedPrompt, assign_mode
from scratch_engine.selectors import ExtensionModeSelector


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[HostBuffer], None]
    update_status: Callable[[str], None] = _noop
    update_buffer_list: Callable[[Tuple[str, ...]], None] = _noop
    log: Callable[[str], None] = _noop


def create_memory_controller(
    host: MemoryHost, config: Optional[ScratchConfig] = None
) -> LifecycleController[HostBuffer]:
    """Wire a controller against every collaborator of ``host``."""

    return LifecycleController(
        registry=host.registry,
        persistence=host.persistence,
        display=host.display,
        mode_selector=ExtensionModeSelector(assign_mode),
        prompt=host.prompt,
        events=host.events,
        config=config,
    )


class TextualScratchAdapter:
    """Bridges the scratch commands and host events to a Textual surface.

    Textual confirms through modal screens, which answer asynchronously.
    The app collects the answer (and, for a save, the target path) first and
    hands it to ``kill_current``; the adapter replays it through the
    scripted prompt and path provider when the destroy hook asks.
    """

    def __init__(
        self, hooks: TextualUIHooks, *, config: Optional[ScratchConfig] = None
    ) -> None:
        self.hooks = hooks
        self._pending_path: Optional[str] = None
        self.host = MemoryHost(
            prompt=ScriptedPrompt(),
            ask_path=self._take_pending_path,
            on_show=self._on_show,
        )
        self.controller = create_memory_controller(self.host, config)
        self.commands = ScratchCommands(self.controller)
        self.host.events.subscribe("after_save", self._on_saved)
        self.host.events.subscribe("after_destroy", self._on_destroyed)

    @property
    def current(self) -> Optional[HostBuffer]:
        return self.host.display.current

    def open_scratch(self, name: str = "", *, other_window: bool = False) -> None:
        if other_window:
            buffer = self.commands.scratch_other_window(name)
        else:
            buffer = self.commands.scratch(name)
        if buffer is None:
            self.hooks.update_status("No matching buffer")

    def new_scratch(self, name: str = "") -> HostBuffer:
        return self.commands.new_scratch(name)

    def edit_current(self, text: str) -> None:
        buffer = self.current
        if buffer is None:
            return
        buffer.replace(text)
        self._refresh_status()

    def toggle_current(self) -> None:
        buffer = self.current
        if buffer is None:
            return
        state = self.commands.toggle_protection(buffer)
        self.hooks.update_status(f"{buffer.name}: {state.value}")

    def needs_path(self) -> bool:
        buffer = self.current
        return buffer is not None and buffer.path is None

    def save_current(self, path: Optional[str] = None) -> None:
        buffer = self.current
        if buffer is None:
            return
        if not (path or buffer.path):
            self.hooks.update_status("Save cancelled")
            return
        self.host.persistence.save(buffer, path)

    def needs_confirmation(self) -> bool:
        buffer = self.current
        return buffer is not None and self.controller.needs_confirmation(buffer)

    def question(self) -> str:
        buffer = self.current
        return self.controller.config.question_for(buffer.name if buffer else "")

    def kill_current(self, save_path: Optional[str] = None) -> bool:
        """Destroy the current buffer; ``save_path`` answers the save prompt."""

        buffer = self.current
        if buffer is None:
            return False
        if save_path is not None and not save_path.strip():
            self.hooks.update_status("Save cancelled: no path given")
            return False
        if self.controller.needs_confirmation(buffer):
            self.host.prompt.queue(save_path is not None)
            self._pending_path = save_path
        destroyed = self.host.registry.destroy(buffer)
        self._pending_path = None
        return destroyed

    def _take_pending_path(self, buffer: HostBuffer) -> Optional[str]:
        del buffer
        path, self._pending_path = self._pending_path, None
        return path

    def _on_show(self, buffer: HostBuffer, other_window: bool) -> None:
        self.hooks.log(f"show -> buffer={buffer.name!r} other_window={other_window}")
        self.hooks.update_buffer(buffer)
        self._refresh_buffer_list()
        self._refresh_status()

    def _on_saved(self, buffer: HostBuffer) -> None:
        self.hooks.log(f"saved -> buffer={buffer.name!r} path={buffer.path!r}")
        self._refresh_status()

    def _on_destroyed(self, buffer: HostBuffer) -> None:
        self.hooks.log(f"destroyed -> buffer={buffer.name!r}")
        if self.host.display.current is buffer:
            remaining = list(self.host.registry)
            if remaining:
                self.host.display.show(remaining[-1])
            elif self.commands.scratch() is None:
                self.host.display.current = None
                self._refresh_status()
        self._refresh_buffer_list()

    def _refresh_buffer_list(self) -> None:
        self.hooks.update_buffer_list(self.host.registry.names())

    def _refresh_status(self) -> None:
        buffer = self.current
        if buffer is None:
            self.hooks.update_status("")
            return
        state = self.controller.state_of(buffer)
        flags = [
            state.value if state else ProtectionState.UNPROTECTED.value,
            "modified" if buffer.modified else "clean",
            buffer.path or "no file",
            buffer.mode or "-",
        ]
        self.hooks.update_status(f"{buffer.name} [{' | '.join(flags)}]")


__all__ = ["TextualScratchAdapter", "TextualUIHooks", "create_memory_controller"]
