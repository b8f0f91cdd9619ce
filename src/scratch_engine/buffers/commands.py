"""User-facing scratch commands composed from the lifecycle controller."""

from __future__ import annotations

from typing import Generic, Optional, Union

from scratch_engine.host.protocols import BufferT

from .lifecycle import LifecycleController, ProtectionState


class ScratchCommands(Generic[BufferT]):
    def __init__(self, controller: LifecycleController[BufferT]) -> None:
        self.controller = controller

    def scratch(
        self, buffer_or_name: Union[BufferT, str, None] = None
    ) -> Optional[BufferT]:
        """Switch to the named scratch buffer, creating it if necessary."""

        return self._show(buffer_or_name, prefer_different_window=False)

    def scratch_other_window(
        self, buffer_or_name: Union[BufferT, str, None] = None
    ) -> Optional[BufferT]:
        return self._show(buffer_or_name, prefer_different_window=True)

    def new_scratch(self, name: Optional[str] = None) -> BufferT:
        return self.controller.create_new(name)

    def protect(self, buffer: BufferT) -> None:
        self.controller.activate(buffer)

    def unprotect(self, buffer: BufferT) -> None:
        self.controller.deactivate(buffer)

    def toggle_protection(self, buffer: BufferT) -> ProtectionState:
        return self.controller.toggle(buffer)

    def _show(
        self,
        buffer_or_name: Union[BufferT, str, None],
        *,
        prefer_different_window: bool,
    ) -> Optional[BufferT]:
        buffer = self.controller.get_or_create(buffer_or_name)
        if buffer is not None:
            self.controller.display.show(
                buffer, prefer_different_window=prefer_different_window
            )
        return buffer


__all__ = ["ScratchCommands"]
