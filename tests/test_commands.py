from __future__ import annotations

from scratch_engine.adapters.textual import create_memory_controller
from scratch_engine.buffers import ProtectionState, ScratchCommands
from scratch_engine.config import ScratchConfig
from scratch_engine.host import HostBuffer, MemoryHost


def make_commands(
    *, create_on_blank: bool = True
) -> tuple[MemoryHost, ScratchCommands[HostBuffer]]:
    host = MemoryHost()
    config = ScratchConfig(default_name="scratch", create_on_blank_name=create_on_blank)
    controller = create_memory_controller(host, config)
    return host, ScratchCommands(controller)


def test_scratch_creates_and_shows_in_current_window() -> None:
    host, commands = make_commands()

    buffer = commands.scratch("notes")

    assert buffer is not None
    assert host.display.history == [(buffer, False)]
    assert commands.controller.is_protected(buffer)


def test_scratch_other_window_prefers_different_window() -> None:
    host, commands = make_commands()

    buffer = commands.scratch_other_window()

    assert buffer is not None
    assert buffer.name == "scratch"
    assert host.display.history == [(buffer, True)]


def test_scratch_shows_nothing_when_blank_is_unresolved() -> None:
    host, commands = make_commands(create_on_blank=False)

    assert commands.scratch() is None
    assert host.display.history == []


def test_new_scratch_never_reuses() -> None:
    host, commands = make_commands()
    existing = commands.scratch("scratch")

    fresh = commands.new_scratch("scratch")

    assert fresh is not existing
    assert fresh.name == "scratch<2>"
    assert host.display.current is fresh


def test_protection_commands_toggle_state() -> None:
    _host, commands = make_commands()
    buffer = commands.scratch("notes")
    assert buffer is not None

    commands.unprotect(buffer)
    unprotected = commands.controller.state_of(buffer)
    commands.protect(buffer)
    protected = commands.controller.state_of(buffer)

    assert unprotected is ProtectionState.UNPROTECTED
    assert protected is ProtectionState.PROTECTED
    assert commands.toggle_protection(buffer) is ProtectionState.UNPROTECTED
