"""Executable Textual app demonstrating guarded scratch buffers."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.screen import ModalScreen
    from textual.widgets import Button, Footer, Header, Input, Label, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use scratch_engine.adapters.textual.app"
    ) from exc

from scratch_engine.config import ScratchConfig
from scratch_engine.host import HostBuffer
from scratch_engine.runtime import telemetry

from .controller import TextualScratchAdapter, TextualUIHooks


class TextPromptScreen(ModalScreen[Optional[str]]):
    """Single-line prompt; dismisses with the text, or ``None`` on escape."""

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, label: str, value: str = "") -> None:
        super().__init__()
        self._label = label
        self._value = value

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Label(self._label)
            yield Input(value=self._value, id="prompt-input")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip())

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmSaveScreen(ModalScreen[Optional[str]]):
    """Save-or-discard dialog; dismisses with a path, or ``None`` to discard."""

    BINDINGS = [("escape", "discard", "Discard")]

    def __init__(self, question: str, suggested_path: str) -> None:
        super().__init__()
        self._question = question
        self._suggested_path = suggested_path

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Label(self._question)
            yield Input(value=self._suggested_path, id="save-path")
            with Horizontal():
                yield Button("Save", id="save", variant="primary")
                yield Button("Discard", id="discard", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self._dismiss_with_path(self.query_one("#save-path", Input).value)
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._dismiss_with_path(event.value)

    def _dismiss_with_path(self, raw: str) -> None:
        path = raw.strip()
        if not path:
            self.notify(
                "Enter a path to save to, or choose Discard.", severity="warning"
            )
            return
        self.dismiss(path)

    def action_discard(self) -> None:
        self.dismiss(None)


@dataclass
class UIState:
    buffer_name: str = ""
    status_text: str = ""
    buffer_names: Tuple[str, ...] = ()


class ScratchEngineApp(App[None]):
    """Minimal editor whose buffers are guarded by the scratch engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
		border: round $accent;
	}

	#buffer-list {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	.dialog {
		width: 70;
		height: auto;
		border: thick $accent;
		background: $surface;
		padding: 1 2;
	}

	ModalScreen {
		align: center middle;
	}
	"""

    BINDINGS = [
        ("ctrl+n", "new_scratch", "New scratch"),
        ("ctrl+o", "open_scratch", "Open scratch"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+w", "kill_buffer", "Kill buffer"),
        ("ctrl+t", "toggle_protection", "Toggle protection"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, config: Optional[ScratchConfig] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._config = config or ScratchConfig.from_env()
        self.adapter: TextualScratchAdapter | None = None
        self._editor: TextArea | None = None
        self._status_widget: Static | None = None
        self._list_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._list_widget = Static("", id="buffer-list")
        yield self._list_widget
        self._editor = TextArea("", id="editor")
        yield self._editor
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            update_buffer_list=self._update_buffer_list,
            log=self._log_line,
        )
        self.adapter = TextualScratchAdapter(hooks, config=self._config)
        self.adapter.open_scratch()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.edit_current(event.text_area.text)

    def action_new_scratch(self) -> None:
        if self.adapter:
            self.adapter.new_scratch()

    def action_open_scratch(self) -> None:
        def opened(name: Optional[str]) -> None:
            if self.adapter and name is not None:
                self.adapter.open_scratch(name)

        self.push_screen(TextPromptScreen("Scratch buffer name:"), opened)

    def action_save(self) -> None:
        adapter = self.adapter
        if adapter is None:
            return
        if not adapter.needs_path():
            adapter.save_current()
            return

        def saved(path: Optional[str]) -> None:
            adapter.save_current(path or None)

        self.push_screen(
            TextPromptScreen("Save as:", self._suggest_path()), saved
        )

    def action_kill_buffer(self) -> None:
        adapter = self.adapter
        if adapter is None:
            return
        if not adapter.needs_confirmation():
            adapter.kill_current()
            return

        def answered(path: Optional[str]) -> None:
            adapter.kill_current(path)

        self.push_screen(
            ConfirmSaveScreen(adapter.question(), self._suggest_path()), answered
        )

    def action_toggle_protection(self) -> None:
        if self.adapter:
            self.adapter.toggle_current()

    def _suggest_path(self) -> str:
        name = self._state.buffer_name.strip("*") or "scratch"
        return name if "." in name else f"{name}.txt"

    def _update_buffer(self, buffer: HostBuffer) -> None:
        self._state.buffer_name = buffer.name
        if self._editor:
            self._editor.load_text(buffer.text)
        self.sub_title = buffer.name

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _update_buffer_list(self, names: Tuple[str, ...]) -> None:
        self._state.buffer_names = names
        if self._list_widget:
            self._list_widget.update("  ".join(names))

    def _log_line(self, line: str) -> None:
        telemetry.record_event(
            "ui.log", level="debug", data={"line": line}, logger_name="scratch_engine.ui"
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the scratch engine Textual demo.")
    parser.add_argument(
        "--name",
        default=os.environ.get("SCRATCH_ENGINE_DEFAULT_NAME"),
        help="Default scratch buffer name (default: *scratch*)",
    )
    parser.add_argument(
        "--no-create-on-blank",
        action="store_true",
        help="Do not create the default buffer for blank names",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Logging preset to apply before starting (default: production)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # console handlers would draw over the TUI
    telemetry.configure(preset=args.log_preset or "production")
    config = ScratchConfig.from_env()
    if args.name:
        config.default_name = args.name
    if args.no_create_on_blank:
        config.create_on_blank_name = False
    ScratchEngineApp(config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
