from __future__ import annotations

from typing import List, Tuple

from scratch_engine.adapters.textual import TextualScratchAdapter, TextualUIHooks
from scratch_engine.config import ScratchConfig
from scratch_engine.host import HostBuffer


def make_adapter(
    *, create_on_blank: bool = True
) -> Tuple[TextualScratchAdapter, List[str], List[str], List[Tuple[str, ...]]]:
    shown: List[str] = []
    statuses: List[str] = []
    listings: List[Tuple[str, ...]] = []
    hooks = TextualUIHooks(
        update_buffer=lambda buffer: shown.append(buffer.name),
        update_status=statuses.append,
        update_buffer_list=listings.append,
    )
    config = ScratchConfig(default_name="scratch", create_on_blank_name=create_on_blank)
    adapter = TextualScratchAdapter(hooks, config=config)
    return adapter, shown, statuses, listings


def current(adapter: TextualScratchAdapter) -> HostBuffer:
    buffer = adapter.current
    assert buffer is not None
    return buffer


def test_open_scratch_updates_ui() -> None:
    adapter, shown, statuses, listings = make_adapter()

    adapter.open_scratch()

    assert shown == ["scratch"]
    assert listings[-1] == ("scratch",)
    assert statuses[-1].startswith("scratch [protected")


def test_open_scratch_reports_unresolved_blank() -> None:
    adapter, shown, statuses, _listings = make_adapter(create_on_blank=False)

    adapter.open_scratch()

    assert shown == []
    assert statuses == ["No matching buffer"]


def test_kill_dirty_scratch_with_path_saves_it() -> None:
    adapter, _shown, _statuses, _listings = make_adapter()
    adapter.open_scratch("notes")
    adapter.edit_current("draft")
    assert adapter.needs_confirmation()

    destroyed = adapter.kill_current("/tmp/notes.txt")

    assert destroyed is True
    assert adapter.host.persistence.files == {"/tmp/notes.txt": "draft"}
    question = adapter.controller.config.question_for("notes")
    assert adapter.host.prompt.questions == [question]


def test_kill_dirty_scratch_discarding_reopens_default() -> None:
    adapter, shown, _statuses, _listings = make_adapter()
    adapter.open_scratch("notes")
    adapter.edit_current("draft")

    adapter.kill_current(None)

    assert adapter.host.persistence.files == {}
    assert current(adapter).name == "scratch"
    assert shown == ["notes", "scratch"]


def test_kill_with_blank_path_keeps_buffer() -> None:
    adapter, _shown, statuses, _listings = make_adapter()
    adapter.open_scratch("notes")
    adapter.edit_current("draft")

    destroyed = adapter.kill_current("   ")

    assert destroyed is False
    assert current(adapter).name == "notes"
    assert current(adapter).text == "draft"
    assert statuses[-1].startswith("Save cancelled")
    assert adapter.host.persistence.files == {}
    assert adapter.host.prompt.questions == []


def test_kill_last_buffer_without_blank_creation_clears_current() -> None:
    adapter, _shown, statuses, _listings = make_adapter(create_on_blank=False)
    adapter.open_scratch("notes")

    adapter.kill_current()

    assert adapter.current is None
    assert statuses[-1] == ""


def test_save_current_unprotects_buffer() -> None:
    adapter, _shown, statuses, _listings = make_adapter()
    adapter.open_scratch("notes.md")
    adapter.edit_current("# title")

    adapter.save_current("/tmp/notes.md")

    buffer = current(adapter)
    assert not adapter.controller.is_protected(buffer)
    assert not adapter.needs_confirmation()
    assert "unprotected" in statuses[-1]
    assert "markdown" in statuses[-1]


def test_save_current_without_path_is_cancelled() -> None:
    adapter, _shown, statuses, _listings = make_adapter()
    adapter.open_scratch("notes")

    assert adapter.needs_path()
    adapter.save_current()

    assert statuses[-1] == "Save cancelled"


def test_toggle_current_reports_state() -> None:
    adapter, _shown, statuses, _listings = make_adapter()
    adapter.open_scratch("notes")

    adapter.toggle_current()

    assert statuses[-1] == "notes: unprotected"
