from __future__ import annotations

import pytest

from scratch_engine.config import DEFAULT_SCRATCH_NAME, ScratchConfig
from scratch_engine.host import HostBuffer, assign_mode
from scratch_engine.selectors import ExtensionModeSelector


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        ("sketch.py", "python"),
        ("README.MD", "markdown"),
        ("notes.json<2>", "json"),
        ("*scratch*", "text"),
        (".bashrc", "text"),
        ("dir.d/plain", "text"),
    ],
)
def test_mode_for_uses_suffix(hint: str, expected: str) -> None:
    selector = ExtensionModeSelector(assign_mode)

    assert selector.mode_for(hint) == expected


def test_select_mode_without_fallback_leaves_buffer_alone() -> None:
    selector = ExtensionModeSelector(assign_mode, fallback=None)
    buffer = HostBuffer(name="notes")

    assert selector.select_mode_for(buffer, "notes") is None
    assert buffer.mode is None


def test_custom_table_overrides_defaults() -> None:
    selector = ExtensionModeSelector(assign_mode, table={".LOG": "log"})
    buffer = HostBuffer(name="build.log")

    selector.select_mode_for(buffer, buffer.name)

    assert buffer.mode == "log"
    assert selector.mode_for("x.py") == "text"


def test_config_defaults() -> None:
    config = ScratchConfig()

    assert config.default_name == DEFAULT_SCRATCH_NAME
    assert config.create_on_blank_name is True
    assert "notes" in config.question_for("notes")


def test_config_rejects_empty_default_name() -> None:
    with pytest.raises(ValueError):
        ScratchConfig(default_name="")


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCRATCH_ENGINE_DEFAULT_NAME", "jot")
    monkeypatch.setenv("SCRATCH_ENGINE_CREATE_ON_BLANK", "off")
    monkeypatch.setenv("SCRATCH_ENGINE_CONFIRM_MESSAGE", "Keep {name}?")

    config = ScratchConfig.from_env()

    assert config.default_name == "jot"
    assert config.create_on_blank_name is False
    assert config.question_for("jot") == "Keep jot?"


def test_select_mode_survives_failing_assign() -> None:
    def refuse(buffer: HostBuffer, mode: str) -> None:
        raise RuntimeError("read-only buffer")

    selector = ExtensionModeSelector(refuse)
    buffer = HostBuffer(name="notes.py")

    assert selector.select_mode_for(buffer, "notes.py") is None
    assert buffer.mode is None


@pytest.mark.parametrize(
    "template", ["Save {buffer} first?", "Save {}?", "Save {0}?", "Save {"]
)
def test_config_rejects_bad_confirm_message(template: str) -> None:
    with pytest.raises(ValueError):
        ScratchConfig(confirm_message=template)


def test_config_accepts_name_conversions() -> None:
    config = ScratchConfig(confirm_message="Save {name!r}?")

    assert config.question_for("notes") == "Save 'notes'?"


def test_config_from_env_rejects_bad_confirm_message(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SCRATCH_ENGINE_CONFIRM_MESSAGE", "Keep {buffer}?")

    with pytest.raises(ValueError):
        ScratchConfig.from_env()
