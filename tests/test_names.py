from __future__ import annotations

from typing import Dict, Optional

from scratch_engine.buffers import NameResolver, numbered_suffix
from scratch_engine.config import ScratchConfig


def make_lookup(*names: str):
    live: Dict[str, object] = {name: object() for name in names}

    def lookup(name: str) -> Optional[object]:
        return live.get(name)

    return lookup


def test_resolve_returns_non_blank_request_unchanged() -> None:
    resolver = NameResolver()

    assert resolver.resolve("notes", ScratchConfig()) == "notes"
    assert resolver.resolve(" spaced ", ScratchConfig()) == " spaced "


def test_resolve_blank_uses_default_when_enabled() -> None:
    resolver = NameResolver()
    config = ScratchConfig(default_name="scratch", create_on_blank_name=True)

    assert resolver.resolve("", config) == "scratch"
    assert resolver.resolve(None, config) == "scratch"


def test_resolve_blank_is_lookup_only_when_disabled() -> None:
    resolver = NameResolver()
    config = ScratchConfig(default_name="scratch", create_on_blank_name=False)

    assert resolver.resolve("", config) == ""
    assert resolver.resolve("", config, force_default=True) == "scratch"


def test_resolve_reads_config_changes_between_calls() -> None:
    resolver = NameResolver()
    config = ScratchConfig(default_name="first")

    before = resolver.resolve("", config)
    config.default_name = "second"
    after = resolver.resolve("", config)

    assert (before, after) == ("first", "second")


def test_numbered_suffix_skips_taken_names() -> None:
    taken = {"log<2>", "log<3>"}

    assert numbered_suffix("log", taken.__contains__) == "log<4>"


def test_uniquify_keeps_free_base_name() -> None:
    resolver = NameResolver()

    assert resolver.uniquify("scratch", make_lookup("other")) == "scratch"


def test_uniquify_falls_back_to_numbered_suffix() -> None:
    resolver = NameResolver()

    result = resolver.uniquify("scratch", make_lookup("scratch", "scratch<2>"))

    assert result == "scratch<3>"


def test_uniquify_prefers_host_scheme() -> None:
    resolver = NameResolver()
    lookup = make_lookup("scratch")

    result = resolver.uniquify("scratch", lookup, lambda base: f"{base}-copy")

    assert result == "scratch-copy"


def test_uniquify_reflects_current_names_on_every_call() -> None:
    resolver = NameResolver()
    live: Dict[str, object] = {}

    first = resolver.uniquify("scratch", live.get)
    live[first] = object()
    second = resolver.uniquify("scratch", live.get)

    assert first == "scratch"
    assert second == "scratch<2>"
