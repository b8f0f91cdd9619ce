"""Suffix-driven content-mode selection for freshly created buffers."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Generic, Mapping, Optional

from scratch_engine.host.protocols import BufferT
from scratch_engine.runtime import telemetry

DEFAULT_SUFFIX_MODES: Mapping[str, str] = MappingProxyType(
    {
        ".py": "python",
        ".pyi": "python",
        ".md": "markdown",
        ".markdown": "markdown",
        ".rst": "rst",
        ".json": "json",
        ".toml": "toml",
        ".yaml": "yaml",
        ".yml": "yaml",
        ".sh": "shell",
        ".sql": "sql",
        ".js": "javascript",
        ".ts": "typescript",
        ".html": "html",
        ".css": "css",
        ".txt": "text",
    }
)


def _suffix(hint_path: str) -> str:
    # "*scratch*.py" and "notes.md<2>" both count; trailing decorations are dropped
    trimmed = hint_path.strip().rstrip("*")
    if trimmed.endswith(">") and "<" in trimmed:
        trimmed = trimmed[: trimmed.rindex("<")]
    base = trimmed.rsplit("/", 1)[-1]
    if "." not in base.lstrip("."):
        return ""
    return "." + base.rsplit(".", 1)[-1].lower()


class ExtensionModeSelector(Generic[BufferT]):
    """Picks a mode from the hint path's suffix and hands it to ``assign``."""

    def __init__(
        self,
        assign: Callable[[BufferT, str], None],
        *,
        table: Optional[Mapping[str, str]] = None,
        fallback: Optional[str] = "text",
    ) -> None:
        self._assign = assign
        self._table = {
            key.lower(): value for key, value in (table or DEFAULT_SUFFIX_MODES).items()
        }
        self.fallback = fallback

    def mode_for(self, hint_path: str) -> Optional[str]:
        return self._table.get(_suffix(hint_path), self.fallback)

    def select_mode_for(self, buffer: BufferT, hint_path: str) -> Optional[str]:
        """Assign the mode for ``hint_path``; ``None`` when none could be set."""

        mode = self.mode_for(hint_path)
        if mode is None:
            return None
        try:
            self._assign(buffer, mode)
        except Exception as exc:
            telemetry.record_event(
                "selectors.assign_failed",
                level="warning",
                data={"mode": mode, "hint": hint_path, "reason": repr(exc)},
                logger_name="scratch_engine.selectors",
            )
            return None
        return mode


__all__ = ["DEFAULT_SUFFIX_MODES", "ExtensionModeSelector"]
