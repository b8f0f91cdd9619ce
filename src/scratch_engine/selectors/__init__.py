"""Content-mode selectors."""

from .modes import DEFAULT_SUFFIX_MODES, ExtensionModeSelector

__all__ = ["DEFAULT_SUFFIX_MODES", "ExtensionModeSelector"]
