"""Textual adapter; ``app`` holds the runnable demo and needs ``textual``."""

from .controller import TextualScratchAdapter, TextualUIHooks, create_memory_controller

__all__ = ["TextualScratchAdapter", "TextualUIHooks", "create_memory_controller"]
