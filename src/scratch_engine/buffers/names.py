"""Name resolution for scratch buffer requests."""

from __future__ import annotations

from typing import Callable, Optional

from scratch_engine.config import ScratchConfig

NameExists = Callable[[str], bool]


def numbered_suffix(base: str, exists: NameExists) -> str:
    """Return ``base<N>`` for the smallest N >= 2 that is not taken."""

    counter = 2
    while True:
        candidate = f"{base}<{counter}>"
        if not exists(candidate):
            return candidate
        counter += 1


class NameResolver:
    """Maps raw name requests to the concrete buffer name to find or create."""

    def resolve(
        self,
        request: Optional[str],
        config: ScratchConfig,
        *,
        force_default: bool = False,
    ) -> str:
        """Resolve ``request`` against ``config``.

        A non-blank request comes back unchanged. A blank one becomes
        ``config.default_name`` when blank creation is enabled (or
        ``force_default`` is set) and ``""`` otherwise, which callers treat
        as lookup-only.
        """

        if request:
            return request
        if force_default or config.create_on_blank_name:
            return config.default_name
        return ""

    def uniquify(
        self,
        base: str,
        lookup: Callable[[str], object],
        generate: Optional[Callable[[str], str]] = None,
    ) -> str:
        if lookup(base) is None:
            return base
        if generate is not None:
            return generate(base)
        return numbered_suffix(base, lambda name: lookup(name) is not None)


__all__ = ["NameResolver", "numbered_suffix"]
