"""Application-facing configuration for scratch buffer policy."""

from __future__ import annotations

import os
from dataclasses import dataclass
from string import Formatter

from scratch_engine.runtime.telemetry import ENV_PREFIX, env_flag

DEFAULT_SCRATCH_NAME = "*scratch*"
DEFAULT_CONFIRM_MESSAGE = (
    "Buffer {name} is a scratch buffer with unsaved changes. Save it first?"
)


def check_confirm_message(template: str) -> str:
    """Return ``template`` if ``{name}`` is its only replacement field."""

    try:
        fields = [field for _, field, _, _ in Formatter().parse(template)]
    except ValueError as exc:
        raise ValueError(f"Malformed confirm_message {template!r}: {exc}") from exc
    unknown = [field for field in fields if field is not None and field != "name"]
    if unknown:
        raise ValueError(
            f"confirm_message may only reference {{name}}, got {unknown!r}"
        )
    return template


@dataclass(slots=True)
class ScratchConfig:
    """Naming policy and prompt text consulted on every request.

    The controller reads the instance it holds at call time, so the
    surrounding application may change fields between calls.
    """

    default_name: str = DEFAULT_SCRATCH_NAME
    create_on_blank_name: bool = True
    confirm_message: str = DEFAULT_CONFIRM_MESSAGE

    def __post_init__(self) -> None:
        if not self.default_name:
            raise ValueError("default_name cannot be empty")
        check_confirm_message(self.confirm_message)

    @classmethod
    def from_env(cls) -> "ScratchConfig":
        message = os.getenv(f"{ENV_PREFIX}CONFIRM_MESSAGE") or DEFAULT_CONFIRM_MESSAGE
        return cls(
            default_name=os.getenv(f"{ENV_PREFIX}DEFAULT_NAME") or DEFAULT_SCRATCH_NAME,
            create_on_blank_name=env_flag("CREATE_ON_BLANK", True),
            confirm_message=check_confirm_message(message),
        )

    def question_for(self, name: str) -> str:
        # the field may have been reassigned after validation
        try:
            return check_confirm_message(self.confirm_message).format(name=name)
        except (ValueError, KeyError, IndexError, AttributeError):
            return DEFAULT_CONFIRM_MESSAGE.format(name=name)


__all__ = [
    "DEFAULT_CONFIRM_MESSAGE",
    "DEFAULT_SCRATCH_NAME",
    "ScratchConfig",
    "check_confirm_message",
]
