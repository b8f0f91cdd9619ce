"""Telemetry for the scratch engine on top of the standard logging package.

Surface used by the rest of the package:

``configure(...)`` -- install handlers from the environment or a named preset
``get_logger(name)`` -- fetch a logger under the ``scratch_engine`` hierarchy
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- time a block and optionally tag it with a component

Nothing is installed at import time beyond a ``NullHandler``; applications
call ``configure`` (the demo does so from ``main``).
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

ENV_PREFIX = "SCRATCH_ENGINE_"
ROOT_LOGGER_NAME = "scratch_engine"
DEFAULT_LOG_FILE = os.getenv(f"{ENV_PREFIX}LOG_FILE", "")

_CONTEXT: ContextVar[Dict[str, str]] = ContextVar("scratch_engine_context", default={})

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    """Read a ``SCRATCH_ENGINE_``-prefixed boolean switch."""

    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


class ContextFilter(logging.Filter):
    """Copy the active span context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = dict(_CONTEXT.get())
        fields.update(getattr(record, "fields", None) or {})
        record.fields = fields
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable lines with structured fields appended as key=value."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        return f"{message} {suffix}"


@dataclass(slots=True)
class TelemetrySettings:
    level: str = "INFO"
    console: bool = True
    json_output: bool = False
    log_file: str = ""

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(_env("LOG_LEVEL") or "INFO").upper(),
            console=not env_flag("DISABLE_CONSOLE", False),
            json_output=env_flag("LOG_JSON", False),
            log_file=_env("LOG_FILE") or DEFAULT_LOG_FILE,
        )

    @classmethod
    def preset(cls, name: str) -> "TelemetrySettings":
        key = name.lower()
        log_file = _env("LOG_FILE", DEFAULT_LOG_FILE) or ""
        if key == "development":
            return cls(level="DEBUG", console=True, json_output=False)
        if key == "production":
            return cls(
                level="INFO", console=False, log_file=log_file or "scratch_engine.log"
            )
        if key in {"performance", "performance_analysis"}:
            return cls(
                level="DEBUG",
                console=False,
                json_output=True,
                log_file=log_file or "scratch_engine-performance.log",
            )
        raise ValueError(f"Unknown preset '{name}'.")


def configure(
    *, settings: Optional[TelemetrySettings] = None, preset: Optional[str] = None
) -> None:
    """Replace the handlers on the ``scratch_engine`` logger.

    ``settings`` is an explicit ``TelemetrySettings``; ``preset`` is one of
    ``"development"``, ``"production"`` or ``"performance"``. They are
    mutually exclusive. Without either, settings come from the environment.
    Calling it again replaces earlier handlers instead of stacking them.
    """

    if settings and preset:
        raise ValueError("Provide either `settings` or `preset`, not both.")
    if preset:
        settings = TelemetrySettings.preset(preset)
    elif settings is None:
        settings = TelemetrySettings.from_env()

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(settings.level)

    formatter = JsonFormatter() if settings.json_output else PlainFormatter()
    handlers: list[logging.Handler] = []
    if settings.console:
        handlers.append(logging.StreamHandler(stream=sys.stderr))
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.addFilter(ContextFilter())
        handler.setFormatter(formatter)
        root.addHandler(handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``name`` under the engine hierarchy (the engine root if omitted)."""

    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _level_number(level: Any) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).upper())
    if not isinstance(number, int):
        raise ValueError(f"Unsupported log level '{level}'.")
    return number


def record_event(
    name: str,
    *,
    level: str | int = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as structured fields."""

    log = get_logger(logger_name)
    number = _level_number(level)
    if not log.isEnabledFor(number):
        return
    fields = {"event": name}
    fields.update({key: _stringify(value) for key, value in (data or {}).items()})
    log.log(number, "event::%s", name, extra={"fields": fields})


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for attaching metadata mid-block."""

    logger: logging.Logger
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(self, level: int, message: str, extra: Dict[str, Any]) -> None:
        fields = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        fields.update({key: _stringify(value) for key, value in extra.items()})
        self.logger.log(level, message, extra={"fields": fields})

    def finish(self, elapsed: float) -> None:
        self._emit(logging.DEBUG, "span::end", {"elapsed_ms": f"{elapsed * 1000:.3f}"})

    def fail(self, reason: str) -> None:
        self._emit(logging.ERROR, "span::fail", {"reason": reason})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Time a block and log its end, tagging it with a component if asked.

    ``component=True`` reuses ``name`` as the component identifier; a string
    names the component explicitly. ``metadata`` is visible as context on
    every record logged inside the block. Exceptions are reported through
    ``SpanHandle.fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    metadata_payload = {key: _stringify(value) for key, value in (metadata or {}).items()}
    token = _CONTEXT.set({**_CONTEXT.get(), **metadata_payload})
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(metadata_payload),
    )
    started = time.perf_counter()
    try:
        yield handle
    except Exception as exc:
        handle.fail(str(exc))
        raise
    else:
        handle.finish(time.perf_counter() - started)
    finally:
        _CONTEXT.reset(token)


__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "PlainFormatter",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
