"""Structured logging for the response pipeline.

Every log call produces a LogEvent: an event name plus flat key/value
fields. Fields come from three layers, later layers winning:

    log_context(...)  ->  logger.bind(...)  ->  call-site kwargs

Renderers decide what an event looks like: colored console lines for
development, JSON Lines for aggregation, or nothing at all.

Quick Start:
    >>> from airesponse.runtime.observability.logging import get_logger, configure_logging
    >>>
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("airesponse.stream").bind(stream_id="s-1")
    >>> with log_context(feature="chat"):
    ...     log.warning("protocol violation", chunks=4)
"""

from __future__ import annotations

import logging
import sys
import time
import traceback
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

import orjson

from airesponse.foundation.errors import JsonDict, JsonValue

if TYPE_CHECKING:
    from airesponse.foundation.config import LoggingSettings


# ─────────────────────────────────────────────────────────────────────────────
# Events & Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LogEvent:
    """One emitted log line before rendering."""

    at: float
    level: str
    event: str
    fields: JsonDict

    def timestamp(self, *, short: bool = False) -> str:
        """ISO-8601 in UTC, or HH:MM:SS.mmm when short."""
        moment = datetime.fromtimestamp(self.at, tz=UTC)
        return moment.strftime("%H:%M:%S.%f")[:-3] if short else moment.isoformat()


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, event: LogEvent) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable lines: time [level] event key=value ...

    Output defaults to stderr, looked up at render time. Colors follow
    isatty() unless forced.
    """

    output: TextIO | None = None
    colors: bool | None = None
    show_timestamp: bool = True

    def render(self, event: LogEvent) -> None:
        out = self.output or sys.stderr
        paint = _painter(out.isatty() if self.colors is None else self.colors)
        fields = dict(event.fields)
        trace = fields.pop("exc_info", None)

        parts = [paint("dim", event.timestamp(short=True))] if self.show_timestamp else []
        parts.append(paint(_LEVEL_STYLES.get(event.level, "dim"), f"[{event.level}]"))
        parts.append(paint("bold", event.event))
        parts.extend(f"{paint('cyan', key)}={_console_value(value, paint)}" for key, value in sorted(fields.items()))

        out.write(" ".join(parts) + "\n")
        if trace:
            out.write(paint("red", str(trace)) + "\n")


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines (orjson), one object per event. Output defaults to stdout."""

    output: TextIO | None = None

    def render(self, event: LogEvent) -> None:
        payload = {"timestamp": event.timestamp(), "level": event.level, "event": event.event, **event.fields}
        line = orjson.dumps(payload, default=str, option=orjson.OPT_NON_STR_KEYS)
        (self.output or sys.stdout).write(line.decode() + "\n")


class NoOpRenderer:
    """Discards everything."""

    __slots__ = ()

    def render(self, event: LogEvent) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global State
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class _LogConfig:
    renderer: LogRenderer
    level: int


_config: ContextVar[_LogConfig] = ContextVar("airesponse_log_config", default=_LogConfig(ConsoleRenderer(), logging.INFO))
_scope: ContextVar[JsonDict] = ContextVar("airesponse_log_scope", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BoundLogger:
    """Logger carrying bound fields. bind/unbind return new loggers.

    renderer and level default to the global configuration, read on every
    call, so module-level loggers follow configure_logging() made later.
    """

    context: JsonDict = field(default_factory=dict)
    renderer: LogRenderer | None = None
    level: int | None = None

    def bind(self, **fields: JsonValue) -> BoundLogger:
        return replace(self, context={**self.context, **fields})

    def unbind(self, *keys: str) -> BoundLogger:
        return replace(self, context={k: v for k, v in self.context.items() if k not in keys})

    def is_enabled_for(self, level: int) -> bool:
        return level >= (_config.get().level if self.level is None else self.level)

    def debug(self, event: str, **fields: JsonValue) -> None:
        self._emit(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: JsonValue) -> None:
        self._emit(logging.INFO, event, fields)

    def warning(self, event: str, **fields: JsonValue) -> None:
        self._emit(logging.WARNING, event, fields)

    def error(self, event: str, **fields: JsonValue) -> None:
        self._emit(logging.ERROR, event, fields)

    def exception(self, event: str, **fields: JsonValue) -> None:
        """Error plus the traceback of the exception being handled."""
        self._emit(logging.ERROR, event, {**fields, "exc_info": traceback.format_exc()})

    def _emit(self, level: int, event: str, fields: JsonDict) -> None:
        if not self.is_enabled_for(level):
            return
        record = LogEvent(time.time(), logging.getLevelName(level).lower(), event,
                          {**_scope.get(), **self.context, **fields})
        (self.renderer or _config.get().renderer).render(record)


def get_logger(name: str | None = None, **fields: JsonValue) -> BoundLogger:
    """Logger with optional initial fields; name is bound as `logger`."""
    return BoundLogger(context={**fields, "logger": name} if name else dict(fields))


@contextmanager
def log_context(**fields: JsonValue) -> Iterator[None]:
    """Add fields to every event logged inside the block, across awaits."""
    token = _scope.set({**_scope.get(), **fields})
    try:
        yield
    finally:
        _scope.reset(token)


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install the global renderer and level threshold. Returns the renderer.

    Raises:
        ValueError: format is not console, json or none
    """
    factories: dict[str, Callable[[], LogRenderer]] = {
        "console": lambda: ConsoleRenderer(output=output, colors=colors),
        "json": lambda: JsonRenderer(output=output),
        "none": NoOpRenderer,
    }
    if format not in factories:
        raise ValueError(f"Unknown format: {format!r}, expected one of {', '.join(factories)}")
    renderer = factories[format]()
    _config.set(_LogConfig(renderer, logging.getLevelNamesMapping().get(level.upper(), logging.INFO)))
    return renderer


def configure_from_settings(settings: LoggingSettings, *, output: TextIO | None = None) -> LogRenderer:
    """Apply LoggingSettings (AIRESPONSE_LOG_*)."""
    return configure_logging(format=settings.format, level=settings.level, output=output)


# ─────────────────────────────────────────────────────────────────────────────
# Console Helpers
# ─────────────────────────────────────────────────────────────────────────────

_ANSI = {"bold": "1", "dim": "2", "red": "31", "green": "32", "yellow": "33", "blue": "34", "cyan": "36"}
_LEVEL_STYLES = {"debug": "dim", "info": "green", "warning": "yellow", "error": "red", "critical": "red"}


def _painter(enabled: bool) -> Callable[[str, str], str]:
    if not enabled:
        return lambda _style, text: text
    return lambda style, text: f"\033[{_ANSI[style]}m{text}\033[0m"


def _console_value(value: object, paint: Callable[[str, str], str]) -> str:
    match value:
        case str():
            return paint("yellow", f'"{value}"')
        case bool() | int() | float() | None:
            return paint("blue", orjson.dumps(value).decode())
        case dict() | list() | tuple():
            return paint("dim", orjson.dumps(value, default=str, option=orjson.OPT_NON_STR_KEYS).decode())
        case _:
            return repr(value)
