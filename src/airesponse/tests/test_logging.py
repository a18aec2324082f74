"""Tests for structured logging."""

from __future__ import annotations

import io
from collections.abc import Iterator

import orjson
import pytest

from airesponse.foundation.config import LoggingSettings
from airesponse.io.streaming import StreamAccumulator, done, text
from airesponse.runtime.observability import configure_from_settings, configure_logging, get_logger, log_context
from airesponse.runtime.observability.logging import BoundLogger, ConsoleRenderer, JsonRenderer


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    configure_logging(format="none", level="INFO")


def _lines(buf: io.StringIO) -> list[dict[str, object]]:
    return [orjson.loads(line) for line in buf.getvalue().splitlines()]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


def test_json_renderer_writes_one_object_per_line() -> None:
    buf = io.StringIO()
    configure_logging(format="json", output=buf)

    get_logger("chat", feature="chat").info("stream finished", chunks=3)

    [entry] = _lines(buf)
    assert entry["event"] == "stream finished"
    assert entry["level"] == "info"
    assert entry["logger"] == "chat"
    assert entry["feature"] == "chat"
    assert entry["chunks"] == 3
    assert "timestamp" in entry


def test_console_renderer_plain() -> None:
    buf = io.StringIO()
    log = BoundLogger(context={"model": "qwen/qwen3-8b"},
                      renderer=ConsoleRenderer(output=buf, colors=False, show_timestamp=False))

    log.warning("slow response", ms=1200)

    assert buf.getvalue() == '[warning] slow response model="qwen/qwen3-8b" ms=1200\n'


def test_unknown_format_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


# ─────────────────────────────────────────────────────────────────────────────
# Levels & Context
# ─────────────────────────────────────────────────────────────────────────────


def test_level_filtering_follows_global_configuration() -> None:
    log = get_logger("parse")
    buf = io.StringIO()

    configure_logging(format="json", level="WARNING", output=buf)
    log.info("dropped")
    log.error("kept")
    configure_logging(format="json", level="debug", output=buf)
    log.debug("now kept")

    assert [e["event"] for e in _lines(buf)] == ["kept", "now kept"]


def test_bind_and_unbind_are_immutable() -> None:
    buf = io.StringIO()
    base = BoundLogger(renderer=JsonRenderer(output=buf))

    bound = base.bind(stream_id="s-1", feature="chat")
    bound.unbind("feature").info("one")
    base.info("two")

    first, second = _lines(buf)
    assert first["stream_id"] == "s-1"
    assert "feature" not in first
    assert "stream_id" not in second
    assert bound.context == {"stream_id": "s-1", "feature": "chat"}


def test_log_context_is_scoped() -> None:
    buf = io.StringIO()
    log = BoundLogger(renderer=JsonRenderer(output=buf))

    with log_context(request_id="r-9"):
        log.info("inside")
    log.info("outside")

    inside, outside = _lines(buf)
    assert inside["request_id"] == "r-9"
    assert "request_id" not in outside


def test_call_site_fields_override_bound_context() -> None:
    buf = io.StringIO()
    log = BoundLogger(context={"model": "a"}, renderer=JsonRenderer(output=buf))

    with log_context(model="scoped"):
        log.info("call", model="b")

    assert _lines(buf)[0]["model"] == "b"


def test_configure_from_settings() -> None:
    buf = io.StringIO()

    renderer = configure_from_settings(LoggingSettings(level="error", format="json"), output=buf)
    get_logger("x").warning("filtered")
    get_logger("x").error("shown")

    assert isinstance(renderer, JsonRenderer)
    assert [e["event"] for e in _lines(buf)] == ["shown"]


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline Events
# ─────────────────────────────────────────────────────────────────────────────


def test_protocol_violation_is_logged_with_stream_id() -> None:
    buf = io.StringIO()
    configure_logging(format="json", output=buf)

    acc = StreamAccumulator(stream_id="s-42")
    acc.feed(done())
    acc.feed(text("late"))

    [entry] = _lines(buf)
    assert entry["event"] == "protocol violation"
    assert entry["level"] == "warning"
    assert entry["stream_id"] == "s-42"


def test_exception_attaches_traceback() -> None:
    buf = io.StringIO()
    log = BoundLogger(renderer=ConsoleRenderer(output=buf, colors=False, show_timestamp=False))

    try:
        raise RuntimeError("kaboom")
    except RuntimeError:
        log.exception("adapter crashed", usage={"prompt_tokens": 1})

    first, *rest = buf.getvalue().splitlines()
    assert first == '[error] adapter crashed usage={"prompt_tokens":1}'
    assert any("RuntimeError: kaboom" in line for line in rest)
