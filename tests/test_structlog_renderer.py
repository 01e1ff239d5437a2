"""Tests for jsonlayout.structlog_renderer."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest
import structlog

from jsonlayout.context import mdc_scope, ndc_scope
from jsonlayout.layout import LayoutError
from jsonlayout.structlog_renderer import JsonLayoutRenderer


def _bound(renderer: JsonLayoutRenderer, stream: io.StringIO) -> Any:
    """Wrap a PrintLogger writing to *stream* with add_log_level and *renderer*."""
    return structlog.wrap_logger(
        structlog.PrintLogger(file=stream),
        processors=[structlog.processors.add_log_level, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(0),
    )


class TestRendererDirect:
    """Tests calling the processor directly."""

    def test_basic_fields(self) -> None:
        """level, logger and event map to the layout fields."""
        out = JsonLayoutRenderer()(None, "info", {"level": "info", "logger": "svc", "event": "hello"})
        assert not out.endswith("\n")
        parsed = json.loads(out)
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "svc"
        assert parsed["message"] == "hello"

    def test_default_logger_name(self) -> None:
        """The renderer's logger name is used when the event has none."""
        out = JsonLayoutRenderer(logger_name="app")(None, "info", {"level": "info", "event": "x"})
        assert json.loads(out)["logger"] == "app"

    def test_missing_event_is_null(self) -> None:
        """No event key writes the "null" message."""
        out = JsonLayoutRenderer(logger_name="app")(None, "info", {"level": "info"})
        assert '"message":"null"' in out

    def test_extra_keys_dropped(self) -> None:
        """Bound keys outside the layout fields are not written."""
        out = JsonLayoutRenderer(logger_name="app")(None, "info", {"level": "info", "event": "x", "user": "u"})
        assert "user" not in json.loads(out)

    def test_missing_level_raises(self) -> None:
        """Without add_log_level there is no level and the event is rejected."""
        with pytest.raises(LayoutError):
            JsonLayoutRenderer(logger_name="app")(None, "info", {"event": "x"})

    def test_missing_logger_raises(self) -> None:
        """Without a logger name anywhere the event is rejected."""
        with pytest.raises(LayoutError):
            JsonLayoutRenderer()(None, "info", {"level": "info", "event": "x"})

    def test_exception_key(self) -> None:
        """An exception object under 'exception' is rendered."""
        out = JsonLayoutRenderer(logger_name="app")(
            None, "error", {"level": "error", "event": "x", "exception": RuntimeError("r")}
        )
        assert json.loads(out)["throwable"].startswith("RuntimeError: r\n\tat ")


class TestRendererPipeline:
    """Tests running the processor inside a structlog logger."""

    def test_context_and_newline(self) -> None:
        """The PrintLogger writes one line carrying MDC and NDC."""
        stream = io.StringIO()
        log = _bound(JsonLayoutRenderer("UserId", logger_name="svc"), stream)
        with mdc_scope(UserId="U1"), ndc_scope("NDC1"), ndc_scope("NDC2"):
            log.info("Hello World")
        output = stream.getvalue()
        assert output.endswith("\n")
        assert output.count("\n") == 1
        assert '"MDC":{"UserId":"U1"}' in output
        assert '"NDC":"NDC1 NDC2"' in output

    def test_exc_info_true(self) -> None:
        """log.exception() inside an except block renders the active error."""
        stream = io.StringIO()
        log = _bound(JsonLayoutRenderer(logger_name="svc"), stream)
        try:
            raise ValueError("boom")
        except ValueError:
            log.exception("failed")
        parsed = json.loads(stream.getvalue())
        assert parsed["level"] == "ERROR"
        assert parsed["throwable"].startswith("ValueError: boom")

    def test_exc_info_instance(self) -> None:
        """An exception passed as exc_info is rendered."""
        stream = io.StringIO()
        log = _bound(JsonLayoutRenderer(logger_name="svc"), stream)
        log.warning("odd", exc_info=KeyError("k"))
        parsed = json.loads(stream.getvalue())
        assert parsed["level"] == "WARNING"
        assert parsed["throwable"].startswith("KeyError: 'k'")

    def test_format_exc_info_string_passed_through(self) -> None:
        """A traceback already rendered by format_exc_info becomes the throwable text."""
        stream = io.StringIO()
        log = structlog.wrap_logger(
            structlog.PrintLogger(file=stream),
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.format_exc_info,
                JsonLayoutRenderer(logger_name="svc"),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(0),
        )
        try:
            raise ValueError("boom")
        except ValueError:
            log.exception("failed")
        output = stream.getvalue()
        assert output.count("\n") == 1
        throwable = json.loads(output)["throwable"]
        assert throwable.startswith("Traceback (most recent call last):")
        assert "ValueError: boom" in throwable

    def test_exception_string_direct(self) -> None:
        """A string under 'exception' is written unchanged."""
        out = JsonLayoutRenderer(logger_name="app")(
            None, "error", {"level": "error", "event": "x", "exception": "E: rendered elsewhere"}
        )
        assert json.loads(out)["throwable"] == "E: rendered elsewhere"
