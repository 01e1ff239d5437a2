# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Single-line JSON encoder for log events.

:class:`JsonLayout` turns a :class:`~jsonlayout.log.LogEvent` plus the
diagnostic context into exactly one line of JSON::

    {"level":"INFO","logger":"app.web","threadName":"MainThread","message":"Hello World","MDC":{"UserId":"U1"},"NDC":"req-7 checkout"}

Field order is fixed: ``timestamp`` (opt-in), ``level``, ``logger``,
``threadName``, ``message``, ``MDC``, ``NDC``, ``throwable``, ``stackInfo``.
The last four appear only when they have content.

A missing message is written as the string ``"null"`` so every line has the
same shape for text search tools.  Each call returns a string ending in one
``"\\n"``; newlines and every other line-breaking character inside field
values are escaped.
"""

from __future__ import annotations

import json
import re
from dataclasses import replace
from datetime import UTC, datetime

from jsonlayout.config import LayoutConfig, parse_mdc_keys
from jsonlayout.context import DiagnosticContext
from jsonlayout.log import LogEvent

__all__ = [
    "LINE_TERMINATOR",
    "JsonLayout",
    "LayoutError",
]

LINE_TERMINATOR = "\n"

# Characters json.dumps(ensure_ascii=False) leaves literal that str.splitlines() treats as line breaks,
# plus lone surrogates, which cannot be written as UTF-8.
_UNSAFE_CHARS = re.compile("[\x85\u2028\u2029\ud800-\udfff]")


def _escape_unsafe(match: re.Match[str]) -> str:
    """Replace one unsafe character with its ``\\uXXXX`` escape."""
    return f"\\u{ord(match.group()):04x}"


class LayoutError(ValueError):
    """Raised when an event lacks a field every log line must carry."""


def _format_timestamp(timestamp: float) -> str:
    """Render epoch seconds as ISO-8601 UTC with millisecond precision."""
    return datetime.fromtimestamp(timestamp, UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonLayout:
    """Encode log events as newline-terminated JSON lines.

    The layout holds only its :class:`~jsonlayout.config.LayoutConfig`,
    which is read-only once logging starts, so :meth:`format` may be called
    from any number of threads at once.  :meth:`configure` is a setup step
    and must not race with :meth:`format`.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        """Create a layout; with no *config* no MDC keys are selected."""
        self._config = config if config is not None else LayoutConfig()

    def __repr__(self) -> str:
        """Return a string representation suitable for debugging."""
        return f"JsonLayout({self._config!r})"

    @property
    def config(self) -> LayoutConfig:
        """The active configuration."""
        return self._config

    @property
    def mdc_keys(self) -> tuple[str, ...]:
        """MDC keys copied into each line, in output order."""
        return self._config.mdc_keys

    def configure(self, mdc_keys: str | None) -> None:
        """Select MDC keys from a comma-separated string; ``None`` or ``""`` selects none."""
        self._config = replace(self._config, mdc_keys=parse_mdc_keys(mdc_keys))

    def to_dict(self, event: LogEvent, context: DiagnosticContext | None = None) -> dict[str, object]:
        """Build the ordered field mapping for *event* without encoding it.

        Raises:
            LayoutError: If the event has no level or no logger name.

        """
        if event.level is None or event.level == "":
            raise LayoutError("log event has no level")
        if not event.logger_name:
            raise LayoutError("log event has no logger name")
        if context is None:
            context = DiagnosticContext.current()

        obj: dict[str, object] = {}
        if self._config.include_timestamp:
            obj["timestamp"] = _format_timestamp(event.timestamp)
        obj["level"] = str(event.level)
        obj["logger"] = event.logger_name
        obj["threadName"] = event.thread_name
        obj["message"] = "null" if event.message is None else event.message

        mdc = {key: context.mdc[key] for key in self._config.mdc_keys if key in context.mdc}
        if mdc:
            obj["MDC"] = mdc
        if context.ndc:
            obj["NDC"] = context.ndc_text()
        if isinstance(event.thrown, str):
            if event.thrown:
                obj["throwable"] = event.thrown
        elif event.thrown is not None:
            obj["throwable"] = event.thrown.render()
        if event.stack_info:
            obj["stackInfo"] = event.stack_info
        return obj

    def format(self, event: LogEvent, context: DiagnosticContext | None = None) -> str:
        """Encode *event* as one JSON line ending in ``"\\n"``.

        Args:
            event: The event to encode.
            context: Diagnostic context to read; the calling thread's current
                context when ``None``.

        Raises:
            LayoutError: If the event has no level or no logger name.

        """
        line = json.dumps(self.to_dict(event, context), ensure_ascii=False, separators=(",", ":"))
        return _UNSAFE_CHARS.sub(_escape_unsafe, line) + LINE_TERMINATOR
