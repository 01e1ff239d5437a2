# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Stdlib ``logging`` integration.

Provides :class:`JsonLayoutFormatter`, a :class:`logging.Formatter` subclass
that renders each record through :class:`~jsonlayout.layout.JsonLayout`,
and :func:`build_logging_config`, a ready-made ``dictConfig`` payload::

    import logging.config

    from jsonlayout.logging_utils import build_logging_config

    logging.config.dictConfig(build_logging_config(mdc_keys="UserId,RequestId"))
"""

from __future__ import annotations

import logging
from typing import Any

from jsonlayout.config import LayoutConfig
from jsonlayout.layout import LINE_TERMINATOR, JsonLayout
from jsonlayout.log import LogEvent

__all__ = ["DEFAULT_LOG_LEVEL", "JsonLayoutFormatter", "build_logging_config"]

DEFAULT_LOG_LEVEL = "INFO"


class JsonLayoutFormatter(logging.Formatter):
    """Formatter that emits one JSON object per record.

    The MDC and NDC are read from the thread that calls :meth:`format`,
    which for the standard handlers is the thread that logged the record.
    With a ``QueueHandler`` the context is not carried across the queue.

    The returned string has no trailing newline: ``StreamHandler`` and its
    subclasses append their own terminator.
    """

    def __init__(
        self,
        mdc_keys: str | None = None,
        *,
        include_timestamp: bool = False,
        layout: JsonLayout | None = None,
    ) -> None:
        """Create a formatter from an MDC key string or an existing layout."""
        super().__init__()
        if layout is None:
            layout = JsonLayout(LayoutConfig.from_string(mdc_keys, include_timestamp=include_timestamp))
        self.layout = layout

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single-line JSON string."""
        line = self.layout.format(LogEvent.from_record(record))
        return line.removesuffix(LINE_TERMINATOR)


def _normalize_level(level: str) -> str:
    """Return a valid logging level name, defaulting to ``INFO`` when unknown."""
    if not level:
        return DEFAULT_LOG_LEVEL
    normalized = level.upper()
    if normalized in logging.getLevelNamesMapping():
        return normalized
    return DEFAULT_LOG_LEVEL


def build_logging_config(
    mdc_keys: str = "",
    level: str = DEFAULT_LOG_LEVEL,
    *,
    include_timestamp: bool = False,
) -> dict[str, Any]:
    """Produce a ``dictConfig`` payload that writes JSON lines to stdout."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "jsonlayout.logging_utils.JsonLayoutFormatter",
                "mdc_keys": mdc_keys,
                "include_timestamp": include_timestamp,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"handlers": ["console"], "level": _normalize_level(level)},
    }
