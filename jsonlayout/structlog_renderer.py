# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""structlog integration.

:class:`JsonLayoutRenderer` is a final processor producing the same line as
:class:`~jsonlayout.logging_utils.JsonLayoutFormatter`::

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            JsonLayoutRenderer(mdc_keys="UserId", logger_name="app"),
        ],
        logger_factory=structlog.PrintLoggerFactory(),
    )

If ``structlog.processors.format_exc_info`` runs earlier in the chain, the
``exception`` string it leaves is written as the ``throwable`` text unchanged.

Keys other than ``level``, ``logger``, ``event`` and the exception keys are
not part of the layout and are dropped; bind values into the MDC with
:func:`jsonlayout.context.mdc_scope` to have them written.
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import MutableMapping
from typing import Any

from jsonlayout.config import LayoutConfig
from jsonlayout.layout import LINE_TERMINATOR, JsonLayout
from jsonlayout.log import LogEvent, ThrownInfo

__all__ = ["JsonLayoutRenderer"]


def _thrown_from(event_dict: MutableMapping[str, Any]) -> ThrownInfo | str | None:
    """Read the error from ``exc_info`` or ``exception``; pre-rendered text passes through."""
    exc_info = event_dict.get("exc_info")
    if exc_info is True:
        exc_info = sys.exc_info()
    if isinstance(exc_info, BaseException):
        return ThrownInfo.from_exception(exc_info)
    if isinstance(exc_info, tuple) and len(exc_info) == 3 and exc_info[1] is not None:
        return ThrownInfo.from_exception(exc_info[1])
    exception = event_dict.get("exception")
    if isinstance(exception, BaseException):
        return ThrownInfo.from_exception(exception)
    if isinstance(exception, str) and exception:
        return exception
    return None


class JsonLayoutRenderer:
    """Render a structlog event dict through :class:`~jsonlayout.layout.JsonLayout`.

    Args:
        mdc_keys: Comma-separated MDC keys to include.
        logger_name: Logger name used when the event dict has no ``logger`` key.
        layout: A prebuilt layout; overrides *mdc_keys*.

    """

    def __init__(
        self,
        mdc_keys: str | None = None,
        *,
        logger_name: str | None = None,
        layout: JsonLayout | None = None,
    ) -> None:
        """Create a renderer from an MDC key string or an existing layout."""
        self.layout = layout if layout is not None else JsonLayout(LayoutConfig.from_string(mdc_keys))
        self.logger_name = logger_name

    def __call__(self, logger: object, method_name: str, event_dict: MutableMapping[str, Any]) -> str:
        """Return the JSON line for *event_dict*, without trailing newline."""
        level = event_dict.get("level")
        message = event_dict.get("event")
        event = LogEvent(
            level=str(level).upper() if level else None,
            logger_name=event_dict.get("logger") or self.logger_name,
            thread_name=threading.current_thread().name,
            message=None if message is None else str(message),
            thrown=_thrown_from(event_dict),
            timestamp=time.time(),
        )
        return self.layout.format(event).removesuffix(LINE_TERMINATOR)
