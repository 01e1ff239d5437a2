# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Log event model consumed by :class:`~jsonlayout.layout.JsonLayout`.

A :class:`LogEvent` is a read-only snapshot of one logging call: severity
label, logger name, thread name, message text, and an optional
:class:`ThrownInfo` describing an attached exception.

EXCEPTION CAPTURE
-----------------
:meth:`ThrownInfo.from_exception` turns an exception into a type name,
message and ordered list of frame descriptions, following ``raise ... from``
and implicit exception context::

    try:
        risky_operation()
    except Exception as e:
        event = LogEvent.create(Level.ERROR, "app.worker", "failed", error=e)

An exception that was created but never raised has no traceback; its frames
are taken from the stack at the point of capture instead.

KEY CLASSES
-----------
Level : StrEnum with FATAL, ERROR, WARN, INFO, DEBUG, TRACE
ThrownInfo : Captured exception (type, message, frames, chained cause)
LogEvent : One log event snapshot

"""

from __future__ import annotations

import logging
import os
import threading
import time
import traceback
from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar

__all__ = [
    "Level",
    "LogEvent",
    "ThrownInfo",
]

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Level(StrEnum):
    """Severity labels for log events.

    Events are not restricted to these labels: any string is rendered
    verbatim, so records from the stdlib ``logging`` module keep their own
    names (``WARNING``, ``CRITICAL``).

    Attributes:
        FATAL: Unrecoverable error; the process is expected to stop.
        ERROR: Failure of the current operation.
        WARN: Something unexpected that did not stop the operation.
        INFO: General progress information.
        DEBUG: Detail useful while debugging.
        TRACE: Fine-grained tracing.

    """

    FATAL = "FATAL"
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"
    TRACE = "TRACE"


def _describe_frame(frame: traceback.FrameSummary) -> str:
    """Render one frame as ``name(filename:lineno)``."""
    return f"{frame.name}({frame.filename}:{frame.lineno})"


def _type_name(cls: type[BaseException]) -> str:
    """Return the module-qualified class name, bare for builtins and ``__main__``."""
    if cls.__module__ in ("builtins", "__main__"):
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _capture_point_stack() -> list[traceback.FrameSummary]:
    """Return the current stack with this package's own trailing frames removed."""
    stack = traceback.extract_stack()
    while stack and os.path.dirname(os.path.abspath(stack[-1].filename)) == _PACKAGE_DIR:
        stack.pop()
    return stack


@dataclass(frozen=True)
class ThrownInfo:
    """An exception reduced to the text a log line needs.

    Attributes:
        type_name: Module-qualified class name; builtins are left bare.
        message: ``str(exc)``; may be empty.
        frames: Frame descriptions, innermost call first.
        cause: The chained exception, if any.
        cause_label: Heading used when rendering ``cause``.

    """

    CAUSED_BY: ClassVar[str] = "Caused by"
    DURING_HANDLING: ClassVar[str] = "During handling of"

    _MAX_CHAIN_DEPTH: ClassVar[int] = 8

    type_name: str
    message: str
    frames: tuple[str, ...] = ()
    cause: ThrownInfo | None = None
    cause_label: str = CAUSED_BY

    @classmethod
    def from_exception(cls, exc: BaseException) -> ThrownInfo:
        """Capture *exc* and its cause/context chain."""
        return cls._capture(exc, seen=set(), depth=0)

    @classmethod
    def _capture(cls, exc: BaseException, *, seen: set[int], depth: int) -> ThrownInfo:
        seen.add(id(exc))
        if exc.__traceback__ is not None:
            summaries = list(traceback.extract_tb(exc.__traceback__))
        else:
            summaries = _capture_point_stack()
        frames = tuple(_describe_frame(f) for f in reversed(summaries))

        chained: BaseException | None = None
        label = cls.CAUSED_BY
        if exc.__cause__ is not None:
            chained = exc.__cause__
        elif exc.__context__ is not None and not exc.__suppress_context__:
            chained = exc.__context__
            label = cls.DURING_HANDLING

        cause: ThrownInfo | None = None
        if chained is not None and id(chained) not in seen and depth < cls._MAX_CHAIN_DEPTH:
            cause = cls._capture(chained, seen=seen, depth=depth + 1)

        return cls(
            type_name=_type_name(type(exc)),
            message=str(exc),
            frames=frames,
            cause=cause,
            cause_label=label,
        )

    def headline(self) -> str:
        """Return ``"<Type>: <message>"``, or just the type when the message is empty."""
        if self.message:
            return f"{self.type_name}: {self.message}"
        return self.type_name

    def render(self) -> str:
        """Render the exception and its chain as multi-line stack trace text."""
        lines: list[str] = []
        current: ThrownInfo | None = self
        prefix = ""
        while current is not None:
            lines.append(prefix + current.headline())
            lines.extend(f"\tat {frame}" for frame in current.frames)
            prefix = f"{current.cause_label}: "
            current = current.cause
        return "\n".join(lines)


@dataclass(frozen=True)
class LogEvent:
    """One log event snapshot.

    ``level`` and ``logger_name`` are required by every consumer of the
    encoded line; the layout rejects events without them.

    ``thrown`` is normally a :class:`ThrownInfo`; a plain string is taken as
    stack trace text some other component already rendered.  ``stack_info``
    is the caller stack requested with ``logger.info(..., stack_info=True)``.
    """

    level: Level | str | None
    logger_name: str | None
    thread_name: str
    message: str | None
    thrown: ThrownInfo | str | None = None
    timestamp: float = 0.0
    stack_info: str | None = None

    @classmethod
    def create(
        cls,
        level: Level | str,
        logger_name: str,
        message: str | None,
        *,
        error: BaseException | None = None,
        thread_name: str | None = None,
    ) -> LogEvent:
        """Build an event for the calling thread, stamped with the current time."""
        return cls(
            level=level,
            logger_name=logger_name,
            thread_name=thread_name if thread_name is not None else threading.current_thread().name,
            message=message,
            thrown=ThrownInfo.from_exception(error) if error is not None else None,
            timestamp=time.time(),
        )

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> LogEvent:
        """Build an event from a stdlib ``logging`` record."""
        thrown: ThrownInfo | None = None
        if record.exc_info and record.exc_info[1] is not None:
            thrown = ThrownInfo.from_exception(record.exc_info[1])
        return cls(
            level=record.levelname,
            logger_name=record.name,
            thread_name=record.threadName or "",
            message=None if record.msg is None else record.getMessage(),
            thrown=thrown,
            timestamp=record.created,
            stack_info=record.stack_info or None,
        )
