# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Keyed (MDC) and nested (NDC) diagnostic context.

Both stores live in :class:`~contextvars.ContextVar` objects, so each
thread sees its own values and each asyncio task works on a copy of the
context it was created in.  Values are immutable and replaced on every
write; a snapshot taken by :meth:`DiagnosticContext.current` never changes
afterwards.

Usage::

    from jsonlayout import context

    with context.mdc_scope(UserId="U1"), context.ndc_scope("checkout"):
        logger.info("charging card")

"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType

__all__ = [
    "DiagnosticContext",
    "mdc_clear",
    "mdc_get",
    "mdc_put",
    "mdc_remove",
    "mdc_scope",
    "mdc_snapshot",
    "ndc_clear",
    "ndc_depth",
    "ndc_peek",
    "ndc_pop",
    "ndc_push",
    "ndc_scope",
    "ndc_snapshot",
]

_EMPTY_MDC: Mapping[str, str] = MappingProxyType({})

_current_mdc: ContextVar[Mapping[str, str]] = ContextVar("jsonlayout_mdc", default=_EMPTY_MDC)
_current_ndc: ContextVar[tuple[str, ...]] = ContextVar("jsonlayout_ndc", default=())


# ---------------------------------------------------------------------------
# Keyed context (MDC)
# ---------------------------------------------------------------------------


def mdc_put(key: str, value: object) -> None:
    """Set *key* to ``str(value)``; a ``None`` value removes the key."""
    if value is None:
        mdc_remove(key)
        return
    updated = dict(_current_mdc.get())
    updated[key] = str(value)
    _current_mdc.set(MappingProxyType(updated))


def mdc_get(key: str) -> str | None:
    """Return the value stored under *key*, or ``None``."""
    return _current_mdc.get().get(key)


def mdc_remove(key: str) -> None:
    """Remove *key* if present."""
    current = _current_mdc.get()
    if key not in current:
        return
    updated = dict(current)
    del updated[key]
    _current_mdc.set(MappingProxyType(updated))


def mdc_clear() -> None:
    """Remove every key."""
    _current_mdc.set(_EMPTY_MDC)


def mdc_snapshot() -> Mapping[str, str]:
    """Return the current read-only mapping."""
    return _current_mdc.get()


@contextlib.contextmanager
def mdc_scope(**values: object) -> Iterator[None]:
    """Add *values* for the duration of the block, then restore the prior mapping."""
    updated = dict(_current_mdc.get())
    for key, value in values.items():
        if value is None:
            updated.pop(key, None)
        else:
            updated[key] = str(value)
    token = _current_mdc.set(MappingProxyType(updated))
    try:
        yield
    finally:
        _current_mdc.reset(token)


# ---------------------------------------------------------------------------
# Nested context (NDC)
# ---------------------------------------------------------------------------


def ndc_push(message: str) -> None:
    """Push *message* onto the calling context's stack."""
    _current_ndc.set((*_current_ndc.get(), str(message)))


def ndc_pop() -> str:
    """Pop and return the newest entry; returns ``""`` when the stack is empty."""
    stack = _current_ndc.get()
    if not stack:
        return ""
    _current_ndc.set(stack[:-1])
    return stack[-1]


def ndc_peek() -> str:
    """Return the newest entry without removing it; ``""`` when empty."""
    stack = _current_ndc.get()
    return stack[-1] if stack else ""


def ndc_depth() -> int:
    """Return the number of entries on the stack."""
    return len(_current_ndc.get())


def ndc_clear() -> None:
    """Empty the stack."""
    _current_ndc.set(())


def ndc_snapshot() -> tuple[str, ...]:
    """Return the stack, oldest entry first."""
    return _current_ndc.get()


@contextlib.contextmanager
def ndc_scope(message: str) -> Iterator[None]:
    """Push *message* for the duration of the block."""
    token = _current_ndc.set((*_current_ndc.get(), str(message)))
    try:
        yield
    finally:
        _current_ndc.reset(token)


# ---------------------------------------------------------------------------
# Snapshot passed to the layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiagnosticContext:
    """Keyed and nested diagnostic context as seen at format time.

    Attributes:
        mdc: Keyed context, key to string value.
        ndc: Nested context stack, oldest entry first.

    """

    mdc: Mapping[str, str] = field(default_factory=lambda: _EMPTY_MDC)
    ndc: tuple[str, ...] = ()

    @classmethod
    def current(cls) -> DiagnosticContext:
        """Snapshot the calling thread's (or task's) context."""
        return cls(mdc=_current_mdc.get(), ndc=_current_ndc.get())

    @classmethod
    def empty(cls) -> DiagnosticContext:
        """Return a context with no keyed values and an empty stack."""
        return cls()

    def ndc_text(self) -> str:
        """Join the nested context with single spaces, oldest first."""
        return " ".join(self.ndc)
