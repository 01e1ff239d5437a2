# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Layout configuration.

The only setting that shapes every line is the ordered list of MDC keys to
copy into the ``MDC`` object.  It is given as one comma-separated string,
parsed once at setup, and never changes afterwards.

Environment variables read by :meth:`LayoutConfig.from_env`:

- ``JSONLAYOUT_MDC_KEYS``: comma-separated MDC key names.
- ``JSONLAYOUT_TIMESTAMP``: ``1``/``true``/``yes`` adds a ``timestamp`` field.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

__all__ = [
    "ENV_MDC_KEYS",
    "ENV_TIMESTAMP",
    "LayoutConfig",
    "parse_mdc_keys",
]

ENV_MDC_KEYS = "JSONLAYOUT_MDC_KEYS"
ENV_TIMESTAMP = "JSONLAYOUT_TIMESTAMP"

_logger = logging.getLogger("jsonlayout.config")


def parse_mdc_keys(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated key list.

    Entries are stripped of surrounding whitespace; empty entries and repeats
    of an earlier key are dropped.  ``None`` and ``""`` give an empty tuple.
    Never raises.
    """
    if not raw:
        return ()
    keys: list[str] = []
    discarded = 0
    for part in raw.split(","):
        key = part.strip()
        if not key or key in keys:
            discarded += 1
            continue
        keys.append(key)
    _logger.debug("Parsed MDC keys", extra={"mdc_keys": keys, "discarded": discarded})
    return tuple(keys)


def _env_flag(value: str | None) -> bool:
    """Return True for ``1``, ``true`` or ``yes``, case-insensitive."""
    return (value or "").strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class LayoutConfig:
    """Immutable settings for :class:`~jsonlayout.layout.JsonLayout`.

    Attributes:
        mdc_keys: MDC keys to include, in output order.
        include_timestamp: Emit an ISO-8601 ``timestamp`` as the first field.

    """

    mdc_keys: tuple[str, ...] = ()
    include_timestamp: bool = False

    @classmethod
    def from_string(cls, mdc_keys: str | None, *, include_timestamp: bool = False) -> LayoutConfig:
        """Build a config from a comma-separated MDC key string."""
        return cls(mdc_keys=parse_mdc_keys(mdc_keys), include_timestamp=include_timestamp)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LayoutConfig:
        """Build a config from ``JSONLAYOUT_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls.from_string(env.get(ENV_MDC_KEYS), include_timestamp=_env_flag(env.get(ENV_TIMESTAMP)))
