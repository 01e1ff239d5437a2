# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""jsonlayout: single-line JSON encoding of log events with MDC/NDC context."""

from jsonlayout.config import LayoutConfig, parse_mdc_keys
from jsonlayout.context import (
    DiagnosticContext,
    mdc_clear,
    mdc_get,
    mdc_put,
    mdc_remove,
    mdc_scope,
    ndc_clear,
    ndc_depth,
    ndc_pop,
    ndc_push,
    ndc_scope,
)
from jsonlayout.layout import JsonLayout, LayoutError
from jsonlayout.log import Level, LogEvent, ThrownInfo

__all__ = [
    "DiagnosticContext",
    "JsonLayout",
    "LayoutConfig",
    "LayoutError",
    "Level",
    "LogEvent",
    "ThrownInfo",
    "mdc_clear",
    "mdc_get",
    "mdc_put",
    "mdc_remove",
    "mdc_scope",
    "ndc_clear",
    "ndc_depth",
    "ndc_pop",
    "ndc_push",
    "ndc_scope",
    "parse_mdc_keys",
]

__version__ = "0.1.0"
