"""Shared test fixtures for jsonlayout tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from jsonlayout.context import mdc_clear, ndc_clear


@pytest.fixture(autouse=True)
def _clean_diagnostic_context() -> Iterator[None]:
    """Start and finish every test with an empty MDC and NDC."""
    mdc_clear()
    ndc_clear()
    yield
    mdc_clear()
    ndc_clear()
