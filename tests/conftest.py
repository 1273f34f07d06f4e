"""Pytest configuration shared by the benchplan tests."""

from __future__ import annotations

import pytest
import structlog
from structlog.testing import capture_logs


@pytest.fixture
def captured_logs():
    """Structlog events emitted while the test runs."""

    with capture_logs() as logs:
        yield logs


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
