"""Shared fixtures for the SmartSpend test suite."""

from __future__ import annotations

from datetime import datetime

import pytest

# Wednesday; weekday phrases resolve relative to this.
FIXED_NOW = datetime(2026, 10, 14, 9, 30)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture(name="anyio_backend")
def _anyio_backend() -> str:
    return "asyncio"
