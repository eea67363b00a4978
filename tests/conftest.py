"""pytest configuration and fixtures for pipeline_core tests.

This module provides shared fixtures for testing the middleware pipeline,
including a call recorder, a recording destination, a mock container and
a fresh EventBridge.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING, Any
from unittest import mock

import pytest

if TYPE_CHECKING:
    from pipeline_core import EventBridge, Pipeline


@pytest.fixture
def calls() -> list[str]:
    """Provide an empty list that middleware append markers to."""
    return []


@pytest.fixture
def destination(calls: list[str]):
    """Provide an async destination recording 'destination' and returning 'OK'."""

    async def _destination(request: Any, response: Any = None) -> str:
        calls.append("destination")
        return "OK"

    return _destination


@pytest.fixture
def pipeline() -> Pipeline:
    """Provide a fresh Pipeline without a container."""
    from pipeline_core import Pipeline

    return Pipeline()


@pytest.fixture
def container() -> mock.MagicMock:
    """Provide a mock container that knows no keys by default."""
    container = mock.MagicMock(spec=["make", "has"])
    container.has.return_value = False
    return container


@pytest.fixture
def event_bridge() -> Generator[EventBridge, None, None]:
    """Provide a fresh, started EventBridge for each test."""
    from pipeline_core import EventBridge

    EventBridge.reset_instance()
    bridge = EventBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()
    EventBridge.reset_instance()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow running",
    )
