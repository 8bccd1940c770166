"""Shared fixtures for flowgraph tests."""

import logging

import pytest

from flowgraph.foundation.registry import BlockRegistry
from tests.foundation.helpers import catalog


@pytest.fixture
def registry() -> BlockRegistry:
    return BlockRegistry(catalog())


@pytest.fixture(autouse=True)
def _capture_flowgraph_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="flowgraph")
