"""Common fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mcp_webcam.config import ServerConfig
from mcp_webcam.devices.camera import CameraManager
from mcp_webcam.server.executor import ToolExecutor
from tests.helpers import FakeCameraBackend, make_shodan_mock


@pytest.fixture
def fake_backend() -> FakeCameraBackend:
    return FakeCameraBackend()


@pytest.fixture
def camera(fake_backend: FakeCameraBackend) -> CameraManager:
    return CameraManager(fake_backend)


@pytest.fixture
def shodan() -> MagicMock:
    return make_shodan_mock()


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig()


@pytest.fixture
def keyed_config() -> ServerConfig:
    return ServerConfig(shodan_api_key="test-key")


@pytest.fixture
def executor():
    pool = ToolExecutor(max_workers=4, remote_timeout=5.0)
    yield pool
    pool.shutdown()
