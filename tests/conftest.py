"""Pytest fixtures for Govee Kettle tests."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from govee_kettle.config import DeviceConfig
from govee_kettle.kettle import GoveeKettle
from govee_kettle.protocol import build_frame
from govee_kettle.surface import InMemoryControlSurface


@pytest.fixture
def report_frame():
    """Build a base64 report frame from a function code and payload hex."""
    def _report_frame(function_code: str, payload_hex: str = "") -> str:
        return build_frame(bytes.fromhex("aa" + function_code + payload_hex))
    return _report_frame


@pytest.fixture
def mock_sender():
    """Create a mock frame sender."""
    sender = MagicMock()
    sender.send = AsyncMock(return_value=None)
    return sender


@pytest.fixture
def surface():
    """Create an in-memory control surface."""
    return InMemoryControlSurface()


@pytest.fixture
def all_modes_config():
    """Configuration exposing every mode toggle."""
    return DeviceConfig(name="Test Kettle", show_custom_mode_1=True, show_custom_mode_2=True)


@pytest.fixture
def kettle(mock_sender, surface, all_modes_config):
    """Create an attached GoveeKettle with all toggles exposed."""
    kettle = GoveeKettle(mock_sender, surface, all_modes_config)
    kettle.attach()
    return kettle
