"""Govee Kettle Library.

A standalone Python library that drives a Govee Smart Kettle through its
mode toggles and reports its state back onto a control surface.

Basic usage:
    >>> from govee_kettle import GoveeKettle, GoveeKettleBLEClient, InMemoryControlSurface
    >>>
    >>> surface = InMemoryControlSurface()
    >>> client = GoveeKettleBLEClient(
    >>>     "AA:BB:CC:DD:EE:FF", notification_callback=lambda batch: kettle.handle_batch(batch)
    >>> )
    >>> kettle = GoveeKettle(client, surface)
    >>>
    >>> async with kettle:
    >>>     await client.connect()
    >>>     await kettle.async_apply_toggle("green_tea", True)
    >>>     print(surface.active, surface.temperature)
    >>>     await client.disconnect()
"""

__version__ = "1.0.0"

from .client import GoveeKettleBLEClient
from .config import DeviceConfig
from .exceptions import (
    DeviceUnreachableError,
    GoveeKettleError,
    InvalidConfigError,
    MalformedFrameError,
    UnknownToggleError,
)
from .kettle import FrameSender, GoveeKettle
from .protocol import (
    CMD_POWER_OFF,
    CMD_POWER_ON,
    MODE_BLACK_TEA_BOIL,
    MODE_COFFEE,
    MODE_CUSTOM_1,
    MODE_CUSTOM_2,
    MODE_GREEN_TEA,
    MODE_NAMES,
    MODE_OOLONG_TEA,
    TOGGLES,
    Frame,
    ToggleSpec,
    build_frame,
    decode_frame,
)
from .state import DeviceCache
from .surface import ControlSurface, InMemoryControlSurface

__all__ = [
    # Main classes
    "GoveeKettle",
    "GoveeKettleBLEClient",
    "DeviceConfig",
    "DeviceCache",
    # Collaborators
    "ControlSurface",
    "FrameSender",
    "InMemoryControlSurface",
    # Data classes
    "Frame",
    "ToggleSpec",
    # Exceptions
    "DeviceUnreachableError",
    "GoveeKettleError",
    "InvalidConfigError",
    "MalformedFrameError",
    "UnknownToggleError",
    # Constants
    "CMD_POWER_OFF",
    "CMD_POWER_ON",
    "MODE_BLACK_TEA_BOIL",
    "MODE_COFFEE",
    "MODE_CUSTOM_1",
    "MODE_CUSTOM_2",
    "MODE_GREEN_TEA",
    "MODE_NAMES",
    "MODE_OOLONG_TEA",
    "TOGGLES",
    # Protocol functions
    "build_frame",
    "decode_frame",
]
