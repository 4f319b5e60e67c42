"""BLE transport for Govee Kettle frames.

This module provides the low-level BLE communication layer using bleak. It
only moves frames: command frames are written to the kettle, and notified
report frames are handed to a callback as base64 batches.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Callable

from bleak import BleakClient
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from .exceptions import DeviceUnreachableError

_LOGGER = logging.getLogger(__name__)

# BLE Service and Characteristics
SERVICE_UUID = "00010203-0405-0607-0809-0a0b0c0d1910"
CHAR_NOTIFY_UUID = "00010203-0405-0607-0809-0a0b0c0d2b10"  # Notify (device -> app)
CHAR_WRITE_UUID = "00010203-0405-0607-0809-0a0b0c0d2b11"  # Write (app -> device)

DEFAULT_WRITE_TIMEOUT = 5.0


class GoveeKettleBLEClient:
    """BLE client for a Govee Kettle."""

    def __init__(
        self,
        ble_device: BLEDevice | str,
        notification_callback: Callable[[list[str]], None] | None = None,
        disconnected_callback: Callable[[], None] | None = None,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    ):
        """Initialize the BLE client.

        Args:
            ble_device: BLE device or address to connect to
            notification_callback: Callback receiving each batch of base64 report frames
            disconnected_callback: Callback for disconnection events
            write_timeout: Seconds to wait for a single frame write
        """
        self._ble_device = ble_device
        self._notification_callback = notification_callback
        self._disconnected_callback = disconnected_callback
        self._write_timeout = write_timeout
        self._client: BleakClient | None = None
        self._connected = False
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Return whether the client is connected."""
        return self._connected and self._client is not None and self._client.is_connected

    @property
    def address(self) -> str:
        """Return the device address."""
        if isinstance(self._ble_device, str):
            return self._ble_device
        return self._ble_device.address

    async def connect(self) -> None:
        """Connect to the device and subscribe to reports."""
        if self._connected:
            return

        _LOGGER.debug("[%s] connecting", self.address)
        self._client = BleakClient(self._ble_device, disconnected_callback=self._on_disconnect)

        try:
            await self._client.connect()
            await self._client.start_notify(CHAR_NOTIFY_UUID, self._notification_handler)
        except (BleakError, asyncio.TimeoutError) as err:
            _LOGGER.error("[%s] failed to connect: %s", self.address, err)
            await self.disconnect()
            raise DeviceUnreachableError(f"Cannot connect to {self.address}: {err}") from err

        self._connected = True
        _LOGGER.info("[%s] connected, listening for reports", self.address)

    def _on_disconnect(self, client: BleakClient) -> None:
        """Handle disconnection."""
        _LOGGER.warning("[%s] kettle dropped the connection", self.address)
        self._connected = False
        if self._disconnected_callback:
            self._disconnected_callback()

    async def disconnect(self) -> None:
        """Disconnect from the device."""
        if self._client and self._client.is_connected:
            try:
                await self._client.stop_notify(CHAR_NOTIFY_UUID)
                await self._client.disconnect()
            except BleakError as err:
                _LOGGER.debug("[%s] error while disconnecting: %s", self.address, err)
        self._client = None
        self._connected = False

    def _notification_handler(self, sender: int, data: bytearray) -> None:
        """Handle BLE notifications."""
        _LOGGER.debug("[%s] report frame %s", self.address, data.hex())
        if self._notification_callback:
            self._notification_callback([base64.b64encode(bytes(data)).decode("ascii")])

    async def send(self, frame_b64: str) -> None:
        """Write one base64 command frame to the kettle.

        Raises:
            DeviceUnreachableError: If not connected or the write fails
        """
        if not self.is_connected:
            raise DeviceUnreachableError(f"Not connected to {self.address}")

        try:
            packet = base64.b64decode(frame_b64, validate=True)
        except binascii.Error as err:
            raise ValueError(f"Invalid base64 frame {frame_b64!r}") from err

        async with self._lock:
            _LOGGER.debug("[%s] sending frame %s", self.address, packet.hex())
            try:
                await asyncio.wait_for(
                    self._client.write_gatt_char(CHAR_WRITE_UUID, packet, response=True),
                    timeout=self._write_timeout,
                )
            except (BleakError, asyncio.TimeoutError) as err:
                raise DeviceUnreachableError(f"Write to {self.address} failed: {err}") from err
