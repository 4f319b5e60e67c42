"""High-level adapter for controlling a Govee Kettle."""
from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

from .config import DeviceConfig
from .exceptions import DeviceUnreachableError, MalformedFrameError, UnknownToggleError
from .protocol import (
    CMD_POWER_OFF,
    CMD_POWER_ON,
    FUNC_CURRENT_MODE,
    FUNC_POWER_OFF,
    FUNC_POWER_ON,
    FUNC_TEMPERATURE,
    IGNORED_FUNCTION_GROUPS,
    MODE_NAMES,
    TEMPERATURE_LABEL_INDEX,
    TEMPERATURE_NAME,
    TOGGLES,
    ToggleSpec,
    decode_frame,
    fahrenheit_to_celsius,
    hex_to_int,
)
from .state import DeviceCache
from .surface import ControlSurface

_LOGGER = logging.getLogger(__name__)


class FrameSender(Protocol):
    """Transport that delivers one command frame to the kettle."""

    async def send(self, frame_b64: str) -> None:
        """Send a base64 frame, raising if the kettle cannot be reached."""
        ...


class GoveeKettle:
    """Adapter between mode toggles and the kettle's command frames.

    Example usage:
        >>> async with GoveeKettle(client, surface, config) as kettle:
        >>>     await kettle.async_apply_toggle("green_tea", True)
        >>>     kettle.handle_batch(["qgUAAgAAAAAAAAAAAAAAAAAAAK0="])
    """

    # Seconds between mode select and power on
    MODE_SETTLE_DELAY = 1.0
    # Seconds before a failed toggle is forced back off
    REVERT_DELAY = 2.0

    def __init__(
        self,
        sender: FrameSender,
        surface: ControlSurface,
        config: DeviceConfig | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            sender: Transport used for outbound command frames
            surface: Control surface owning the exposed toggles
            config: Which toggles and sensors to expose
        """
        self._sender = sender
        self._surface = surface
        self._config = config or DeviceConfig()
        self._cache = DeviceCache()
        self._toggles: dict[str, ToggleSpec] = {
            spec.key: spec for spec in TOGGLES if not self._config.is_hidden(spec.key)
        }
        self._revert_tasks: set[asyncio.Task[None]] = set()
        self._attached = False

    async def __aenter__(self) -> GoveeKettle:
        """Async context manager entry."""
        self.attach()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.detach()

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def cache(self) -> DeviceCache:
        """Return the cached kettle state."""
        return self._cache

    @property
    def toggles(self) -> dict[str, ToggleSpec]:
        """Return the exposed toggles keyed by toggle key."""
        return dict(self._toggles)

    @property
    def pending_reverts(self) -> int:
        """Return the number of scheduled toggle reverts still running."""
        return len(self._revert_tasks)

    def attach(self) -> None:
        """Expose the configured toggles and sensor on the control surface.

        Toggles start from whatever reports were cached before attaching, so
        the kettle may be connected either before or after this call.
        """
        for spec in TOGGLES:
            if spec.key in self._toggles:
                self._surface.expose_toggle(spec)
            else:
                self._surface.remove_toggle(spec.key)

        if self._config.hide_temperature:
            self._surface.remove_temperature()
        else:
            self._surface.expose_temperature(TEMPERATURE_NAME, TEMPERATURE_LABEL_INDEX)

        self._attached = True
        self.reconcile()
        _LOGGER.info("[%s] initialising with options %s", self.name, self._config.as_dict())

    async def detach(self) -> None:
        """Let scheduled reverts finish and forget the cached state."""
        try:
            await self.async_wait_pending()
        finally:
            self._attached = False
            self._cache.reset()
        _LOGGER.debug("[%s] detached", self.name)

    async def async_wait_pending(self) -> None:
        """Wait for all scheduled toggle reverts to complete."""
        while self._revert_tasks:
            await asyncio.gather(*list(self._revert_tasks))

    def _get_toggle(self, key: str) -> ToggleSpec:
        try:
            return self._toggles[key]
        except KeyError as err:
            raise UnknownToggleError(f"Toggle {key!r} is not exposed") from err

    async def async_apply_toggle(self, key: str, on: bool) -> None:
        """Drive the kettle to match a toggle change.

        Turning a toggle off powers the kettle off. Turning it on selects the
        toggle's mode, waits MODE_SETTLE_DELAY, then powers the kettle on.

        Args:
            key: Toggle key
            on: Requested toggle state

        Raises:
            UnknownToggleError: If the toggle is not exposed
            DeviceUnreachableError: If any frame could not be sent; the toggle
                is forced off after REVERT_DELAY
        """
        spec = self._get_toggle(key)

        try:
            if not on:
                await self._sender.send(CMD_POWER_OFF)
                self._cache.update_power(False)
            else:
                await self._sender.send(spec.command)
                await asyncio.sleep(self.MODE_SETTLE_DELAY)
                await self._sender.send(CMD_POWER_ON)
                self._cache.update_power(True)
                self._cache.update_mode(spec.mode)
                _LOGGER.info("[%s] current mode [%s]", self.name, spec.name)
        except Exception as err:
            _LOGGER.warning("[%s] could not update [%s]: %s", self.name, spec.name, err)
            self._schedule_revert(spec.key)
            raise DeviceUnreachableError(
                f"{self.name} did not respond to {spec.name}", toggle=spec.key
            ) from err

        self.reconcile()

    def _schedule_revert(self, key: str) -> None:
        task = asyncio.create_task(self._revert_toggle(key))
        self._revert_tasks.add(task)
        task.add_done_callback(self._revert_tasks.discard)

    async def _revert_toggle(self, key: str) -> None:
        await asyncio.sleep(self.REVERT_DELAY)
        if key not in self._toggles:
            return
        _LOGGER.debug("[%s] reverting [%s] to off", self.name, key)
        try:
            self._surface.set_toggle(key, False)
        except Exception as err:
            _LOGGER.warning("[%s] could not revert [%s]: %s", self.name, key, err)

    def handle_batch(self, commands: Sequence[str] | None) -> None:
        """Process a batch of report frames pushed by the kettle.

        A frame that cannot be decoded or applied is skipped. Exposed toggles
        are reconciled once at the end if any frame changed the cached state;
        before attach only the cache is updated.
        """
        changed = False
        for command in commands or ():
            try:
                changed |= self._handle_report(command)
            except MalformedFrameError as err:
                _LOGGER.debug("[%s] skipping malformed frame [%s]: %s", self.name, command, err)
            except Exception:
                _LOGGER.exception("[%s] failed to handle report [%s]", self.name, command)

        if changed and self._attached:
            self.reconcile()

    def _handle_report(self, command: str) -> bool:
        """Apply one report frame. Returns whether the cache changed."""
        frame = decode_frame(command)
        if not frame.is_report:
            return False

        function_code = frame.function_code

        if function_code == FUNC_CURRENT_MODE:
            mode = frame.byte_range(4, 5)
            _LOGGER.debug(
                "[%s] current mode code [%s] (%s)",
                self.name,
                mode,
                MODE_NAMES.get(mode, "unknown"),
            )
            return self._cache.update_mode(mode)

        if function_code == FUNC_TEMPERATURE:
            temp_f = hex_to_int(frame.byte_range(4, 5)) / 100
            _LOGGER.debug("[%s] current temp [%s F]", self.name, temp_f)
            if not self._config.hide_temperature:
                self._surface.set_temperature(fahrenheit_to_celsius(temp_f))
            return False

        if function_code == FUNC_POWER_OFF:
            _LOGGER.debug("[%s] current switched on [off]", self.name)
            return self._cache.update_power(False)

        if function_code == FUNC_POWER_ON:
            _LOGGER.debug("[%s] current switched on [on]", self.name)
            return self._cache.update_power(True)

        if function_code[:2] in IGNORED_FUNCTION_GROUPS:
            return False

        _LOGGER.debug("[%s] new scene code: [%s] [%s]", self.name, command, frame.hex)
        return False

    def reconcile(self) -> None:
        """Set every exposed toggle from the cached mode and power state."""
        for spec in self._toggles.values():
            self._surface.set_toggle(spec.key, self._cache.is_active(spec.mode))
