"""Cached state for a Govee Kettle."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DeviceCache:
    """Last known state of the kettle.

    Both fields start unset (None) until the kettle reports them or an
    update is confirmed.
    """

    current_mode: str | None = None
    power_on: bool | None = None

    def update_mode(self, mode: str) -> bool:
        """Store the current mode code. Returns whether it changed."""
        if self.current_mode == mode:
            return False
        self.current_mode = mode
        return True

    def update_power(self, power_on: bool) -> bool:
        """Store the power state. Returns whether it changed."""
        if self.power_on is power_on:
            return False
        self.power_on = power_on
        return True

    def is_active(self, mode: str) -> bool:
        """Return whether the kettle is on in the given mode."""
        return self.power_on is True and self.current_mode == mode

    def reset(self) -> None:
        """Forget everything known about the kettle."""
        self.current_mode = None
        self.power_on = None
