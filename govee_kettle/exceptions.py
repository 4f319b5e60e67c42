"""Exceptions for the Govee Kettle library."""
from __future__ import annotations


class GoveeKettleError(Exception):
    """Base exception for Govee Kettle errors."""


class MalformedFrameError(GoveeKettleError):
    """Frame could not be decoded or is shorter than the requested position."""


class DeviceUnreachableError(GoveeKettleError):
    """The kettle did not accept a command frame.

    Raised to the caller of a toggle update as a "no response" condition.
    """

    def __init__(self, message: str, toggle: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error message
            toggle: Key of the toggle whose update failed, if any
        """
        super().__init__(message)
        self.toggle = toggle


class UnknownToggleError(GoveeKettleError):
    """Toggle key is unknown or not exposed for this kettle."""


class InvalidConfigError(GoveeKettleError):
    """Device configuration failed validation."""
