"""Control surface the kettle state is exposed on.

The adapter never renders anything itself. It tells a control surface which
toggles exist and what state they should show, and pushes temperature
readings to it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Protocol

from .exceptions import UnknownToggleError
from .protocol import ToggleSpec

_LOGGER = logging.getLogger(__name__)


class ControlSurface(Protocol):
    """Collaborator that owns the user-visible toggles and sensor."""

    def expose_toggle(self, spec: ToggleSpec) -> None:
        ...

    def remove_toggle(self, key: str) -> None:
        ...

    def set_toggle(self, key: str, on: bool) -> None:
        ...

    def get_toggle(self, key: str) -> bool:
        ...

    def expose_temperature(self, name: str, label_index: int) -> None:
        ...

    def remove_temperature(self) -> None:
        ...

    def set_temperature(self, celsius: float) -> None:
        ...


@dataclass
class ExposedToggle:
    """A toggle as currently shown on the surface."""

    spec: ToggleSpec
    on: bool = False


@dataclass
class InMemoryControlSurface:
    """Control surface that keeps toggle and sensor values in memory.

    Args:
        on_change: Optional callback invoked as on_change(name, value) whenever
            a toggle or the temperature is written
    """

    on_change: Callable[[str, object], None] | None = None
    toggles: dict[str, ExposedToggle] = field(default_factory=dict)
    temperature_exposed: bool = False
    temperature: float | None = None

    def expose_toggle(self, spec: ToggleSpec) -> None:
        if spec.key not in self.toggles:
            self.toggles[spec.key] = ExposedToggle(spec)

    def remove_toggle(self, key: str) -> None:
        self.toggles.pop(key, None)

    def set_toggle(self, key: str, on: bool) -> None:
        try:
            toggle = self.toggles[key]
        except KeyError as err:
            raise UnknownToggleError(f"Toggle {key!r} is not exposed") from err
        toggle.on = on
        if self.on_change:
            self.on_change(key, on)

    def get_toggle(self, key: str) -> bool:
        try:
            return self.toggles[key].on
        except KeyError as err:
            raise UnknownToggleError(f"Toggle {key!r} is not exposed") from err

    def expose_temperature(self, name: str, label_index: int) -> None:
        self.temperature_exposed = True

    def remove_temperature(self) -> None:
        self.temperature_exposed = False
        self.temperature = None

    def set_temperature(self, celsius: float) -> None:
        if not self.temperature_exposed:
            _LOGGER.debug("Temperature sensor not exposed, dropping %.2f", celsius)
            return
        self.temperature = celsius
        if self.on_change:
            self.on_change("temperature", celsius)

    @property
    def active(self) -> list[str]:
        """Return the keys of all toggles currently on."""
        return [key for key, toggle in self.toggles.items() if toggle.on]
