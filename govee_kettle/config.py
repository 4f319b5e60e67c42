"""Per-device options for the Govee Kettle adapter."""
from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

import voluptuous as vol

from .exceptions import InvalidConfigError

CONF_NAME = "name"
CONF_HIDE_GREEN_TEA = "hide_mode_green_tea"
CONF_HIDE_OOLONG_TEA = "hide_mode_oolong_tea"
CONF_HIDE_COFFEE = "hide_mode_coffee"
CONF_HIDE_BLACK_TEA_BOIL = "hide_mode_black_tea_boil"
CONF_SHOW_CUSTOM_MODE_1 = "show_custom_mode_1"
CONF_SHOW_CUSTOM_MODE_2 = "show_custom_mode_2"
CONF_HIDE_TEMPERATURE = "hide_temperature"

DEFAULT_NAME = "Kettle"

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_HIDE_GREEN_TEA, default=False): bool,
        vol.Optional(CONF_HIDE_OOLONG_TEA, default=False): bool,
        vol.Optional(CONF_HIDE_COFFEE, default=False): bool,
        vol.Optional(CONF_HIDE_BLACK_TEA_BOIL, default=False): bool,
        vol.Optional(CONF_SHOW_CUSTOM_MODE_1, default=False): bool,
        vol.Optional(CONF_SHOW_CUSTOM_MODE_2, default=False): bool,
        vol.Optional(CONF_HIDE_TEMPERATURE, default=False): bool,
    }
)


@dataclass(frozen=True)
class DeviceConfig:
    """Which toggles and sensors are exposed for one kettle.

    The custom modes are hidden unless explicitly shown.
    """

    name: str = DEFAULT_NAME
    hide_mode_green_tea: bool = False
    hide_mode_oolong_tea: bool = False
    hide_mode_coffee: bool = False
    hide_mode_black_tea_boil: bool = False
    show_custom_mode_1: bool = False
    show_custom_mode_2: bool = False
    hide_temperature: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DeviceConfig:
        """Validate a raw options mapping.

        Raises:
            InvalidConfigError: If the mapping does not match the schema
        """
        try:
            validated = CONFIG_SCHEMA(dict(data or {}))
        except vol.Invalid as err:
            raise InvalidConfigError(f"Invalid kettle configuration: {err}") from err
        return cls(**validated)

    @classmethod
    def from_file(cls, path: Path) -> DeviceConfig:
        """Load and validate options from a JSON file."""
        try:
            with path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (OSError, json.JSONDecodeError) as err:
            raise InvalidConfigError(f"Cannot read configuration {path}: {err}") from err
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Configuration {path} must be a JSON object")
        return cls.from_dict(data)

    def is_hidden(self, toggle_key: str) -> bool:
        """Return whether the toggle with this key should not be exposed."""
        hidden = {
            "green_tea": self.hide_mode_green_tea,
            "oolong_tea": self.hide_mode_oolong_tea,
            "coffee": self.hide_mode_coffee,
            "black_tea_boil": self.hide_mode_black_tea_boil,
            "custom_mode_1": not self.show_custom_mode_1,
            "custom_mode_2": not self.show_custom_mode_2,
        }
        return hidden.get(toggle_key, True)

    def as_dict(self) -> dict[str, Any]:
        """Return the options in schema form."""
        return {
            CONF_NAME: self.name,
            CONF_HIDE_GREEN_TEA: self.hide_mode_green_tea,
            CONF_HIDE_OOLONG_TEA: self.hide_mode_oolong_tea,
            CONF_HIDE_COFFEE: self.hide_mode_coffee,
            CONF_HIDE_BLACK_TEA_BOIL: self.hide_mode_black_tea_boil,
            CONF_SHOW_CUSTOM_MODE_1: self.show_custom_mode_1,
            CONF_SHOW_CUSTOM_MODE_2: self.show_custom_mode_2,
            CONF_HIDE_TEMPERATURE: self.hide_temperature,
        }
