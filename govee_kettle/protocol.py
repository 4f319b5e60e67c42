"""Frame protocol for the Govee Smart Kettle.

This module provides the low-level frame codec for the kettle: base64
transport decoding, 1-based hex accessors, checksum calculation, and the
fixed catalogue of command frames the kettle accepts.

Frame layout (20 bytes):
    [1]      marker (0xAA report, 0x33 command)
    [2-3]    function code (group, subcode)
    [4-19]   payload
    [20]     checksum (XOR of bytes 1-19)

Command frames:
    Green Tea:      3305000200000000000000000000000000000034 [mode select]
    Oolong Tea:     3305000300000000000000000000000000000035 [mode select]
    Coffee:         3305000400000000000000000000000000000032 [mode select]
    Black Tea/Boil: 3305000500000000000000000000000000000033 [mode select]
    Custom Mode 1:  3305000101000000000000000000000000000036 [mode select]
    Custom Mode 2:  3305000102000000000000000000000000000035 [mode select]
    Power On:       3301010000000000000000000000000000000033
    Power Off:      3301000000000000000000000000000000000032
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from .exceptions import MalformedFrameError

# Protocol constants
FRAME_LENGTH = 20
REPORT_MARKER = 0xAA
COMMAND_MARKER = 0x33

# Report function codes
FUNC_CURRENT_MODE = "0500"
FUNC_TEMPERATURE = "1001"
FUNC_POWER_OFF = "1900"
FUNC_POWER_ON = "1901"

# Function groups that are reported but carry nothing we act on:
# 0x17 base on/off, 0x22 keep warm, 0x23 scheduled start
IGNORED_FUNCTION_GROUPS = frozenset({"17", "22", "23"})

FUNCTION_NAMES = {
    FUNC_CURRENT_MODE: "Current Mode",
    FUNC_TEMPERATURE: "Temperature",
    FUNC_POWER_OFF: "Power Off",
    FUNC_POWER_ON: "Power On",
    "1700": "Base",
    "2200": "Keep Warm Off",
    "2201": "Keep Warm On",
    "2300": "Scheduled Start Off",
    "2301": "Scheduled Start On",
}

# Mode codes
MODE_GREEN_TEA = "0200"
MODE_OOLONG_TEA = "0300"
MODE_COFFEE = "0400"
MODE_BLACK_TEA_BOIL = "0500"
MODE_CUSTOM_1 = "0101"
MODE_CUSTOM_2 = "0102"

MODE_NAMES = {
    MODE_GREEN_TEA: "Green Tea",
    MODE_OOLONG_TEA: "Oolong Tea",
    MODE_COFFEE: "Coffee",
    MODE_BLACK_TEA_BOIL: "Black Tea/Boil",
    MODE_CUSTOM_1: "Custom Mode 1",
    MODE_CUSTOM_2: "Custom Mode 2",
}

# Command frames (base64)
CMD_POWER_OFF = "MwEAAAAAAAAAAAAAAAAAAAAAADI="
CMD_POWER_ON = "MwEBAAAAAAAAAAAAAAAAAAAAADM="
CMD_MODE_GREEN_TEA = "MwUAAgAAAAAAAAAAAAAAAAAAADQ="
CMD_MODE_OOLONG_TEA = "MwUAAwAAAAAAAAAAAAAAAAAAADU="
CMD_MODE_COFFEE = "MwUABAAAAAAAAAAAAAAAAAAAADI="
CMD_MODE_BLACK_TEA_BOIL = "MwUABQAAAAAAAAAAAAAAAAAAADM="
CMD_MODE_CUSTOM_1 = "MwUAAQEAAAAAAAAAAAAAAAAAADY="
CMD_MODE_CUSTOM_2 = "MwUAAQIAAAAAAAAAAAAAAAAAADU="

MODE_COMMANDS = {
    MODE_GREEN_TEA: CMD_MODE_GREEN_TEA,
    MODE_OOLONG_TEA: CMD_MODE_OOLONG_TEA,
    MODE_COFFEE: CMD_MODE_COFFEE,
    MODE_BLACK_TEA_BOIL: CMD_MODE_BLACK_TEA_BOIL,
    MODE_CUSTOM_1: CMD_MODE_CUSTOM_1,
    MODE_CUSTOM_2: CMD_MODE_CUSTOM_2,
}

# Temperature sensor
TEMPERATURE_NAME = "Temperature"
TEMPERATURE_LABEL_INDEX = 7


@dataclass(frozen=True)
class Frame:
    """Decoded protocol frame.

    Positions are 1-based to match the frame layout above. Accessors return
    lowercase two-digit hex text so multi-byte codes can be built by
    concatenation.
    """

    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def byte_at(self, position: int) -> str:
        """Return the byte at a 1-based position as hex text.

        Raises:
            MalformedFrameError: If the frame is shorter than position
        """
        if position < 1 or position > len(self.data):
            raise MalformedFrameError(
                f"Frame has {len(self.data)} bytes, position {position} requested"
            )
        return f"{self.data[position - 1]:02x}"

    def byte_range(self, start: int, end: int) -> str:
        """Return bytes start..end (inclusive, 1-based) as hex text."""
        return "".join(self.byte_at(pos) for pos in range(start, end + 1))

    @property
    def hex(self) -> str:
        """Return the whole frame as hex text."""
        return self.data.hex()

    @property
    def marker(self) -> str:
        return self.byte_at(1)

    @property
    def is_report(self) -> bool:
        """Return whether this is a report (query response) frame."""
        return self.marker == f"{REPORT_MARKER:02x}"

    @property
    def function_code(self) -> str:
        """Return the 2-byte function code (group + subcode)."""
        return self.byte_range(2, 3)

    @property
    def payload(self) -> bytes:
        """Return the bytes between the function code and the checksum."""
        return self.data[3:-1]

    @property
    def checksum_valid(self) -> bool:
        """Return whether the trailing byte matches the computed checksum."""
        if len(self.data) < 2:
            return False
        return compute_checksum(self.data[:-1]) == self.data[-1]


def decode_frame(frame_b64: str) -> Frame:
    """Decode a base64 transport string into a frame.

    Args:
        frame_b64: Base64-encoded frame

    Returns:
        Decoded frame

    Raises:
        MalformedFrameError: If the text is not valid base64 or decodes to nothing
    """
    try:
        data = base64.b64decode(frame_b64, validate=True)
    except (binascii.Error, ValueError, TypeError) as err:
        raise MalformedFrameError(f"Invalid base64 frame {frame_b64!r}") from err
    if not data:
        raise MalformedFrameError("Empty frame")
    return Frame(data)


def compute_checksum(data: bytes) -> int:
    """Calculate the frame checksum (XOR of all bytes)."""
    checksum = 0
    for byte in data:
        checksum ^= byte
    return checksum


def build_frame(head: bytes, frame_length: int = FRAME_LENGTH) -> str:
    """Build a base64 frame from its leading bytes.

    The head is zero padded to frame_length - 1 bytes and the checksum is
    appended.

    Args:
        head: Marker, function code and payload bytes
        frame_length: Total frame length including checksum

    Returns:
        Base64-encoded frame

    Raises:
        ValueError: If head does not fit in the frame
    """
    if len(head) >= frame_length:
        raise ValueError("Payload exceeds frame size")

    frame = bytearray(head)
    frame.extend(b"\x00" * (frame_length - 1 - len(frame)))
    frame.append(compute_checksum(frame))
    return base64.b64encode(bytes(frame)).decode("ascii")


def hex_to_int(hex_text: str) -> int:
    """Convert big-endian hex text to an integer."""
    return int(hex_text, 16)


def fahrenheit_to_celsius(temp_f: float) -> float:
    """Convert Fahrenheit to Celsius."""
    return (temp_f - 32) * 5 / 9


def describe_function(function_code: str) -> str:
    """Return a human readable name for a report function code."""
    if function_code in FUNCTION_NAMES:
        return FUNCTION_NAMES[function_code]
    if function_code[:2] in IGNORED_FUNCTION_GROUPS:
        return "Ignored"
    return "Unknown"


@dataclass(frozen=True)
class ToggleSpec:
    """Describes one exposed mode toggle."""

    key: str
    name: str
    mode: str
    command: str
    label_index: int


TOGGLES: tuple[ToggleSpec, ...] = (
    ToggleSpec("green_tea", "Green Tea", MODE_GREEN_TEA, CMD_MODE_GREEN_TEA, 1),
    ToggleSpec("oolong_tea", "Oolong Tea", MODE_OOLONG_TEA, CMD_MODE_OOLONG_TEA, 2),
    ToggleSpec("coffee", "Coffee", MODE_COFFEE, CMD_MODE_COFFEE, 3),
    ToggleSpec(
        "black_tea_boil", "Black Tea/Boil", MODE_BLACK_TEA_BOIL, CMD_MODE_BLACK_TEA_BOIL, 4
    ),
    ToggleSpec("custom_mode_1", "Custom Mode 1", MODE_CUSTOM_1, CMD_MODE_CUSTOM_1, 5),
    ToggleSpec("custom_mode_2", "Custom Mode 2", MODE_CUSTOM_2, CMD_MODE_CUSTOM_2, 6),
)
