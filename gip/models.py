"""Immutable data models for GIP frames, input state and session events.

All models are frozen dataclasses to ensure immutability and thread-safety.
These models serve as the contract between codec, session and application layers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag
from typing import Tuple, Union

HEADER_SIZE = 4
MAX_PAYLOAD_SIZE = 0xFF

# Observed on every frame the controller accepts; meaning of the bit is unknown.
DEFAULT_OPTIONS = 0x20


class Command(IntEnum):
    """GIP command codes carried in the first header byte."""
    UNKNOWN = -1
    ACKNOWLEDGE = 0x01
    ANNOUNCE = 0x02
    STATUS = 0x03
    IDENTIFY = 0x04
    POWER = 0x05
    AUTHENTICATE = 0x06
    GUIDE_BUTTON = 0x07
    RUMBLE = 0x09
    LED = 0x0A
    SERIAL_NUMBER = 0x1E
    INPUT = 0x20

    @classmethod
    def from_code(cls, code: int) -> Command:
        """Map a raw command byte to a Command, UNKNOWN if unrecognised."""
        try:
            command = cls(code)
        except ValueError:
            return cls.UNKNOWN
        return command if code >= 0 else cls.UNKNOWN


_COMMAND_NAMES = {
    Command.UNKNOWN: "Unknown",
    Command.ACKNOWLEDGE: "Acknowledge",
    Command.ANNOUNCE: "Announce",
    Command.STATUS: "Status",
    Command.IDENTIFY: "Identify",
    Command.POWER: "Power",
    Command.AUTHENTICATE: "Authenticate",
    Command.GUIDE_BUTTON: "Guide Button",
    Command.RUMBLE: "Rumble",
    Command.LED: "LED",
    Command.SERIAL_NUMBER: "Serial Number",
    Command.INPUT: "Input",
}


def command_name(code: int) -> str:
    """Human readable name for a raw command byte."""
    return _COMMAND_NAMES[Command.from_code(code)]


class Button(IntFlag):
    """Button bits of the 16-bit mask at the start of an Input payload."""
    SYNC = 0x0001
    RESERVED = 0x0002  # never set by the controller
    MENU = 0x0004
    VIEW = 0x0008
    A = 0x0010
    B = 0x0020
    X = 0x0040
    Y = 0x0080
    DPAD_UP = 0x0100
    DPAD_DOWN = 0x0200
    DPAD_LEFT = 0x0400
    DPAD_RIGHT = 0x0800
    LB = 0x1000
    RB = 0x2000
    LS = 0x4000
    RS = 0x8000


# Bit order, lowest first
BUTTONS: Tuple[Button, ...] = (
    Button.SYNC,
    Button.RESERVED,
    Button.MENU,
    Button.VIEW,
    Button.A,
    Button.B,
    Button.X,
    Button.Y,
    Button.DPAD_UP,
    Button.DPAD_DOWN,
    Button.DPAD_LEFT,
    Button.DPAD_RIGHT,
    Button.LB,
    Button.RB,
    Button.LS,
    Button.RS,
)


@dataclass(frozen=True)
class Header:
    """Fixed 4-byte GIP frame header.

    Attributes:
        command: Raw command code (see Command)
        options: Flag byte, 0x20 on everything we send
        sequence: Sender supplied sequence counter
        length: Number of payload bytes following the header
    """
    command: int
    options: int = DEFAULT_OPTIONS
    sequence: int = 0
    length: int = 0

    @property
    def command_type(self) -> Command:
        return Command.from_code(self.command)

    @property
    def command_name(self) -> str:
        return command_name(self.command)


@dataclass(frozen=True)
class Frame:
    """One header-plus-payload unit exchanged with the controller."""
    header: Header
    payload: bytes = b""

    def to_bytes(self) -> bytes:
        """Serialize to wire format."""
        from .protocol.codec import encode
        return encode(self.header, self.payload)


@dataclass(frozen=True)
class StickPosition:
    """Analog stick deflection, signed 16-bit per axis."""
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class InputReport:
    """Decoded contents of one Input frame.

    Attributes:
        buttons: Raw 16-bit button mask (see Button)
        left_trigger: Left trigger pull 0-255
        right_trigger: Right trigger pull 0-255
        left_stick: Left stick position
        right_stick: Right stick position
    """
    buttons: int = 0
    left_trigger: int = 0
    right_trigger: int = 0
    left_stick: StickPosition = StickPosition()
    right_stick: StickPosition = StickPosition()

    @property
    def left_stick_x(self) -> int:
        return self.left_stick.x

    @property
    def left_stick_y(self) -> int:
        return self.left_stick.y

    @property
    def right_stick_x(self) -> int:
        return self.right_stick.x

    @property
    def right_stick_y(self) -> int:
        return self.right_stick.y

    @property
    def pressed(self) -> Tuple[Button, ...]:
        """Buttons held in this report, lowest bit first."""
        return tuple(button for button in BUTTONS if self.buttons & button)

    def is_pressed(self, button: Button) -> bool:
        return bool(self.buttons & button)


@dataclass(frozen=True)
class RumbleCommand:
    """Force feedback request.

    All fields are raw bytes in device-defined units.

    Attributes:
        enable: Motor enable mask
        magnitude_left: Left (low frequency) motor strength
        magnitude_right: Right (high frequency) motor strength
        magnitude_trigger_left: Left trigger motor strength
        magnitude_trigger_right: Right trigger motor strength
        duration: How long each pulse lasts
        delay: Pause between pulses
        repeat: Number of extra pulses
    """
    enable: int = 0x0F
    magnitude_left: int = 0
    magnitude_right: int = 0
    magnitude_trigger_left: int = 0
    magnitude_trigger_right: int = 0
    duration: int = 0xFF
    delay: int = 0
    repeat: int = 0

    @classmethod
    def stop(cls) -> RumbleCommand:
        """Command that silences every motor."""
        return cls(enable=0x00, duration=0)


class SessionPhase(Enum):
    """Lifecycle phase of a GIP session."""
    DISCONNECTED = "disconnected"
    ANNOUNCING = "announcing"
    ACKNOWLEDGING = "acknowledging"
    POWERING_ON = "powering_on"
    STREAMING = "streaming"


# Session events

@dataclass(frozen=True)
class InputSnapshot:
    """A decoded Input frame.

    Attributes:
        report: Normalized controller state
        sequence: Sequence number of the frame it came from
    """
    report: InputReport
    sequence: int = 0


@dataclass(frozen=True)
class GuideButtonPressed:
    """The controller reported activity on the guide (Xbox) button."""
    header: Header


@dataclass(frozen=True)
class UnhandledFrame:
    """A frame the session has no handler for, header only."""
    header: Header


@dataclass(frozen=True)
class SessionEnded:
    """Final event of every session."""
    reason: str


SessionEvent = Union[
    InputSnapshot,
    GuideButtonPressed,
    UnhandledFrame,
    SessionEnded,
]
