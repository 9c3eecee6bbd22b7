"""GIP SDK - Game Input Protocol driver for wired Xbox One controllers."""

from .config import SessionConfig
from .controller import Controller
from .errors import (
    GipError,
    TruncatedFrame,
    SessionError,
    TransportError,
    TransportTimeout,
    DeviceGone,
)
from .models import (
    Button,
    Command,
    Frame,
    Header,
    InputReport,
    StickPosition,
    RumbleCommand,
    SessionPhase,
    InputSnapshot,
    GuideButtonPressed,
    UnhandledFrame,
    SessionEnded,
    SessionEvent,
    command_name,
)
from .session import GipSession
from .transport import Transport, UsbTransport

__all__ = [
    "SessionConfig",
    "Controller",
    "GipError",
    "TruncatedFrame",
    "SessionError",
    "TransportError",
    "TransportTimeout",
    "DeviceGone",
    "Button",
    "Command",
    "Frame",
    "Header",
    "InputReport",
    "StickPosition",
    "RumbleCommand",
    "SessionPhase",
    "InputSnapshot",
    "GuideButtonPressed",
    "UnhandledFrame",
    "SessionEnded",
    "SessionEvent",
    "command_name",
    "GipSession",
    "Transport",
    "UsbTransport",
]
