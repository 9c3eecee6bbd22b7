"""Input decoder for GIP Input (0x20) payloads.

Parses the payload of an Input frame into an InputReport.
Pure functions with no side effects.
"""
from __future__ import annotations

import struct
from typing import Tuple

from ..errors import TruncatedFrame
from ..models import BUTTONS, HEADER_SIZE, Button, InputReport, StickPosition

# Payload offsets as observed on the Model 1697 controller (add 4 for frame
# offsets). The right trigger sits at 4, not 3, and each stick sends Y before
# X. Do not reorder.
BUTTONS_OFFSET = 0          # u16
LEFT_TRIGGER_OFFSET = 2     # u8, byte 3 is padding
RIGHT_TRIGGER_OFFSET = 4    # u8, byte 5 is padding
LEFT_STICK_Y_OFFSET = 6     # i16
LEFT_STICK_X_OFFSET = 8     # i16
RIGHT_STICK_Y_OFFSET = 10   # i16
RIGHT_STICK_X_OFFSET = 12   # i16

INPUT_PAYLOAD_SIZE = 14
INPUT_FRAME_SIZE = HEADER_SIZE + INPUT_PAYLOAD_SIZE


def decode_input(payload: bytes) -> InputReport:
    """Decode an Input payload (frame minus header).

    Args:
        payload: At least 14 bytes; extra bytes are ignored

    Returns:
        InputReport with sticks presented as (x, y)

    Raises:
        TruncatedFrame: Fewer than 14 bytes supplied

    Examples:
        >>> report = decode_input(bytes.fromhex("1000 7f00 ff00 0080 ff7f ff7f ff7f"))
        >>> report.right_trigger, report.left_stick_y
        (255, -32768)
    """
    if len(payload) < INPUT_PAYLOAD_SIZE:
        raise TruncatedFrame(
            f"Input payload needs {INPUT_PAYLOAD_SIZE} bytes, got {len(payload)}",
            expected=INPUT_PAYLOAD_SIZE,
            actual=len(payload),
        )

    (buttons,) = struct.unpack_from("<H", payload, BUTTONS_OFFSET)
    left_trigger = payload[LEFT_TRIGGER_OFFSET]
    right_trigger = payload[RIGHT_TRIGGER_OFFSET]
    (left_y,) = struct.unpack_from("<h", payload, LEFT_STICK_Y_OFFSET)
    (left_x,) = struct.unpack_from("<h", payload, LEFT_STICK_X_OFFSET)
    (right_y,) = struct.unpack_from("<h", payload, RIGHT_STICK_Y_OFFSET)
    (right_x,) = struct.unpack_from("<h", payload, RIGHT_STICK_X_OFFSET)

    return InputReport(
        buttons=buttons,
        left_trigger=left_trigger,
        right_trigger=right_trigger,
        left_stick=StickPosition(x=left_x, y=left_y),
        right_stick=StickPosition(x=right_x, y=right_y),
    )


def decode_buttons(mask: int) -> Tuple[Button, ...]:
    """Named buttons set in a 16-bit mask, lowest bit first."""
    return tuple(button for button in BUTTONS if mask & button)
