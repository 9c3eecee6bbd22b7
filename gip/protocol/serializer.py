"""Output encoder for GIP commands sent to the controller.

Builds outbound frames. Pure functions with no side effects.
"""
from __future__ import annotations

from ..models import DEFAULT_OPTIONS, Command, Frame, Header, RumbleCommand

ACKNOWLEDGE_PAYLOAD_SIZE = 9
POWER_MODE_ON = 0x00

RUMBLE_FIELDS = (
    "enable",
    "magnitude_left",
    "magnitude_right",
    "magnitude_trigger_left",
    "magnitude_trigger_right",
    "duration",
    "delay",
    "repeat",
)


def _frame(command: Command, sequence: int, payload: bytes) -> Frame:
    header = Header(
        command=command.value,
        options=DEFAULT_OPTIONS,
        sequence=sequence,
        length=len(payload),
    )
    return Frame(header=header, payload=payload)


def build_acknowledge(sequence: int) -> Frame:
    """Acknowledge a frame, echoing its sequence number.

    Protocol: 01 20 <seq> 09 + nine zero bytes

    Examples:
        >>> build_acknowledge(7).to_bytes().hex(" ")
        '01 20 07 09 00 00 00 00 00 00 00 00 00'
    """
    return _frame(Command.ACKNOWLEDGE, sequence, bytes(ACKNOWLEDGE_PAYLOAD_SIZE))


def build_power_on() -> Frame:
    """Switch the controller into input mode.

    Protocol: 05 20 00 01 00
    """
    return _frame(Command.POWER, 0, bytes([POWER_MODE_ON]))


def build_rumble(command: RumbleCommand, sequence: int = 0) -> Frame:
    """Serialize a RumbleCommand.

    Protocol: 09 20 <seq> 08 + enable, left, right, trigger left,
    trigger right, duration, delay, repeat

    Raises:
        ValueError: A field is outside 0-255
    """
    values = []
    for name in RUMBLE_FIELDS:
        value = getattr(command, name)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Rumble {name} out of range: {value}")
        values.append(value)

    return _frame(Command.RUMBLE, sequence, bytes(values))
