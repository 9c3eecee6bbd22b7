"""Protocol layer for GIP frames exchanged with the controller."""

from .codec import decode_header, decode_payload, encode, parse_frame
from .parser import INPUT_FRAME_SIZE, INPUT_PAYLOAD_SIZE, decode_buttons, decode_input
from .serializer import build_acknowledge, build_power_on, build_rumble

__all__ = [
    "decode_header",
    "decode_payload",
    "encode",
    "parse_frame",
    "decode_input",
    "decode_buttons",
    "INPUT_FRAME_SIZE",
    "INPUT_PAYLOAD_SIZE",
    "build_acknowledge",
    "build_power_on",
    "build_rumble",
]
