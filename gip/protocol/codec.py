"""Packet codec for GIP frames.

Converts between raw transport buffers and (Header, payload) pairs.
Pure functions with no side effects.
"""
from __future__ import annotations

import struct
from typing import Tuple

from ..errors import TruncatedFrame
from ..models import HEADER_SIZE, MAX_PAYLOAD_SIZE, Frame, Header

# command, options, sequence, length
HEADER_FORMAT = "<BBBB"


def decode_header(data: bytes) -> Tuple[Header, bytes]:
    """Split the 4-byte header off a buffer.

    Args:
        data: Raw bytes as returned by the transport

    Returns:
        (Header, remaining bytes after the header)

    Raises:
        TruncatedFrame: Fewer than 4 bytes supplied

    Examples:
        >>> header, rest = decode_header(bytes([0x02, 0x20, 0x03, 0x01, 0xAA]))
        >>> header.sequence, rest
        (3, b'\\xaa')
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedFrame(
            f"Header needs {HEADER_SIZE} bytes, got {len(data)}",
            expected=HEADER_SIZE,
            actual=len(data),
        )

    command, options, sequence, length = struct.unpack_from(HEADER_FORMAT, data, 0)
    header = Header(command=command, options=options, sequence=sequence, length=length)
    return header, bytes(data[HEADER_SIZE:])


def decode_payload(header: Header, data: bytes) -> bytes:
    """Take exactly header.length payload bytes.

    Transport buffers may be over-sized, so trailing bytes are ignored.

    Raises:
        TruncatedFrame: Fewer than header.length bytes supplied
    """
    if len(data) < header.length:
        raise TruncatedFrame(
            f"{header.command_name} payload declares {header.length} bytes, got {len(data)}",
            expected=header.length,
            actual=len(data),
        )
    return bytes(data[:header.length])


def encode(header: Header, payload: bytes = b"") -> bytes:
    """Serialize a header and payload to wire bytes.

    The length field is always taken from the payload; header.length is ignored.

    Returns:
        Exactly 4 + len(payload) bytes

    Raises:
        ValueError: Payload longer than 255 bytes or header field out of range
    """
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Payload too long: {len(payload)} > {MAX_PAYLOAD_SIZE}")

    try:
        head = struct.pack(
            HEADER_FORMAT,
            header.command,
            header.options,
            header.sequence,
            len(payload),
        )
    except struct.error as e:
        raise ValueError(f"Header field out of range: {header}") from e

    return head + bytes(payload)


def parse_frame(data: bytes) -> Frame:
    """Decode a complete frame from one transport read.

    Raises:
        TruncatedFrame: Header or declared payload incomplete
    """
    header, rest = decode_header(data)
    return Frame(header=header, payload=decode_payload(header, rest))
