"""Unit tests for the Input decoder.

The fixtures here pin the Model 1697 byte layout: right trigger at frame
offset 8 (not 7) and each stick sending Y before X. A decoder that reads the
fields in "natural" order fails these tests.
"""
import unittest

from gip.errors import TruncatedFrame
from gip.models import BUTTONS, Button, Command
from gip.protocol.codec import parse_frame
from gip.protocol.parser import INPUT_FRAME_SIZE, decode_buttons, decode_input

# 18-byte Input frame as read from the IN endpoint
INPUT_FRAME = bytes([
    0x20, 0x00, 0x5E, 0x0E,  # header: Input, seq 0x5E, 14 byte payload
    0x10, 0x00,              # buttons: A
    0x7F,                    # left trigger
    0x00,                    # padding
    0xFF,                    # right trigger
    0x00,                    # padding
    0x00, 0x80,              # left stick Y
    0xFF, 0x7F,              # left stick X
    0xFF, 0x7F,              # right stick Y
    0xFF, 0x7F,              # right stick X
])

# Every field distinct so any swapped offset shows up
DISTINCT_PAYLOAD = bytes([
    0x01, 0x30,  # buttons 0x3001: SYNC, LB, RB
    0x11,        # left trigger
    0xEE,        # padding
    0x22,        # right trigger
    0xDD,        # padding
    0x01, 0x02,  # left Y  = 0x0201
    0x03, 0x04,  # left X  = 0x0403
    0x05, 0xF6,  # right Y = 0xF605 -> -2555
    0x07, 0x08,  # right X = 0x0807
])


class TestDecodeInput(unittest.TestCase):
    """Tests for decode_input."""

    def test_literal_fixture(self):
        """Test the reference frame decodes with the offset quirks applied."""
        self.assertEqual(len(INPUT_FRAME), INPUT_FRAME_SIZE)
        frame = parse_frame(INPUT_FRAME)
        self.assertEqual(frame.header.command_type, Command.INPUT)

        report = decode_input(frame.payload)
        self.assertEqual(report.buttons, 0x0010)
        self.assertEqual(report.pressed, (Button.A,))
        self.assertEqual(report.left_trigger, 0x7F)
        self.assertEqual(report.right_trigger, 0xFF)
        self.assertEqual(report.left_stick_x, 0x7FFF)
        self.assertEqual(report.left_stick_y, -32768)
        self.assertEqual(report.right_stick_x, 0x7FFF)
        self.assertEqual(report.right_stick_y, 0x7FFF)

    def test_distinct_fields(self):
        """Test each field is read from its own offset."""
        report = decode_input(DISTINCT_PAYLOAD)
        self.assertEqual(report.buttons, 0x3001)
        self.assertEqual(report.left_trigger, 0x11)
        self.assertEqual(report.right_trigger, 0x22)
        self.assertEqual(report.left_stick.y, 0x0201)
        self.assertEqual(report.left_stick.x, 0x0403)
        self.assertEqual(report.right_stick.y, -2555)
        self.assertEqual(report.right_stick.x, 0x0807)

    def test_padding_ignored(self):
        """Test padding bytes never leak into triggers."""
        payload = bytearray(DISTINCT_PAYLOAD)
        payload[3] = 0x00
        payload[5] = 0x00
        self.assertEqual(decode_input(bytes(payload)), decode_input(DISTINCT_PAYLOAD))

    def test_extra_bytes_ignored(self):
        """Test longer payloads from newer firmware still decode."""
        report = decode_input(DISTINCT_PAYLOAD + bytes(16))
        self.assertEqual(report, decode_input(DISTINCT_PAYLOAD))

    def test_centered_sticks(self):
        report = decode_input(bytes(14))
        self.assertEqual(report.buttons, 0)
        self.assertEqual(report.pressed, ())
        self.assertEqual((report.left_stick_x, report.left_stick_y), (0, 0))
        self.assertEqual((report.right_stick_x, report.right_stick_y), (0, 0))

    def test_truncated(self):
        """Test payloads under 14 bytes are rejected."""
        for size in (0, 4, 13):
            with self.subTest(size=size):
                with self.assertRaises(TruncatedFrame):
                    decode_input(bytes(size))


class TestDecodeButtons(unittest.TestCase):
    """Tests for decode_buttons."""

    def test_single_bits(self):
        """Test each of the 16 bits maps to exactly one named button."""
        self.assertEqual(len(BUTTONS), 16)
        for bit in range(16):
            with self.subTest(bit=bit):
                decoded = decode_buttons(1 << bit)
                self.assertEqual(len(decoded), 1)
                self.assertEqual(int(decoded[0]), 1 << bit)

    def test_named_bits(self):
        self.assertEqual(decode_buttons(0x0001), (Button.SYNC,))
        self.assertEqual(decode_buttons(0x0004), (Button.MENU,))
        self.assertEqual(decode_buttons(0x0008), (Button.VIEW,))
        self.assertEqual(decode_buttons(0x0100), (Button.DPAD_UP,))
        self.assertEqual(decode_buttons(0x0800), (Button.DPAD_RIGHT,))
        self.assertEqual(decode_buttons(0x8000), (Button.RS,))

    def test_zero_mask(self):
        self.assertEqual(decode_buttons(0), ())

    def test_combined_mask_in_bit_order(self):
        self.assertEqual(
            decode_buttons(0x1000 | 0x0020 | 0x0010),
            (Button.A, Button.B, Button.LB),
        )

    def test_all_bits(self):
        self.assertEqual(decode_buttons(0xFFFF), BUTTONS)


if __name__ == '__main__':
    unittest.main()
