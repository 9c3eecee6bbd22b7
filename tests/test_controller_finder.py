"""Unit tests for the controller finder."""
import unittest
from unittest.mock import MagicMock, patch

import usb.core

from gip.finder import (
    ControllerInfo,
    ControllerNotFoundError,
    MultipleControllersError,
    find_controllers,
    find_single_controller,
    is_matching_controller,
)

STRINGS = {1: "Microsoft", 2: "Controller", 3: "3032363030"}


def make_usb_device(vid, pid, bus=1, address=2):
    device = MagicMock()
    device.idVendor = vid
    device.idProduct = pid
    device.bus = bus
    device.address = address
    device.iManufacturer = 1
    device.iProduct = 2
    device.iSerialNumber = 3
    return device


def fake_get_string(device, index):
    return STRINGS[index]


class TestIsMatchingController(unittest.TestCase):
    """Tests for the matching predicate."""

    def setUp(self):
        self.info = ControllerInfo(
            vid=0x045E, pid=0x02DD, bus=1, address=4,
            manufacturer="Microsoft", product="Controller", serial_number="3032363030",
        )

    def test_defaults_match_xbox_one(self):
        self.assertTrue(is_matching_controller(self.info))

    def test_no_criteria(self):
        self.assertTrue(is_matching_controller(self.info, expected_vid=None, expected_pid=None))

    def test_vid_pid(self):
        self.assertTrue(is_matching_controller(self.info, expected_vid=0x045E, expected_pid=0x02DD))
        self.assertFalse(is_matching_controller(self.info, expected_pid=0x02D1))
        self.assertFalse(is_matching_controller(self.info, expected_vid=0x046D))

    def test_serial_number(self):
        self.assertTrue(is_matching_controller(self.info, serial_number="3032363030"))
        self.assertFalse(is_matching_controller(self.info, serial_number="3032"))

    def test_serial_number_unreadable(self):
        info = ControllerInfo(
            vid=0x045E, pid=0x02DD, bus=1, address=4,
            manufacturer=None, product=None, serial_number=None,
        )
        self.assertFalse(is_matching_controller(info, serial_number="3032363030"))

    def test_device_id(self):
        self.assertEqual(self.info.device_id, "3032363030")
        info = ControllerInfo(
            vid=0x045E, pid=0x02DD, bus=1, address=4,
            manufacturer=None, product=None, serial_number=None,
        )
        self.assertEqual(info.device_id, "1-4")


@patch('usb.util.get_string', side_effect=fake_get_string)
@patch('usb.core.find')
class TestFindControllers(unittest.TestCase):
    """Tests for find_controllers / find_single_controller."""

    def test_filters_by_vid_pid(self, mock_find, mock_get_string):
        mock_find.return_value = [
            make_usb_device(0x045E, 0x02DD, address=5),
            make_usb_device(0x046D, 0xC52B, address=6),
        ]
        results = find_controllers()
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].address, 5)
        self.assertEqual(results[0].product, "Controller")
        mock_find.assert_called_once_with(find_all=True)

    def test_other_pid(self, mock_find, mock_get_string):
        mock_find.return_value = [
            make_usb_device(0x045E, 0x02DD, address=5),
            make_usb_device(0x045E, 0x02D1, address=6),
        ]
        results = find_controllers(expected_pid=0x02D1)
        self.assertEqual([r.address for r in results], [6])

    def test_unreadable_strings(self, mock_find, mock_get_string):
        mock_get_string.side_effect = usb.core.USBError("Access denied")
        mock_find.return_value = [make_usb_device(0x045E, 0x02DD)]
        results = find_controllers()
        self.assertEqual(len(results), 1)
        self.assertIsNone(results[0].product)
        self.assertEqual(results[0].device_id, "1-2")

    def test_single(self, mock_find, mock_get_string):
        mock_find.return_value = [make_usb_device(0x045E, 0x02DD, bus=2, address=9)]
        info = find_single_controller()
        self.assertEqual((info.bus, info.address), (2, 9))

    def test_single_not_found(self, mock_find, mock_get_string):
        mock_find.return_value = []
        with self.assertRaises(ControllerNotFoundError):
            find_single_controller()

    def test_single_multiple(self, mock_find, mock_get_string):
        mock_find.return_value = [
            make_usb_device(0x045E, 0x02DD, address=5),
            make_usb_device(0x045E, 0x02DD, address=6),
        ]
        with self.assertRaises(MultipleControllersError) as ctx:
            find_single_controller()
        self.assertEqual(len(ctx.exception.devices), 2)

    def test_single_by_serial(self, mock_find, mock_get_string):
        strings = {1: "Microsoft", 2: "Controller", 3: "AAA", 4: "BBB"}
        mock_get_string.side_effect = lambda device, index: strings[index]
        first = make_usb_device(0x045E, 0x02DD, address=5)
        second = make_usb_device(0x045E, 0x02DD, address=6)
        second.iSerialNumber = 4
        mock_find.return_value = [first, second]

        info = find_single_controller(serial_number="BBB")

        self.assertEqual(info.address, 6)
        with self.assertRaises(ControllerNotFoundError):
            find_single_controller(serial_number="CCC")


if __name__ == '__main__':
    unittest.main()
