from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import usb.core
import usb.util

from .errors import ControllerNotFoundError, MultipleControllersError

logger = logging.getLogger(__name__)

XBOX_VENDOR_ID = 0x045E
XBOX_ONE_PRODUCT_ID = 0x02DD  # Model 1697


@dataclass(frozen=True)
class ControllerInfo:
    """
    Representation of one USB game controller as seen by pyusb.

    Attributes:
        vid: USB Vendor ID.
        pid: USB Product ID.
        bus: USB bus number, used together with address to reopen the device.
        address: Device address on the bus.
        manufacturer: USB manufacturer string, if readable.
        product: USB product string, if readable.
        serial_number: USB serial string, if readable.
    """
    vid: int
    pid: int
    bus: Optional[int]
    address: Optional[int]
    manufacturer: Optional[str]
    product: Optional[str]
    serial_number: Optional[str]

    @property
    def device_id(self) -> str:
        """
        OS-agnostic identifier for the controller.

        Prefer the USB serial_number (stable across replugs);
        fall back to bus/address if serial is missing.
        """
        if self.serial_number:
            return self.serial_number
        return f"{self.bus}-{self.address}"


def _read_string(device, index: int) -> Optional[str]:
    """Read a string descriptor, None if absent or not permitted."""
    if not index:
        return None
    try:
        return usb.util.get_string(device, index)
    except (usb.core.USBError, ValueError, NotImplementedError) as e:
        logger.debug(f"Cannot read string descriptor {index}: {e}")
        return None


def _device_to_info(device) -> ControllerInfo:
    """Convert a pyusb Device to ControllerInfo."""
    return ControllerInfo(
        vid=device.idVendor,
        pid=device.idProduct,
        bus=getattr(device, "bus", None),
        address=getattr(device, "address", None),
        manufacturer=_read_string(device, device.iManufacturer),
        product=_read_string(device, device.iProduct),
        serial_number=_read_string(device, device.iSerialNumber),
    )


def is_matching_controller(
    info: ControllerInfo,
    *,
    expected_vid: Optional[int] = XBOX_VENDOR_ID,
    expected_pid: Optional[int] = XBOX_ONE_PRODUCT_ID,
    serial_number: Optional[str] = None,
) -> bool:
    """
    Check a ControllerInfo against VID/PID and, optionally, a serial number.

    A criterion left as None is not checked. A serial filter never matches
    a device whose serial string could not be read.
    """
    if expected_vid is not None and info.vid != expected_vid:
        return False
    if expected_pid is not None and info.pid != expected_pid:
        return False
    if serial_number is not None:
        return info.serial_number == serial_number
    return True


def find_controllers(
    *,
    expected_vid: Optional[int] = XBOX_VENDOR_ID,
    expected_pid: Optional[int] = XBOX_ONE_PRODUCT_ID,
    serial_number: Optional[str] = None,
) -> List[ControllerInfo]:
    """List every attached controller matching the given VID/PID and serial."""
    found = []
    for device in usb.core.find(find_all=True) or []:
        info = _device_to_info(device)
        if is_matching_controller(info, expected_vid=expected_vid,
                                  expected_pid=expected_pid, serial_number=serial_number):
            found.append(info)
    logger.debug(f"Found {len(found)} controller(s)")
    return found


def find_single_controller(
    *,
    expected_vid: Optional[int] = XBOX_VENDOR_ID,
    expected_pid: Optional[int] = XBOX_ONE_PRODUCT_ID,
    serial_number: Optional[str] = None,
) -> ControllerInfo:
    """
    Find exactly one controller.

    Raises:
        ControllerNotFoundError: Nothing matched
        MultipleControllersError: More than one match; pass a serial_number to pick one
    """
    matches = find_controllers(
        expected_vid=expected_vid,
        expected_pid=expected_pid,
        serial_number=serial_number,
    )
    if not matches:
        if serial_number:
            raise ControllerNotFoundError(f"No controller with serial {serial_number}")
        raise ControllerNotFoundError("No matching controller found")
    if len(matches) > 1:
        ids = ", ".join(info.device_id for info in matches)
        logger.error(f"Multiple controllers found: {ids}")
        raise MultipleControllersError(
            f"{len(matches)} controllers found ({ids}); select one by serial number",
            devices=matches,
        )
    return matches[0]
