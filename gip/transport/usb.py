"""pyusb transport for wired Xbox One controllers.

The controller exposes GIP on interface 0 through one interrupt IN endpoint
(reports from the controller) and one interrupt OUT endpoint (commands to it).

This module handles:
- Locating the controller (explicit bus/address or auto-detect by VID/PID)
- Detaching the kernel driver and claiming interface 0
- Interrupt endpoint discovery
- Mapping pyusb errors onto TransportTimeout / DeviceGone / TransportError

Note: This is a RAW BYTE layer. It does not interpret frames.
"""
from __future__ import annotations

import errno
import logging
from typing import Optional, Tuple

import usb.core
import usb.util

from ..errors import DeviceGone, TransportError, TransportTimeout
from ..finder import (
    XBOX_ONE_PRODUCT_ID,
    XBOX_VENDOR_ID,
    ControllerNotFoundError,
    MultipleControllersError,
    find_single_controller,
)
from .base import Transport

logger = logging.getLogger(__name__)

GIP_INTERFACE = 0
LIBUSB_ERROR_NO_DEVICE = -4


def find_interrupt_endpoints(device, interface_number: int = GIP_INTERFACE) -> Tuple[int, int]:
    """Return the (IN, OUT) interrupt endpoint addresses of an interface.

    Raises:
        TransportError: Interface lacks an interrupt IN/OUT pair
    """
    config = device.get_active_configuration()
    interface = config[(interface_number, 0)]

    in_endpoint = None
    out_endpoint = None
    for endpoint in interface:
        if usb.util.endpoint_type(endpoint.bmAttributes) != usb.util.ENDPOINT_TYPE_INTR:
            continue
        direction = usb.util.endpoint_direction(endpoint.bEndpointAddress)
        if direction == usb.util.ENDPOINT_IN and in_endpoint is None:
            in_endpoint = endpoint.bEndpointAddress
        elif direction == usb.util.ENDPOINT_OUT and out_endpoint is None:
            out_endpoint = endpoint.bEndpointAddress

    if in_endpoint is None or out_endpoint is None:
        raise TransportError(
            f"Interface {interface_number} has no interrupt IN/OUT endpoint pair"
        )
    return in_endpoint, out_endpoint


def _is_device_gone(error: usb.core.USBError) -> bool:
    return (
        getattr(error, "errno", None) == errno.ENODEV
        or getattr(error, "backend_error_code", None) == LIBUSB_ERROR_NO_DEVICE
    )


class UsbTransport(Transport):
    """Interrupt endpoint transport on top of pyusb.

    Example:
        >>> with UsbTransport() as transport:
        ...     data = transport.receive(transport.in_endpoint, 64, 2000)
    """

    def __init__(self,
                 vid: int = XBOX_VENDOR_ID,
                 pid: int = XBOX_ONE_PRODUCT_ID,
                 bus: Optional[int] = None,
                 address: Optional[int] = None,
                 interface_number: int = GIP_INTERFACE,
                 serial_number: Optional[str] = None):
        """Initialize USB transport.

        Args:
            vid: USB vendor ID to look for
            pid: USB product ID to look for
            bus: Bus number, or None to auto-detect
            address: Device address, or None to auto-detect
            interface_number: Interface carrying GIP
            serial_number: Only auto-detect the controller with this serial
        """
        self._vid = vid
        self._pid = pid
        self._bus = bus
        self._address = address
        # Auto-detected locations are dropped on close; a replugged
        # controller comes back at a new address.
        self._auto_detect = bus is None or address is None
        self._serial_number = serial_number
        self._interface_number = interface_number

        self._device = None
        self._in_endpoint: Optional[int] = None
        self._out_endpoint: Optional[int] = None
        self._claimed = False

    @property
    def in_endpoint(self) -> int:
        if self._in_endpoint is None:
            raise TransportError("Transport is not open")
        return self._in_endpoint

    @property
    def out_endpoint(self) -> int:
        if self._out_endpoint is None:
            raise TransportError("Transport is not open")
        return self._out_endpoint

    def open(self) -> None:
        """Find, claim and configure the controller."""
        if self.is_open():
            logger.warning("Already open")
            return

        if self._auto_detect:
            try:
                info = find_single_controller(
                    expected_vid=self._vid,
                    expected_pid=self._pid,
                    serial_number=self._serial_number,
                )
            except (ControllerNotFoundError, MultipleControllersError) as e:
                raise TransportError(f"Controller not found: {e}") from e
            self._bus = info.bus
            self._address = info.address
            logger.info(f"Auto-detected controller {info.device_id} "
                        f"on bus {self._bus} address {self._address}")

        device = usb.core.find(
            idVendor=self._vid,
            idProduct=self._pid,
            bus=self._bus,
            address=self._address,
        )
        if device is None:
            raise TransportError(
                f"No controller {self._vid:04x}:{self._pid:04x} at bus {self._bus} address {self._address}"
            )

        self._device = device
        try:
            self._detach_kernel_driver(device)
            try:
                device.get_active_configuration()
            except usb.core.USBError:
                device.set_configuration()
            usb.util.claim_interface(device, self._interface_number)
            self._claimed = True
            self._in_endpoint, self._out_endpoint = find_interrupt_endpoints(
                device, self._interface_number
            )
        except usb.core.USBError as e:
            self.close()
            raise TransportError(f"Failed to claim controller: {e}") from e
        except TransportError:
            self.close()
            raise

        logger.info(f"Opened controller: IN=0x{self._in_endpoint:02x}, OUT=0x{self._out_endpoint:02x}")

    def close(self) -> None:
        """Release interface and device resources."""
        device = self._device
        if device is None:
            return

        if self._claimed:
            try:
                usb.util.release_interface(device, self._interface_number)
            except usb.core.USBError as e:
                logger.debug(f"Error releasing interface: {e}")
            self._claimed = False

        try:
            usb.util.dispose_resources(device)
        except usb.core.USBError as e:
            logger.debug(f"Error disposing device: {e}")

        self._device = None
        self._in_endpoint = None
        self._out_endpoint = None
        if self._auto_detect:
            self._bus = None
            self._address = None
        logger.info("Closed controller")

    def is_open(self) -> bool:
        return self._device is not None

    def send(self, endpoint: int, data: bytes, timeout_ms: int) -> int:
        device = self._require_device()
        try:
            return device.write(endpoint, data, timeout=timeout_ms)
        except usb.core.USBError as e:
            raise self._translate(e) from e

    def receive(self, endpoint: int, max_bytes: int, timeout_ms: int) -> bytes:
        device = self._require_device()
        try:
            return bytes(device.read(endpoint, max_bytes, timeout=timeout_ms))
        except usb.core.USBError as e:
            raise self._translate(e) from e

    # Internal methods

    def _require_device(self):
        if self._device is None:
            raise DeviceGone("Transport is closed")
        return self._device

    def _detach_kernel_driver(self, device) -> None:
        try:
            if device.is_kernel_driver_active(self._interface_number):
                device.detach_kernel_driver(self._interface_number)
                logger.info(f"Detached kernel driver from interface {self._interface_number}")
        except NotImplementedError:
            # Not supported on this platform's backend
            pass
        except usb.core.USBError as e:
            logger.warning(f"Could not detach kernel driver: {e}")

    @staticmethod
    def _translate(error: usb.core.USBError) -> TransportError:
        if isinstance(error, usb.core.USBTimeoutError):
            return TransportTimeout(str(error))
        if _is_device_gone(error):
            return DeviceGone(str(error))
        return TransportError(str(error))
