"""Transport layer for GIP communication."""

from .base import Transport
from .usb import UsbTransport, find_interrupt_endpoints

__all__ = ["Transport", "UsbTransport", "find_interrupt_endpoints"]
