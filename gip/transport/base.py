"""Abstract base class for the transport layer.

The Transport interface is the only way the session reaches the controller.
Implementations can be pyusb, a replayed capture, a scripted fake for tests,
or anything else that can move byte buffers over an endpoint pair.

Key principles:
- Blocking calls with an explicit per-call timeout
- Timeouts are routine and raised as TransportTimeout
- Device loss is raised as DeviceGone and ends the session
- No knowledge of GIP framing
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class Transport(ABC):
    """Abstract transport interface for an interrupt endpoint pair.

    Transports are responsible for:
    1. Managing the device handle lifecycle
    2. Sending raw buffers to the OUT endpoint
    3. Receiving raw buffers from the IN endpoint

    Transports should NOT contain protocol logic like handshakes or decoding.
    They are pure communication channels. A closed transport must unblock
    any pending call promptly.
    """

    @abstractmethod
    def open(self) -> None:
        """Acquire the device and discover its endpoints.

        Raises:
            TransportError: Device could not be opened
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the device.

        Should be safe to call multiple times.
        """
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if the transport currently holds the device."""
        pass

    @property
    @abstractmethod
    def in_endpoint(self) -> int:
        """Address of the interrupt IN endpoint (device to host)."""
        pass

    @property
    @abstractmethod
    def out_endpoint(self) -> int:
        """Address of the interrupt OUT endpoint (host to device)."""
        pass

    @abstractmethod
    def send(self, endpoint: int, data: bytes, timeout_ms: int) -> int:
        """Write a buffer to an endpoint.

        Args:
            endpoint: Endpoint address
            data: Bytes to send
            timeout_ms: Transfer timeout in milliseconds

        Returns:
            Number of bytes written

        Raises:
            TransportTimeout: Transfer did not complete in time
            DeviceGone: Device disconnected
            TransportError: Any other transfer failure
        """
        pass

    @abstractmethod
    def receive(self, endpoint: int, max_bytes: int, timeout_ms: int) -> bytes:
        """Read one transfer from an endpoint.

        Args:
            endpoint: Endpoint address
            max_bytes: Size of the receive buffer
            timeout_ms: Transfer timeout in milliseconds

        Returns:
            Bytes received (at most max_bytes)

        Raises:
            TransportTimeout: Nothing arrived in time
            DeviceGone: Device disconnected
            TransportError: Any other transfer failure
        """
        pass

    def __enter__(self) -> Transport:
        """Context manager support - open on enter."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
