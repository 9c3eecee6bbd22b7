"""High-level controller facade.

Runs a GipSession on a background thread over a UsbTransport (or any other
Transport) and fans session events out to subscribers.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from .config import SessionConfig
from .errors import SessionError, TransportError
from .models import RumbleCommand, SessionEvent, SessionPhase
from .session import GipSession
from .transport.base import Transport
from .transport.usb import UsbTransport

logger = logging.getLogger(__name__)

JOIN_TIMEOUT = 2.0  # seconds


class Controller:
    """One connected game controller.

    Responsibilities:
    - Manage transport lifecycle
    - Run the session loop on a reader thread
    - Notify subscribers of session events
    - Forward rumble commands to the session

    A Controller runs at most one session per connect(). After the device
    goes away, call connect() again to reopen it and start a new session.

    Example:
        >>> with Controller() as pad:
        ...     pad.subscribe(print)
        ...     pad.rumble(RumbleCommand(magnitude_left=0x80))
    """

    def __init__(self,
                 transport: Optional[Transport] = None,
                 config: Optional[SessionConfig] = None):
        """Initialize Controller.

        Args:
            transport: Transport to use, or None for an auto-detecting UsbTransport
            config: Session timeouts and limits
        """
        self._transport = transport or UsbTransport()
        self._config = config or SessionConfig()

        self._session: Optional[GipSession] = None
        self._cancel = threading.Event()
        self._reader_thread: Optional[threading.Thread] = None

        self._subscribers: List[Callable[[SessionEvent], None]] = []
        self._subscriber_lock = threading.Lock()

    def connect(self) -> bool:
        """Open the transport and start the session thread.

        Returns:
            True if the session was started, False otherwise
        """
        if self.is_connected():
            logger.warning("Already connected")
            return True

        if self._session is not None:
            # The previous session has ended; its device handle may be dead
            self._stop_reader()
            self._transport.close()

        try:
            if not self._transport.is_open():
                self._transport.open()
        except TransportError as e:
            logger.error(f"Failed to open controller: {e}")
            return False

        self._cancel.clear()
        self._session = GipSession(self._transport, config=self._config)
        self._session.subscribe(self._notify_subscribers)

        self._reader_thread = threading.Thread(
            target=self._reader_loop,
            daemon=True,
            name="GipSession",
        )
        self._reader_thread.start()
        return True

    def disconnect(self) -> None:
        """Stop the session and release the transport."""
        self._stop_reader()
        self._transport.close()

    def is_connected(self) -> bool:
        """Check if a session is running."""
        return (
            self._reader_thread is not None
            and self._reader_thread.is_alive()
            and self._session is not None
            and not self._session.ended
        )

    @property
    def phase(self) -> SessionPhase:
        if self._session is None:
            return SessionPhase.DISCONNECTED
        return self._session.phase

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> Callable[[], None]:
        """Subscribe to session events.

        Returns:
            Unsubscribe function
        """
        with self._subscriber_lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._subscriber_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def rumble(self, command: RumbleCommand) -> None:
        """Queue a rumble command for the running session.

        Raises:
            SessionError: No session running
        """
        if not self.is_connected():
            raise SessionError("Controller is not connected")
        self._session.submit_rumble(command)

    def stop_rumble(self) -> None:
        self.rumble(RumbleCommand.stop())

    def _stop_reader(self) -> None:
        self._cancel.set()

        if self._reader_thread and self._reader_thread.is_alive():
            self._reader_thread.join(timeout=JOIN_TIMEOUT)
            if self._reader_thread.is_alive():
                logger.warning("Session thread did not stop in time")
        self._reader_thread = None

    def _reader_loop(self) -> None:
        """Run the session until it ends."""
        try:
            reason = self._session.run(self._cancel)
            logger.info(f"Controller session finished: {reason}")
        except Exception as e:
            logger.error(f"Session error: {e}")

    def _notify_subscribers(self, event: SessionEvent) -> None:
        with self._subscriber_lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Subscriber error: {e}")

    def __enter__(self) -> Controller:
        """Context manager support - connect on enter."""
        if not self.connect():
            raise TransportError("Could not connect to controller")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - disconnect on exit."""
        self.disconnect()
