"""GIP session state machine.

Drives one controller from a freshly opened transport to streaming input:

    DISCONNECTED -> ANNOUNCING <-> ACKNOWLEDGING -> POWERING_ON -> STREAMING
                                                                 -> DISCONNECTED

The session owns all of its state and is driven by a single control flow
(the thread calling run()). Other threads only subscribe to events, submit
rumble commands through a queue and set the cancel event.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional

from .config import SessionConfig
from .errors import DeviceGone, SessionError, TransportError, TransportTimeout, TruncatedFrame
from .models import (
    Command,
    Frame,
    GuideButtonPressed,
    InputSnapshot,
    RumbleCommand,
    SessionEnded,
    SessionEvent,
    SessionPhase,
    UnhandledFrame,
)
from .protocol import build_acknowledge, build_power_on, build_rumble, decode_input, parse_frame
from .transport.base import Transport

logger = logging.getLogger(__name__)

END_CANCELLED = "cancelled"


class GipSession:
    """One GIP conversation with one controller.

    Responsibilities:
    - Acknowledge Announce frames during the handshake
    - Power the controller on
    - Decode streaming frames into events for subscribers
    - Send queued rumble commands between reads

    Example:
        >>> session = GipSession(transport)
        >>> session.subscribe(lambda event: print(event))
        >>> session.run(cancel_event)
        'cancelled'
    """

    def __init__(self,
                 transport: Optional[Transport] = None,
                 config: Optional[SessionConfig] = None):
        """Initialize session.

        Args:
            transport: Opened transport; the session starts announcing when given
            config: Timeouts and limits (default: SessionConfig())
        """
        self._config = config or SessionConfig()

        self._transport: Optional[Transport] = None
        self._in_endpoint: Optional[int] = None
        self._out_endpoint: Optional[int] = None

        self._phase = SessionPhase.DISCONNECTED
        self._ended = False
        self._end_reason: Optional[str] = None

        # Sequence counters per direction
        self._announce_sequence: Optional[int] = None
        self._last_sequence: Optional[int] = None
        self._out_sequence = 0

        self._subscribers: List[Callable[[SessionEvent], None]] = []
        self._subscriber_lock = threading.Lock()

        self._outbound: queue.Queue[RumbleCommand] = queue.Queue()

        if transport is not None:
            self.attach(transport)

    # --- Read-only state ---

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def end_reason(self) -> Optional[str]:
        return self._end_reason

    @property
    def sequence_to_acknowledge(self) -> Optional[int]:
        """Sequence number of the most recent Announce frame."""
        return self._announce_sequence

    @property
    def last_sequence(self) -> Optional[int]:
        """Sequence number of the most recent frame received."""
        return self._last_sequence

    @property
    def config(self) -> SessionConfig:
        return self._config

    # --- Lifecycle ---

    def attach(self, transport: Transport) -> None:
        """Hand the session its transport and start announcing.

        Raises:
            SessionError: Session already ended or already has a transport
        """
        if self._ended:
            raise SessionError("Session has ended; start a new session")
        if self._transport is not None:
            raise SessionError("Transport already attached")

        self._transport = transport
        self._set_phase(SessionPhase.ANNOUNCING)

    def run(self, cancel: Optional[threading.Event] = None) -> str:
        """Run handshake and input loop until cancelled or the device goes away.

        Blocks the calling thread. Exactly one SessionEnded event is emitted.

        Args:
            cancel: Event polled at each loop head; set it to stop the session

        Returns:
            The reason the session ended

        Raises:
            SessionError: No transport attached or session already ended
        """
        if self._ended:
            raise SessionError("Session has ended; start a new session")
        if self._transport is None or self._phase != SessionPhase.ANNOUNCING:
            raise SessionError(f"Cannot run session in phase {self._phase.value}")

        if cancel is None:
            cancel = threading.Event()

        try:
            self._in_endpoint = self._transport.in_endpoint
            self._out_endpoint = self._transport.out_endpoint

            if not self._handshake(cancel):
                self._end(END_CANCELLED)
                return self._end_reason

            self._power_on(cancel)
            self._stream(cancel)
        except DeviceGone as e:
            logger.warning(f"Controller disconnected: {e}")
            self._end(f"device gone: {e}")
        except Exception as e:
            self._end(f"error: {e}")
            raise

        return self._end_reason

    # --- Consumers ---

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> Callable[[], None]:
        """Subscribe to session events.

        Callbacks run on the session thread and should return quickly.

        Args:
            callback: Function receiving InputSnapshot, GuideButtonPressed,
                UnhandledFrame and SessionEnded events

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

    def submit_rumble(self, command: RumbleCommand) -> None:
        """Queue a rumble command; sent before the next streaming read.

        Safe to call from any thread.

        Raises:
            ValueError: A field is outside 0-255
        """
        build_rumble(command)
        self._outbound.put(command)

    # --- Phases ---

    def _handshake(self, cancel: threading.Event) -> bool:
        """Acknowledge Announce frames until timeout or attempt budget.

        Returns:
            False if cancelled, True when ready to power on
        """
        logger.info("Waiting for controller announce")

        for attempt in range(self._config.handshake_attempts):
            if cancel.is_set():
                return False

            try:
                data = self._transport.receive(
                    self._in_endpoint,
                    self._config.read_size,
                    self._config.handshake_timeout_ms,
                )
            except TransportTimeout:
                logger.info("No further announce, handshake complete")
                break
            except DeviceGone:
                raise
            except TransportError as e:
                logger.warning(f"Handshake read {attempt + 1} failed: {e}")
                continue

            frame = self._parse(data)
            if frame is None:
                continue

            header = frame.header
            if header.command_type == Command.ANNOUNCE:
                self._announce_sequence = header.sequence
                self._set_phase(SessionPhase.ACKNOWLEDGING)
                if self._send(build_acknowledge(header.sequence)):
                    logger.info(f"Acknowledged announce (seq={header.sequence})")
                self._set_phase(SessionPhase.ANNOUNCING)
            else:
                logger.debug(f"Ignoring {header.command_name} (0x{header.command:02x}) during handshake")

        self._set_phase(SessionPhase.POWERING_ON)
        return True

    def _power_on(self, cancel: threading.Event) -> None:
        """Send Power-on and give the controller time to switch modes.

        The controller never acknowledges power-on, so this always proceeds.
        """
        if self._send(build_power_on()):
            logger.info("Power on sent")
        cancel.wait(self._config.power_settle_delay)
        self._set_phase(SessionPhase.STREAMING)

    def _stream(self, cancel: threading.Event) -> None:
        """Receive and dispatch frames until cancelled."""
        logger.info("Streaming input")

        while True:
            if cancel.is_set():
                self._end(END_CANCELLED)
                return

            self._flush_outbound()

            try:
                data = self._transport.receive(
                    self._in_endpoint,
                    self._config.read_size,
                    self._config.stream_timeout_ms,
                )
            except TransportTimeout:
                continue
            except DeviceGone:
                raise
            except TransportError as e:
                logger.warning(f"Read error: {e}")
                continue

            self._dispatch(data)

    # --- Internal methods ---

    def _dispatch(self, data: bytes) -> None:
        """Route one streaming frame to the matching event."""
        frame = self._parse(data)
        if frame is None:
            return

        header = frame.header
        self._last_sequence = header.sequence
        command = header.command_type

        if command == Command.INPUT:
            try:
                report = decode_input(frame.payload)
            except TruncatedFrame as e:
                logger.warning(f"Dropping short input frame: {e}")
                return
            self._emit(InputSnapshot(report=report, sequence=header.sequence))
        elif command == Command.GUIDE_BUTTON:
            self._emit(GuideButtonPressed(header=header))
        else:
            logger.debug(f"Unhandled {header.command_name} (0x{header.command:02x}), len={header.length}")
            self._emit(UnhandledFrame(header=header))

    def _parse(self, data: bytes) -> Optional[Frame]:
        try:
            return parse_frame(data)
        except TruncatedFrame as e:
            logger.warning(f"Dropping truncated frame: {e}")
            return None

    def _send(self, frame: Frame) -> bool:
        """Send a frame; DeviceGone propagates, other failures are logged."""
        try:
            self._transport.send(
                self._out_endpoint,
                frame.to_bytes(),
                self._config.write_timeout_ms,
            )
        except DeviceGone:
            raise
        except TransportError as e:
            logger.warning(f"Failed to send {frame.header.command_name}: {e}")
            return False
        return True

    def _flush_outbound(self) -> None:
        while True:
            try:
                command = self._outbound.get_nowait()
            except queue.Empty:
                return
            self._send(build_rumble(command, self._next_out_sequence()))

    def _next_out_sequence(self) -> int:
        # 1-255, 0 is left to power-on
        self._out_sequence = self._out_sequence % 0xFF + 1
        return self._out_sequence

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase != self._phase:
            logger.debug(f"Session phase {self._phase.value} -> {phase.value}")
            self._phase = phase

    def _end(self, reason: str) -> None:
        if self._ended:
            return
        self._ended = True
        self._end_reason = reason
        self._set_phase(SessionPhase.DISCONNECTED)
        logger.info(f"Session ended: {reason}")
        self._emit(SessionEnded(reason=reason))

    def _emit(self, event: SessionEvent) -> None:
        """Notify all subscribers."""
        with self._subscriber_lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Subscriber error: {e}")
