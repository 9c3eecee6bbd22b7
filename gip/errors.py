"""Exception hierarchy for the GIP SDK."""


class GipError(Exception):
    """Base class for all GIP SDK errors."""
    pass


class TruncatedFrame(GipError):
    """Raised when a buffer holds fewer bytes than a frame requires."""

    def __init__(self, message, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SessionError(GipError):
    """Raised when a session is driven outside its lifecycle."""
    pass


class TransportError(GipError):
    """Raised by a Transport when a transfer fails."""
    pass


class TransportTimeout(TransportError):
    """No data within the transfer timeout. Routine, never fatal."""
    pass


class DeviceGone(TransportError):
    """The device was unplugged or the handle became invalid."""
    pass
