"""Exceptions raised by serial port operations."""


class SerialError(Exception):
    """Base class for every serial port failure."""


class SerialIOError(SerialError, OSError):
    """An operating-system level failure while talking to the port.

    Built like ``OSError``: ``SerialIOError(errno, strerror)`` fills in
    ``errno`` and ``strerror``; a single message argument is also accepted.
    """


class PortNotOpenedError(SerialError):
    """An operation needed an open port but the port was closed."""

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f"{operation} called before the port was opened")