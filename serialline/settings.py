"""Line settings for a serial port and derived timing values."""

from dataclasses import dataclass
from enum import Enum, IntEnum

MAX_TIMEOUT = 2**32 - 1
"""Largest timeout value in milliseconds; means "no limit" for inter-byte waits."""


class ByteSize(IntEnum):
    """Number of data bits per character."""

    FIVEBITS = 5
    SIXBITS = 6
    SEVENBITS = 7
    EIGHTBITS = 8


class Parity(IntEnum):
    """Parity checking mode."""

    NONE = 0
    ODD = 1
    EVEN = 2
    MARK = 3
    SPACE = 4


class StopBits(IntEnum):
    """Number of stop bits; one and a half is encoded as 3."""

    ONE = 1
    TWO = 2
    ONE_POINT_FIVE = 3


class FlowControl(Enum):
    """Flow control mode."""

    NONE = 0
    SOFTWARE = 1
    HARDWARE = 2


@dataclass
class Timeout:
    """Read and write timeouts in milliseconds.

    A read waits at most ``read_timeout_constant + read_timeout_multiplier * n``
    for ``n`` bytes, and at most ``inter_byte_timeout`` between bytes.
    Writes are limited the same way.
    """

    inter_byte_timeout: int = 0
    read_timeout_constant: int = 0
    read_timeout_multiplier: int = 0
    write_timeout_constant: int = 0
    write_timeout_multiplier: int = 0

    @classmethod
    def simple(cls, timeout):
        """Timeout with one total limit for reads and writes and no inter-byte limit."""
        return cls(
            inter_byte_timeout=MAX_TIMEOUT,
            read_timeout_constant=timeout,
            read_timeout_multiplier=0,
            write_timeout_constant=timeout,
            write_timeout_multiplier=0,
        )


def byte_time_ns(baudrate, bytesize, parity, stopbits):
    """Time in nanoseconds to transmit one character with these settings."""
    if baudrate <= 0:
        raise ValueError("baudrate must be positive")
    bit_time_ns = int(1e9 / baudrate)
    byte_time = bit_time_ns * (1 + int(bytesize) + int(parity) + int(stopbits))
    if StopBits(stopbits) is StopBits.ONE_POINT_FIVE:
        # The enum value is 3, not 1.5; take the difference back off.
        byte_time = int(byte_time + (1.5 - StopBits.ONE_POINT_FIVE) * bit_time_ns)
    return byte_time