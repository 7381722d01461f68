"""Windows serial port settings: device control block and timeout values.

These are plain values in the shape the Windows communications API expects.
They are computed here so that the mapping from line settings can be used
and checked on any system.
"""

from dataclasses import dataclass

from .settings import ByteSize, FlowControl, Parity, StopBits

PORT_PREFIX = "\\\\.\\"
"""Prefix that lets Windows open any COM port, including those above COM9."""

ONESTOPBIT = 0
ONE5STOPBITS = 1
TWOSTOPBITS = 2

NOPARITY = 0
ODDPARITY = 1
EVENPARITY = 2
MARKPARITY = 3
SPACEPARITY = 4

RTS_CONTROL_DISABLE = 0
RTS_CONTROL_ENABLE = 1
RTS_CONTROL_HANDSHAKE = 2

_STOP_BITS = {
    StopBits.ONE: ONESTOPBIT,
    StopBits.ONE_POINT_FIVE: ONE5STOPBITS,
    StopBits.TWO: TWOSTOPBITS,
}

_PARITY = {
    Parity.NONE: NOPARITY,
    Parity.ODD: ODDPARITY,
    Parity.EVEN: EVENPARITY,
    Parity.MARK: MARKPARITY,
    Parity.SPACE: SPACEPARITY,
}


@dataclass(frozen=True)
class DcbSettings:
    """The fields of a device control block that the line settings determine."""

    baud_rate: int
    byte_size: int
    stop_bits: int
    parity: int
    out_x_cts_flow: bool
    rts_control: int
    out_x: bool
    in_x: bool


@dataclass(frozen=True)
class CommTimeouts:
    """Timeouts in milliseconds as the communications API takes them."""

    read_interval_timeout: int
    read_total_timeout_constant: int
    read_total_timeout_multiplier: int
    write_total_timeout_constant: int
    write_total_timeout_multiplier: int


def prefix_port(port):
    """Device name to open for ``port``; every name but the bare prefix gets it."""
    if port != PORT_PREFIX:
        return PORT_PREFIX + port
    return port


def dcb_settings(baudrate, bytesize, parity, stopbits, flowcontrol):
    """Device control block values for the given line settings.

    Every baud rate is passed through as given; the driver decides whether
    a non-standard rate is usable.
    """
    try:
        size = ByteSize(bytesize)
    except ValueError:
        raise ValueError("invalid char len") from None
    try:
        stop = StopBits(stopbits)
    except ValueError:
        raise ValueError("invalid stop bit") from None
    try:
        par = Parity(parity)
    except ValueError:
        raise ValueError("invalid parity") from None
    flow = FlowControl(flowcontrol)

    hardware = flow is FlowControl.HARDWARE
    software = flow is FlowControl.SOFTWARE
    return DcbSettings(
        baud_rate=int(baudrate),
        byte_size=int(size),
        stop_bits=_STOP_BITS[stop],
        parity=_PARITY[par],
        out_x_cts_flow=hardware,
        rts_control=RTS_CONTROL_HANDSHAKE if hardware else RTS_CONTROL_DISABLE,
        out_x=software,
        in_x=software,
    )


def comm_timeouts(timeout):
    """Communications timeouts for a :class:`~serialline.settings.Timeout`."""
    return CommTimeouts(
        read_interval_timeout=timeout.inter_byte_timeout,
        read_total_timeout_constant=timeout.read_timeout_constant,
        read_total_timeout_multiplier=timeout.read_timeout_multiplier,
        write_total_timeout_constant=timeout.write_timeout_constant,
        write_total_timeout_multiplier=timeout.write_timeout_multiplier,
    )