"""Translation of line settings into POSIX terminal attributes."""

import termios

from .settings import ByteSize, FlowControl, Parity, StopBits

_STANDARD_RATES = (
    0, 50, 75, 110, 134, 150, 200, 300, 600, 1200, 1800, 2400, 4800, 7200,
    9600, 14400, 19200, 28800, 57600, 76800, 38400, 115200, 128000, 153600,
    230400, 256000, 460800, 500000, 576000, 921600, 1000000, 1152000,
    1500000, 2000000, 2500000, 3000000, 3500000, 4000000,
)

_BAUD_CONSTANTS = {
    rate: getattr(termios, f"B{rate}")
    for rate in _STANDARD_RATES
    if hasattr(termios, f"B{rate}")
}

_CHAR_SIZE = {
    ByteSize.EIGHTBITS: termios.CS8,
    ByteSize.SEVENBITS: termios.CS7,
    ByteSize.SIXBITS: termios.CS6,
    ByteSize.FIVEBITS: termios.CS5,
}

_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)


def baud_constant(baudrate):
    """The termios speed constant for a standard rate, or None for a custom rate."""
    return _BAUD_CONSTANTS.get(baudrate)


def _flag(name):
    return getattr(termios, name, 0)


def _rtscts_flag():
    for name in ("CRTSCTS", "CNEW_RTSCTS"):
        value = getattr(termios, name, None)
        if value is not None:
            return value
    raise OSError("no RTS/CTS flow control flag is available on this system")


def configure_attributes(attrs, baudrate, bytesize, parity, stopbits, flowcontrol):
    """Return a raw-mode copy of ``attrs`` (as from ``termios.tcgetattr``).

    Standard baud rates are written into the speed fields; for a custom rate
    the speeds are left as they were and must be set another way.
    """
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    cc = list(cc)

    cflag |= termios.CLOCAL | termios.CREAD
    lflag &= ~(
        termios.ICANON | termios.ECHO | termios.ECHOE | termios.ECHOK
        | termios.ECHONL | termios.ISIG | termios.IEXTEN
    )
    oflag &= ~termios.OPOST
    iflag &= ~(termios.INLCR | termios.IGNCR | termios.ICRNL | termios.IGNBRK)
    iflag &= ~(_flag("IUCLC") | _flag("PARMRK"))

    speed = baud_constant(baudrate)
    if speed is not None:
        ispeed = ospeed = speed

    try:
        size = ByteSize(bytesize)
    except ValueError:
        raise ValueError("invalid char len") from None
    cflag &= ~termios.CSIZE
    cflag |= _CHAR_SIZE[size]

    try:
        stop = StopBits(stopbits)
    except ValueError:
        raise ValueError("invalid stop bit") from None
    if stop is StopBits.ONE:
        cflag &= ~termios.CSTOPB
    else:
        # No POSIX support for 1.5 stop bits; two is the nearest.
        cflag |= termios.CSTOPB

    try:
        par = Parity(parity)
    except ValueError:
        raise ValueError("invalid parity") from None
    iflag &= ~(termios.INPCK | termios.ISTRIP)
    if par is Parity.NONE:
        cflag &= ~(termios.PARENB | termios.PARODD)
    elif par is Parity.EVEN:
        cflag &= ~termios.PARODD
        cflag |= termios.PARENB
    elif par is Parity.ODD:
        cflag |= termios.PARENB | termios.PARODD
    else:
        cmspar = getattr(termios, "CMSPAR", None)
        if cmspar is None:
            raise ValueError("OS does not support mark or space parity")
        if par is Parity.MARK:
            cflag |= termios.PARENB | cmspar | termios.PARODD
        else:
            cflag |= termios.PARENB | cmspar
            cflag &= ~termios.PARODD

    flow = FlowControl(flowcontrol)
    xonxoff = flow is FlowControl.SOFTWARE
    rtscts = flow is FlowControl.HARDWARE

    if xonxoff:
        iflag |= termios.IXON | termios.IXOFF
    else:
        iflag &= ~(termios.IXON | termios.IXOFF | _flag("IXANY"))

    rtscts_flag = _rtscts_flag()
    if rtscts:
        cflag |= rtscts_flag
    else:
        cflag &= ~rtscts_flag

    # Polling reads: readiness is established with select before each read.
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 0

    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]