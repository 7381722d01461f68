import termios

import pytest

from serialline.settings import ByteSize, FlowControl, Parity, StopBits
from serialline.termios_config import baud_constant, configure_attributes

ALL_ONES = 0xFFFFFFFF


def _attrs(flags=0):
    return [flags, flags, flags, flags, termios.B9600, termios.B9600, [b"\x01"] * 32]


def _configure(attrs=None, baudrate=115200, bytesize=ByteSize.EIGHTBITS,
               parity=Parity.NONE, stopbits=StopBits.ONE,
               flowcontrol=FlowControl.NONE):
    return configure_attributes(
        attrs if attrs is not None else _attrs(),
        baudrate, bytesize, parity, stopbits, flowcontrol,
    )


def test_baud_constant_standard_rate():
    assert baud_constant(9600) == termios.B9600
    assert baud_constant(115200) == termios.B115200


def test_baud_constant_custom_rate_is_none():
    assert baud_constant(12345) is None


def test_raw_mode_flags():
    iflag, oflag, cflag, lflag, _, _, cc = _configure(_attrs(ALL_ONES))
    assert cflag & termios.CLOCAL and cflag & termios.CREAD
    assert lflag & (termios.ICANON | termios.ECHO | termios.ISIG) == 0
    assert oflag & termios.OPOST == 0
    assert iflag & (termios.ICRNL | termios.INLCR | termios.IGNCR) == 0
    assert cc[termios.VMIN] == 0
    assert cc[termios.VTIME] == 0


def test_standard_baud_sets_speeds():
    result = _configure(baudrate=115200)
    assert result[4] == termios.B115200
    assert result[5] == termios.B115200


def test_custom_baud_keeps_speeds():
    result = _configure(baudrate=12345)
    assert result[4] == termios.B9600
    assert result[5] == termios.B9600


@pytest.mark.parametrize(
    "size, flag",
    [
        (ByteSize.EIGHTBITS, termios.CS8),
        (ByteSize.SEVENBITS, termios.CS7),
        (ByteSize.SIXBITS, termios.CS6),
        (ByteSize.FIVEBITS, termios.CS5),
    ],
)
def test_char_size(size, flag):
    cflag = _configure(_attrs(ALL_ONES), bytesize=size)[2]
    assert cflag & termios.CSIZE == flag


def test_stop_bits():
    assert _configure(_attrs(ALL_ONES), stopbits=StopBits.ONE)[2] & termios.CSTOPB == 0
    assert _configure(stopbits=StopBits.TWO)[2] & termios.CSTOPB == termios.CSTOPB
    assert _configure(stopbits=StopBits.ONE_POINT_FIVE)[2] & termios.CSTOPB == termios.CSTOPB


def test_parity_modes():
    none = _configure(_attrs(ALL_ONES), parity=Parity.NONE)[2]
    assert none & (termios.PARENB | termios.PARODD) == 0
    even = _configure(_attrs(ALL_ONES), parity=Parity.EVEN)[2]
    assert even & (termios.PARENB | termios.PARODD) == termios.PARENB
    odd = _configure(parity=Parity.ODD)[2]
    assert odd & (termios.PARENB | termios.PARODD) == termios.PARENB | termios.PARODD


def test_software_flow_control():
    iflag = _configure(flowcontrol=FlowControl.SOFTWARE)[0]
    wanted = termios.IXON | termios.IXOFF
    assert iflag & wanted == wanted


def test_no_flow_control_clears_xon():
    iflag = _configure(_attrs(ALL_ONES), flowcontrol=FlowControl.NONE)[0]
    assert iflag & (termios.IXON | termios.IXOFF) == 0


def test_hardware_flow_control():
    cflag = _configure(flowcontrol=FlowControl.HARDWARE)[2]
    assert cflag & termios.CRTSCTS == termios.CRTSCTS
    cleared = _configure(_attrs(ALL_ONES), flowcontrol=FlowControl.NONE)[2]
    assert cleared & termios.CRTSCTS == 0


def test_input_not_mutated():
    attrs = _attrs(ALL_ONES)
    snapshot = [attrs[0], attrs[1], attrs[2], attrs[3], attrs[4], attrs[5], list(attrs[6])]
    _configure(attrs)
    assert attrs == snapshot


def test_invalid_bytesize_raises():
    with pytest.raises(ValueError, match="invalid char len"):
        _configure(bytesize=9)


def test_invalid_stopbits_raises():
    with pytest.raises(ValueError, match="invalid stop bit"):
        _configure(stopbits=7)


def test_invalid_parity_raises():
    with pytest.raises(ValueError, match="invalid parity"):
        _configure(parity=42)